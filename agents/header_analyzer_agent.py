# agents/header_analyzer_agent.py

from __future__ import annotations

import logging
from typing import Optional

from app.config import settings
from models.header_models import HeaderAnalysisRequest, HeaderAnalysisResult
from services.llm_client import JsonCompleter, invoke_structured

# ============================================================
# ロガー設定
# ============================================================

logger = logging.getLogger(__name__)

# 開発中は必ずコンソールに出したいので、ハンドラを直付け
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            "%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)

logger.setLevel(settings.log_level)

# ============================================================
# プロンプト
# ============================================================

# プレースホルダは HeaderAnalysisRequest の alias 名。HTML はそのまま差し込む。
ANALYZE_SEO_HEADERS_PROMPT = """
You are an expert SEO analyst. Analyze the provided HTML content for its header structure (H1-H6).

Based on your analysis, provide the following in a JSON object:
1.  'seoScore': An overall score from 0-100 for the header structure. A score of 100 means a perfect structure. Base the score on:
    - Presence of a single, compelling H1 tag.
    - Correct hierarchical order (H1 -> H2 -> H3...).
    - Clarity and relevance of header content.
    - Avoidance of skipping heading levels (e.g., H1 to H3).
2.  'detectedHeaders': An array of all H1-H6 tags found, in document order. Each object should have 'tag' (e.g., "H1") and 'content'.
3.  'analysis': An array of issues found. For each issue, provide:
    - 'severity': "Critical", "Warning", or "Info".
    - 'message': A clear, concise description of the problem (e.g., "Multiple H1 tags found.", "Incorrect heading hierarchy: H3 follows H1.").
    - 'recommendation': An actionable suggestion to fix it (e.g., "Ensure there is only one H1 tag per page.").
4.  'optimizedHtml': The complete, original HTML content, but with the header tags modified to fix the identified issues and improve SEO. Ensure the new headers are relevant and follow best practices.

HTML Content:
```html
{htmlContent}
```

Ensure your entire output is a single, valid JSON object. Do not include any text before or after the JSON object.
""".strip()


# ============================================================
# 公開関数
# ============================================================

def analyze_seo_headers(
    request: HeaderAnalysisRequest,
    completer: Optional[JsonCompleter] = None,
) -> HeaderAnalysisResult:
    """
    HTML の見出し構造を LLM で採点し、修正版 HTML と指摘事項を返す。

    フォールバックは持たない。LLM 失敗・スキーマ不一致は
    ModelInvocationError としてそのまま呼び出し側に投げる。
    """
    logger.info(
        "[header_analyzer] analyze start html_len=%d",
        len(request.html_content),
    )

    result = invoke_structured(
        ANALYZE_SEO_HEADERS_PROMPT,
        request,
        HeaderAnalysisResult,
        completer=completer,
    )

    groups = result.issues_by_severity()
    logger.info(
        "[header_analyzer] analyze success seo_score=%d headers=%d critical=%d warning=%d info=%d",
        result.seo_score,
        len(result.detected_headers),
        len(groups["Critical"]),
        len(groups["Warning"]),
        len(groups["Info"]),
    )
    return result
