# agents/ranking_estimator_agent.py

from __future__ import annotations

import logging
from typing import List, Optional

from app.config import settings
from models.ranking_models import RankingRequest, RankingResult
from services.llm_client import JsonCompleter, invoke_structured

logger = logging.getLogger(__name__)

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

# 監査チェックリストの固定項目（LLM にこの文言のまま評価させる）
CHECKLIST_ITEMS: List[str] = [
    "Keyword Presence",
    "Keyword Prominence",
    "Intent Alignment",
    "Clarity & Specificity for Keyword",
    "Compellingness for Keyword Click",
    "Length Appropriateness",
]

_CHECKLIST_TEXT = ", ".join(f'"{item}"' for item in CHECKLIST_ITEMS)

# str.format で埋めるので、リテラルの波括弧は使わないこと
ESTIMATE_RANKING_POTENTIAL_PROMPT = f"""
You are an AI SEO Ranking Potential Estimator. The user wants to know how well their {{headerType}} (content: "{{headerText}}") is likely to rank for the main keyword: "{{mainKeyword}}". Your analysis is an *estimation* based on SEO best practices.

Provide the following in your JSON response:
1.  'rankingPotentialScore': An estimated score (0-100) indicating how well the text might rank for the main keyword.
2.  'estimatedRankingCategory': A concise qualitative assessment: "High Potential", "Moderate Potential" or "Low Potential".
3.  'rankingAnalysisReport': A comprehensive report in Markdown format (2-4 paragraphs) detailing the overall assessment, key strengths/weaknesses regarding the keyword, and actionable suggestions to improve the text.
4.  'keywordVariations': An array of 3-5 relevant keyword variations. Each object should have "keyword" (string), "volume" (string, e.g., "1.2K", "N/A"), and "kd" (string, e.g., "35%", "Low"). These metrics are for illustrative purposes.
5.  'auditChecklistResults': An array of objects. For each item, assess "{{headerText}}" against "{{mainKeyword}}". Checklist items must be: {_CHECKLIST_TEXT}. For each checklist item, include:
    - "checklistItem": The exact text of the checklist item.
    - "isMet": A boolean (true if met, false if not).
    - "reasoning": Markdown. If "isMet" is false, explain the problem in 1-2 sentences and suggest a fix. If "isMet" is true, provide a brief positive explanation.

Ensure your entire output is a single, valid JSON object. Do not include any text before or after the JSON object.
""".strip()


def estimate_ranking_potential(
    request: RankingRequest,
    completer: Optional[JsonCompleter] = None,
) -> RankingResult:
    """見出しテキストがメインキーワードでどの程度上位を狙えるかを LLM で推定する。"""
    logger.info(
        "[ranking_estimator] estimate start header_type=%s main_keyword=%s",
        request.header_type,
        request.main_keyword,
    )

    result = invoke_structured(
        ESTIMATE_RANKING_POTENTIAL_PROMPT,
        request,
        RankingResult,
        completer=completer,
    )

    logger.info(
        "[ranking_estimator] estimate success score=%d category=%s variations=%d unmet=%d",
        result.ranking_potential_score,
        result.estimated_ranking_category,
        len(result.keyword_variations),
        len(result.unmet_items()),
    )
    return result
