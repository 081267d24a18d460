# app/actions.py

from __future__ import annotations

import logging
from typing import Optional

from pydantic import AnyHttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from agents.header_analyzer_agent import analyze_seo_headers
from agents.ranking_estimator_agent import estimate_ranking_potential
from models.header_models import HeaderAnalysisRequest, HeaderAnalysisResult
from models.ranking_models import RankingRequest, RankingResult
from models.result_models import (
    ActionFailure,
    ActionSuccess,
    FetchHtmlResult,
    FetchHtmlSuccess,
    HeaderAnalysisActionResult,
    RankingActionResult,
)
from services.crawler import fetch_html
from services.errors import SeoAssistantError, ValidationError
from services.llm_client import JsonCompleter

logger = logging.getLogger(__name__)

_url_adapter = TypeAdapter(AnyHttpUrl)

# ユーザーに見せるメッセージ（内部エラーの詳細は出さない）
MSG_INVALID_URL = "Please enter a valid URL."
MSG_FETCH_UNEXPECTED = "An unexpected error occurred while fetching the URL."
MSG_EMPTY_HTML = "HTML content cannot be empty."
MSG_ANALYZE_FAILED = "Failed to analyze headers with AI. Please try again."
MSG_EMPTY_HEADER_TYPE = "Header type is required."
MSG_EMPTY_RANKING_INPUT = "Header text and main keyword cannot be empty."
MSG_RANKING_FAILED = "Failed to estimate ranking potential with AI. Please try again."


def _validate_url(url: str) -> None:
    try:
        _url_adapter.validate_python(url)
    except PydanticValidationError as e:
        raise ValidationError(MSG_INVALID_URL) from e


# ============================================================
# 1) URL → HTML
# ============================================================

def get_html_from_url(url: str) -> FetchHtmlResult:
    """
    URL から HTML を取得する。

    - URL 形式が不正ならネットワークには出ずに即失敗
    - 2xx 以外はステータスコード入りのメッセージで失敗
    - 成功時は本文をそのまま返す
    """
    try:
        _validate_url(url)
        html = fetch_html(url)
    except SeoAssistantError as e:
        # ValidationError / NetworkError / UpstreamStatusError はメッセージをそのまま見せてよい
        logger.info("[actions.fetch-html] failed url=%r kind=%s", url, e.kind)
        return ActionFailure(error=str(e), kind=e.kind)
    except Exception as e:  # noqa: BLE001
        logger.exception("[actions.fetch-html] unexpected error url=%s: %s", url, e)
        return ActionFailure(error=MSG_FETCH_UNEXPECTED, kind="unexpected")

    return FetchHtmlSuccess(html=html)


# ============================================================
# 2) 見出し分析
# ============================================================

def get_optimized_headers(
    html_content: str,
    completer: Optional[JsonCompleter] = None,
) -> HeaderAnalysisActionResult:
    """HTML の見出し構造を分析する。空・空白のみなら LLM は呼ばない。"""
    if not html_content.strip():
        return ActionFailure(error=MSG_EMPTY_HTML, kind="validation")

    try:
        result = analyze_seo_headers(
            HeaderAnalysisRequest(html_content=html_content),
            completer=completer,
        )
    except SeoAssistantError as e:
        logger.error("[actions.analyze-headers] AI analysis failed: %r", e)
        return ActionFailure(error=MSG_ANALYZE_FAILED, kind=e.kind)
    except Exception as e:  # noqa: BLE001
        logger.exception("[actions.analyze-headers] unexpected error: %s", e)
        return ActionFailure(error=MSG_ANALYZE_FAILED, kind="unexpected")

    return ActionSuccess[HeaderAnalysisResult](data=result)


# ============================================================
# 3) ランキング見込み推定
# ============================================================

def get_ranking_potential(
    request: RankingRequest,
    completer: Optional[JsonCompleter] = None,
) -> RankingActionResult:
    """見出しテキスト × メインキーワードのランキング見込みを推定する。"""
    if not request.header_text.strip() or not request.main_keyword.strip():
        return ActionFailure(error=MSG_EMPTY_RANKING_INPUT, kind="validation")
    if not request.header_type.strip():
        return ActionFailure(error=MSG_EMPTY_HEADER_TYPE, kind="validation")

    try:
        result = estimate_ranking_potential(request, completer=completer)
    except SeoAssistantError as e:
        logger.error("[actions.estimate-ranking] AI ranking potential estimation failed: %r", e)
        return ActionFailure(error=MSG_RANKING_FAILED, kind=e.kind)
    except Exception as e:  # noqa: BLE001
        logger.exception("[actions.estimate-ranking] unexpected error: %s", e)
        return ActionFailure(error=MSG_RANKING_FAILED, kind="unexpected")

    return ActionSuccess[RankingResult](data=result)
