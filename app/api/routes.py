# app/api/routes.py
from __future__ import annotations

import logging
from typing import Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.actions import get_html_from_url, get_optimized_headers, get_ranking_potential
from app.config import settings
from models.header_models import HeaderAnalysisRequest
from models.ranking_models import RankingRequest
from models.result_models import (
    FetchHtmlResult,
    HeaderAnalysisActionResult,
    RankingActionResult,
)
from services.llm_client import JsonCompleter, openai_json_completion

logger = logging.getLogger(__name__)

router = APIRouter()


# --------- Request モデル ---------


class FetchHtmlRequest(BaseModel):
    url: str


# --------- 依存関係 ---------


def get_completer() -> JsonCompleter:
    """
    LLM プロバイダ。テストでは app.dependency_overrides でスタブに差し替える。
    """
    return openai_json_completion


# --------- エンドポイント ---------
# 失敗も 200 + {"success": false, "error": ...} で返す（アクションの結果をそのまま返す）


@router.get("/health")
def api_health() -> Dict[str, str]:
    return {"status": "ok", "model": settings.openai_model}


@router.post("/fetch-html", response_model=FetchHtmlResult)
def api_fetch_html(payload: FetchHtmlRequest) -> FetchHtmlResult:
    """URL の HTML をそのまま返す。"""
    logger.info("[api.fetch-html] url=%s", payload.url)
    return get_html_from_url(payload.url)


@router.post("/analyze-headers", response_model=HeaderAnalysisActionResult)
def api_analyze_headers(
    payload: HeaderAnalysisRequest,
    completer: JsonCompleter = Depends(get_completer),
) -> HeaderAnalysisActionResult:
    """
    HTML の見出し構造（H1〜H6）を LLM で採点し、
    スコア・検出見出し・指摘事項・修正版 HTML を返す。
    """
    logger.info("[api.analyze-headers] html_len=%d", len(payload.html_content))
    result = get_optimized_headers(payload.html_content, completer=completer)
    logger.info("[api.analyze-headers] done success=%s", result.success)
    return result


@router.post("/estimate-ranking", response_model=RankingActionResult)
def api_estimate_ranking(
    payload: RankingRequest,
    completer: JsonCompleter = Depends(get_completer),
) -> RankingActionResult:
    """見出しテキストのメインキーワードに対するランキング見込みを返す。"""
    logger.info(
        "[api.estimate-ranking] header_type=%s main_keyword=%s",
        payload.header_type,
        payload.main_keyword,
    )
    result = get_ranking_potential(payload, completer=completer)
    logger.info("[api.estimate-ranking] done success=%s", result.success)
    return result
