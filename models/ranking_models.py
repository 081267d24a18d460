# models/ranking_models.py

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field


# -----------------------------------------
# ランキング見込みの定性評価
# -----------------------------------------
RankingCategoryType = Literal[
    "High Potential",
    "Moderate Potential",
    "Low Potential",
]


class RankingRequest(BaseModel):
    """ランキング見込み推定の入力。

    Attributes:
        header_type (str): 見出しの種類（"H1", "Title Tag" など）。
        header_text (str): 見出しテキスト。
        main_keyword (str): 狙うメインキーワード。
    """

    model_config = ConfigDict(populate_by_name=True)

    header_type: str = Field(
        "H1",
        alias="headerType",
        description="The type of header (e.g., H1, Title Tag).",
    )
    header_text: str = Field(
        ..., alias="headerText", description="The text content of the header."
    )
    main_keyword: str = Field(
        ..., alias="mainKeyword", description="The main keyword to rank for."
    )


class KeywordVariation(BaseModel):
    """関連キーワード案。volume / kd は LLM の目安値（自由書式）。"""

    keyword: str
    volume: str = Field(..., description="e.g., '1.2K', 'N/A'")
    kd: str = Field(..., description="e.g., '35%', 'Low'")


class ChecklistResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    checklist_item: str = Field(..., alias="checklistItem")
    is_met: bool = Field(..., alias="isMet")
    reasoning: str = Field(
        ...,
        description="Markdown. Explanation of the problem if not met, a brief positive explanation if met.",
    )


class RankingResult(BaseModel):
    """ランキング見込み推定の出力。LLM の JSON はこのスキーマで検証される。"""

    model_config = ConfigDict(populate_by_name=True)

    ranking_potential_score: int = Field(
        ...,
        alias="rankingPotentialScore",
        ge=0,
        le=100,
        description="An estimated score (0-100) indicating how well the text might rank for the main keyword.",
    )
    estimated_ranking_category: RankingCategoryType = Field(
        ...,
        alias="estimatedRankingCategory",
        description="A concise qualitative assessment.",
    )
    ranking_analysis_report: str = Field(
        ...,
        alias="rankingAnalysisReport",
        description="A report in Markdown format (2-4 paragraphs).",
    )
    # 3〜5 件を想定しているが件数は検証しない
    keyword_variations: List[KeywordVariation] = Field(
        ...,
        alias="keywordVariations",
        description="An array of 3-5 relevant keyword variations.",
    )
    audit_checklist_results: List[ChecklistResult] = Field(
        ..., alias="auditChecklistResults"
    )

    def unmet_items(self) -> List[ChecklistResult]:
        """満たしていないチェック項目だけを返す。"""
        return [item for item in self.audit_checklist_results if not item.is_met]
