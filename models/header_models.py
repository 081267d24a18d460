# models/header_models.py

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# -----------------------------------------
# 見出し分析の重要度
# -----------------------------------------
SeverityType = Literal[
    "Critical",  # 構造的に致命的（H1 欠落・複数 H1 など）
    "Warning",   # 階層の飛ばしなど
    "Info",      # 改善提案レベル
]


class HeaderAnalysisRequest(BaseModel):
    """見出し分析の入力（LLM に渡す HTML）。"""

    model_config = ConfigDict(populate_by_name=True)

    html_content: str = Field(
        ...,
        alias="htmlContent",
        description="The HTML content to analyze for header optimization.",
    )


class HeaderDetail(BaseModel):
    """検出された見出し1件（tag は "H1"〜"H6"）。"""

    tag: str = Field(
        ...,
        pattern=r"^H[1-6]$",
        description="The header tag, e.g., 'H1'",
    )
    content: str = Field(..., description="The text content of the header tag.")

    @field_validator("tag", mode="before")
    @classmethod
    def _normalize_tag(cls, value: object) -> object:
        # LLM は "h2" や " H2 " を返すことがあるので揃えておく
        if isinstance(value, str):
            return value.strip().upper()
        return value


class AnalysisIssue(BaseModel):
    severity: SeverityType
    message: str = Field(..., description="A description of the SEO issue found.")
    recommendation: str = Field(
        ..., description="An actionable recommendation to fix the issue."
    )


class HeaderAnalysisResult(BaseModel):
    """見出し分析の出力。LLM の JSON はこのスキーマで検証される。

    Attributes:
        seo_score (int): 見出し構造の総合スコア（0〜100）。
        detected_headers (List[HeaderDetail]): 出現順の見出し一覧。
        analysis (List[AnalysisIssue]): 指摘事項と改善案。
        optimized_html (str): 見出しを修正した HTML 全体。
    """

    model_config = ConfigDict(populate_by_name=True)

    seo_score: int = Field(
        ...,
        alias="seoScore",
        ge=0,
        le=100,
        description="An overall SEO score for the header structure, from 0 to 100.",
    )
    detected_headers: List[HeaderDetail] = Field(
        ...,
        alias="detectedHeaders",
        description="A list of all detected H1-H6 headers, in document order.",
    )
    analysis: List[AnalysisIssue] = Field(
        ...,
        description="A list of SEO issues found in the headers, with recommendations.",
    )
    optimized_html: str = Field(
        ...,
        alias="optimizedHtml",
        description="The AI-optimized HTML snippet with improved header tags.",
    )

    def issues_by_severity(self) -> dict[str, List[AnalysisIssue]]:
        """severity 別に指摘事項をグループ化する（レポート表示用）。"""
        groups: dict[str, List[AnalysisIssue]] = {"Critical": [], "Warning": [], "Info": []}
        for issue in self.analysis:
            groups[issue.severity].append(issue)
        return groups
