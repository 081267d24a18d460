# models/result_models.py

from __future__ import annotations

from typing import Generic, Literal, TypeVar, Union

from pydantic import BaseModel

from models.header_models import HeaderAnalysisResult
from models.ranking_models import RankingResult

DataT = TypeVar("DataT")

# ActionFailure.kind の取りうる値
FailureKind = Literal[
    "validation",
    "network",
    "upstream_status",
    "model_invocation",
    "unexpected",
]


class ActionSuccess(BaseModel, Generic[DataT]):
    """アクション成功時の結果（Ok）。"""

    success: Literal[True] = True
    data: DataT


class ActionFailure(BaseModel):
    """
    アクション失敗時の結果（Err）。
    error はユーザーにそのまま見せてよい短いメッセージのみ。
    """

    success: Literal[False] = False
    error: str
    kind: FailureKind = "unexpected"


class FetchHtmlSuccess(BaseModel):
    """URL 取得成功時の結果。本文は加工せずそのまま返す。"""

    success: Literal[True] = True
    html: str


FetchHtmlResult = Union[FetchHtmlSuccess, ActionFailure]
HeaderAnalysisActionResult = Union[ActionSuccess[HeaderAnalysisResult], ActionFailure]
RankingActionResult = Union[ActionSuccess[RankingResult], ActionFailure]
