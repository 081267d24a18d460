# services/errors.py

from __future__ import annotations

from typing import Optional


class SeoAssistantError(Exception):
    """
    このアプリで扱うエラーの基底クラス。
    kind は ActionFailure にそのまま載せる機械可読な分類。
    """

    kind: str = "unexpected"


class ValidationError(SeoAssistantError):
    """入力が不正（URL 形式不正・空文字など）。ネットワークには出ない。"""

    kind = "validation"


class NetworkError(SeoAssistantError):
    """対象 URL への接続失敗（DNS / 接続拒否 / タイムアウトなど）。"""

    kind = "network"


class UpstreamStatusError(SeoAssistantError):
    """対象 URL が 2xx 以外を返した。"""

    kind = "upstream_status"

    def __init__(self, status_code: int, message: Optional[str] = None) -> None:
        self.status_code = status_code
        super().__init__(message or f"Failed to fetch URL. Status: {status_code}")


class ModelInvocationError(SeoAssistantError):
    """LLM 呼び出しの失敗全般（API エラー・タイムアウト・キー未設定など）。"""

    kind = "model_invocation"


class SchemaValidationError(ModelInvocationError):
    """
    LLM の返却 JSON が宣言スキーマに合わなかった。
    呼び出し側からは ModelInvocationError と同じ扱いになる。
    """
