# services/llm_client.py

from __future__ import annotations

import json
import logging
import threading
from typing import Callable, Optional, Type, TypeVar

import openai
from openai import OpenAI
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.config import settings
from services.errors import ModelInvocationError, SchemaValidationError

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)

# (system_prompt, user_prompt) -> JSON 文字列
# OpenAI 以外のプロバイダやテスト用スタブはこの形で差し替える
JsonCompleter = Callable[[str, str], str]

_client: OpenAI | None = None
_client_lock = threading.Lock()


def get_openai_client() -> OpenAI:
    global _client
    if _client is not None:
        return _client
    # スレッドプールから同時に初回呼び出しされても生成は1回だけ
    with _client_lock:
        if _client is None:
            if not settings.openai_api_key:
                raise ModelInvocationError("OPENAI_API_KEY が設定されていません")
            # リトライはこの層では行わない（呼び出し側の責務）
            _client = OpenAI(
                api_key=settings.openai_api_key,
                timeout=settings.openai_timeout,
                max_retries=0,
            )
    return _client


def openai_json_completion(system_prompt: str, user_prompt: str) -> str:
    """
    OpenAI chat completions を JSON モードで1回だけ呼び、生の本文を返す。
    ここではスキーマ検証はしない（invoke_structured 側で行う）。
    """
    client = get_openai_client()
    model_name = settings.openai_model

    logger.info("[llm_client] LLM call start model=%s prompt_len=%d", model_name, len(user_prompt))

    try:
        response = client.chat.completions.create(
            model=model_name,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=settings.openai_temperature,
        )
    except openai.OpenAIError as e:
        logger.error("[llm_client] LLM call failed model=%s error=%r", model_name, e)
        raise ModelInvocationError("LLM の呼び出しに失敗しました") from e

    usage = getattr(response, "usage", None)
    logger.info(
        "[llm_client] LLM response received model=%s total_tokens=%s",
        model_name,
        getattr(usage, "total_tokens", None) if usage else None,
    )

    content = response.choices[0].message.content
    if content is None:
        raise ModelInvocationError("LLM からコンテンツが返却されませんでした")
    return content


def build_system_prompt(output_model: Type[BaseModel]) -> str:
    """出力スキーマ（JSON Schema）を埋め込んだ system プロンプトを作る。"""
    schema = json.dumps(output_model.model_json_schema(by_alias=True), ensure_ascii=False)
    return (
        "You respond with a single JSON object and nothing else.\n"
        "The JSON object must conform to this JSON Schema:\n"
        f"{schema}\n"
        "Do not include any text before or after the JSON object."
    )


def render_prompt(prompt_template: str, input_fields: BaseModel) -> str:
    """
    入力フィールドをテンプレートにそのまま差し込む。
    プレースホルダは alias 名（例: {htmlContent}）。エスケープはしない。
    """
    return prompt_template.format(**input_fields.model_dump(by_alias=True))


def _strip_code_fence(content: str) -> str:
    """```json ... ``` で囲まれて返ってきた場合だけ中身を取り出す。"""
    text = content.strip()
    if text.startswith("```") and text.endswith("```"):
        first_newline = text.find("\n")
        if first_newline == -1:
            return text.strip("`")
        return text[first_newline + 1 : -3].strip()
    return text


def invoke_structured(
    prompt_template: str,
    input_fields: BaseModel,
    output_model: Type[OutputT],
    completer: Optional[JsonCompleter] = None,
) -> OutputT:
    """
    プロンプトテンプレート + 入力 + 出力スキーマで LLM を1回呼び、
    スキーマ検証済みのオブジェクトを返す。

    - 失敗はすべて ModelInvocationError（スキーマ不一致は SchemaValidationError）
    - 検証に通らなかった JSON は一部たりとも返さない
    - リトライはしない
    """
    completer = completer or openai_json_completion
    system_prompt = build_system_prompt(output_model)
    user_prompt = render_prompt(prompt_template, input_fields)

    try:
        content = completer(system_prompt, user_prompt)
    except ModelInvocationError:
        raise
    except Exception as e:  # noqa: BLE001
        logger.error("[llm_client] completer error output=%s error=%r", output_model.__name__, e)
        raise ModelInvocationError("LLM の呼び出しに失敗しました") from e

    if not isinstance(content, str):
        logger.error(
            "[llm_client] completer returned non-str output=%s type=%s",
            output_model.__name__,
            type(content).__name__,
        )
        raise ModelInvocationError("LLM の返却が文字列ではありません")

    # 型の強制変換はしない（"85" や "no" はスキーマ違反として扱う）
    try:
        result = output_model.model_validate_json(_strip_code_fence(content), strict=True)
    except PydanticValidationError as e:
        logger.error(
            "[llm_client] schema validation error output=%s errors=%d content=%r",
            output_model.__name__,
            e.error_count(),
            content[:2000],
        )
        raise SchemaValidationError(
            f"LLM の返却が {output_model.__name__} のスキーマに一致しません"
        ) from e

    logger.info("[llm_client] structured output validated output=%s", output_model.__name__)
    return result
