# app/config.py

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    アプリ全体で使う設定クラス。
    .env から環境変数を読み込み、属性として参照できるようにする。
    """

    # ---------- OpenAI ----------
    # OPENAI_API_KEY=sk-xxxx... を .env に書く想定
    openai_api_key: str | None = None

    # モデル名を変えたい場合は .env に
    # OPENAI_MODEL=gpt-4.1 などと書けば上書きされる
    openai_model: str = "gpt-4.1-mini"
    openai_temperature: float = 0.2

    # モデル呼び出しのタイムアウト（秒）
    openai_timeout: float = 60.0

    # ---------- URL 取得 ----------
    fetch_timeout: float = 10.0

    # ブラウザっぽい UA（素の UA だと弾くサイトがあるため）
    fetch_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/91.0.4472.124 Safari/537.36"
    )

    # ---------- ログ ----------
    # logging.setLevel にそのまま渡すので大文字に揃える（LOG_LEVEL=info も可）
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    # ---------- Pydantic Settings 設定 ----------
    model_config = SettingsConfigDict(
        env_file=".env",            # .env を読む
        env_file_encoding="utf-8",
        extra="ignore",             # 定義外の環境変数があっても無視（エラーにしない）
    )


@lru_cache
def get_settings() -> Settings:
    """Settings をシングルトン的に使うためのヘルパ。"""
    return Settings()


# 他のモジュールからは `from app.config import settings` で利用
settings = get_settings()
