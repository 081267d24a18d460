# services/crawler.py

import logging

import requests

from app.config import settings
from services.errors import NetworkError, UpstreamStatusError

logger = logging.getLogger(__name__)


def fetch_html(url: str, timeout: float | None = None) -> str:
    """
    単純な GET だけのクロール。
    並列もリトライも入れていない。サイズや Content-Type のチェックもしない。

    Raises:
        UpstreamStatusError: 2xx 以外が返ってきた場合（status_code を保持）
        NetworkError: 接続できなかった場合
    """
    headers = {
        "User-Agent": settings.fetch_user_agent,
    }
    timeout = settings.fetch_timeout if timeout is None else timeout

    logger.info("[crawler] GET start url=%s", url)
    try:
        resp = requests.get(url, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        logger.warning("[crawler] GET failed url=%s error=%r", url, e)
        raise NetworkError(
            "Network error or invalid URL. Please check the URL and your connection."
        ) from e

    if not 200 <= resp.status_code < 300:
        logger.warning("[crawler] Non-2xx status url=%s status=%s", url, resp.status_code)
        raise UpstreamStatusError(resp.status_code)

    logger.info("[crawler] GET done url=%s status=%s length=%d", url, resp.status_code, len(resp.text))
    return resp.text
