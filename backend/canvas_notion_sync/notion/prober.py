# backend/canvas_notion_sync/notion/prober.py

"""
同期バックエンドの死活確認（Liveness Prober）。
"""

import logging
from enum import Enum

import httpx

from .client import new_async_client
from .config import BackendSettings, get_backend_settings

logger = logging.getLogger(__name__)


class ProbeResult(str, Enum):
    ALIVE = "alive"
    UNREACHABLE = "unreachable"


class LivenessProber:
    """
    ベース URL に HEAD を 1 回だけ送って到達可否を判定する。

    - ステータスコードに関係なく、応答があれば ALIVE
    - 通信レベルで失敗したら UNREACHABLE（例外は投げない）
    - 結果は参考情報で、呼び出し側はこれだけで処理を中断しない
    """

    def __init__(
        self,
        settings: BackendSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_backend_settings()
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._settings.api_base_url

    async def probe(self, base_url: str | None = None) -> ProbeResult:
        url = base_url or self.base_url
        try:
            async with new_async_client(self._settings, self._transport) as client:
                await client.head(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.debug("Liveness probe to %s failed: %s", url, exc)
            return ProbeResult.UNREACHABLE

        return ProbeResult.ALIVE
