# backend/canvas_notion_sync/notion/dispatcher.py

"""
同期バックエンドへの書き込みリクエストを組み立てて送信する Sync Dispatcher。
"""

import logging
from typing import Any, Dict, Optional

import httpx

from canvas_notion_sync.auth import Credential
from canvas_notion_sync.canvas.schemas import CollectedDataset

from .client import BackendConnectionError, BackendTimeoutError, new_async_client
from .config import BackendSettings, get_backend_settings
from .schemas import SyncKind

logger = logging.getLogger(__name__)

ENDPOINT_PATHS: Dict[SyncKind, str] = {
    SyncKind.SYNC: "/sync",
    SyncKind.COMPARE: "/compare",
}


class SyncDispatcher:
    """
    操作種別に応じたエンドポイントへ POST を 1 回だけ送る。

    - リトライはしない（必要なら utils.retry を呼び出し側で使う）
    - トークンが無い場合は Authorization ヘッダを付けずにそのまま送る
    - レスポンスの解釈は ResponseNormalizer に任せ、ここでは生の httpx.Response を返す
    """

    def __init__(
        self,
        settings: BackendSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_backend_settings()
        self._transport = transport

    def endpoint_for(self, kind: SyncKind) -> str:
        return self._settings.endpoint(ENDPOINT_PATHS[SyncKind(kind)])

    @staticmethod
    def build_headers(credential: Credential) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if credential.token:
            headers["Authorization"] = f"Bearer {credential.token}"
        return headers

    @staticmethod
    def build_payload(
        dataset: CollectedDataset,
        target_page_id: Optional[str],
    ) -> Dict[str, Any]:
        return {
            "pageId": target_page_id,
            "courses": [course.to_payload() for course in dataset.courses],
            "assignments": [a.to_payload() for a in dataset.assignments],
        }

    async def dispatch(
        self,
        kind: SyncKind,
        dataset: CollectedDataset,
        credential: Credential,
        target_page_id: Optional[str],
    ) -> httpx.Response:
        """
        :raises BackendTimeoutError: タイムアウト時
        :raises BackendConnectionError: サーバへ到達できなかった場合
        :return: バックエンドからの生レスポンス（ステータスコードは問わない）
        """
        url = self.endpoint_for(kind)
        payload = self.build_payload(dataset, target_page_id)

        logger.info(
            "Dispatching %s to %s (courses=%d, assignments=%d)",
            SyncKind(kind).value,
            url,
            len(dataset.courses),
            len(dataset.assignments),
        )

        try:
            async with new_async_client(self._settings, self._transport) as client:
                return await client.post(
                    url,
                    json=payload,
                    headers=self.build_headers(credential),
                )
        except httpx.TimeoutException as exc:
            raise BackendTimeoutError(f"Sync request timed out: {exc}") from exc
        except httpx.RequestError as exc:
            raise BackendConnectionError(f"Failed to reach sync backend: {exc}") from exc
