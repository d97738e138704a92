# backend/canvas_notion_sync/notion/client.py

"""
同期バックエンドとの通信で共通に使う例外と HTTP クライアント生成ヘルパー。
"""

import httpx

from .config import BackendSettings


class BackendClientError(RuntimeError):
    """同期バックエンド呼び出し全般の例外。"""


class BackendConnectionError(BackendClientError):
    """サーバに到達する前に失敗した場合（DNS, 接続拒否など）の例外。"""


class BackendTimeoutError(BackendConnectionError):
    """タイムアウトした場合の例外。"""


def new_async_client(
    settings: BackendSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    設定値のタイムアウトを持つ AsyncClient を生成する。

    transport はテストで httpx.MockTransport を差し込むために使う。
    """
    return httpx.AsyncClient(
        timeout=settings.timeout_seconds,
        transport=transport,
    )
