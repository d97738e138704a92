# backend/canvas_notion_sync/sync/router.py

from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Body, Depends

from canvas_notion_sync.auth import CredentialAccessor
from canvas_notion_sync.canvas.collector import RemoteCollector
from canvas_notion_sync.notion.dispatcher import SyncDispatcher
from canvas_notion_sync.notion.prober import LivenessProber
from canvas_notion_sync.storage import InMemoryKeyValueStore, KeyValueStore

from .config import get_router_settings
from .message_router import MessageRouter
from .schemas import SyncReply

router = APIRouter(tags=["sync"])


@lru_cache()
def get_key_value_store() -> KeyValueStore:
    """
    アプリ全体で共有するキーバリューストア。

    NOTE:
      - 永続ストアはこのサービスの外側の責務。ここではインメモリ実装を使う。
    """
    return InMemoryKeyValueStore()


@lru_cache()
def get_message_router() -> MessageRouter:
    """
    MessageRouter のシングルトンインスタンスを取得する。

    テストでは app.dependency_overrides で差し替える前提。
    """
    store = get_key_value_store()
    return MessageRouter(
        credential_accessor=CredentialAccessor(store),
        prober=LivenessProber(),
        collector=RemoteCollector(),
        dispatcher=SyncDispatcher(),
        store=store,
        deadline_seconds=get_router_settings().deadline_seconds,
    )


@router.post(
    "/messages",
    response_model=SyncReply,
    response_model_exclude_none=True,
    summary="同期メッセージを処理して応答を返す",
    description="SYNC_TO_NOTION / COMPARE メッセージを受け取り、Canvas → Notion の同期結果を返す。",
)
async def post_message(
    message: Any = Body(None),
    message_router: MessageRouter = Depends(get_message_router),
) -> SyncReply:
    """
    拡張機能のメッセージングと同じ形の JSON を受け付けるエンドポイント。

    - 成功・警告・失敗のいずれも 200 で SyncReply を返す
    - 失敗かどうかはボディの success で判断する
    """
    return await message_router.handle(message)
