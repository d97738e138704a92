# backend/canvas_notion_sync/sync/__init__.py

"""
同期メッセージ処理モジュール。

- schemas: 受信メッセージと応答（SyncReply）の Pydantic モデル
- config: パイプライン全体の上限時間などの設定値
- message_router: メッセージを振り分けて同期パイプラインを実行する MessageRouter
- router: POST /messages エンドポイント
"""

from .message_router import MessageRouter  # noqa: F401
from .schemas import InboundMessage, SyncReply  # noqa: F401
