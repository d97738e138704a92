# backend/canvas_notion_sync/main.py

"""
同期オーケストレーションサービスのエントリーポイント。

主な責務:
- POST /messages で同期メッセージを受け付ける
- GET /health で死活確認に応答する
"""

from fastapi import FastAPI

from canvas_notion_sync.sync.router import router as sync_router


def create_app() -> FastAPI:
    """
    FastAPI アプリケーションファクトリ。

    - 同期メッセージエンドポイント (/messages)
    - ヘルスチェックエンドポイント (/health)
    """
    app = FastAPI(title="Canvas to Notion Sync")

    # ルーター登録
    app.include_router(sync_router)

    @app.get("/health", tags=["health"])
    def health_check() -> dict:
        """
        簡易ヘルスチェックエンドポイント。
        """
        return {"status": "ok"}

    return app


# uvicorn 実行時のエントリーポイント
app = create_app()
