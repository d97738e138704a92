# backend/canvas_notion_sync/notion/__init__.py

"""
Notion 同期バックエンド連携用モジュール群。

主な責務:
- バックエンドの死活確認（prober）
- /sync, /compare への書き込みリクエスト送信（dispatcher）
- 応答を SyncOutcome にそろえる（normalizer）
"""
