# backend/canvas_notion_sync/canvas/__init__.py

"""
Canvas LMS 連携モジュール群。

主な責務:
- Canvas API から直近の受講コースと課題を取得する
- 取得結果を同期用の簡略レコードに変換する
"""
