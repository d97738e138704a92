# backend/canvas_notion_sync/__init__.py
"""
Canvas to Notion sync orchestration package.

This package contains:
- main: FastAPI application entrypoint
- sync: message routing and the sync pipeline
- canvas: Canvas LMS client and data collector
- notion: sync backend prober / dispatcher / response normalizer
- auth, storage: credential access over the external key-value store
"""
