# backend/canvas_notion_sync/storage/__init__.py

"""
外部キーバリューストアとの境界。

- store: KeyValueStore プロトコルとインメモリ実装
"""

from .store import InMemoryKeyValueStore, KeyValueStore  # noqa: F401
