# backend/tests/conftest.py
"""
Pytest configuration for the Canvas to Notion sync tests.

- Ensures that the project root (backend/) is added to sys.path
  so that `import canvas_notion_sync.*` works correctly in tests.
- Ensures environment variables used by the settings loaders are set
  with safe dummy values.
- Clears cached settings between tests so monkeypatched env vars take effect.
"""

import os
import sys
from pathlib import Path

import pytest


def _ensure_project_root_in_sys_path() -> None:
    # This file is located at: backend/tests/conftest.py
    # parents[1] -> backend/
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)

    if project_root_str not in sys.path:
        # Insert at the beginning so it has priority over site-packages, etc.
        sys.path.insert(0, project_root_str)


def _ensure_test_env_vars() -> None:
    """
    Set dummy environment variables required for tests.

    These values are only for local testing and do NOT contain real secrets.
    """
    os.environ.setdefault("SYNC_ENV", "development")
    os.environ.setdefault("SYNC_API_BASE_URL", "http://localhost:3000")
    os.environ.setdefault("CANVAS_API_BASE_URL", "https://canvas.test/api/v1")


_ensure_project_root_in_sys_path()
_ensure_test_env_vars()


@pytest.fixture(autouse=True)
def _clear_cached_settings():
    from canvas_notion_sync.canvas.config import get_canvas_settings
    from canvas_notion_sync.notion.config import get_backend_settings
    from canvas_notion_sync.sync.config import get_router_settings
    from canvas_notion_sync.sync.router import get_key_value_store, get_message_router

    caches = (
        get_canvas_settings,
        get_backend_settings,
        get_router_settings,
        get_key_value_store,
        get_message_router,
    )
    for cached in caches:
        cached.cache_clear()
    yield
    for cached in caches:
        cached.cache_clear()
