# backend/canvas_notion_sync/sync/config.py

"""
メッセージルーターの設定値。
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from canvas_notion_sync.utils.config import get_env_float


@dataclass(frozen=True)
class RouterSettings:
    """
    deadline_seconds: 1 メッセージ分のパイプライン全体に掛ける上限秒数。
    None の場合は上限なし（各通信のタイムアウトのみ）。
    """

    deadline_seconds: Optional[float] = None


@lru_cache()
def get_router_settings() -> RouterSettings:
    """
    任意:
      - SYNC_DEADLINE_SECONDS（未設定なら上限なし）
    """
    deadline = get_env_float("SYNC_DEADLINE_SECONDS", default=None)
    if deadline is not None and deadline <= 0:
        deadline = None
    return RouterSettings(deadline_seconds=deadline)
