# backend/canvas_notion_sync/canvas/config.py

"""
Canvas LMS API 連携に必要な設定値をまとめるモジュール。
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from canvas_notion_sync.utils.config import get_env, get_env_float, get_env_int


@dataclass(frozen=True)
class CanvasSettings:
    """Canvas API 用の設定値コンテナ。"""

    api_base_url: str
    api_token: Optional[str] = None
    recent_cutoff_months: int = 4
    timeout_seconds: float = 10.0


@lru_cache()
def get_canvas_settings() -> CanvasSettings:
    """
    環境変数から Canvas 設定を読み込む。

    任意:
      - CANVAS_API_BASE_URL         (デフォルト: https://canvas.ucsc.edu/api/v1)
      - CANVAS_API_TOKEN            (未設定ならブラウザセッション前提で認証ヘッダなし)
      - CANVAS_RECENT_CUTOFF_MONTHS (デフォルト: 4)
      - CANVAS_TIMEOUT_SECONDS      (デフォルト: 10)
    """
    api_base_url = get_env(
        "CANVAS_API_BASE_URL",
        default="https://canvas.ucsc.edu/api/v1",
        required=False,
    )

    return CanvasSettings(
        api_base_url=api_base_url.rstrip("/"),
        api_token=get_env("CANVAS_API_TOKEN", required=False),
        recent_cutoff_months=get_env_int("CANVAS_RECENT_CUTOFF_MONTHS", default=4),
        timeout_seconds=get_env_float("CANVAS_TIMEOUT_SECONDS", default=10.0),
    )
