# backend/canvas_notion_sync/notion/config.py

"""
Notion 同期バックエンドに必要な設定値をまとめるモジュール。

ビルド環境（development / production）ごとにベース URL と API プレフィックスが変わる。
"""

from dataclasses import dataclass
from functools import lru_cache

from canvas_notion_sync.utils.config import get_env, get_env_float

# 環境ごとのデフォルト値
_ENV_DEFAULTS = {
    "development": {
        "base_url": "http://localhost:3000",
        "api_prefix": "/api/notion",
    },
    "production": {
        "base_url": "https://canvastonotion.netlify.app/.netlify/functions",
        "api_prefix": "/notion",
    },
}


@dataclass(frozen=True)
class BackendSettings:
    """同期バックエンド用の設定値コンテナ。"""

    environment: str
    api_base_url: str
    api_prefix: str = "/api/notion"
    timeout_seconds: float = 10.0

    def endpoint(self, path: str) -> str:
        """
        ベース URL + プレフィックス + path でフル URL を組み立てる。
        """
        normalized = path if path.startswith("/") else f"/{path}"
        return f"{self.api_base_url}{self.api_prefix}{normalized}"


@lru_cache()
def get_backend_settings() -> BackendSettings:
    """
    環境変数から同期バックエンド設定を読み込む。

    任意:
      - SYNC_ENV              (development / production、デフォルト: development)
      - SYNC_API_BASE_URL     (デフォルト: 環境ごとの値)
      - SYNC_API_PREFIX       (デフォルト: 環境ごとの値)
      - SYNC_TIMEOUT_SECONDS  (デフォルト: 10)
    """
    environment = get_env("SYNC_ENV", default="development", required=False)
    # 不明な環境名は development 扱い
    defaults = _ENV_DEFAULTS.get(environment, _ENV_DEFAULTS["development"])

    api_base_url = get_env(
        "SYNC_API_BASE_URL",
        default=defaults["base_url"],
        required=False,
    )
    api_prefix = get_env(
        "SYNC_API_PREFIX",
        default=defaults["api_prefix"],
        required=False,
    )

    return BackendSettings(
        environment=environment,
        api_base_url=api_base_url.rstrip("/"),
        api_prefix="/" + api_prefix.strip("/") if api_prefix.strip("/") else "",
        timeout_seconds=get_env_float("SYNC_TIMEOUT_SECONDS", default=10.0),
    )
