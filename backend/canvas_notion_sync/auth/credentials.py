# backend/canvas_notion_sync/auth/credentials.py

"""
キーバリューストアから Bearer トークンを読み出す Credential Accessor。

トークンの発行・更新（サインイン、自動リフレッシュ）は外部の責務で、
ここでは「いま保存されているトークン」のスナップショットを借りるだけ。
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from canvas_notion_sync.storage import KeyValueStore

logger = logging.getLogger(__name__)

TOKEN_KEY = "firebaseToken"
TOKEN_TIMESTAMP_KEY = "tokenTimestamp"


class Credential(BaseModel):
    """ストアから読み出した認証情報のスナップショット。"""

    model_config = ConfigDict(frozen=True)

    token: Optional[str] = Field(None, description="Bearer トークン。未保存なら None")
    issued_at_epoch_millis: Optional[int] = Field(
        None,
        description="トークンを保存した時刻（epoch ミリ秒）",
    )

    @property
    def is_present(self) -> bool:
        return bool(self.token)


def _coerce_millis(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    return None


class CredentialAccessor:
    """
    トークンと発行時刻を 1 回のバッチ読み出しで取得する。

    - リトライはしない
    - トークンが無いのはエラーではなく、token=None の Credential を返す
    - ストア自体が例外を投げた場合もログを残して token=None 扱いにする
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        token_key: str = TOKEN_KEY,
        timestamp_key: str = TOKEN_TIMESTAMP_KEY,
    ) -> None:
        self._store = store
        self._token_key = token_key
        self._timestamp_key = timestamp_key

    async def get_credential(self) -> Credential:
        try:
            result = await self._store.get([self._token_key, self._timestamp_key])
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to read credential from storage: %s", exc)
            return Credential()

        result = result or {}
        token = result.get(self._token_key)
        if not isinstance(token, str) or not token:
            token = None

        return Credential(
            token=token,
            issued_at_epoch_millis=_coerce_millis(result.get(self._timestamp_key)),
        )
