# backend/canvas_notion_sync/notion/schemas.py

"""
同期バックエンド呼び出しの種別と、その結果（SyncOutcome）のスキーマ定義。
"""

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SyncKind(str, Enum):
    """
    バックエンドに対する操作の種別。

    - SYNC: Notion へ書き込む
    - COMPARE: 差分を返すだけで書き込まない
    """

    SYNC = "sync"
    COMPARE = "compare"


class ErrorCode(str, Enum):
    """SyncFailure.code に入る代表的なコード。"""

    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    PARSE_ERROR = "PARSE_ERROR"
    SYNC_ERROR = "SYNC_ERROR"
    COLLECT_ERROR = "COLLECT_ERROR"
    UNKNOWN_ACTION = "UNKNOWN_ACTION"
    INVALID_MESSAGE = "INVALID_MESSAGE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class SyncSuccess(BaseModel):
    """同期成功。件数はバックエンドの申告値をそのまま使う。"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    synced_count: int = Field(0, ge=0)
    new_count: int = Field(0, ge=0)
    updated_count: int = Field(0, ge=0)
    timestamp: str = Field(..., description="ISO8601 形式の完了時刻")


class SyncWarning(BaseModel):
    """
    形式上は成功だが、注意喚起すべき状況があった結果。

    バックエンド呼び出し自体が成功していれば result にその内容を保持する。
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["warning"] = "warning"
    message: str
    result: Optional[SyncSuccess] = None


class SyncFailure(BaseModel):
    """同期失敗。message は利用者に見せられる文言にする。"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    message: str
    code: str = ErrorCode.SYNC_ERROR.value


SyncOutcome = Union[SyncSuccess, SyncWarning, SyncFailure]
