# backend/canvas_notion_sync/sync/schemas.py

"""
メッセージルーターが受け取るメッセージと、呼び出し元へ返す応答のスキーマ定義。

ワイヤ上のキー名（pageId, syncedCount など）は拡張機能側との互換のため camelCase。
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from canvas_notion_sync.notion.schemas import (
    SyncFailure,
    SyncKind,
    SyncOutcome,
    SyncSuccess,
    SyncWarning,
)

# メッセージ type → バックエンド操作種別
MESSAGE_KINDS: Dict[str, SyncKind] = {
    "SYNC_TO_NOTION": SyncKind.SYNC,
    "COMPARE": SyncKind.COMPARE,
}


class MessageData(BaseModel):
    """メッセージの data 部。pageId 以外のキーは無視せず保持する。"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    page_id: Optional[str] = Field(None, alias="pageId", description="同期先の Notion ページ ID")


class InboundMessage(BaseModel):
    """
    ポップアップなどから届く 1 件のメッセージ。

    type が MESSAGE_KINDS に無いものも受け付け、ルーター側で Unknown action として扱う。
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(..., description="SYNC_TO_NOTION / COMPARE / その他")
    data: Optional[MessageData] = None

    @field_validator("data", mode="before")
    @classmethod
    def _ignore_data_of_unknown_type(cls, value: Any, info: ValidationInfo) -> Any:
        # 未知の type は Unknown action になるので data の形は問わない
        if info.data.get("type") not in MESSAGE_KINDS:
            return None
        return value

    @property
    def kind(self) -> Optional[SyncKind]:
        return MESSAGE_KINDS.get(self.type)

    @property
    def target_page_id(self) -> Optional[str]:
        return self.data.page_id if self.data is not None else None


class SyncReplyData(BaseModel):
    """成功時に返す件数サマリ。"""

    model_config = ConfigDict(populate_by_name=True)

    synced_count: int = Field(..., alias="syncedCount")
    new_assignments: int = Field(..., alias="newAssignments")
    updated_assignments: int = Field(..., alias="updatedAssignments")
    timestamp: str

    @classmethod
    def from_success(cls, success: SyncSuccess) -> "SyncReplyData":
        return cls(
            synced_count=success.synced_count,
            new_assignments=success.new_count,
            updated_assignments=success.updated_count,
            timestamp=success.timestamp,
        )


class SyncReply(BaseModel):
    """
    呼び出し元へ返す応答。

    - success=True: SyncSuccess または SyncWarning（syncWarning に文言）
    - success=False: SyncFailure（error に文言、code にエラーコード）
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    data: Optional[SyncReplyData] = None
    sync_warning: Optional[str] = Field(None, alias="syncWarning")
    error: Optional[str] = None
    code: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: SyncOutcome) -> "SyncReply":
        if isinstance(outcome, SyncSuccess):
            return cls(success=True, data=SyncReplyData.from_success(outcome))
        if isinstance(outcome, SyncWarning):
            data = SyncReplyData.from_success(outcome.result) if outcome.result else None
            return cls(success=True, data=data, sync_warning=outcome.message)
        if isinstance(outcome, SyncFailure):
            return cls(success=False, error=outcome.message, code=outcome.code)
        raise TypeError(f"Unsupported outcome type: {type(outcome)!r}")

    def to_wire(self) -> Dict[str, Any]:
        """
        拡張機能のメッセージングにそのまま渡せる dict を返す（None は省く）。
        """
        return self.model_dump(by_alias=True, exclude_none=True)
