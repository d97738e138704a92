# backend/canvas_notion_sync/sync/message_router.py

"""
同期メッセージのエントリーポイントとなる MessageRouter。

1 メッセージごとに次の順で処理し、必ず 1 回だけ応答を返す:
  死活確認（失敗しても続行） → Canvas からの収集 → バックエンドへの送信 → 応答の正規化
"""

import asyncio
import logging
from typing import Any, Callable, Mapping, Optional, Set, Union

from pydantic import ValidationError

from canvas_notion_sync.auth import Credential, CredentialAccessor
from canvas_notion_sync.canvas.collector import RemoteCollector
from canvas_notion_sync.notion.client import BackendClientError
from canvas_notion_sync.notion.dispatcher import SyncDispatcher
from canvas_notion_sync.notion.normalizer import ResponseNormalizer
from canvas_notion_sync.notion.prober import LivenessProber, ProbeResult
from canvas_notion_sync.notion.schemas import (
    ErrorCode,
    SyncFailure,
    SyncKind,
    SyncOutcome,
    SyncSuccess,
    SyncWarning,
)
from canvas_notion_sync.storage import KeyValueStore

from .schemas import InboundMessage, SyncReply

logger = logging.getLogger(__name__)

MISSING_TOKEN_MESSAGE = "Firebase token not found in storage"
UNKNOWN_ACTION_MESSAGE = "Unknown action"
INVALID_MESSAGE_MESSAGE = "Invalid message format"
TIMED_OUT_MESSAGE = "Sync timed out"
LAST_SYNC_KEY = "lastSyncTime"

SendResponse = Callable[[dict], Any]


class MessageRouter:
    """
    受信メッセージを SYNC / COMPARE / 不明 に振り分け、SyncReply を返す。

    - handle() は例外を投げない（すべて SyncReply に変換する）
    - インスタンスは使い回すが、メッセージごとの状態はローカル変数だけで持つ
    - deadline_seconds を指定するとパイプライン全体に上限時間を掛ける
    """

    def __init__(
        self,
        *,
        credential_accessor: CredentialAccessor,
        prober: LivenessProber,
        collector: RemoteCollector,
        dispatcher: SyncDispatcher,
        normalizer: Optional[ResponseNormalizer] = None,
        store: Optional[KeyValueStore] = None,
        deadline_seconds: Optional[float] = None,
    ) -> None:
        self._credentials = credential_accessor
        self._prober = prober
        self._collector = collector
        self._dispatcher = dispatcher
        self._normalizer = normalizer or ResponseNormalizer()
        self._store = store
        self._deadline_seconds = deadline_seconds
        self._pending: Set[asyncio.Task] = set()

    # ---- 公開 API ------------------------------------------------------

    async def handle(self, message: Union[InboundMessage, Mapping[str, Any], None]) -> SyncReply:
        """
        1 件のメッセージを処理して SyncReply を返す。
        """
        outcome = await self.process(message)
        return SyncReply.from_outcome(outcome)

    def listen(self, message: Any, send_response: SendResponse) -> bool:
        """
        コールバック形式のメッセージング向けアダプタ。

        パイプラインをタスクとして登録し、すぐに True（非同期で応答する）を返す。
        応答は send_response に dict で 1 回だけ渡される。
        実行中のイベントループ内から呼び出すこと。
        """
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._reply(message, send_response))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return True

    async def process(self, message: Union[InboundMessage, Mapping[str, Any], None]) -> SyncOutcome:
        """
        メッセージを SyncOutcome に変換する。例外は投げない。
        """
        try:
            parsed = self._parse(message)
        except (ValidationError, TypeError) as exc:
            logger.warning("Rejected malformed message: %s", exc)
            return SyncFailure(
                message=INVALID_MESSAGE_MESSAGE,
                code=ErrorCode.INVALID_MESSAGE.value,
            )

        kind = parsed.kind
        if kind is None:
            logger.warning("Unknown message type: %s", parsed.type)
            return SyncFailure(
                message=UNKNOWN_ACTION_MESSAGE,
                code=ErrorCode.UNKNOWN_ACTION.value,
            )

        try:
            if self._deadline_seconds is not None:
                return await asyncio.wait_for(
                    self._run_pipeline(kind, parsed),
                    timeout=self._deadline_seconds,
                )
            return await self._run_pipeline(kind, parsed)
        except asyncio.TimeoutError:
            logger.error(
                "Sync pipeline exceeded deadline of %.1fs", self._deadline_seconds
            )
            return SyncFailure(message=TIMED_OUT_MESSAGE, code=ErrorCode.TIMEOUT.value)
        except Exception as exc:  # noqa: BLE001
            # どの段階の想定外エラーでも応答は必ず返す
            logger.exception("Error in sync pipeline")
            return SyncFailure(
                message=str(exc) or "Unknown error",
                code=ErrorCode.INTERNAL_ERROR.value,
            )

    # ---- 内部: パイプライン ---------------------------------------------

    @staticmethod
    def _parse(message: Union[InboundMessage, Mapping[str, Any], None]) -> InboundMessage:
        if isinstance(message, InboundMessage):
            return message
        if not isinstance(message, Mapping):
            raise TypeError(f"message must be a mapping, got {type(message).__name__}")
        return InboundMessage.model_validate(dict(message))

    async def _run_pipeline(self, kind: SyncKind, message: InboundMessage) -> SyncOutcome:
        page_id = message.target_page_id
        if not page_id:
            logger.warning("Missing pageId, but continuing with sync attempt")

        # 認証情報の読み出しと死活確認は順序依存が無いので並行に行う
        credential, probe_result = await asyncio.gather(
            self._credentials.get_credential(),
            self._prober.probe(),
        )
        if probe_result is ProbeResult.UNREACHABLE:
            logger.warning("Server might not be running at %s", self._prober.base_url)

        try:
            dataset = await self._collector.collect()
        except Exception as exc:  # noqa: BLE001
            logger.error("Sync encountered an issue while collecting Canvas data: %s", exc)
            return SyncFailure(
                message=str(exc) or "Failed to collect Canvas data",
                code=ErrorCode.COLLECT_ERROR.value,
            )

        try:
            response = await self._dispatcher.dispatch(kind, dataset, credential, page_id)
        except BackendClientError as exc:
            logger.error("Error syncing with Notion: %s", exc)
            return self._normalizer.normalize(exc)

        outcome = self._apply_credential_advisory(
            self._normalizer.normalize(response),
            credential,
        )

        if isinstance(outcome, SyncFailure):
            logger.error("Error syncing with Notion: %s", outcome.message)
        elif isinstance(outcome, SyncWarning):
            logger.warning("Sync completed with warning: %s", outcome.message)

        if kind is SyncKind.SYNC:
            await self._record_last_sync(outcome)

        return outcome

    @staticmethod
    def _apply_credential_advisory(outcome: SyncOutcome, credential: Credential) -> SyncOutcome:
        """
        トークン無しで送った場合、失敗でなければ警告に差し替える。
        """
        if credential.is_present or isinstance(outcome, SyncFailure):
            return outcome

        logger.error("Error syncing with Notion: %s", MISSING_TOKEN_MESSAGE)
        result = outcome if isinstance(outcome, SyncSuccess) else outcome.result
        return SyncWarning(message=MISSING_TOKEN_MESSAGE, result=result)

    async def _record_last_sync(self, outcome: SyncOutcome) -> None:
        if self._store is None or isinstance(outcome, SyncFailure):
            return

        success = outcome if isinstance(outcome, SyncSuccess) else outcome.result
        if success is None:
            return

        try:
            await self._store.set({LAST_SYNC_KEY: success.timestamp})
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to record last sync time: %s", exc)

    async def _reply(self, message: Any, send_response: SendResponse) -> None:
        reply = await self.handle(message)
        try:
            send_response(reply.to_wire())
        except Exception:  # noqa: BLE001
            logger.exception("Failed to deliver reply")
