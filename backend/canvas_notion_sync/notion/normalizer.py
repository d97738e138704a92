# backend/canvas_notion_sync/notion/normalizer.py

"""
バックエンドからのさまざまな応答を 1 つの SyncOutcome に変換する Response Normalizer。

入力になりうるもの:
- JSON の成功レスポンス
- JSON の失敗レスポンス（success: false）
- JSON 以外のボディ（HTML のエラーページなど）
- 通信レベルの例外
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import httpx

from .client import BackendConnectionError, BackendTimeoutError
from .schemas import ErrorCode, SyncFailure, SyncOutcome, SyncSuccess, SyncWarning

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
UNEXPECTED_FORMAT_MESSAGE = "Unexpected response format"
DEFAULT_FAILURE_MESSAGE = "Sync failed"


def is_hard_failure(message: str) -> bool:
    """
    エラーメッセージが「本当の失敗」を表すかどうか。

    NOTE:
      小文字化した文言に "failed" / "error" が含まれるかだけで判定する。
      "Firebase token not found in storage" のような文言は警告扱いになる。
      構造化されたエラー種別に置き換えるまでは、この挙動を変えないこと。
    """
    lowered = message.lower()
    return "failed" in lowered or "error" in lowered


def advisory_or_failure(message: str, code: str) -> SyncOutcome:
    """
    is_hard_failure に従って SyncFailure か SyncWarning を返す。
    """
    if is_hard_failure(message):
        return SyncFailure(message=message, code=code)
    return SyncWarning(message=message)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _as_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)) and value >= 0:
        return int(value)
    return 0


class ResponseNormalizer:
    """
    httpx.Response または例外を受け取り、SyncOutcome を返す。

    例外は投げない。
    """

    def __init__(self, *, clock: Optional[Callable[[], str]] = None) -> None:
        self._clock = clock or _utc_now_iso

    def normalize(self, result: httpx.Response | BaseException) -> SyncOutcome:
        if isinstance(result, BaseException):
            return self._from_exception(result)
        return self._from_response(result)

    # ---- 内部ヘルパー -------------------------------------------------

    @staticmethod
    def _infer_code(exc: BaseException) -> str:
        if isinstance(exc, (BackendTimeoutError, httpx.TimeoutException)):
            return ErrorCode.TIMEOUT.value
        if isinstance(exc, (BackendConnectionError, httpx.RequestError)):
            return ErrorCode.NETWORK_ERROR.value
        return ErrorCode.INTERNAL_ERROR.value

    def _from_exception(self, exc: BaseException) -> SyncOutcome:
        message = str(exc) or exc.__class__.__name__
        return SyncFailure(message=message, code=self._infer_code(exc))

    def _from_response(self, response: httpx.Response) -> SyncOutcome:
        content_type = response.headers.get("content-type", "")
        if JSON_CONTENT_TYPE not in content_type.lower():
            # JSON 以外はパースを試みない
            logger.warning(
                "Server returned non-JSON response with status %s (content-type=%r)",
                response.status_code,
                content_type,
            )
            return SyncFailure(
                message=UNEXPECTED_FORMAT_MESSAGE,
                code=ErrorCode.PARSE_ERROR.value,
            )

        try:
            body = response.json()
        except ValueError:
            logger.warning(
                "Server returned malformed JSON with status %s",
                response.status_code,
            )
            return SyncFailure(
                message=UNEXPECTED_FORMAT_MESSAGE,
                code=ErrorCode.PARSE_ERROR.value,
            )

        if not isinstance(body, dict):
            return SyncFailure(
                message=UNEXPECTED_FORMAT_MESSAGE,
                code=ErrorCode.PARSE_ERROR.value,
            )

        if body.get("success") is not True:
            message = body.get("error") or DEFAULT_FAILURE_MESSAGE
            code = body.get("code") or ErrorCode.SYNC_ERROR.value
            return advisory_or_failure(str(message), str(code))

        return self._success_from_body(body)

    def _success_from_body(self, body: Dict[str, Any]) -> SyncSuccess:
        data = body.get("data")
        if not isinstance(data, dict):
            data = body

        timestamp = data.get("timestamp") or body.get("timestamp")
        if not isinstance(timestamp, str) or not timestamp:
            timestamp = self._clock()

        return SyncSuccess(
            synced_count=_as_count(data.get("syncedCount")),
            new_count=_as_count(data.get("newAssignments")),
            updated_count=_as_count(data.get("updatedAssignments")),
            timestamp=timestamp,
        )
