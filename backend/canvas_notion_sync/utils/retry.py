# backend/canvas_notion_sync/utils/retry.py

"""
指数バックオフ付きリトライの汎用ユーティリティ。

同期パイプラインのデフォルト経路では自動適用しない。
呼び出し側が必要に応じて個々の非同期処理を包んで使う。
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    *,
    max_retries: int = 3,
    base_delay_seconds: float = 1.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    operation を最大 max_retries 回まで実行する。

    - 待機時間は base_delay_seconds * 2 ** attempt（1s, 2s, 4s ...）
    - retry_on に含まれない例外は即座にそのまま送出する
    - すべて失敗した場合は最後の例外を送出する

    :param sleep: テストで待機を差し替えるためのフック
    """
    if max_retries < 1:
        raise ValueError("max_retries must be >= 1")

    last_error: Optional[BaseException] = None

    for attempt in range(max_retries):
        try:
            return await operation()
        except retry_on as exc:
            last_error = exc
            if attempt >= max_retries - 1:
                break

            wait_time = base_delay_seconds * (2 ** attempt)
            logger.warning(
                "Attempt %d/%d failed: %s. Retrying in %.1fs...",
                attempt + 1,
                max_retries,
                exc,
                wait_time,
            )
            await sleep(wait_time)

    logger.error("Operation failed after %d attempts: %s", max_retries, last_error)
    raise last_error  # type: ignore[misc]
