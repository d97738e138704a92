# backend/tests/test_retry.py

import pytest

from canvas_notion_sync.utils.retry import retry_with_backoff


class _Sleeps:
    def __init__(self) -> None:
        self.delays = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.mark.asyncio
async def test_retries_with_exponential_backoff_then_succeeds():
    sleeps = _Sleeps()
    attempts = []

    async def operation():
        attempts.append(1)
        if len(attempts) < 3:
            raise ConnectionError("flaky")
        return "ok"

    result = await retry_with_backoff(operation, max_retries=3, base_delay_seconds=1.0, sleep=sleeps)

    assert result == "ok"
    assert len(attempts) == 3
    assert sleeps.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_raises_last_error_when_exhausted():
    sleeps = _Sleeps()

    async def operation():
        raise TimeoutError("still down")

    with pytest.raises(TimeoutError, match="still down"):
        await retry_with_backoff(operation, max_retries=2, base_delay_seconds=0.5, sleep=sleeps)

    assert sleeps.delays == [0.5]


@pytest.mark.asyncio
async def test_non_retryable_error_is_raised_immediately():
    sleeps = _Sleeps()
    attempts = []

    async def operation():
        attempts.append(1)
        raise ValueError("bad input")

    with pytest.raises(ValueError):
        await retry_with_backoff(operation, retry_on=(ConnectionError,), sleep=sleeps)

    assert len(attempts) == 1
    assert sleeps.delays == []
