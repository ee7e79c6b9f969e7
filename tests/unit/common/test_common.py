"""
Common 모듈 단위 테스트

이 모듈은 재시도 로직의 기능을 테스트합니다.
"""

import pytest
from unittest.mock import AsyncMock, patch
from app.common.retry import backoff_delay, retry_with_backoff


class TestBackoffDelay:
    """지수 백오프 지연 계산 테스트"""

    def test_without_jitter(self):
        assert backoff_delay(1, 1.0, 60.0, jitter=False) == 1.0
        assert backoff_delay(2, 1.0, 60.0, jitter=False) == 2.0
        assert backoff_delay(4, 1.0, 60.0, jitter=False) == 8.0

    def test_capped_by_max_delay(self):
        assert backoff_delay(10, 1.0, 5.0, jitter=False) == 5.0

    def test_jitter_range(self):
        """지터는 지연을 절반까지 줄일 수 있음"""
        for _ in range(50):
            delay = backoff_delay(3, 1.0, 60.0, jitter=True)
            assert 2.0 <= delay <= 4.0


class TestRetryWithBackoff:
    """재시도 로직 테스트"""

    @pytest.mark.asyncio
    async def test_success_first_try(self):
        func = AsyncMock(return_value="ok")

        assert await retry_with_backoff(func, base_delay=0) == "ok"
        assert func.await_count == 1

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self):
        func = AsyncMock(side_effect=[ValueError("1"), ValueError("2"), "ok"])

        with patch("asyncio.sleep", AsyncMock()) as sleep_mock:
            result = await retry_with_backoff(func, max_retries=3, base_delay=1.0, jitter=False)

        assert result == "ok"
        assert func.await_count == 3
        assert [c.args[0] for c in sleep_mock.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        func = AsyncMock(side_effect=ValueError("boom"))

        with pytest.raises(ValueError, match="boom"):
            await retry_with_backoff(func, max_retries=2, base_delay=0)
        assert func.await_count == 3

    @pytest.mark.asyncio
    async def test_zero_retries(self):
        func = AsyncMock(side_effect=ValueError("boom"))

        with pytest.raises(ValueError):
            await retry_with_backoff(func, max_retries=0)
        assert func.await_count == 1

    @pytest.mark.asyncio
    async def test_other_exceptions_not_retried(self):
        """retry_on에 없는 예외는 즉시 전파"""
        func = AsyncMock(side_effect=KeyError("x"))

        with pytest.raises(KeyError):
            await retry_with_backoff(func, max_retries=3, base_delay=0, retry_on=(ValueError,))
        assert func.await_count == 1
