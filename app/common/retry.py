"""
Retry utilities for LuLu Monitor.

Only idempotent gateway calls (message edits) are retried; alert
submission is never retried so the agent is not spawned twice.
"""

import asyncio
import random
from typing import Awaitable, Callable, Tuple, Type, TypeVar

T = TypeVar('T')

def backoff_delay(attempt: int, base: float, max_delay: float, jitter: bool = True) -> float:
    """
    n번째 실패 후 기다릴 시간(초)을 계산합니다.

    base, 2*base, 4*base ... 로 늘어나며 max_delay를 넘지 않습니다.
    지터를 켜면 계산된 값의 50~100% 사이로 흔듭니다.
    """
    exponent = max(0, attempt - 1)
    delay = min(max_delay, base * (2 ** exponent))
    if not jitter:
        return delay
    return delay * random.uniform(0.5, 1.0)

async def retry_with_backoff(
    func: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    jitter: bool = True,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
) -> T:
    """
    비동기 호출을 retry_on 예외에 한해 다시 시도합니다.

    첫 시도 + 최대 max_retries번 재시도. 재시도 사이에는
    backoff_delay 만큼 쉽니다. 그 외 예외는 바로 전파됩니다.

    Raises:
        재시도를 모두 소진한 뒤의 마지막 예외
    """
    failures = 0
    while True:
        try:
            return await func()
        except retry_on:
            failures += 1
            if failures > max_retries:
                raise
            await asyncio.sleep(backoff_delay(failures, base_delay, max_delay, jitter))
