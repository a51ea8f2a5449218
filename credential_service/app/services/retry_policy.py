"""
Bounded retry with exponential backoff.

Shared by the credential store and the notification dispatcher. The wrapped
call returns a Result; the policy inspects the error to decide between
retrying and giving up. Backoff sleeps hold no session or lock.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from credential_service.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


class RetryPolicy:
    """
    Retry up to ``max_retries`` times after the first attempt, waiting
    ``base_delay * 2**n`` seconds before retry n+1 (1s, 2s, 4s by default).

    Each attempt is bounded by ``attempt_timeout`` seconds when set; an attempt
    that runs past it counts as the error returned by ``on_timeout``.
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        attempt_timeout: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.attempt_timeout = attempt_timeout
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_for(self, retry_index: int) -> float:
        return self.base_delay * (2**retry_index)

    async def run(
        self,
        operation_name: str,
        call: Callable[[], Awaitable[Result]],
        is_retryable: Callable[[Error], bool],
        on_timeout: Callable[[], Error],
    ) -> Result:
        last_error: Optional[Error] = None

        for attempt in range(self.max_attempts):
            if attempt > 0:
                delay = self.delay_for(attempt - 1)
                logger.warning(
                    f"{operation_name}: retrying in {delay}s "
                    f"(attempt {attempt + 1}/{self.max_attempts}, last error {last_error.code})"
                )
                await self._sleep(delay)

            try:
                if self.attempt_timeout:
                    result = await asyncio.wait_for(call(), timeout=self.attempt_timeout)
                else:
                    result = await call()
            except asyncio.TimeoutError:
                result = Return.err(on_timeout())

            if result.is_ok():
                return result

            last_error = result.error
            if not is_retryable(last_error):
                return result

        logger.error(
            f"{operation_name}: giving up after {self.max_attempts} attempts ({last_error.code})"
        )
        return Return.err(last_error)
