"""
Retry policy for single-request transient faults.

Wraps one submit / poll / download call. The job polling loop has its
own interval and is not driven from here.

Retried: NetworkError, RateLimited, 408/5xx RequestFailed.
Not retried: validation, auth, not-found, timeouts, cancellation.

Delay before retry n (0-indexed) is base_delay * 2**n.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .errors import SoraError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RetryObserver = Callable[[int, float, BaseException], None]


def is_transient(error: BaseException) -> bool:
    """True for failures worth retrying immediately."""
    return isinstance(error, SoraError) and error.retryable


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""
    max_attempts: int = 3  # Total attempts, including the first
    base_delay: float = 2.0  # Seconds before the first retry

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must not be negative")


class RetryPolicy:
    """
    Bounded exponential-backoff retry around an async operation.

    Usage:
        policy = RetryPolicy(RetryConfig(max_attempts=3, base_delay=2.0))
        response = await policy.run(lambda: send_request(), description="submit job")

    The caller sees either the operation's result or the last error it
    raised, unchanged.
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        is_retryable: Callable[[BaseException], bool] = is_transient,
        on_retry: Optional[RetryObserver] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.config = config or RetryConfig()
        self.is_retryable = is_retryable
        self.on_retry = on_retry
        self._sleep = sleep

    def _retrying(self, description: str) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.config.max_attempts),
            wait=wait_exponential(multiplier=self.config.base_delay, exp_base=2, min=0),
            retry=retry_if_exception(self.is_retryable),
            before_sleep=lambda state: self._before_sleep(state, description),
            sleep=self._sleep,
            reraise=True,
        )

    def _before_sleep(self, retry_state: RetryCallState, description: str):
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        attempt = retry_state.attempt_number

        status = getattr(error, "status_code", None)
        logger.warning(
            f"Retry {attempt}/{self.config.max_attempts - 1} for {description} "
            f"after {delay * 1000:.0f}ms due to {status or type(error).__name__}"
        )

        if self.on_retry:
            try:
                self.on_retry(attempt, delay, error)
            except Exception as e:
                logger.warning(f"Retry observer failed: {e}")

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        description: str = "request",
    ) -> T:
        """
        Execute an operation with retry protection.

        Args:
            operation: Zero-argument coroutine factory, called once per attempt
            description: Label used in retry log lines

        Returns:
            Result from the operation

        Raises:
            The last exception raised by the operation
        """
        return await self._retrying(description)(operation)
