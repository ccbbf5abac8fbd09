"""Retry with exponential backoff.

The loop moves through four states: attempting, waiting before a retry,
succeeded and failed. Only exceptions accepted by ``is_retryable`` lead to
another attempt. Anything else propagates from the attempt that raised it.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from digiclick_client.errors import ClientError, MaxRetriesExceeded, NetworkError, RequestTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AttemptState(str, Enum):
    ATTEMPTING = "attempting"
    RETRY_WAIT = "retry_wait"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class RetryPolicy:
    retries: int = 3
    base_delay: float = 1.0
    factor: float = 2.0

    @property
    def attempts(self) -> int:
        return self.retries + 1

    def delay_for(self, attempt: int) -> float:
        """Backoff before the retry that follows a failed ``attempt`` (0-based)."""
        return self.base_delay * self.factor**attempt


def is_transient(exc: BaseException) -> bool:
    return isinstance(exc, (NetworkError, RequestTimeout))


async def retry_async(
    operation: Callable[[int], Awaitable[T]],
    policy: RetryPolicy,
    *,
    is_retryable: Callable[[BaseException], bool] = is_transient,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    on_state: Callable[[AttemptState, int], None] | None = None,
    label: str = "request",
) -> T:
    """Run ``operation(attempt)`` until it succeeds or attempts run out.

    Raises:
        MaxRetriesExceeded: every attempt failed with a retryable ClientError.
    """

    def transition(state: AttemptState, attempt: int) -> None:
        if on_state is not None:
            on_state(state, attempt)

    for attempt in range(policy.attempts):
        transition(AttemptState.ATTEMPTING, attempt)
        try:
            result = await operation(attempt)
        except ClientError as exc:
            if not is_retryable(exc):
                transition(AttemptState.FAILED, attempt)
                raise
            if attempt + 1 >= policy.attempts:
                transition(AttemptState.FAILED, attempt)
                logger.error(
                    "%s failed after %d attempts: %s",
                    label,
                    policy.attempts,
                    type(exc).__name__,
                )
                raise MaxRetriesExceeded(exc, attempts=policy.attempts) from exc

            delay = policy.delay_for(attempt)
            logger.warning(
                "%s attempt %d/%d failed (%s), retrying in %.2fs",
                label,
                attempt + 1,
                policy.attempts,
                type(exc).__name__,
                delay,
            )
            transition(AttemptState.RETRY_WAIT, attempt)
            await sleep(delay)
        else:
            transition(AttemptState.SUCCEEDED, attempt)
            return result

    # attempts is always >= 1, so the loop returns or raises
    raise RuntimeError("retry loop exited without a result")
