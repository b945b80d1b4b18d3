from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..logging_config import log_structured_error
from .internal import (
    BroadcastError,
    ChatError,
    CodecError,
    ConfigError,
)


T = TypeVar("T")


def categorize_error(error: BaseException) -> str:
    """Return the aggregation category used for ``error``."""
    if isinstance(error, OSError | ConnectionError | EOFError):
        return "network"
    if isinstance(error, CodecError):
        return "codec"
    if isinstance(error, BroadcastError):
        return "broadcast"
    if isinstance(error, ConfigError):
        return "config"
    if isinstance(error, ChatError):
        return "internal"
    return "unknown"


def log_error(message: str, error: Exception, context: dict | None = None, level: int = logging.ERROR) -> None:
    """Log ``error`` under its category and count it in the aggregator.

    Args:
        message: What was being attempted, e.g. "Connection read failed".
        error: The exception that ended the attempt.
        context: Extra ``key=value`` pairs such as the peer address.
        level: Logging level; transport failures use WARNING.
    """
    log_structured_error(
        error_type=categorize_error(error),
        message=f"{message}: {str(error)}",
        exception=error,
        context=context,
        level=level,
    )


def is_retryable_error(error: BaseException) -> bool:
    """Transient socket failures (address in use, refused, reset) are worth retrying."""
    return isinstance(error, OSError)


async def handle_retryable_error(
    operation: Callable[[int], Awaitable[T]],
    context: str,
    max_attempts: int = 3,
    wait_multiplier: float = 1.0,
    wait_max: float = 30.0,
) -> T:
    """Run an async operation with Tenacity-based retry logic.

    Errors accepted by ``is_retryable_error`` are retried with exponential
    backoff; any other exception propagates immediately.

    Args:
        operation: Async callable receiving the 1-based attempt number.
        context: Descriptive context for the operation.
        max_attempts: Maximum number of attempts.
        wait_multiplier: Exponential backoff multiplier in seconds.
        wait_max: Upper bound on a single backoff wait in seconds.

    Returns:
        The result of the first successful attempt.

    Raises:
        ChatError: If every attempt failed with a retryable error.
    """
    attempt_count = 0

    def before_attempt(retry_state):
        nonlocal attempt_count
        attempt_count = retry_state.attempt_number
        if attempt_count > 1:
            logging.info(f"🔁 Retrying {context} (attempt {attempt_count}/{max_attempts})")

    def after_attempt(retry_state):
        if retry_state.outcome.failed:
            log_error(
                f"Attempt failed for {context}",
                retry_state.outcome.exception(),
                context={"attempt": attempt_count, "operation": context},
                level=logging.WARNING,
            )

    async def wrapped_operation() -> T:
        return await operation(attempt_count)

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=wait_multiplier, max=wait_max),
        retry=retry_if_exception(is_retryable_error),
        before=before_attempt,
        after=after_attempt,
    )

    try:
        return await retrying(wrapped_operation)
    except RetryError as e:
        final = e.last_attempt.exception()
        log_error(
            f"All retry attempts exhausted for {context}",
            final if isinstance(final, Exception) else e,
            context={"max_attempts": max_attempts, "operation": context},
        )
        raise ChatError(
            f"Operation failed after {max_attempts} attempts in {context}: {final}",
            data={"attempts": max_attempts, "operation": context},
        ) from final
