# domnode/waits.py
"""
@file waits.py
@brief Retry utilities backing Element.synchronize and Document.find.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional, Tuple, TypeVar

from .exceptions import TimeoutError
from .timinglogger import TIMING_LOGGER

T = TypeVar("T")


def _now() -> float:
    """Monotonic time source for deterministic timeout calculations."""
    return time.monotonic()


def _set_timeout_metadata(
    error: TimeoutError,
    *,
    description: str,
    timeout: float,
    attempt_count: int,
    elapsed: float,
    stage: Optional[str],
) -> None:
    error.description = description
    error.timeout = timeout
    error.attempt_count = attempt_count
    error.elapsed_time = elapsed
    error.stage = stage


def _log_retry_attempt(description: str, attempt: int, stage: Optional[str]) -> None:
    """Emit sampled retry attempt events to action logger if enabled."""
    from .actionlogger import ACTION_LOGGER

    if not ACTION_LOGGER.is_enabled():
        return
    if not ACTION_LOGGER.should_log_retry_attempt(attempt):
        return

    ACTION_LOGGER.log(
        action="retry_attempt",
        status="info",
        metadata={"description": description},
        attempt=attempt,
        phase=stage or "execute",
        event="retry_attempt",
    )


def wait_until_passes(
    func: Callable[..., T],
    timeout: float,
    interval: float = 0.2,
    exceptions: Tuple[type, ...] = (Exception,),
    description: str = "operation",
    *args: Any,
    stage: Optional[str] = None,
    retry_if: Optional[Callable[[BaseException], bool]] = None,
    before_retry: Optional[Callable[[BaseException], None]] = None,
    **kwargs: Any,
) -> T:
    """
    Wait until func(*args, **kwargs) succeeds without raising specified exceptions.

    @param exceptions Exception classes that may be retried
    @param retry_if Extra filter; a caught exception for which it returns
                    False is re-raised immediately
    @param before_retry Called with the failure before each new attempt
    @throws TimeoutError carrying the last retried exception once the
            deadline has passed
    """
    start_time = _now()
    attempt_count = 0

    if TIMING_LOGGER.is_enabled():
        TIMING_LOGGER.log(
            event="retry_start",
            description=description,
            metadata={"timeout_s": timeout, "interval_s": interval, "stage": stage},
        )

    while True:
        attempt_count += 1
        _log_retry_attempt(description, attempt_count, stage)
        try:
            result = func(*args, **kwargs)
            if TIMING_LOGGER.is_enabled():
                elapsed = _now() - start_time
                TIMING_LOGGER.log(
                    event="retry_success",
                    description=description,
                    status="success",
                    metadata={
                        "attempts": attempt_count,
                        "elapsed_s": round(elapsed, 3),
                        "stage": stage,
                    },
                )
            return result
        except exceptions as e:
            if retry_if is not None and not retry_if(e):
                raise
            elapsed = _now() - start_time
            time_left = timeout - elapsed

            if time_left <= 0:
                if TIMING_LOGGER.is_enabled():
                    TIMING_LOGGER.log(
                        event="retry_timeout",
                        description=description,
                        status="error",
                        metadata={
                            "attempts": attempt_count,
                            "elapsed_s": round(elapsed, 3),
                            "stage": stage,
                        },
                    )
                error = TimeoutError(
                    f"Timed out waiting for {description} after {timeout}s "
                    f"({attempt_count} attempts). "
                    f"Last error: {type(e).__name__}: {e}"
                )
                error.original_exception = e
                _set_timeout_metadata(
                    error,
                    description=description,
                    timeout=timeout,
                    attempt_count=attempt_count,
                    elapsed=elapsed,
                    stage=stage,
                )
                raise error from e

            sleep_time = min(interval, time_left)
            if TIMING_LOGGER.is_enabled():
                TIMING_LOGGER.log(
                    event="retry_wait",
                    description=description,
                    metadata={
                        "attempt": attempt_count,
                        "sleep_s": round(sleep_time, 3),
                        "stage": stage,
                    },
                )
            time.sleep(sleep_time)
            if before_retry is not None:
                before_retry(e)
