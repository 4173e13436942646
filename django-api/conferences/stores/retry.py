"""Bounded retry loop shared by the store implementations."""

import logging
from collections.abc import Callable
from typing import TypeVar

from tenacity import (
    RetryError,
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
    wait_none,
    wait_random,
)

from conferences.domain import ProfileKey
from conferences.stores.interfaces import ConcurrentModificationError, TransactionConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_on_conflict(
    root_key: ProfileKey,
    attempt: Callable[[], T],
    max_attempts: int,
    backoff_seconds: float,
) -> T:
    """Call ``attempt`` until it commits without a version conflict.

    Waits a jittered, linearly growing backoff between attempts. Any
    exception other than ``ConcurrentModificationError`` propagates at once.

    Raises:
        TransactionConflictError: If every attempt lost to a concurrent writer.
    """
    if backoff_seconds > 0:
        wait = wait_incrementing(
            start=backoff_seconds / 2, increment=backoff_seconds
        ) + wait_random(0, backoff_seconds)
    else:
        wait = wait_none()

    retrying = Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait,
        retry=retry_if_exception_type(ConcurrentModificationError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
    try:
        return retrying(attempt)
    except RetryError as exc:
        logger.warning("Giving up on transaction on %s after %d attempts", root_key, max_attempts)
        raise TransactionConflictError(root_key, max_attempts) from exc
