import logging
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry(attempts: int, fn: Callable[[], T]) -> T:
    """Call fn until it succeeds, at most `attempts` times; re-raise the last error."""
    if attempts < 1:
        raise ValueError("attempts must be at least 1")
    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except Exception as e:
            logger.warning(f"[Retry] Attempt {attempt}/{attempts} failed: {e}")
            if attempt == attempts:
                raise
