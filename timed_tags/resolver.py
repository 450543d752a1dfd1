from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar("S")
T = TypeVar("T")

Attempt = Callable[[], Optional[T]]


def attempt(setup: Callable[[], Optional[S]], getter: Callable[[S], Optional[T]]) -> Attempt[T]:
    """Defer ``getter(setup())``; a missing setup value short-circuits to None."""

    def run() -> Optional[T]:
        value = setup()
        if value is None:
            return None
        return getter(value)

    return run


def is_empty(value: object) -> bool:
    if value is None:
        return True
    try:
        return len(value) == 0  # type: ignore[arg-type]
    except TypeError:
        return False


def first_result(attempts: Iterable[Attempt[T]], label: str = "result") -> Optional[T]:
    """Run attempts in priority order and return the first non-empty result.

    Attempts after the winning one are never evaluated.
    """
    for index, method in enumerate(attempts):
        result = method()
        if not is_empty(result):
            logger.debug("Resolved %s from source #%d", label, index)
            return result
    logger.debug("No source provided %s", label)
    return None
