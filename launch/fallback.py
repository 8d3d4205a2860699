import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

from core.errors import AggregateFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def try_each(candidates: Iterable[T], attempt: Callable[[T], Awaitable[R]]) -> R:
    """Run `attempt` on each candidate in order and return the first success.

    Candidates are tried one at a time. If all of them fail, AggregateFailure
    carries every error in attempt order.
    """
    errors: list[Exception] = []
    for candidate in candidates:
        try:
            return await attempt(candidate)
        except Exception as e:
            logger.debug("Candidate %r failed: %s", candidate, e)
            errors.append(e)
    raise AggregateFailure(errors)
