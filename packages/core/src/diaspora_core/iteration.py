"""Many-record operations synthesized from a single-record primitive."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from diaspora_query import QueryOptions

logger = logging.getLogger("diaspora.iteration")

T = TypeVar("T")


async def iterate_limit(
    options: QueryOptions,
    step: Callable[[QueryOptions], Awaitable[T | None]],
    *,
    advance_skip: bool = True,
) -> list[T]:
    """Call ``step`` sequentially until it returns ``None`` or ``limit`` results.

    Each call receives the caller's options with ``limit=1``. With
    ``advance_skip`` (reads), ``skip`` is offset by the number of results
    already collected, so a ``find_one`` honouring ``skip`` walks successive
    matches. Without it (updates, deletes), every call sees the same
    ``skip``: the previous call's side effect is what moves the match set.

    Calls are never overlapped. ``step`` is never called again after it
    returns ``None``, and its exceptions propagate unchanged.
    """
    results: list[T] = []
    base = options.with_limit(1)
    while options.limit is None or len(results) < options.limit:
        step_options = (
            base.with_skip(options.skip + len(results)) if advance_skip else base
        )
        logger.debug(
            "Iteration %d (skip=%d, limit=%s)",
            len(results),
            step_options.skip,
            options.limit,
        )
        item = await step(step_options)
        if item is None:
            break
        results.append(item)
    logger.debug("Iteration finished with %d result(s)", len(results))
    return results
