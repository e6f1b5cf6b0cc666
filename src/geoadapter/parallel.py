"""Order-preserving worker pool for batch conversions."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

from . import settings

T = TypeVar("T")
R = TypeVar("R")


def ordered_map(func: Callable[[T], R], items: Iterable[T], max_workers: int | None = None) -> list[R]:
    """Apply ``func`` to every item on a thread pool and return results in input order.

    Batches of fewer than two items run inline.
    """
    items = list(items)
    if len(items) < 2:
        return [func(item) for item in items]

    workers = max_workers or settings.MAX_WORKERS
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="geoadapter") as executor:
        # Executor.map yields in submission order regardless of completion order
        return list(executor.map(func, items))
