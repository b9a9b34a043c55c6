"""In-process grouped-stream facility: keyed grouping, mapping and per-key reduction.

Stands in for a distributed map/shuffle/reduce runtime. Each key is reduced as an
independent unit of work; a failure in one key is recorded and never stops the others.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .records import RecordParseError

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
R = TypeVar("R")
T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class GroupFailure:
    """A key whose reduction raised."""

    key: Hashable
    error: str


@dataclass
class ReduceOutcome(Generic[K, T]):
    """Per-key results plus the keys that failed."""

    results: dict[K, T] = field(default_factory=dict)
    failures: list[GroupFailure] = field(default_factory=list)


def group_by_key(records: Iterable[R], key_fn: Callable[[R], K]) -> dict[K, list[R]]:
    """Partition records by key, keeping arrival order inside each group."""
    groups: dict[K, list[R]] = {}
    for record in records:
        groups.setdefault(key_fn(record), []).append(record)
    return groups


def map_records(
    records: Iterable[R],
    fn: Callable[[R], T],
    skip: tuple[type[Exception], ...] = (RecordParseError,),
) -> Iterator[T]:
    """Apply ``fn`` to every record, dropping records that raise one of ``skip``.

    Exceptions outside ``skip`` propagate. Pass ``skip=()`` to fail on every error.
    """
    skipped = 0
    for record in records:
        try:
            yield fn(record)
        except skip as exc:
            skipped += 1
            logger.debug("Skipping record: %s", exc)
    if skipped:
        logger.warning("Skipped %s records that failed to map", skipped)


def _make_executor(kind: str, workers: int | None) -> Executor:
    if kind == "process":
        return ProcessPoolExecutor(max_workers=workers)
    if kind == "thread":
        return ThreadPoolExecutor(max_workers=workers)
    raise ValueError(f"Unknown executor kind: {kind!r}")


def reduce_groups(
    groups: Mapping[K, list[R]],
    fn: Callable[[list[R]], T],
    *,
    workers: int | None = None,
    executor: str = "thread",
) -> ReduceOutcome[K, T]:
    """Reduce every group with ``fn`` concurrently, one task per key.

    ``fn`` must be a module-level function when ``executor="process"``.
    Results come back keyed, so completion order does not matter.
    """
    outcome: ReduceOutcome[K, T] = ReduceOutcome()
    if not groups:
        return outcome

    with _make_executor(executor, workers) as pool:
        futures: dict[Future[T], K] = {pool.submit(fn, values): key for key, values in groups.items()}
        for future in as_completed(futures):
            key = futures[future]
            try:
                outcome.results[key] = future.result()
            except Exception as exc:
                logger.exception("Reduction failed for key %r", key)
                outcome.failures.append(GroupFailure(key=key, error=str(exc)))

    return outcome
