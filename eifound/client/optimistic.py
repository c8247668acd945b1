"""Optimistic mutations: change local state first, confirm remotely, roll back on failure."""

from typing import Awaitable, Callable, Dict, TypeVar
import asyncio
import logging

logger = logging.getLogger(__name__)

S = TypeVar("S")
R = TypeVar("R")


async def run_optimistic(
    apply: Callable[[], S],
    revert: Callable[[S], None],
    commit: Callable[[S], Awaitable[R]],
) -> R:
    """Apply a local change, then commit it remotely.

    ``apply`` mutates local state synchronously and returns the snapshot it
    replaced. ``commit`` receives that snapshot and performs the single
    remote write. If the write raises, ``revert`` restores the snapshot and
    the error propagates; nothing is retried.
    """
    snapshot = apply()
    try:
        return await commit(snapshot)
    except Exception:
        revert(snapshot)
        raise


class OptimisticMutator:
    """Serializes optimistic mutations per entity key.

    Mutations on different keys run concurrently. A second mutation on the
    same key waits for the first to settle, then applies against the state
    the first one left behind.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._waiting: Dict[str, int] = {}

    def in_flight(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    async def run(
        self,
        key: str,
        apply: Callable[[], S],
        revert: Callable[[S], None],
        commit: Callable[[S], Awaitable[R]],
    ) -> R:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiting[key] = self._waiting.get(key, 0) + 1
        try:
            async with lock:
                return await run_optimistic(apply, revert, commit)
        finally:
            self._waiting[key] -= 1
            if not self._waiting[key]:
                del self._waiting[key]
                self._locks.pop(key, None)
