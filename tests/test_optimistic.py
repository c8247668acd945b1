"""Optimistic mutation helper: apply first, commit once, restore the snapshot on failure."""

import asyncio

import pytest

from eifound.client.optimistic import OptimisticMutator, run_optimistic
from eifound.errors import RemoteCallError
from tests.fakes import settle


class Counter:
    def __init__(self, value=0):
        self.value = value

    def bump(self):
        before = self.value
        self.value += 1
        return before

    def restore(self, before):
        self.value = before


async def test_success_keeps_applied_state_and_returns_commit_result():
    counter = Counter(5)
    commits = []

    async def commit(snapshot):
        commits.append(snapshot)
        return "ok"

    result = await run_optimistic(counter.bump, counter.restore, commit)

    assert result == "ok"
    assert counter.value == 6
    assert commits == [5]


async def test_failure_restores_snapshot_and_reraises():
    counter = Counter(5)

    async def commit(snapshot):
        raise RemoteCallError("Failed to like tweet")

    with pytest.raises(RemoteCallError):
        await run_optimistic(counter.bump, counter.restore, commit)

    assert counter.value == 5


async def test_state_is_applied_before_commit_resolves():
    counter = Counter(1)
    release = asyncio.Event()

    async def commit(snapshot):
        await release.wait()

    task = asyncio.create_task(run_optimistic(counter.bump, counter.restore, commit))
    await settle()
    assert counter.value == 2

    release.set()
    await task
    assert counter.value == 2


async def test_commit_is_not_retried():
    counter = Counter()
    attempts = []

    async def commit(snapshot):
        attempts.append(snapshot)
        raise RemoteCallError("nope")

    with pytest.raises(RemoteCallError):
        await run_optimistic(counter.bump, counter.restore, commit)

    assert len(attempts) == 1


async def test_same_key_mutations_run_one_after_another():
    mutator = OptimisticMutator()
    counter = Counter()
    release = asyncio.Event()
    snapshots = []

    async def slow_commit(snapshot):
        snapshots.append(snapshot)
        await release.wait()

    async def fast_commit(snapshot):
        snapshots.append(snapshot)

    first = asyncio.create_task(mutator.run("tweet-1", counter.bump, counter.restore, slow_commit))
    await settle()
    second = asyncio.create_task(mutator.run("tweet-1", counter.bump, counter.restore, fast_commit))
    await settle()

    # The second toggle waits for the first to settle before applying
    assert mutator.in_flight("tweet-1")
    assert counter.value == 1
    assert snapshots == [0]

    release.set()
    await asyncio.gather(first, second)

    assert counter.value == 2
    assert snapshots == [0, 1]
    assert not mutator.in_flight("tweet-1")


async def test_different_keys_do_not_block_each_other():
    mutator = OptimisticMutator()
    a, b = Counter(), Counter()
    release = asyncio.Event()

    async def blocked(snapshot):
        await release.wait()

    async def immediate(snapshot):
        return None

    held = asyncio.create_task(mutator.run("tweet-a", a.bump, a.restore, blocked))
    await settle()
    await mutator.run("tweet-b", b.bump, b.restore, immediate)

    assert b.value == 1
    assert mutator.in_flight("tweet-a")

    release.set()
    await held


async def test_failure_on_one_key_leaves_the_other_untouched():
    mutator = OptimisticMutator()
    a, b = Counter(3), Counter(7)

    async def fail(snapshot):
        raise RemoteCallError("boom")

    async def ok(snapshot):
        return None

    results = await asyncio.gather(
        mutator.run("a", a.bump, a.restore, fail),
        mutator.run("b", b.bump, b.restore, ok),
        return_exceptions=True,
    )

    assert isinstance(results[0], RemoteCallError)
    assert a.value == 3
    assert b.value == 8
