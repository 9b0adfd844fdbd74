"""Tests for the mutate-then-reload list synchronizer."""

from __future__ import annotations

import threading
import time

import pytest

from expensetracker.errors import PersistenceError
from expensetracker.services.sync import ListSynchronizer, mutation_succeeded


class FakeStore:
    def __init__(self, rows=None):
        self.rows = list(rows or [])
        self.loads = 0

    def load(self):
        self.loads += 1
        return list(self.rows)


@pytest.mark.parametrize(
    "outcome, expected",
    [(7, True), (1, True), (0, False), (-1, False), (True, True), (False, False), (None, False)],
)
def test_mutation_succeeded(outcome, expected):
    assert mutation_succeeded(outcome) is expected


def test_successful_mutation_replaces_list_wholesale():
    store = FakeStore(["a"])
    sync = ListSynchronizer(store.load)
    sync.reload()

    def op():
        store.rows = ["b", "c"]
        return 5

    seen = []
    outcome = sync.apply_mutation(op, on_success=seen.append)

    assert outcome.succeeded is True
    assert outcome.value == 5
    assert sync.items == ["b", "c"]
    assert seen == [5]
    assert store.loads == 2


@pytest.mark.parametrize("failure", [False, 0, -1])
def test_failed_mutation_leaves_list_untouched(failure):
    store = FakeStore(["a"])
    sync = ListSynchronizer(store.load)
    sync.reload()
    store.rows = ["changed behind our back"]

    outcome = sync.apply_mutation(lambda: failure, on_success=pytest.fail)

    assert outcome.succeeded is False
    assert sync.items == ["a"]
    assert store.loads == 1


def test_raising_mutation_propagates_and_keeps_list():
    store = FakeStore(["a"])
    sync = ListSynchronizer(store.load)
    sync.reload()

    def op():
        raise PersistenceError("boom")

    with pytest.raises(PersistenceError):
        sync.apply_mutation(op)

    assert sync.items == ["a"]
    assert store.loads == 1


def test_failing_reload_keeps_previous_list():
    calls = {"n": 0}

    def loader():
        calls["n"] += 1
        if calls["n"] > 1:
            raise RuntimeError("store went away")
        return ["a"]

    sync = ListSynchronizer(loader)
    sync.reload()

    with pytest.raises(RuntimeError):
        sync.apply_mutation(lambda: True)

    assert sync.items == ["a"]


def test_items_is_a_copy():
    sync = ListSynchronizer(lambda: ["a"])
    sync.reload()

    sync.items.append("b")

    assert sync.items == ["a"]
    assert len(sync) == 1


def test_reloads_never_overlap():
    active = {"now": 0, "max": 0}
    lock = threading.Lock()

    def loader():
        with lock:
            active["now"] += 1
            active["max"] = max(active["max"], active["now"])
        time.sleep(0.01)
        with lock:
            active["now"] -= 1
        return []

    sync = ListSynchronizer(loader)
    threads = [threading.Thread(target=sync.apply_mutation, args=(lambda: True,)) for _ in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert active["max"] == 1
