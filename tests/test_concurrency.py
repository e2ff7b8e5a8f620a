import random
import threading
from concurrent.futures import ThreadPoolExecutor

from pantry.results import Outcome


def test_interleaved_adds_and_removes_are_not_lost(ledger, store):
    ledger.add_item("rice", 500)
    rng = random.Random(1234)
    ops = ["add"] * 300 + ["remove"] * 200
    rng.shuffle(ops)

    def run(op):
        if op == "add":
            return ledger.add_item("rice", 2)
        return ledger.remove_one("rice")

    with ThreadPoolExecutor(max_workers=12) as pool:
        results = list(pool.map(run, ops))

    assert all(result.ok for result in results)
    assert store.get("rice").quantity == 500 + 300 * 2 - 200
    assert len(ledger.locks) == 0


def test_two_removes_of_the_last_unit(ledger, store):
    ledger.add_item("lime")
    barrier = threading.Barrier(2)

    def remove():
        barrier.wait()
        return ledger.remove_one("lime")

    with ThreadPoolExecutor(max_workers=2) as pool:
        outcomes = sorted(result.outcome.value for result in pool.map(lambda _: remove(), range(2)))

    assert outcomes == [Outcome.NOT_FOUND.value, Outcome.SUCCESS.value]
    assert store.get("lime") is None


def test_concurrent_renames_and_adds_keep_totals(ledger, store):
    ledger.add_item("a", 10)
    ledger.add_item("b", 10)

    def shuffle(n):
        source, target = ("a", "b") if n % 2 else ("b", "a")
        ledger.rename(source, target)
        ledger.add_item(source, 1)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(shuffle, range(40)))

    # A rename either merges every unit into the target or finds nothing to move.
    total = sum(record.quantity for _, record in store.list())
    assert total == 20 + 40
    assert len(ledger.locks) == 0


def test_slow_key_does_not_block_other_keys(ledger, store, stall_event):
    ledger.add_item("slow")
    store.stall["put"] = stall_event

    with ThreadPoolExecutor(max_workers=2) as pool:
        slow = pool.submit(ledger.add_item, "slow")
        entry = pool.submit(ledger.delete_item, "other").result(timeout=2)
        assert entry.ok
        assert not slow.done()
        stall_event.set()
        assert slow.result(timeout=2).ok

    assert store.get("slow").quantity == 2
