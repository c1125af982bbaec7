"""
Tests for log2mqtt.backlog.PendingQueue.
"""

import pytest

from log2mqtt import LogCall, OverflowPolicy, PendingQueue, Severity


def _call(n):
    return LogCall(f"message {n}", Severity.INFO)


def test_drain_preserves_submission_order():
    queue = PendingQueue()
    for n in range(5):
        assert queue.append(_call(n))

    drained = queue.drain_all()

    assert [c.template for c in drained] == [f"message {n}" for n in range(5)]


def test_drain_leaves_queue_empty_and_is_idempotent():
    queue = PendingQueue()
    queue.append(_call(1))
    queue.append(_call(2))

    assert len(queue.drain_all()) == 2
    assert len(queue) == 0
    assert queue.drain_all() == []


def test_unbounded_by_default():
    queue = PendingQueue()
    for n in range(10000):
        queue.append(_call(n))

    assert len(queue) == 10000
    assert queue.dropped == 0
    assert not queue.is_full()


def test_drop_oldest_policy_evicts_head():
    queue = PendingQueue(capacity=3, policy=OverflowPolicy.DROP_OLDEST)
    for n in range(5):
        assert queue.append(_call(n))

    assert [c.template for c in queue.drain_all()] == ["message 2", "message 3", "message 4"]
    assert queue.dropped == 2


def test_reject_policy_refuses_new_calls():
    queue = PendingQueue(capacity=2, policy="reject")
    assert queue.append(_call(0))
    assert queue.append(_call(1))
    assert not queue.append(_call(2))

    assert [c.template for c in queue.drain_all()] == ["message 0", "message 1"]
    assert queue.dropped == 1


def test_invalid_capacity():
    with pytest.raises(ValueError):
        PendingQueue(capacity=0)
