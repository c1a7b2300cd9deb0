import time

from influxwriter.queue import Batch, RetryQueue, new_batch


def test_queue():
    que = RetryQueue(2)
    assert que.is_empty()
    assert que.first() is None
    assert que.pop() is None
    b = Batch(data="batch", retry_attempts=3)
    que.push(b)
    assert not que.is_empty()
    b2 = que.pop()
    assert b2 is b
    assert que.is_empty()

    que.push(b)
    que.push(b)
    assert que.push(b) is True
    assert not que.is_empty()
    que.pop()
    que.pop()
    assert que.is_empty()
    assert que.pop() is None
    assert que.is_empty()


def test_overwrite_drops_oldest_and_marks_evicted():
    que = RetryQueue(2)
    first, second, third = Batch("1"), Batch("2"), Batch("3")
    assert que.push(first) is False
    assert que.push(second) is False
    assert que.push(third) is True
    assert first.evicted is True
    assert second.evicted is False
    assert len(que) == 2
    assert que.first() is second


def test_first_does_not_remove():
    que = RetryQueue(3)
    b = Batch("x")
    que.push(b)
    assert que.first() is b
    assert len(que) == 1
    assert b.evicted is False


def test_new_batch_expiry():
    before = time.monotonic()
    b = new_batch("a\n", 1_000)
    after = time.monotonic()
    assert b.data == "a\n"
    assert b.retry_attempts == 0
    assert b.evicted is False
    assert before + 1.0 <= b.expires <= after + 1.0