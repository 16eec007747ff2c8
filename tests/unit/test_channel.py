# tests/unit/test_channel.py
import queue
import threading

import pytest

from zeroscan.domain.errors import ChannelClosed, PipelineAborted
from zeroscan.services.channel import Channel


def test_fifo_and_iteration_ends_after_close():
    ch = Channel(4)
    for i in range(3):
        ch.put(i)
    ch.close()
    assert list(ch) == [0, 1, 2]
    assert ch.closed


def test_put_after_close_raises():
    ch = Channel(1)
    ch.close()
    with pytest.raises(ChannelClosed):
        ch.put("late")


def test_close_is_idempotent():
    ch = Channel(2)
    ch.close()
    ch.close()
    assert list(ch) == []


def test_get_times_out_when_empty():
    ch = Channel(1)
    with pytest.raises(queue.Empty):
        ch.get(timeout=0.05)


def test_close_is_seen_by_every_consumer():
    ch = Channel(2)
    seen = []
    lock = threading.Lock()

    def consume():
        for item in ch:
            with lock:
                seen.append(item)

    consumers = [threading.Thread(target=consume) for _ in range(4)]
    for t in consumers:
        t.start()
    for i in range(20):
        ch.put(i)
    ch.close()
    for t in consumers:
        t.join(timeout=5)
        assert not t.is_alive()
    assert sorted(seen) == list(range(20))


def test_blocked_put_raises_once_cancelled():
    cancel = threading.Event()
    ch = Channel(1, cancel)
    ch.put("fills the channel")
    timer = threading.Timer(0.1, cancel.set)
    timer.start()
    with pytest.raises(PipelineAborted):
        ch.put("never fits")
    timer.join()


def test_blocked_get_raises_once_cancelled():
    cancel = threading.Event()
    ch = Channel(1, cancel)
    timer = threading.Timer(0.1, cancel.set)
    timer.start()
    with pytest.raises(PipelineAborted):
        ch.get()
    timer.join()


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        Channel(0)
    assert Channel(3).capacity == 3
