import threading
from dataclasses import dataclass

import pytest

from exomation.channels import LatestValueSlot, ObservableState, SlotClosed


def test_take_returns_latest_and_counts_drops():
    slot = LatestValueSlot()
    assert slot.put(1) is True
    assert slot.put(2) is False
    assert slot.put(3) is False
    assert slot.take(timeout=0) == 3
    assert slot.dropped == 2


def test_take_times_out_with_none():
    assert LatestValueSlot().take(timeout=0.01) is None


def test_close_drains_then_raises():
    slot = LatestValueSlot()
    slot.put("last")
    slot.close()
    assert slot.put("ignored") is False
    assert slot.take(timeout=0) == "last"
    with pytest.raises(SlotClosed):
        slot.take(timeout=0)


def test_blocked_consumer_wakes_on_put():
    slot = LatestValueSlot()
    received = []

    def consume():
        received.append(slot.take(timeout=2.0))

    consumer = threading.Thread(target=consume)
    consumer.start()
    slot.put("frame")
    consumer.join(timeout=2.0)
    assert received == ["frame"]


@dataclass(frozen=True)
class Status:
    count: int = 0
    label: str = ""


def test_observable_update_notifies_listeners():
    state = ObservableState(Status())
    seen = []
    state.subscribe(seen.append)
    state.update(count=3)
    state.set(Status(4, "x"))
    assert state.value == Status(4, "x")
    assert seen == [Status(3, ""), Status(4, "x")]


def test_unsubscribe_stops_notifications():
    state = ObservableState(Status())
    seen = []
    state.subscribe(seen.append)
    state.unsubscribe(seen.append)
    state.update(count=1)
    assert seen == []
