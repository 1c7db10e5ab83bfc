"""Tests for event dispatch."""

import threading

from flightsurety.event_bus import WILDCARD, EventBus
from flightsurety.models.events import ContractEvent, FLIGHT_STATUS_INFO, ORACLE_REQUEST


def make_event(sequence, name=ORACLE_REQUEST):
    return ContractEvent(sequence=sequence, name=name, args={"index": 3}, emitted_at=1_700_000_000.0)


def test_handlers_receive_matching_events():
    bus = EventBus()
    requests, everything = [], []
    bus.subscribe(ORACLE_REQUEST, requests.append)
    bus.subscribe(WILDCARD, everything.append)

    bus.publish(make_event(1))
    bus.publish(make_event(2, FLIGHT_STATUS_INFO))

    assert [e.sequence for e in requests] == [1]
    assert [e.sequence for e in everything] == [1, 2]
    assert bus.stats["delivered"] == 2


def test_unsubscribe():
    bus = EventBus()
    received = []
    unsubscribe = bus.subscribe(ORACLE_REQUEST, received.append)

    bus.publish(make_event(1))
    unsubscribe()
    bus.publish(make_event(2))

    assert [e.sequence for e in received] == [1]


def test_failing_handler_does_not_block_others():
    bus = EventBus()
    received = []

    def broken(event):
        raise ValueError("boom")

    bus.subscribe(ORACLE_REQUEST, broken)
    bus.subscribe(ORACLE_REQUEST, received.append)
    bus.publish(make_event(1))

    assert len(received) == 1
    assert bus.stats["error_count"] == 1


def test_background_delivery_preserves_order():
    bus = EventBus()
    received = []
    threads = set()

    def handler(event):
        threads.add(threading.current_thread().name)
        received.append(event.sequence)

    bus.subscribe(WILDCARD, handler)
    bus.start_background()
    try:
        assert bus.stats["background"] is True
        for sequence in range(1, 21):
            bus.publish(make_event(sequence))
        bus.drain()
    finally:
        bus.stop()

    assert received == list(range(1, 21))
    assert threads == {"event-dispatcher"}
    assert bus.stats["background"] is False
