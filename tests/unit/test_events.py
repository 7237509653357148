"""
Unit tests for auction notifications.
"""

import pytest

from lossless.core.auction import (
    AuctionEnded,
    AuctionPausedChanged,
    EventLog,
    NewBid,
)


ALICE = b"\x0a" * 20


class TestEventLog:
    """Tests for the event log."""

    def test_publish_records(self):
        log = EventLog()
        log.publish(NewBid(ALICE, 10))
        assert len(log) == 1
        assert log.last() == NewBid(ALICE, 10)

    def test_empty_log(self):
        log = EventLog()
        assert len(log) == 0
        assert log.last() is None

    def test_of_type_filters(self):
        log = EventLog()
        log.publish(NewBid(ALICE, 10))
        log.publish(AuctionPausedChanged(True))
        log.publish(NewBid(ALICE, 20))
        assert log.of_type(NewBid) == [NewBid(ALICE, 10), NewBid(ALICE, 20)]
        assert log.of_type(AuctionEnded) == []

    def test_subscribers_receive_events(self):
        log = EventLog()
        received = []
        log.subscribe(received.append)
        log.publish(AuctionPausedChanged(False))
        assert received == [AuctionPausedChanged(False)]

    def test_failing_subscriber_is_isolated(self):
        """One broken subscriber does not stop delivery to the others."""
        log = EventLog()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        log.subscribe(broken)
        log.subscribe(received.append)
        log.publish(NewBid(ALICE, 1))
        assert received == [NewBid(ALICE, 1)]
        assert len(log) == 1

    def test_event_name(self):
        assert NewBid(ALICE, 1).name == "NewBid"
        assert AuctionEnded(None, 0).name == "AuctionEnded"

    def test_events_are_immutable(self):
        event = NewBid(ALICE, 1)
        with pytest.raises(AttributeError):
            event.amount = 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
