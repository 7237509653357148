"""
Auction notifications.

Events are advisory: the auction publishes them after an operation commits
and never reads them back. An EventLog keeps every published event and
forwards it to subscribers; a failing subscriber is logged and skipped.
"""

import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Type, TypeVar

from lossless.utils.logger import get_logger

logger = get_logger("events")


# =============================================================================
# Event Types
# =============================================================================


@dataclass(frozen=True)
class AuctionEvent:
    """Base class for auction notifications."""

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class AuctionInitialized(AuctionEvent):
    owner: bytes
    duration: int
    end_time: int


@dataclass(frozen=True)
class NewBid(AuctionEvent):
    bidder: bytes
    amount: int


@dataclass(frozen=True)
class Refund(AuctionEvent):
    """A displaced bidder was paid back their deposit plus the bonus."""
    bidder: bytes
    amount: int


@dataclass(frozen=True)
class AuctionEnded(AuctionEvent):
    winner: Optional[bytes]
    amount: int


@dataclass(frozen=True)
class FundsWithdrawn(AuctionEvent):
    owner: bytes
    amount: int


@dataclass(frozen=True)
class AuctionPausedChanged(AuctionEvent):
    paused: bool


# =============================================================================
# Event Log
# =============================================================================

E = TypeVar("E", bound=AuctionEvent)
Subscriber = Callable[[AuctionEvent], None]


class EventLog:
    """
    Append-only record of published events with subscriber fan-out.
    """

    def __init__(self):
        self.events: List[AuctionEvent] = []
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, subscriber: Subscriber) -> None:
        """Register a callback for every future event."""
        self._subscribers.append(subscriber)

    def publish(self, event: AuctionEvent) -> None:
        with self._lock:
            self.events.append(event)
        logger.debug(f"Event {event.name}")

        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception as e:
                logger.warning(f"Subscriber failed on {event.name}: {e}")

    def of_type(self, event_type: Type[E]) -> List[E]:
        """All published events of the given type, oldest first."""
        return [e for e in self.events if isinstance(e, event_type)]

    def last(self) -> Optional[AuctionEvent]:
        return self.events[-1] if self.events else None

    def __len__(self) -> int:
        return len(self.events)
