"""
Auction State Machine - bid, refund, finalize and withdraw.

The auction has three independent state axes:

1. Temporal phase (derived from the clock, never stored):
   BIDDING before end_time, CLOSED at or after it.
2. Finalization (stored): NotEnded -> Ended, only through finalize().
3. Pause (stored): Active <-> Paused, toggled by the owner only.

Bid Processing:
--------------
1. Check phase, pause flag and that the bid strictly beats the highest bid
2. Take the bid's value into custody
3. Pay the displaced bidder their deposit + 10% of the NEW bid
4. Only if that payment went through, record the new highest bid

If step 3 fails the deposit is handed back and the call fails with
RefundTransferFailed: no state change is observable.

Custody Arithmetic:
------------------
The bonus comes out of the pooled balance. After bids b1 < b2 the custody
account holds b1 + b2 - (b1 + b2/10) = 0.9 * b2, so custody equals the highest
bid only while a single bid has been placed. A refund the pool cannot cover
fails like any other payment failure.

Concurrency:
-----------
Each public operation holds one re-entrant lock for its whole duration, and
mutating operations additionally set a guard flag. A payment recipient that
calls back into the auction while being paid (same thread, lock already
held) hits the flag and gets ReentrantCall instead of seeing a
half-updated auction.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional

from lossless.core.auction.errors import (
    AlreadyEnded,
    AuctionClosed,
    AuctionError,
    AuctionPaused,
    BidTooLow,
    DepositFailed,
    InvalidDuration,
    NotEnded,
    NotOwner,
    ReentrantCall,
    RefundTransferFailed,
    TooEarly,
    WithdrawalTransferFailed,
)
from lossless.core.auction.events import (
    AuctionEnded,
    AuctionEvent,
    AuctionInitialized,
    AuctionPausedChanged,
    EventLog,
    FundsWithdrawn,
    NewBid,
    Refund,
)
from lossless.core.clock import (
    Clock,
    Phase,
    SystemClock,
    is_after_end,
    is_before_end,
    phase_at,
    time_remaining,
)
from lossless.core.custody import FundsCustodian
from lossless.core.state import AccountBook, BidLedger
from lossless.crypto import bytes_to_hex, derive_custody_address, short_address
from lossless.utils.logger import get_logger
from lossless.utils.validation import require_address, require_amount, validate_duration

logger = get_logger("auction")


# =============================================================================
# Constants
# =============================================================================

# Bonus paid to a displaced bidder, as a percentage of the new winning bid
REFUND_BONUS_PERCENT = 10


def refund_for(previous_deposit: int, new_amount: int) -> int:
    """
    Refund owed to a bidder displaced by a bid of `new_amount`.

    The bonus is computed from the new bid, truncated toward zero.
    """
    return previous_deposit + (new_amount * REFUND_BONUS_PERCENT) // 100


@dataclass(frozen=True)
class AuctionStatus:
    """Snapshot returned by Auction.status()."""
    end_time: int
    time_remaining: int
    ended: bool
    paused: bool


# =============================================================================
# Auction
# =============================================================================


class Auction:
    """
    Single-lot auction with bonus refunds for outbid bidders.

    Creating the auction is its initialization: the caller becomes the owner
    and the deadline is fixed at now + duration_seconds.
    """

    def __init__(
        self,
        owner: bytes,
        duration_seconds: int,
        accounts: AccountBook,
        clock: Optional[Clock] = None,
        events: Optional[EventLog] = None,
    ):
        """
        Args:
            owner: Address of the creator, the only one allowed to pause
                and withdraw
            duration_seconds: Bidding window, must be > 0
            accounts: Value-transfer environment holding all balances
            clock: Time source (SystemClock if None)
            events: Notification sink (a fresh EventLog if None)

        Raises:
            InvalidDuration: if duration_seconds is not a positive integer
        """
        owner = require_address(owner, "owner")
        is_valid, error = validate_duration(duration_seconds)
        if not is_valid:
            logger.warning(f"Rejected auction creation: {error}")
            raise InvalidDuration()

        self.clock: Clock = clock if clock is not None else SystemClock()
        self.events = events if events is not None else EventLog()

        self._owner = owner
        self._end_time = self.clock.now() + duration_seconds
        self._highest_bidder: Optional[bytes] = None
        self._highest_bid = 0
        self._ended = False
        self._paused = False

        self.ledger = BidLedger()
        self.custodian = FundsCustodian(
            accounts, derive_custody_address(owner, accounts.next_nonce(owner))
        )

        self._lock = threading.RLock()
        self._in_call = False

        logger.info(
            f"Auction initialized by {short_address(owner)}: "
            f"duration={duration_seconds}s, ends at {self._end_time}"
        )
        self._publish([AuctionInitialized(owner, duration_seconds, self._end_time)])

    # =========================================================================
    # State Access
    # =========================================================================

    @property
    def owner(self) -> bytes:
        return self._owner

    @property
    def end_time(self) -> int:
        return self._end_time

    @property
    def highest_bidder(self) -> Optional[bytes]:
        return self._highest_bidder

    @property
    def highest_bid(self) -> int:
        return self._highest_bid

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def custody_address(self) -> bytes:
        return self.custodian.address

    @property
    def custody_balance(self) -> int:
        """Literal balance of the custody account."""
        return self.custodian.balance

    @property
    def phase(self) -> Phase:
        return phase_at(self.clock.now(), self._end_time)

    def status(self) -> AuctionStatus:
        """(end_time, time_remaining, ended, paused). No side effects."""
        with self._lock:
            return AuctionStatus(
                end_time=self._end_time,
                time_remaining=time_remaining(self.clock.now(), self._end_time),
                ended=self._ended,
                paused=self._paused,
            )

    # =========================================================================
    # Bidding
    # =========================================================================

    def place_bid(self, bidder: bytes, amount: int) -> int:
        """
        Place a value-carrying bid.

        Args:
            bidder: Bidder address; `amount` is taken from its balance
            amount: Bid in wei, must exceed the current highest bid

        Returns:
            Refund paid to the displaced bidder (0 for the first bid)

        Raises:
            AuctionClosed, AuctionPaused, BidTooLow, DepositFailed,
            RefundTransferFailed, ReentrantCall
        """
        bidder = require_address(bidder, "bidder")
        amount = require_amount(amount)
        emitted: List[AuctionEvent] = []

        with self._mutating("place_bid"):
            if not is_before_end(self.clock.now(), self._end_time):
                raise self._reject(AuctionClosed())
            if self._paused:
                raise self._reject(AuctionPaused())
            if amount <= self._highest_bid:
                raise self._reject(
                    BidTooLow(),
                    f"bid {amount} from {short_address(bidder)} <= {self._highest_bid}",
                )

            previous = self._highest_bidder
            refund = 0
            if previous is not None:
                refund = refund_for(self.ledger.amount_of(previous), amount)

            if not self.custodian.receive(bidder, amount):
                raise self._reject(DepositFailed(), f"{short_address(bidder)} cannot send {amount}")

            if previous is not None:
                if not self.custodian.pay(previous, refund):
                    self.custodian.release_deposit(bidder, amount)
                    raise self._reject(
                        RefundTransferFailed(),
                        f"refund {refund} to {short_address(previous)}",
                    )
                emitted.append(Refund(previous, refund))
                logger.info(f"Refunded {refund} to outbid bidder {short_address(previous)}")

            self._highest_bidder = bidder
            self._highest_bid = amount
            self.ledger.record_deposit(bidder, amount)
            emitted.append(NewBid(bidder, amount))

            logger.info(f"New highest bid {amount} from {short_address(bidder)}")

        self._publish(emitted)
        return refund

    # =========================================================================
    # Finalization
    # =========================================================================

    def finalize(self) -> None:
        """
        End the auction once its deadline has passed. Anyone may call.

        Finalizing an auction that received no bids is allowed; the ended
        notification then carries (None, 0).

        Raises:
            TooEarly, AlreadyEnded, ReentrantCall
        """
        with self._mutating("finalize"):
            if not is_after_end(self.clock.now(), self._end_time):
                raise self._reject(TooEarly())
            if self._ended:
                raise self._reject(AlreadyEnded())

            self._ended = True
            event = AuctionEnded(self._highest_bidder, self._highest_bid)
            logger.info(
                f"Auction ended: winner={short_address(self._highest_bidder)}, "
                f"amount={self._highest_bid}"
            )

        self._publish([event])

    # =========================================================================
    # Owner Operations
    # =========================================================================

    def set_paused(self, caller: bytes, value: bool) -> None:
        """
        Pause or resume bidding. Owner only; setting the current value again
        is allowed and still notifies.

        Raises:
            NotOwner, ReentrantCall
        """
        caller = require_address(caller, "caller")
        if not isinstance(value, bool):
            raise ValueError(f"paused must be bool, got {type(value).__name__}")

        with self._mutating("set_paused"):
            if caller != self._owner:
                raise self._reject(NotOwner(), f"set_paused by {short_address(caller)}")
            self._paused = value
            logger.info(f"Auction {'paused' if value else 'resumed'}")

        self._publish([AuctionPausedChanged(value)])

    def withdraw(self, caller: bytes) -> int:
        """
        Pay the whole custody balance to the owner.

        Requires an explicit finalize(); the deadline passing is not enough.
        Once the balance has been withdrawn further calls succeed and pay 0.

        Returns:
            Amount paid

        Raises:
            NotOwner, NotEnded, WithdrawalTransferFailed, ReentrantCall
        """
        caller = require_address(caller, "caller")

        with self._mutating("withdraw"):
            if caller != self._owner:
                raise self._reject(NotOwner(), f"withdraw by {short_address(caller)}")
            if not self._ended:
                raise self._reject(NotEnded())

            amount = self.custodian.balance
            if not self.custodian.pay(self._owner, amount):
                raise self._reject(WithdrawalTransferFailed(), f"amount {amount}")

            logger.info(f"Withdrew {amount} to owner {short_address(self._owner)}")

        self._publish([FundsWithdrawn(self._owner, amount)])
        return amount

    # =========================================================================
    # Internals
    # =========================================================================

    @contextmanager
    def _mutating(self, operation: str) -> Iterator[None]:
        """Serialize a mutating operation and refuse re-entry into it."""
        with self._lock:
            if self._in_call:
                raise self._reject(ReentrantCall(), operation)
            self._in_call = True
            try:
                yield
            finally:
                self._in_call = False

    def _reject(self, error: AuctionError, detail: str = "") -> AuctionError:
        suffix = f" ({detail})" if detail else ""
        logger.warning(f"Rejected: {error.code}: {error}{suffix}")
        return error

    def _publish(self, emitted: List[AuctionEvent]) -> None:
        for event in emitted:
            self.events.publish(event)

    # =========================================================================
    # Utility
    # =========================================================================

    def __repr__(self) -> str:
        return (
            f"Auction(owner={short_address(self._owner)}, end_time={self._end_time}, "
            f"highest_bid={self._highest_bid}, ended={self._ended}, paused={self._paused})"
        )

    def stats(self) -> dict:
        """Get auction statistics."""
        return {
            "owner": bytes_to_hex(self._owner),
            "end_time": self._end_time,
            "phase": self.phase.name,
            "ended": self._ended,
            "paused": self._paused,
            "highest_bidder": bytes_to_hex(self._highest_bidder) if self._highest_bidder else None,
            "highest_bid": self._highest_bid,
            "custody": self.custodian.stats(),
            "ledger": self.ledger.stats(),
        }
