"""
BidLedger - record of who owns how much of the pooled balance.

Only the current highest bidder's entry is authoritative. Every displaced
bidder is refunded as soon as they are outbid, after which their entry is
left in place but no longer meaningful.

The ledger performs no validation; the auction state machine decides what
gets recorded.
"""

from typing import Dict

from lossless.crypto import short_address
from lossless.utils.logger import get_logger

logger = get_logger("ledger")


class BidLedger:
    """
    Mapping of bidder address to last recorded deposit.

    Attributes:
        deposits: bidder -> amount recorded while they held the highest bid
    """

    def __init__(self):
        self.deposits: Dict[bytes, int] = {}

    def record_deposit(self, bidder: bytes, amount: int) -> None:
        """Set the bidder's deposit, overwriting any previous value."""
        previous = self.deposits.get(bidder)
        self.deposits[bidder] = amount
        if previous is not None:
            logger.debug(f"Ledger: {short_address(bidder)} {previous} -> {amount}")
        else:
            logger.debug(f"Ledger: {short_address(bidder)} recorded {amount}")

    def amount_of(self, bidder: bytes) -> int:
        """Last recorded deposit for bidder, or 0."""
        return self.deposits.get(bidder, 0)

    def entries(self) -> Dict[bytes, int]:
        """Copy of all recorded deposits."""
        return dict(self.deposits)

    def __contains__(self, bidder: bytes) -> bool:
        return bidder in self.deposits

    def __len__(self) -> int:
        return len(self.deposits)

    def __repr__(self) -> str:
        return f"BidLedger(bidders={len(self.deposits)})"

    def stats(self) -> dict:
        """Get ledger statistics."""
        return {
            "bidder_count": len(self.deposits),
            "largest_deposit": max(self.deposits.values(), default=0),
        }
