"""
Lossless Auction Module.

This module provides the auction state machine and its contract:
- Bid placement with bonus refunds for displaced bidders
- Explicit finalization after the deadline
- Owner-only pause and withdrawal
- Typed failures and advisory notifications
"""

from lossless.core.auction.state_machine import (
    Auction,
    AuctionStatus,
    refund_for,
    REFUND_BONUS_PERCENT,
)

from lossless.core.auction.errors import (
    AuctionError,
    InvalidDuration,
    AuctionClosed,
    AuctionPaused,
    BidTooLow,
    DepositFailed,
    RefundTransferFailed,
    TooEarly,
    AlreadyEnded,
    NotOwner,
    NotEnded,
    WithdrawalTransferFailed,
    ReentrantCall,
)

from lossless.core.auction.events import (
    AuctionEvent,
    AuctionInitialized,
    NewBid,
    Refund,
    AuctionEnded,
    FundsWithdrawn,
    AuctionPausedChanged,
    EventLog,
)

__all__ = [
    # State machine
    "Auction",
    "AuctionStatus",
    "refund_for",
    "REFUND_BONUS_PERCENT",
    # Errors
    "AuctionError",
    "InvalidDuration",
    "AuctionClosed",
    "AuctionPaused",
    "BidTooLow",
    "DepositFailed",
    "RefundTransferFailed",
    "TooEarly",
    "AlreadyEnded",
    "NotOwner",
    "NotEnded",
    "WithdrawalTransferFailed",
    "ReentrantCall",
    # Events
    "AuctionEvent",
    "AuctionInitialized",
    "NewBid",
    "Refund",
    "AuctionEnded",
    "FundsWithdrawn",
    "AuctionPausedChanged",
    "EventLog",
]
