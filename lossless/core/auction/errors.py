"""
Typed failures raised by auction operations.

Every failure aborts the whole operation and leaves auction state and
balances exactly as they were before the call. Each class carries a stable
`code` and the revert message used by the on-chain version of the auction.
"""


class AuctionError(Exception):
    """Base class for all auction failures."""

    code = "AuctionError"
    default_message = "Auction operation failed"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)


class InvalidDuration(AuctionError):
    code = "InvalidDuration"
    default_message = "Duration must be greater than zero"


class AuctionClosed(AuctionError):
    code = "AuctionClosed"
    default_message = "Auction has ended"


class AuctionPaused(AuctionError):
    code = "AuctionPaused"
    default_message = "Auction is paused"


class BidTooLow(AuctionError):
    code = "BidTooLow"
    default_message = "Bid must be higher than current highest bid"


class DepositFailed(AuctionError):
    """The bidder could not send the value carried by the bid."""
    code = "DepositFailed"
    default_message = "Bid value could not be deposited"


class RefundTransferFailed(AuctionError):
    code = "RefundTransferFailed"
    default_message = "Refund failed"


class TooEarly(AuctionError):
    code = "TooEarly"
    default_message = "Auction has not ended"


class AlreadyEnded(AuctionError):
    code = "AlreadyEnded"
    default_message = "Auction end already called"


class NotOwner(AuctionError):
    code = "NotOwner"
    default_message = "Only owner can call this function"


class NotEnded(AuctionError):
    code = "NotEnded"
    default_message = "Auction has not ended"


class WithdrawalTransferFailed(AuctionError):
    code = "WithdrawalTransferFailed"
    default_message = "Withdrawal failed"


class ReentrantCall(AuctionError):
    """A mutating call arrived while another one was still in progress."""
    code = "ReentrantCall"
    default_message = "Reentrant call"


__all__ = [
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
]
