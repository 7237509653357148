"""Bid ledger and account balances"""
from lossless.core.state.ledger import BidLedger
from lossless.core.state.accounts import AccountBook, ReceiveHook

__all__ = [
    "BidLedger",
    "AccountBook",
    "ReceiveHook",
]
