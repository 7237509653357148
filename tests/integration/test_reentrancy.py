"""
Reentrancy and concurrency tests.

A displaced bidder is paid before the new highest bid is recorded. These
tests make the payment recipient call back into the auction mid-payment and
check that it never observes or produces a half-updated auction.
"""

import threading

import pytest

from lossless.core.auction import (
    Auction,
    AuctionError,
    EventLog,
    NewBid,
    ReentrantCall,
    RefundTransferFailed,
)
from lossless.core.clock import ManualClock
from lossless.core.state import AccountBook


DURATION = 3600
OWNER = b"\x01" * 20
ATTACKER = b"\xaa" * 20
HONEST = b"\x02" * 20


@pytest.fixture
def accounts():
    book = AccountBook()
    for address in (OWNER, ATTACKER, HONEST):
        book.fund(address, 10**21)
    return book


@pytest.fixture
def clock():
    return ManualClock(start=50_000)


@pytest.fixture
def auction(accounts, clock):
    return Auction(OWNER, DURATION, accounts, clock=clock, events=EventLog())


class TestReentrancy:
    """Callbacks from payment recipients."""

    def test_reentrant_bid_from_refund_is_blocked(self, auction, accounts):
        """
        The attacker, when refunded, tries to rebid. The nested call is
        refused and, because the hook swallows the error, the outer bid
        still commits normally.
        """
        nested_errors = []

        def rebid(sender, amount):
            try:
                auction.place_bid(ATTACKER, 10**20)
            except ReentrantCall as e:
                nested_errors.append(e)

        auction.place_bid(ATTACKER, 1000)
        accounts.set_receive_hook(ATTACKER, rebid)

        auction.place_bid(HONEST, 2000)

        assert len(nested_errors) == 1
        assert auction.highest_bidder == HONEST
        assert auction.highest_bid == 2000

    def test_reverting_hook_fails_the_outer_bid(self, auction, accounts):
        """If the nested failure propagates, the refund fails and nothing commits."""
        def rebid(sender, amount):
            auction.place_bid(ATTACKER, 10**20)

        auction.place_bid(ATTACKER, 1000)
        accounts.set_receive_hook(ATTACKER, rebid)
        honest_before = accounts.balance_of(HONEST)
        custody_before = auction.custody_balance

        with pytest.raises(RefundTransferFailed):
            auction.place_bid(HONEST, 2000)

        assert auction.highest_bidder == ATTACKER
        assert auction.highest_bid == 1000
        assert accounts.balance_of(HONEST) == honest_before
        assert auction.custody_balance == custody_before

    def test_hook_sees_pre_bid_state(self, auction, accounts):
        """Reads during the refund show the old winner, never a mix."""
        observed = []

        def peek(sender, amount):
            observed.append((auction.highest_bidder, auction.highest_bid, auction.status().paused))

        auction.place_bid(ATTACKER, 1000)
        accounts.set_receive_hook(ATTACKER, peek)
        auction.place_bid(HONEST, 2000)

        assert observed == [(ATTACKER, 1000, False)]

    def test_owner_cannot_pause_mid_payment(self, auction, accounts):
        """Owner-as-bidder trying set_paused from a refund hook is refused."""
        nested_errors = []

        def pause(sender, amount):
            try:
                auction.set_paused(OWNER, True)
            except ReentrantCall as e:
                nested_errors.append(e)

        auction.place_bid(OWNER, 1000)
        accounts.set_receive_hook(OWNER, pause)
        auction.place_bid(HONEST, 2000)

        assert len(nested_errors) == 1
        assert not auction.paused

    def test_reentrant_withdraw_is_blocked(self, auction, accounts, clock):
        nested = []

        def withdraw_again(sender, amount):
            try:
                auction.withdraw(OWNER)
            except ReentrantCall as e:
                nested.append(e)

        auction.place_bid(HONEST, 1000)
        clock.advance(DURATION)
        auction.finalize()
        accounts.set_receive_hook(OWNER, withdraw_again)

        assert auction.withdraw(OWNER) == 1000
        assert len(nested) == 1
        assert auction.custody_balance == 0

    def test_failed_refund_keeps_bid_on_other_auction(self, auction, accounts, clock):
        """
        A refund hook that bids elsewhere and then reverts only undoes the
        refund. The other auction keeps both its bid and the funds behind it.
        """
        other = Auction(OWNER, DURATION, accounts, clock=clock)
        supply = accounts.total_supply()

        def bid_elsewhere_then_revert(sender, amount):
            other.place_bid(ATTACKER, 50)
            raise RuntimeError("revert")

        auction.place_bid(ATTACKER, 1000)
        accounts.set_receive_hook(ATTACKER, bid_elsewhere_then_revert)

        with pytest.raises(RefundTransferFailed):
            auction.place_bid(HONEST, 2000)

        assert other.highest_bidder == ATTACKER
        assert other.highest_bid == 50
        assert other.custody_balance == 50
        assert other.custodian.total_received == 50

        assert auction.highest_bidder == ATTACKER
        assert auction.custody_balance == 1000
        assert accounts.total_supply() == supply

    def test_refund_cannot_fund_nested_bid(self, auction, accounts, clock):
        """The refund in flight is not spendable inside the hook."""
        broke = b"\x03" * 20
        other = Auction(OWNER, DURATION, accounts, clock=clock)
        outcomes = []

        def bid_with_refund(sender, amount):
            try:
                other.place_bid(broke, amount)
            except AuctionError as e:
                outcomes.append(e.code)

        accounts.fund(broke, 1000)
        auction.place_bid(broke, 1000)
        accounts.set_receive_hook(broke, bid_with_refund)
        auction.place_bid(HONEST, 2000)

        assert outcomes == ["DepositFailed"]
        assert other.highest_bid == 0
        assert accounts.balance_of(broke) == 1200

    def test_subscriber_may_call_back(self, accounts, clock):
        """Notifications go out after the operation, so callbacks are not reentrant."""
        events = EventLog()
        auction = Auction(OWNER, DURATION, accounts, clock=clock, events=events)
        statuses = []
        events.subscribe(lambda event: statuses.append(auction.status()))

        auction.place_bid(HONEST, 1000)
        assert statuses


class TestConcurrency:
    """Parallel callers on one auction."""

    def test_parallel_bidders_keep_invariants(self, accounts, clock):
        auction = Auction(OWNER, DURATION, accounts, clock=clock)
        bidders = [bytes([0x10 + i]) * 20 for i in range(8)]
        for bidder in bidders:
            accounts.fund(bidder, 10**21)
        supply = accounts.total_supply()
        barrier = threading.Barrier(len(bidders))

        def bid_loop(bidder, offset):
            barrier.wait()
            for step in range(25):
                try:
                    auction.place_bid(bidder, 10**18 + step * 1000 + offset)
                except AuctionError:
                    pass

        threads = [
            threading.Thread(target=bid_loop, args=(bidder, i))
            for i, bidder in enumerate(bidders)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        accepted = [e.amount for e in auction.events.of_type(NewBid)]
        assert accepted == sorted(accepted)
        assert len(set(accepted)) == len(accepted)
        assert auction.highest_bid == accepted[-1]
        assert auction.ledger.amount_of(auction.highest_bidder) == auction.highest_bid
        assert accounts.total_supply() == supply
        custodian = auction.custodian
        assert custodian.balance == custodian.total_received - custodian.total_paid


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
