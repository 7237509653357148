"""Auction core: clock, ledger, custody and state machine"""
