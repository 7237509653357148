"""
Lossless Auction

A single-lot, fixed-duration auction engine:
- Bids replace the winning position only when strictly higher
- Outbid depositors are refunded immediately with a 10% bonus
- Explicit finalization once the deadline passes
- Owner-only withdrawal of the pooled funds
"""
