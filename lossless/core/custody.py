"""
Funds Custodian - value movement in and out of an auction's custody account.

The custodian executes transfers and reports whether they happened. It does
not decide whether a payment is allowed; the auction state machine does
that and treats the reported outcome as deciding whether the surrounding
operation commits at all.

Guarantees:
- pay() is all-or-nothing: a failed payment has moved no value
- The custody balance is always the literal balance of the custody account
  in the AccountBook, never a separately maintained figure
- balance == total_received - total_paid
"""

from lossless.core.state.accounts import AccountBook
from lossless.crypto import short_address
from lossless.utils.logger import get_logger

logger = get_logger("custody")


class FundsCustodian:
    """
    Holds pooled auction funds at a dedicated address.

    Attributes:
        accounts: Value-transfer environment
        address: Custody account address
        total_received: Sum of deposits accepted
        total_paid: Sum of payments made (refunds and withdrawals)
    """

    def __init__(self, accounts: AccountBook, address: bytes):
        self.accounts = accounts
        self.address = address
        self.total_received = 0
        self.total_paid = 0

    @property
    def balance(self) -> int:
        """Value currently held in custody."""
        return self.accounts.balance_of(self.address)

    def receive(self, sender: bytes, amount: int) -> bool:
        """
        Take a deposit from `sender` into custody.

        Returns:
            True if the deposit arrived, False if nothing moved
        """
        if not self.accounts.transfer(sender, self.address, amount):
            return False
        self.total_received += amount
        logger.debug(f"Received {amount} from {short_address(sender)}, custody={self.balance}")
        return True

    def pay(self, recipient: bytes, amount: int) -> bool:
        """
        Pay `amount` out of custody to `recipient`.

        Fails without moving anything when custody cannot cover the amount
        or the recipient rejects the payment.

        Returns:
            True if paid, False otherwise
        """
        if self.balance < amount:
            logger.warning(
                f"Cannot pay {amount} to {short_address(recipient)}: custody holds {self.balance}"
            )
            return False

        if not self.accounts.transfer(self.address, recipient, amount):
            logger.warning(f"Payment of {amount} to {short_address(recipient)} failed")
            return False

        self.total_paid += amount
        logger.debug(f"Paid {amount} to {short_address(recipient)}, custody={self.balance}")
        return True

    def release_deposit(self, sender: bytes, amount: int) -> None:
        """
        Hand back a deposit taken by an operation that is being rolled back.

        The sender does not get a say: receive hooks and rejection rules are
        skipped, exactly as if the deposit had never been sent.
        """
        if not self.accounts.transfer(self.address, sender, amount, notify=False):
            raise RuntimeError(
                f"Custody cannot return deposit of {amount} to {short_address(sender)}"
            )
        self.total_received -= amount
        logger.debug(f"Released deposit {amount} back to {short_address(sender)}")

    def stats(self) -> dict:
        """Get custody statistics."""
        return {
            "balance": self.balance,
            "total_received": self.total_received,
            "total_paid": self.total_paid,
        }
