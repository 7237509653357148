"""
AccountBook - native value balances for auction participants.

Stands in for the execution environment's value-transfer layer: every
address has a balance, and value moves between addresses through
transfer(), which is all-or-nothing.

Recipients can be configured to behave like contract accounts:
- reject_payments(): every incoming transfer fails
- set_receive_hook(): a callback runs when value arrives, after the balance
  is credited; if it raises, that payment is reversed and the transfer
  reports failure

While a hook runs, the value it was notified of is in flight: it shows in
the balance but cannot be spent until the hook returns. Transfers the hook
makes from its other funds are final and stay in place when the hook fails,
since the ledgers that recorded them (another auction, say) are not rolled
back with it.

The hook is how a recipient could call back into an auction while a
payment to it is still in flight.
"""

import threading
from typing import Callable, Dict, Optional, Set

from lossless.crypto import short_address
from lossless.utils.logger import get_logger
from lossless.utils.validation import require_address, require_amount

logger = get_logger("accounts")

# (sender, amount) -> None; raising rejects the payment
ReceiveHook = Callable[[bytes, int], None]


class AccountBook:
    """
    In-memory balances with atomic transfers.

    Attributes:
        balances: address -> balance in wei
    """

    def __init__(self):
        self.balances: Dict[bytes, int] = {}
        self._rejecting: Set[bytes] = set()
        self._hooks: Dict[bytes, ReceiveHook] = {}
        self._in_flight: Dict[bytes, int] = {}
        self._nonces: Dict[bytes, int] = {}
        self._lock = threading.RLock()

    # =========================================================================
    # Setup
    # =========================================================================

    def fund(self, address: bytes, amount: int) -> int:
        """Credit an address out of thin air (genesis allocation)."""
        address = require_address(address)
        amount = require_amount(amount)
        with self._lock:
            self.balances[address] = self.balances.get(address, 0) + amount
            logger.debug(f"Funded {short_address(address)} with {amount}")
            return self.balances[address]

    def reject_payments(self, address: bytes, reject: bool = True) -> None:
        """Make every transfer to `address` fail (or stop doing so)."""
        address = require_address(address)
        with self._lock:
            if reject:
                self._rejecting.add(address)
            else:
                self._rejecting.discard(address)

    def set_receive_hook(self, address: bytes, hook: Optional[ReceiveHook]) -> None:
        """Install (or with None, remove) the callback run when `address` is paid."""
        address = require_address(address)
        with self._lock:
            if hook is None:
                self._hooks.pop(address, None)
            else:
                self._hooks[address] = hook

    # =========================================================================
    # Queries
    # =========================================================================

    def balance_of(self, address: bytes) -> int:
        return self.balances.get(address, 0)

    def spendable(self, address: bytes) -> int:
        """Balance minus value still in flight to `address`."""
        return self.balance_of(address) - self._in_flight.get(address, 0)

    def can_pay(self, sender: bytes, amount: int) -> bool:
        """Whether sender can currently spend at least `amount`."""
        return self.spendable(sender) >= amount

    def next_nonce(self, address: bytes) -> int:
        """
        Issue the next account nonce of `address`.

        Nonces start at 0 and are never reissued, so (address, nonce) names
        one account creation.
        """
        address = require_address(address)
        with self._lock:
            nonce = self._nonces.get(address, 0)
            self._nonces[address] = nonce + 1
            return nonce

    def total_supply(self) -> int:
        """Sum of all balances; constant across transfers."""
        return sum(self.balances.values())

    # =========================================================================
    # Transfers
    # =========================================================================

    def transfer(
        self,
        sender: bytes,
        recipient: bytes,
        amount: int,
        notify: bool = True,
    ) -> bool:
        """
        Move `amount` from sender to recipient.

        Args:
            sender: Paying address
            recipient: Receiving address
            amount: Value in wei (zero is allowed)
            notify: Run the recipient's rejection rule and receive hook.
                Disabled for rollbacks, which must not fail.

        Returns:
            True if the value moved, False if nothing moved
        """
        sender = require_address(sender, "sender")
        recipient = require_address(recipient, "recipient")
        amount = require_amount(amount)

        with self._lock:
            if self.spendable(sender) < amount:
                logger.warning(
                    f"Transfer of {amount} from {short_address(sender)} failed: "
                    f"spendable {self.spendable(sender)}"
                )
                return False

            if notify and recipient in self._rejecting:
                logger.warning(f"Transfer of {amount} rejected by {short_address(recipient)}")
                return False

            self.balances[sender] = self.balances.get(sender, 0) - amount
            self.balances[recipient] = self.balances.get(recipient, 0) + amount

            hook = self._hooks.get(recipient) if notify else None
            if hook is not None:
                self._in_flight[recipient] = self._in_flight.get(recipient, 0) + amount
                try:
                    hook(sender, amount)
                except Exception as e:
                    # in-flight value is unspendable, so the recipient still holds it
                    self.balances[recipient] -= amount
                    self.balances[sender] += amount
                    logger.warning(f"Receive hook of {short_address(recipient)} failed: {e}")
                    return False
                finally:
                    self._in_flight[recipient] -= amount
                    if not self._in_flight[recipient]:
                        del self._in_flight[recipient]

            logger.debug(f"Transferred {amount} {short_address(sender)} -> {short_address(recipient)}")
            return True

    def __repr__(self) -> str:
        return f"AccountBook(accounts={len(self.balances)}, supply={self.total_supply()})"
