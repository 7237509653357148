"""
Input Validation - sanity checks for values crossing the auction boundary.

Every public auction operation receives principals and amounts from the
outside. These helpers reject malformed values before any state is read:
- Addresses must be exactly 20 bytes
- Amounts must be non-negative integers within the uint256 range
- Durations must be positive integers
"""

from typing import Any, Optional, Tuple

# =============================================================================
# Constants
# =============================================================================

ADDRESS_SIZE = 20

MIN_AMOUNT = 0
MAX_AMOUNT = 2**256 - 1
MIN_DURATION = 1
MAX_DURATION = 2**64 - 1


# =============================================================================
# Validation Functions
# =============================================================================


def validate_bytes(
    data: Any,
    name: str,
    expected_length: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate bytes input.

    Args:
        data: Data to validate
        name: Field name for error messages
        expected_length: Exact expected length

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(data, (bytes, bytearray)):
        return False, f"{name} must be bytes, got {type(data).__name__}"

    if expected_length is not None and len(data) != expected_length:
        return False, f"{name} must be {expected_length} bytes, got {len(data)}"

    return True, ""


def validate_address(address: Any, name: str = "address") -> Tuple[bool, str]:
    """Validate a 20-byte principal address."""
    return validate_bytes(address, name, expected_length=ADDRESS_SIZE)


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_AMOUNT,
    max_val: int = MAX_AMOUNT,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Booleans are rejected even though they subclass int.

    Returns:
        (is_valid, error_message)
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_amount(amount: Any, name: str = "amount") -> Tuple[bool, str]:
    """Validate a wei amount."""
    return validate_integer(amount, name, MIN_AMOUNT, MAX_AMOUNT)


def validate_duration(duration: Any) -> Tuple[bool, str]:
    """Validate an auction duration in seconds."""
    return validate_integer(duration, "duration_seconds", MIN_DURATION, MAX_DURATION)


def require_address(address: Any, name: str = "address") -> bytes:
    """Return the address as immutable bytes or raise ValueError."""
    is_valid, error = validate_address(address, name)
    if not is_valid:
        raise ValueError(error)
    return bytes(address)


def require_amount(amount: Any, name: str = "amount") -> int:
    """Return the amount or raise ValueError."""
    is_valid, error = validate_amount(amount, name)
    if not is_valid:
        raise ValueError(error)
    return amount
