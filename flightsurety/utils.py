"""Utility functions for amounts and addresses."""

import re
from decimal import Decimal
from typing import Union

from .config import WEI_PER_ETHER
from .errors import InvalidAddress

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def to_wei(amount: Union[str, int, float, Decimal], unit: str = "ether") -> int:
    """
    Convert an amount in ether (or wei) to integer wei.

    Args:
        amount: Amount expressed in `unit`
        unit: "ether" or "wei"

    Returns:
        Amount in wei

    Examples:
        >>> to_wei("0.8")
        800000000000000000
        >>> to_wei(10)
        10000000000000000000
    """
    if unit == "wei":
        return int(amount)
    if unit != "ether":
        raise ValueError(f"Unsupported unit: {unit}")
    # str() keeps floats like 0.1 from picking up binary noise
    return int(Decimal(str(amount)) * WEI_PER_ETHER)


def from_wei(amount: int) -> Decimal:
    """Convert integer wei to ether."""
    return Decimal(amount) / WEI_PER_ETHER


def format_ether(amount: int) -> str:
    """
    Format a wei amount as an ether string.

    Examples:
        >>> format_ether(1500000000000000000)
        '1.5 ETH'
        >>> format_ether(0)
        '0 ETH'
    """
    ether = from_wei(amount).normalize()
    # normalize() turns 10 into 1E+1
    text = f"{ether:f}"
    return f"{text} ETH"


def is_address(value: str) -> bool:
    """Check that a value looks like a 20-byte hex address."""
    return isinstance(value, str) and bool(_ADDRESS_RE.match(value))


def normalize_address(value: str) -> str:
    """
    Validate and lowercase an address.

    Raises:
        InvalidAddress: If the value is not a 0x-prefixed 40 hex digit string
    """
    if not is_address(value):
        raise InvalidAddress(f"Malformed address: {value!r}", {"address": value})
    return value.lower()
