"""Deterministic local accounts, in the spirit of a development chain's unlocked accounts."""

import hashlib
from typing import List


def derive_address(*parts) -> str:
    """Derive a 20-byte address from the hash of the parts."""
    digest = hashlib.sha3_256(":".join(str(p) for p in parts).encode("utf-8")).hexdigest()
    return "0x" + digest[-40:]


def generate_accounts(count: int, seed: str = "flightsurety") -> List[str]:
    """
    Generate `count` addresses; the same seed always yields the same list.

    Examples:
        >>> len(generate_accounts(3))
        3
    """
    return [derive_address(seed, "account", i) for i in range(count)]


def contract_address(deployer: str, nonce: int) -> str:
    """Address of the contract `deployer` creates with its `nonce`-th deployment."""
    return derive_address(deployer, "create", nonce)
