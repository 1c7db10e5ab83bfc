"""Tests for amount and address helpers."""

from decimal import Decimal

import pytest

from flightsurety.accounts import contract_address, generate_accounts
from flightsurety.errors import InvalidAddress
from flightsurety.utils import format_ether, from_wei, is_address, normalize_address, to_wei


def test_to_wei_handles_fractions():
    """Test ether strings convert exactly."""
    assert to_wei("0.8") == 800_000_000_000_000_000
    assert to_wei(10) == 10 * 10 ** 18
    assert to_wei(0.1) == 10 ** 17
    assert to_wei(5, unit="wei") == 5


def test_to_wei_rejects_unknown_unit():
    with pytest.raises(ValueError):
        to_wei(1, unit="gwei")


def test_format_ether():
    assert format_ether(1_500_000_000_000_000_000) == "1.5 ETH"
    assert format_ether(10 * 10 ** 18) == "10 ETH"
    assert format_ether(0) == "0 ETH"
    assert from_wei(10 ** 18) == Decimal(1)


def test_normalize_address():
    """Test addresses are validated and lowercased."""
    address = "0x627306090ABaB3A6e1400e9345bC60c78a8BEf57"
    assert is_address(address)
    assert normalize_address(address) == address.lower()

    for bad in ["", "0x123", "627306090abab3a6e1400e9345bc60c78a8bef57", "0x" + "g" * 40]:
        with pytest.raises(InvalidAddress):
            normalize_address(bad)


def test_generated_accounts_are_deterministic():
    first = generate_accounts(5, "seed")
    assert first == generate_accounts(5, "seed")
    assert first != generate_accounts(5, "other")
    assert len(set(first)) == 5
    assert all(is_address(a) for a in first)
    assert contract_address(first[0], 0) != contract_address(first[0], 1)
