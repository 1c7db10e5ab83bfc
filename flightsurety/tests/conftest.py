"""Shared fixtures for contract tests."""

import pytest

from flightsurety.accounts import generate_accounts
from flightsurety.config import AIRLINE_FUNDING_MINIMUM
from flightsurety.deployment import deploy
from flightsurety.models.contract_state import ContractState
from flightsurety.registry import AirlineRegistry


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def accounts():
    """Forty deterministic test accounts; index 0 is the owner."""
    return generate_accounts(40, "test")


@pytest.fixture
def owner(accounts):
    return accounts[0]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def state(owner):
    """Contract storage with the owner registered as first airline."""
    state = ContractState(owner=owner, authorized_callers=[])
    AirlineRegistry().bootstrap(state, owner, "First Airline")
    return state


@pytest.fixture
def deployment(owner, clock):
    return deploy(owner, "First Airline", clock=clock)


@pytest.fixture
def app(deployment):
    return deployment.app


@pytest.fixture
def approved_airlines(app, accounts):
    """Owner plus three registered airlines, all funded and approved."""
    airlines = accounts[0:4]
    app.fund_airline(airlines[0], AIRLINE_FUNDING_MINIMUM)
    for i, airline in enumerate(airlines[1:], start=2):
        app.register_airline(airline, f"Airline {i}", airlines[0])
        app.fund_airline(airline, AIRLINE_FUNDING_MINIMUM)
    return airlines
