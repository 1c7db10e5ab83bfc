"""Tests for oracle registration, request matching and quorum resolution."""

import pytest

from flightsurety.config import (
    AIRLINE_FUNDING_MINIMUM,
    ORACLE_INDEX_SPACE,
    ORACLE_NONCE_RESET,
    ORACLE_REGISTRATION_FEE,
    STATUS_CODE_LATE_AIRLINE,
    STATUS_CODE_LATE_WEATHER,
    STATUS_CODE_ON_TIME,
)
from flightsurety.errors import AlreadyRegistered, InsufficientFee, InvalidState, Unauthorized
from flightsurety.models.events import FLIGHT_STATUS_INFO, ORACLE_REPORT, ORACLE_REQUEST
from flightsurety.models.oracle import Oracle
from flightsurety.oracle_coordinator import OracleCoordinator, SubmissionOutcome
from flightsurety.policy_ledger import PolicyLedger
from flightsurety.registry import AirlineRegistry
from flightsurety.utils import to_wei

FLIGHT = "ND1309"
TIMESTAMP = 1630021956
NOW = 1_700_000_000.0


class EventRecorder:
    """Collects emitted (name, args) pairs."""

    def __init__(self):
        self.events = []

    def __call__(self, name, args):
        self.events.append((name, args))

    def names(self):
        return [name for name, _ in self.events]


@pytest.fixture
def ledger():
    return PolicyLedger()


@pytest.fixture
def coordinator(ledger):
    return OracleCoordinator(ledger)


@pytest.fixture
def emit():
    return EventRecorder()


@pytest.fixture
def request_(coordinator, state, owner, emit):
    """An open status request for FLIGHT."""
    return coordinator.fetch_flight_status(state, owner, owner, FLIGHT, TIMESTAMP, NOW, emit)


def add_oracles(state, accounts, index):
    """Register oracles directly with `index` among their indexes."""
    for account in accounts:
        others = [i for i in range(ORACLE_INDEX_SPACE) if i != index][:2]
        state.oracles[account] = Oracle(address=account, indexes=[index] + others, fee_paid=ORACLE_REGISTRATION_FEE)


def test_register_oracle_assigns_three_distinct_indexes(coordinator, state, accounts):
    for account in accounts[20:40]:
        oracle = coordinator.register_oracle(state, account, ORACLE_REGISTRATION_FEE)
        assert len(oracle.indexes) == 3
        assert len(set(oracle.indexes)) == 3
        assert all(0 <= i < ORACLE_INDEX_SPACE for i in oracle.indexes)
        assert coordinator.get_my_indexes(state, account) == oracle.indexes

    assert state.balance == 20 * ORACLE_REGISTRATION_FEE
    assert 0 <= state.nonce < ORACLE_NONCE_RESET


def test_register_oracle_rejections(coordinator, state, accounts):
    with pytest.raises(InsufficientFee):
        coordinator.register_oracle(state, accounts[20], ORACLE_REGISTRATION_FEE - 1)

    coordinator.register_oracle(state, accounts[20], ORACLE_REGISTRATION_FEE)
    with pytest.raises(AlreadyRegistered):
        coordinator.register_oracle(state, accounts[20], ORACLE_REGISTRATION_FEE)

    with pytest.raises(Unauthorized):
        coordinator.get_my_indexes(state, accounts[21])


def test_fetch_flight_status_emits_request(request_, emit, owner):
    assert request_.is_open
    assert 0 <= request_.index < ORACLE_INDEX_SPACE
    assert emit.events == [(ORACLE_REQUEST, {
        "index": request_.index,
        "airline": owner,
        "flight": FLIGHT,
        "timestamp": TIMESTAMP,
    })]


def test_fetch_flight_status_requires_flight(coordinator, state, owner, emit):
    with pytest.raises(InvalidState):
        coordinator.fetch_flight_status(state, owner, owner, "  ", TIMESTAMP, NOW, emit)


def test_quorum_resolves_request(coordinator, state, owner, accounts, request_, emit):
    oracles = accounts[20:23]
    add_oracles(state, oracles, request_.index)

    outcomes = [
        coordinator.submit_oracle_response(
            state, oracle, request_.index, owner, FLIGHT, TIMESTAMP, STATUS_CODE_LATE_WEATHER, NOW, emit
        )
        for oracle in oracles
    ]

    assert outcomes == [SubmissionOutcome.ACCEPTED, SubmissionOutcome.ACCEPTED, SubmissionOutcome.RESOLVED]
    assert emit.names() == [ORACLE_REQUEST, ORACLE_REPORT, ORACLE_REPORT, ORACLE_REPORT, FLIGHT_STATUS_INFO]
    assert not state.requests[request_.key].is_open
    assert state.requests[request_.key].final_status == STATUS_CODE_LATE_WEATHER

    status = coordinator.get_flight_status(state, owner, FLIGHT, TIMESTAMP)
    assert status.status_code == STATUS_CODE_LATE_WEATHER
    assert coordinator.open_requests(state) == []


def test_responses_after_resolution_are_ignored(coordinator, state, owner, accounts, request_, emit):
    oracles = accounts[20:24]
    add_oracles(state, oracles, request_.index)
    for oracle in oracles[:3]:
        coordinator.submit_oracle_response(
            state, oracle, request_.index, owner, FLIGHT, TIMESTAMP, STATUS_CODE_LATE_WEATHER, NOW, emit
        )
    emitted = len(emit.events)

    outcome = coordinator.submit_oracle_response(
        state, oracles[3], request_.index, owner, FLIGHT, TIMESTAMP, STATUS_CODE_ON_TIME, NOW + 5, emit
    )

    assert outcome == SubmissionOutcome.IGNORED
    assert len(emit.events) == emitted
    assert coordinator.get_flight_status(state, owner, FLIGHT, TIMESTAMP).status_code == STATUS_CODE_LATE_WEATHER


def test_split_votes_need_matching_quorum(coordinator, state, owner, accounts, request_, emit):
    oracles = accounts[20:25]
    add_oracles(state, oracles, request_.index)
    codes = [STATUS_CODE_ON_TIME, STATUS_CODE_LATE_WEATHER, STATUS_CODE_ON_TIME, STATUS_CODE_LATE_WEATHER]

    for oracle, code in zip(oracles, codes):
        outcome = coordinator.submit_oracle_response(
            state, oracle, request_.index, owner, FLIGHT, TIMESTAMP, code, NOW, emit
        )
        assert outcome == SubmissionOutcome.ACCEPTED
    assert coordinator.get_flight_status(state, owner, FLIGHT, TIMESTAMP) is None

    outcome = coordinator.submit_oracle_response(
        state, oracles[4], request_.index, owner, FLIGHT, TIMESTAMP, STATUS_CODE_ON_TIME, NOW, emit
    )
    assert outcome == SubmissionOutcome.RESOLVED
    assert coordinator.get_flight_status(state, owner, FLIGHT, TIMESTAMP).status_code == STATUS_CODE_ON_TIME


def test_unmatched_responses_are_ignored(coordinator, state, owner, accounts, request_, emit):
    add_oracles(state, accounts[20:22], request_.index)
    wrong_index = (request_.index + 5) % ORACLE_INDEX_SPACE
    state.oracles[accounts[22]] = Oracle(
        address=accounts[22],
        indexes=[wrong_index],
        fee_paid=ORACLE_REGISTRATION_FEE,
    )

    def submit(oracle, index=request_.index, flight=FLIGHT, timestamp=TIMESTAMP):
        return coordinator.submit_oracle_response(
            state, oracle, index, owner, flight, timestamp, STATUS_CODE_ON_TIME, NOW, emit
        )

    # Not an oracle
    assert submit(accounts[30]) == SubmissionOutcome.IGNORED
    # Index not assigned to the oracle
    assert submit(accounts[22]) == SubmissionOutcome.IGNORED
    # No request for this flight
    assert submit(accounts[20], flight="OTHER") == SubmissionOutcome.IGNORED
    assert submit(accounts[20], timestamp=TIMESTAMP + 1) == SubmissionOutcome.IGNORED

    # Same oracle twice
    assert submit(accounts[20]) == SubmissionOutcome.ACCEPTED
    assert submit(accounts[20]) == SubmissionOutcome.IGNORED

    assert state.requests[request_.key].responders() == [accounts[20]]
    assert emit.names() == [ORACLE_REQUEST, ORACLE_REPORT]


def test_unknown_status_code_rejected(coordinator, state, owner, accounts, request_, emit):
    add_oracles(state, accounts[20:21], request_.index)
    with pytest.raises(InvalidState):
        coordinator.submit_oracle_response(
            state, accounts[20], request_.index, owner, FLIGHT, TIMESTAMP, 25, NOW, emit
        )


def test_late_airline_credits_insurees(coordinator, state, owner, accounts, emit):
    AirlineRegistry().fund_airline(state, owner, AIRLINE_FUNDING_MINIMUM)
    passenger = accounts[15]
    coordinator.ledger.buy_insurance_policy(state, passenger, owner, FLIGHT, TIMESTAMP, to_wei("0.8"))

    request = coordinator.fetch_flight_status(state, passenger, owner, FLIGHT, TIMESTAMP, NOW, emit)
    add_oracles(state, accounts[20:23], request.index)
    for oracle in accounts[20:23]:
        coordinator.submit_oracle_response(
            state, oracle, request.index, owner, FLIGHT, TIMESTAMP, STATUS_CODE_LATE_AIRLINE, NOW, emit
        )

    assert state.entitlements[passenger] == to_wei("1.2")


def test_on_time_does_not_credit(coordinator, state, owner, accounts, emit):
    AirlineRegistry().fund_airline(state, owner, AIRLINE_FUNDING_MINIMUM)
    passenger = accounts[15]
    coordinator.ledger.buy_insurance_policy(state, passenger, owner, FLIGHT, TIMESTAMP, to_wei("0.8"))

    request = coordinator.fetch_flight_status(state, passenger, owner, FLIGHT, TIMESTAMP, NOW, emit)
    add_oracles(state, accounts[20:23], request.index)
    for oracle in accounts[20:23]:
        coordinator.submit_oracle_response(
            state, oracle, request.index, owner, FLIGHT, TIMESTAMP, STATUS_CODE_ON_TIME, NOW, emit
        )

    assert state.entitlements.get(passenger, 0) == 0


def test_expire_requests(coordinator, state, owner, accounts, request_, emit):
    add_oracles(state, accounts[20:21], request_.index)

    assert coordinator.expire_requests(state, NOW + 59, ttl_seconds=60) == 0
    assert coordinator.expire_requests(state, NOW + 60, ttl_seconds=60) == 1

    request = state.requests[request_.key]
    assert request.expired
    assert not request.resolved
    outcome = coordinator.submit_oracle_response(
        state, accounts[20], request_.index, owner, FLIGHT, TIMESTAMP, STATUS_CODE_ON_TIME, NOW + 61, emit
    )
    assert outcome == SubmissionOutcome.IGNORED


def test_refetch_after_expiry_always_opens_a_request(coordinator, state, owner, accounts, request_, emit):
    """Test every fetch for an expired flight announces an open request, whatever index is drawn."""
    coordinator.expire_requests(state, NOW + 60, ttl_seconds=60)

    for i in range(60):
        caller = accounts[10 + i % 20]
        request = coordinator.fetch_flight_status(state, caller, owner, FLIGHT, TIMESTAMP, NOW + 61, emit)
        assert request.is_open
        assert not request.expired
        assert emit.events[-1] == (ORACLE_REQUEST, {
            "index": request.index,
            "airline": owner,
            "flight": FLIGHT,
            "timestamp": TIMESTAMP,
        })

    assert emit.names().count(ORACLE_REQUEST) == 61


def test_finalized_flight_cannot_be_refetched(coordinator, state, owner, accounts, request_, emit):
    add_oracles(state, accounts[20:23], request_.index)
    for oracle in accounts[20:23]:
        coordinator.submit_oracle_response(
            state, oracle, request_.index, owner, FLIGHT, TIMESTAMP, STATUS_CODE_LATE_AIRLINE, NOW, emit
        )

    with pytest.raises(InvalidState):
        coordinator.fetch_flight_status(state, accounts[16], owner, FLIGHT, TIMESTAMP, NOW + 5, emit)


def test_first_quorum_finalizes_flight(coordinator, state, owner, accounts, request_, emit):
    """Test a second request for the same flight cannot overwrite or re-credit a final status."""
    AirlineRegistry().fund_airline(state, owner, AIRLINE_FUNDING_MINIMUM)
    coordinator.ledger.buy_insurance_policy(state, accounts[15], owner, FLIGHT, TIMESTAMP, to_wei("1"))

    # Draw until a second request opens at a different index
    second = request_
    for caller in accounts[10:40]:
        second = coordinator.fetch_flight_status(state, caller, owner, FLIGHT, TIMESTAMP, NOW, emit)
        if second.index != request_.index:
            break
    assert second.index != request_.index

    first_oracles, second_oracles = accounts[20:23], accounts[23:26]
    add_oracles(state, first_oracles, request_.index)
    add_oracles(state, second_oracles, second.index)
    for oracle in first_oracles:
        coordinator.submit_oracle_response(
            state, oracle, request_.index, owner, FLIGHT, TIMESTAMP, STATUS_CODE_LATE_AIRLINE, NOW, emit
        )

    assert not state.requests[second.key].is_open
    outcomes = [
        coordinator.submit_oracle_response(
            state, oracle, second.index, owner, FLIGHT, TIMESTAMP, STATUS_CODE_ON_TIME, NOW + 5, emit
        )
        for oracle in second_oracles
    ]

    assert outcomes == [SubmissionOutcome.IGNORED] * 3
    assert coordinator.get_flight_status(state, owner, FLIGHT, TIMESTAMP).status_code == STATUS_CODE_LATE_AIRLINE
    assert state.entitlements[accounts[15]] == to_wei("1.5")
    assert emit.names().count(FLIGHT_STATUS_INFO) == 1
