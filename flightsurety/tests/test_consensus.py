"""Tests for consensus votes on airlines past the registration threshold."""

import pytest

from flightsurety.config import AIRLINE_FUNDING_MINIMUM
from flightsurety.consensus import ConsensusVoter
from flightsurety.errors import DuplicateVote, InvalidState, Unauthorized
from flightsurety.registry import AirlineRegistry


@pytest.fixture
def registry():
    return AirlineRegistry()


@pytest.fixture
def voter():
    return ConsensusVoter()


@pytest.fixture
def four_approved(registry, state, accounts):
    """Owner and three more airlines, all approved."""
    owner = accounts[0]
    registry.fund_airline(state, owner, AIRLINE_FUNDING_MINIMUM)
    for i in (1, 2, 3):
        registry.register_airline(state, owner, accounts[i], f"Airline {i + 1}")
        registry.fund_airline(state, accounts[i], AIRLINE_FUNDING_MINIMUM)
    return accounts[0:4]


def test_required_votes_is_half_of_registered_rounded_up(voter, registry, state, four_approved, accounts):
    assert voter.required_votes(state) == 2  # 4 registered
    registry.register_airline(state, four_approved[0], accounts[4], "Fifth Airline")
    assert voter.required_votes(state) == 3  # 5 registered


def test_fifth_airline_approved_after_three_votes(voter, registry, state, four_approved, accounts):
    """Test 50% of the five registered airlines must vote for the fifth."""
    candidate = accounts[4]
    registry.register_airline(state, four_approved[0], candidate, "Fifth Airline")
    registry.fund_airline(state, candidate, AIRLINE_FUNDING_MINIMUM)

    voter.vote_for_airline(state, four_approved[0], candidate)
    voter.vote_for_airline(state, four_approved[1], candidate)
    assert not registry.is_approved(state, candidate)

    airline = voter.vote_for_airline(state, four_approved[2], candidate)
    assert airline.accepted
    assert registry.is_approved(state, candidate)


def test_accepted_but_unfunded_candidate_is_not_approved(voter, registry, state, four_approved, accounts):
    candidate = accounts[4]
    registry.register_airline(state, four_approved[0], candidate, "Fifth Airline")
    for airline in four_approved[:3]:
        voter.vote_for_airline(state, airline, candidate)

    assert state.airlines[candidate].accepted
    assert not registry.is_approved(state, candidate)

    registry.fund_airline(state, candidate, AIRLINE_FUNDING_MINIMUM)
    assert registry.is_approved(state, candidate)


def test_threshold_recomputed_as_registry_grows(voter, registry, state, four_approved, accounts):
    """Test the quorum follows the current registry size, not the size at proposal time."""
    candidate = accounts[4]
    registry.register_airline(state, four_approved[0], candidate, "Fifth Airline")
    voter.vote_for_airline(state, four_approved[0], candidate)
    voter.vote_for_airline(state, four_approved[1], candidate)

    # Two more proposals raise the registry to 7, so 4 votes are now needed
    registry.register_airline(state, four_approved[0], accounts[5], "Sixth Airline")
    registry.register_airline(state, four_approved[0], accounts[6], "Seventh Airline")
    assert voter.required_votes(state) == 4

    airline = voter.vote_for_airline(state, four_approved[2], candidate)
    assert not airline.accepted

    airline = voter.vote_for_airline(state, four_approved[3], candidate)
    assert airline.accepted


def test_duplicate_vote_rejected(voter, registry, state, four_approved, accounts):
    candidate = accounts[4]
    registry.register_airline(state, four_approved[0], candidate, "Fifth Airline")
    voter.vote_for_airline(state, four_approved[0], candidate)

    with pytest.raises(DuplicateVote):
        voter.vote_for_airline(state, four_approved[0], candidate)
    assert state.airlines[candidate].voters == [four_approved[0]]


def test_only_approved_airlines_vote(voter, registry, state, four_approved, accounts):
    candidate = accounts[4]
    registry.register_airline(state, four_approved[0], candidate, "Fifth Airline")
    registry.register_airline(state, four_approved[0], accounts[5], "Sixth Airline")

    with pytest.raises(Unauthorized):
        voter.vote_for_airline(state, accounts[5], candidate)
    with pytest.raises(Unauthorized):
        voter.vote_for_airline(state, accounts[20], candidate)
    assert state.airlines[candidate].voters == []


def test_vote_for_unknown_or_accepted_airline(voter, state, four_approved, accounts):
    with pytest.raises(InvalidState):
        voter.vote_for_airline(state, four_approved[0], accounts[9])
    with pytest.raises(InvalidState):
        voter.vote_for_airline(state, four_approved[0], four_approved[1])
