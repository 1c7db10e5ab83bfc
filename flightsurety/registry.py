"""Airline registry: registration, funding and lifecycle queries."""

import logging
from typing import List, Optional

from .config import AIRLINE_CONSENSUS_THRESHOLD, AIRLINE_FUNDING_MINIMUM
from .errors import AlreadyRegistered, InsufficientFunds, InvalidState, Unauthorized
from .models.airline import Airline
from .models.contract_state import ContractState
from .utils import format_ether

logger = logging.getLogger(__name__)


class AirlineRegistry:
    """Tracks airline identities and their lifecycle state."""

    def __init__(self, consensus_threshold: int = AIRLINE_CONSENSUS_THRESHOLD):
        """
        Initialize registry.

        Args:
            consensus_threshold: Number of airlines accepted without votes
        """
        self.consensus_threshold = consensus_threshold

    def bootstrap(self, state: ContractState, address: str, name: str) -> Airline:
        """
        Register the first airline at deployment; it is accepted without a sponsor.

        Raises:
            InvalidState: If airlines already exist
        """
        if state.airlines:
            raise InvalidState("First airline can only be registered on an empty registry")
        airline = Airline(address=address, name=name, accepted=True, registered_by=address)
        state.airlines[address] = airline
        logger.info(f"First airline {name} ({address}) registered")
        return airline

    def register_airline(self, state: ContractState, caller: str, address: str, name: str) -> Airline:
        """
        Register a new airline sponsored by an approved airline.

        The first `consensus_threshold` airlines are accepted immediately;
        later ones wait for consensus votes.

        Args:
            state: Contract storage
            caller: Sponsoring airline
            address: New airline's address
            name: New airline's name

        Returns:
            The created airline entry

        Raises:
            Unauthorized: If the caller is not an approved airline
            AlreadyRegistered: If the address already has an entry
            InvalidState: If the name is blank
        """
        if not self.is_approved(state, caller):
            raise Unauthorized("Only approved airlines can register airlines", {"caller": caller})
        if address in state.airlines:
            raise AlreadyRegistered(f"Airline {address} is already registered", {"airline": address})
        if not name or not name.strip():
            raise InvalidState("Airline name is required")

        accepted = state.registered_count < self.consensus_threshold
        airline = Airline(address=address, name=name.strip(), accepted=accepted, registered_by=caller)
        state.airlines[address] = airline

        if accepted:
            logger.info(f"Airline {airline.name} ({address}) registered by {caller}")
        else:
            logger.info(
                f"Airline {airline.name} ({address}) proposed by {caller}, "
                f"awaiting consensus ({state.registered_count} airlines)"
            )
        return airline

    def fund_airline(self, state: ContractState, caller: str, value: int) -> Airline:
        """
        Add a funding contribution from a registered airline.

        Contributions accumulate; a payment that would leave the total below
        the minimum is rejected and nothing is kept.

        Raises:
            InvalidState: If the caller has no registry entry
            InsufficientFunds: If the cumulative contribution stays below the minimum
        """
        airline = state.airlines.get(caller)
        if airline is None:
            raise InvalidState("Only registered airlines can be funded", {"caller": caller})
        if value <= 0:
            raise InsufficientFunds("Funding payment must be positive", {"value": value})

        total = airline.funding + value
        if total < AIRLINE_FUNDING_MINIMUM:
            raise InsufficientFunds(
                f"Airline funding requires at least {format_ether(AIRLINE_FUNDING_MINIMUM)}",
                {"value": value, "total": total, "minimum": AIRLINE_FUNDING_MINIMUM},
            )

        airline.funding = total
        state.balance += value
        logger.info(f"Airline {caller} funded with {format_ether(value)} (total {format_ether(total)})")
        return airline

    def get_airline(self, state: ContractState, address: str) -> Optional[Airline]:
        return state.airlines.get(address)

    def list_airlines(self, state: ContractState) -> List[Airline]:
        return list(state.airlines.values())

    def is_registered(self, state: ContractState, address: str) -> bool:
        return address in state.airlines

    def is_funded(self, state: ContractState, address: str) -> bool:
        airline = state.airlines.get(address)
        return airline is not None and airline.is_funded

    def is_approved(self, state: ContractState, address: str) -> bool:
        airline = state.airlines.get(address)
        return airline is not None and airline.is_approved
