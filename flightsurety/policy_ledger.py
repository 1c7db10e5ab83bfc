"""Insurance policy ledger: purchases, credits and withdrawals."""

import logging
from typing import Callable, List, Optional

from .config import INSURANCE_PREMIUM_CAP, PAYOUT_DENOMINATOR, PAYOUT_NUMERATOR
from .errors import (
    AlreadyExists,
    InsufficientFunds,
    InvalidAirline,
    InvalidState,
    NoBalance,
    ReentrancyRejected,
)
from .models.contract_state import ContractState
from .models.oracle import flight_key
from .models.policy import InsurancePolicy, policy_key
from .utils import format_ether

logger = logging.getLogger(__name__)

Transfer = Callable[[str, int], None]


class PolicyLedger:
    """Records insurance purchases and passenger entitlements."""

    def buy_insurance_policy(
        self,
        state: ContractState,
        passenger: str,
        airline: str,
        flight: str,
        timestamp: int,
        value: int,
    ) -> InsurancePolicy:
        """
        Buy insurance on a flight of an approved airline.

        Args:
            state: Contract storage
            passenger: Buyer, who receives any payout
            airline: Operating airline
            flight: Flight identifier
            timestamp: Scheduled flight time (unix seconds)
            value: Premium paid in wei

        Returns:
            The new policy

        Raises:
            InvalidAirline: If the airline is not approved
            InsufficientFunds: If no premium is paid
            InvalidState: If the premium exceeds the cap, the flight is malformed
                or the flight already has a final status
            AlreadyExists: If the passenger already insured this flight
        """
        entry = state.airlines.get(airline)
        if entry is None or not entry.is_approved:
            raise InvalidAirline(f"Airline {airline} cannot sell insurance", {"airline": airline})
        if not flight or not flight.strip():
            raise InvalidState("Flight identifier is required")
        if timestamp < 0:
            raise InvalidState("Flight timestamp must not be negative", {"timestamp": timestamp})
        if flight_key(airline, flight, timestamp) in state.flight_statuses:
            raise InvalidState(
                f"Flight {flight}@{timestamp} already has a final status",
                {"airline": airline, "flight": flight, "timestamp": timestamp},
            )
        if value <= 0:
            raise InsufficientFunds("Insurance premium must be positive", {"value": value})
        if value > INSURANCE_PREMIUM_CAP:
            raise InvalidState(
                f"Insurance premium is capped at {format_ether(INSURANCE_PREMIUM_CAP)}",
                {"value": value, "cap": INSURANCE_PREMIUM_CAP},
            )

        key = policy_key(passenger, airline, flight, timestamp)
        if key in state.policies:
            raise AlreadyExists(
                f"Passenger {passenger} already insured flight {flight}",
                {"passenger": passenger, "flight": flight, "timestamp": timestamp},
            )

        policy = InsurancePolicy(
            passenger=passenger,
            airline=airline,
            flight=flight,
            timestamp=timestamp,
            premium=value,
        )
        state.policies[key] = policy
        state.flight_policies.setdefault(flight_key(airline, flight, timestamp), []).append(key)
        state.balance += value

        logger.info(f"Policy bought by {passenger} for {flight}@{timestamp}: {format_ether(value)}")
        return policy

    def credit_insurees(self, state: ContractState, airline: str, flight: str, timestamp: int) -> int:
        """
        Credit every uncredited policy on the flight with 1.5x its premium.

        Returns:
            Total wei credited
        """
        total = 0
        for key in state.flight_policies.get(flight_key(airline, flight, timestamp), []):
            policy = state.policies[key]
            if policy.credited:
                continue
            payout = policy.premium * PAYOUT_NUMERATOR // PAYOUT_DENOMINATOR
            policy.payout = payout
            policy.credited = True
            state.entitlements[policy.passenger] = state.entitlements.get(policy.passenger, 0) + payout
            total += payout
            logger.info(f"Credited {policy.passenger} with {format_ether(payout)} for {flight}@{timestamp}")
        return total

    def get_passenger_entitlement(self, state: ContractState, passenger: str) -> int:
        return state.entitlements.get(passenger, 0)

    def get_policy(
        self, state: ContractState, passenger: str, airline: str, flight: str, timestamp: int
    ) -> Optional[InsurancePolicy]:
        return state.policies.get(policy_key(passenger, airline, flight, timestamp))

    def list_policies(self, state: ContractState, passenger: str) -> List[InsurancePolicy]:
        return [p for p in state.policies.values() if p.passenger == passenger]

    def withdraw_insurance_claim(self, state: ContractState, passenger: str, transfer: Transfer) -> int:
        """
        Pay out a passenger's entitlement.

        The balance is zeroed before `transfer` runs, and a second withdrawal
        for the same passenger is refused until the transfer returns.

        Args:
            state: Contract storage
            passenger: Passenger to pay
            transfer: Callback moving the wei to the passenger

        Returns:
            Amount withdrawn in wei

        Raises:
            ReentrancyRejected: If a withdrawal for this passenger is in flight
            NoBalance: If there is nothing to withdraw
            InsufficientFunds: If the contract cannot cover the payout
        """
        if passenger in state.withdrawals_in_flight:
            raise ReentrancyRejected(f"Withdrawal already in progress for {passenger}", {"passenger": passenger})

        amount = state.entitlements.get(passenger, 0)
        if amount <= 0:
            raise NoBalance(f"No credit to withdraw for {passenger}", {"passenger": passenger})
        if state.balance < amount:
            raise InsufficientFunds(
                "Contract balance cannot cover the payout",
                {"balance": state.balance, "amount": amount},
            )

        state.withdrawals_in_flight.append(passenger)
        state.entitlements[passenger] = 0
        state.balance -= amount
        state.disbursed[passenger] = state.disbursed.get(passenger, 0) + amount
        try:
            transfer(passenger, amount)
        finally:
            state.withdrawals_in_flight.remove(passenger)

        logger.info(f"Withdrawn {format_ether(amount)} to {passenger}")
        return amount
