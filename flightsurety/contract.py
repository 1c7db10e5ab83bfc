"""FlightSurety contract: the transactional call surface over contract storage."""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .config import AIRLINE_CONSENSUS_THRESHOLD, MIN_ORACLE_RESPONSES
from .consensus import ConsensusVoter
from .event_bus import EventBus, Handler
from .gate import OperationalGate
from .models.airline import Airline
from .models.contract_state import ContractState
from .models.events import ContractEvent
from .models.oracle import FlightStatus, FlightStatusRequest, Oracle
from .models.policy import InsurancePolicy
from .oracle_coordinator import OracleCoordinator, SubmissionOutcome
from .policy_ledger import PolicyLedger, Transfer
from .registry import AirlineRegistry
from .utils import normalize_address

logger = logging.getLogger(__name__)


def _record_transfer(passenger: str, amount: int) -> None:
    logger.debug(f"Transfer of {amount} wei to {passenger}")


class FlightSuretyApp:
    """
    Business rules over a shared `ContractState`.

    Every mutating call is serialized and atomic: it runs under one lock,
    the outermost call restores the storage snapshot on any error, and
    events are only published once the call has committed.
    """

    def __init__(
        self,
        state: ContractState,
        address: str,
        bus: Optional[EventBus] = None,
        clock: Callable[[], float] = time.time,
        transfer: Transfer = _record_transfer,
        request_ttl: Optional[float] = None,
        consensus_threshold: int = AIRLINE_CONSENSUS_THRESHOLD,
        min_responses: int = MIN_ORACLE_RESPONSES,
        seed: str = "",
    ):
        """
        Initialize the app contract.

        Args:
            state: Contract storage (the data contract)
            address: This app's address; must be authorized on `state` to write
            bus: Event bus committed events are published to
            clock: Source of the current unix time
            transfer: Callback paying wei out to an account
            request_ttl: Seconds before unresolved oracle requests expire (None keeps them)
            consensus_threshold: Airlines registered before votes are required
            min_responses: Matching oracle responses needed to resolve a request
            seed: Extra entropy for oracle index generation
        """
        self.state = state
        self.address = normalize_address(address)
        self.bus = bus or EventBus()
        self.clock = clock
        self.transfer = transfer
        self.request_ttl = request_ttl

        self.gate = OperationalGate()
        self.registry = AirlineRegistry(consensus_threshold)
        self.voter = ConsensusVoter()
        self.ledger = PolicyLedger()
        self.coordinator = OracleCoordinator(self.ledger, min_responses=min_responses, seed=seed)

        self.events: List[ContractEvent] = []
        self._pending: List[Tuple[str, Dict[str, Any]]] = []
        self._lock = threading.RLock()
        self._depth = 0

    # ------------------------------------------------------------------
    # Transactions and events
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self, mutating: bool = True, gated: bool = True) -> Iterator[ContractState]:
        """
        Run one contract call.

        Args:
            mutating: Whether the call writes storage
            gated: Whether a mutating call requires the operational flag and
                this app's authorization

        Yields:
            Contract storage to operate on
        """
        committed: List[ContractEvent] = []
        with self._lock:
            outermost = self._depth == 0
            snapshot = self.state.model_copy(deep=True) if outermost and mutating else None
            self._depth += 1
            try:
                if mutating and gated:
                    self.gate.require_operational(self.state)
                    self.gate.require_authorized(self.state, self.address)
                yield self.state
            except Exception:
                if snapshot is not None:
                    self.state = snapshot
                    self._pending = []
                raise
            finally:
                self._depth -= 1
            if outermost:
                committed = self._commit_events()

        for event in committed:
            self.bus.publish(event)

    def _emit(self, name: str, args: Dict[str, Any]) -> None:
        self._pending.append((name, args))

    def _commit_events(self) -> List[ContractEvent]:
        committed = []
        now = self.clock()
        for name, args in self._pending:
            event = ContractEvent(sequence=len(self.events) + 1, name=name, args=args, emitted_at=now)
            self.events.append(event)
            committed.append(event)
        self._pending = []
        return committed

    def subscribe(self, name: str, handler: Handler) -> Callable[[], None]:
        return self.bus.subscribe(name, handler)

    def get_events(self, since: int = 0, name: Optional[str] = None) -> List[ContractEvent]:
        """
        Events with a sequence number greater than `since`, oldest first.

        Args:
            since: Last sequence number the caller has seen
            name: Optional event name filter
        """
        with self._lock:
            events = self.events[since:] if since >= 0 else list(self.events)
        if name:
            events = [e for e in events if e.name == name]
        return events

    # ------------------------------------------------------------------
    # Operational gate
    # ------------------------------------------------------------------

    def is_operational(self) -> bool:
        with self.transaction(mutating=False) as state:
            return self.gate.is_operational(state)

    def set_operational_status(self, mode: bool, sender: str) -> None:
        sender = normalize_address(sender)
        with self.transaction(gated=False) as state:
            self.gate.set_operational_status(state, sender, mode)

    def authorize_caller(self, address: str, sender: str) -> None:
        address, sender = normalize_address(address), normalize_address(sender)
        with self.transaction(gated=False) as state:
            self.gate.require_operational(state)
            self.gate.authorize_caller(state, sender, address)

    def deauthorize_caller(self, address: str, sender: str) -> None:
        address, sender = normalize_address(address), normalize_address(sender)
        with self.transaction(gated=False) as state:
            self.gate.require_operational(state)
            self.gate.deauthorize_caller(state, sender, address)

    # ------------------------------------------------------------------
    # Airlines
    # ------------------------------------------------------------------

    def register_airline(self, address: str, name: str, sender: str) -> Airline:
        address, sender = normalize_address(address), normalize_address(sender)
        with self.transaction() as state:
            return self.registry.register_airline(state, sender, address, name).model_copy(deep=True)

    def fund_airline(self, sender: str, value: int) -> Airline:
        sender = normalize_address(sender)
        with self.transaction() as state:
            return self.registry.fund_airline(state, sender, value).model_copy(deep=True)

    def vote_for_airline(self, address: str, sender: str) -> Airline:
        address, sender = normalize_address(address), normalize_address(sender)
        with self.transaction() as state:
            return self.voter.vote_for_airline(state, sender, address).model_copy(deep=True)

    def required_votes(self) -> int:
        with self.transaction(mutating=False) as state:
            return self.voter.required_votes(state)

    def is_airline_registered(self, address: str) -> bool:
        address = normalize_address(address)
        with self.transaction(mutating=False) as state:
            return self.registry.is_registered(state, address)

    def is_airline_funded(self, address: str) -> bool:
        address = normalize_address(address)
        with self.transaction(mutating=False) as state:
            return self.registry.is_funded(state, address)

    def is_airline_approved(self, address: str) -> bool:
        address = normalize_address(address)
        with self.transaction(mutating=False) as state:
            return self.registry.is_approved(state, address)

    def get_airline(self, address: str) -> Optional[Airline]:
        address = normalize_address(address)
        with self.transaction(mutating=False) as state:
            airline = self.registry.get_airline(state, address)
            return airline.model_copy(deep=True) if airline else None

    def list_airlines(self) -> List[Airline]:
        with self.transaction(mutating=False) as state:
            return [a.model_copy(deep=True) for a in self.registry.list_airlines(state)]

    # ------------------------------------------------------------------
    # Insurance
    # ------------------------------------------------------------------

    def buy_insurance_policy(self, airline: str, flight: str, timestamp: int, sender: str, value: int) -> InsurancePolicy:
        airline, sender = normalize_address(airline), normalize_address(sender)
        with self.transaction() as state:
            policy = self.ledger.buy_insurance_policy(state, sender, airline, flight, timestamp, value)
            return policy.model_copy(deep=True)

    def get_policy(self, passenger: str, airline: str, flight: str, timestamp: int) -> Optional[InsurancePolicy]:
        passenger, airline = normalize_address(passenger), normalize_address(airline)
        with self.transaction(mutating=False) as state:
            policy = self.ledger.get_policy(state, passenger, airline, flight, timestamp)
            return policy.model_copy(deep=True) if policy else None

    def list_policies(self, passenger: str) -> List[InsurancePolicy]:
        passenger = normalize_address(passenger)
        with self.transaction(mutating=False) as state:
            return [p.model_copy(deep=True) for p in self.ledger.list_policies(state, passenger)]

    def get_passenger_entitlement(self, passenger: str) -> int:
        passenger = normalize_address(passenger)
        with self.transaction(mutating=False) as state:
            return self.ledger.get_passenger_entitlement(state, passenger)

    def withdraw_insurance_claim(self, passenger: str, sender: str) -> int:
        """Pay the passenger's entitlement to the passenger; any account may trigger it."""
        passenger, sender = normalize_address(passenger), normalize_address(sender)
        with self.transaction() as state:
            logger.debug(f"Withdrawal for {passenger} requested by {sender}")
            return self.ledger.withdraw_insurance_claim(state, passenger, self.transfer)

    # ------------------------------------------------------------------
    # Oracles
    # ------------------------------------------------------------------

    def oracle_registration_fee(self) -> int:
        return self.coordinator.registration_fee

    def register_oracle(self, sender: str, value: int) -> Oracle:
        sender = normalize_address(sender)
        with self.transaction() as state:
            return self.coordinator.register_oracle(state, sender, value).model_copy(deep=True)

    def get_my_indexes(self, sender: str) -> List[int]:
        sender = normalize_address(sender)
        with self.transaction(mutating=False) as state:
            return self.coordinator.get_my_indexes(state, sender)

    def fetch_flight_status(self, airline: str, flight: str, timestamp: int, sender: str) -> FlightStatusRequest:
        airline, sender = normalize_address(airline), normalize_address(sender)
        with self.transaction() as state:
            if self.request_ttl is not None:
                self.coordinator.expire_requests(state, self.clock(), self.request_ttl)
            request = self.coordinator.fetch_flight_status(
                state, sender, airline, flight, timestamp, self.clock(), self._emit
            )
            return request.model_copy(deep=True)

    def submit_oracle_response(
        self,
        index: int,
        airline: str,
        flight: str,
        timestamp: int,
        status_code: int,
        sender: str,
    ) -> SubmissionOutcome:
        airline, sender = normalize_address(airline), normalize_address(sender)
        with self.transaction() as state:
            if self.request_ttl is not None:
                self.coordinator.expire_requests(state, self.clock(), self.request_ttl)
            return self.coordinator.submit_oracle_response(
                state, sender, index, airline, flight, timestamp, status_code, self.clock(), self._emit
            )

    def expire_requests(self) -> int:
        """Close open oracle requests older than the configured TTL."""
        if self.request_ttl is None:
            return 0
        with self.transaction() as state:
            return self.coordinator.expire_requests(state, self.clock(), self.request_ttl)

    def get_flight_status(self, airline: str, flight: str, timestamp: int) -> Optional[FlightStatus]:
        airline = normalize_address(airline)
        with self.transaction(mutating=False) as state:
            status = self.coordinator.get_flight_status(state, airline, flight, timestamp)
            return status.model_copy(deep=True) if status else None

    def open_requests(self) -> List[FlightStatusRequest]:
        with self.transaction(mutating=False) as state:
            return [r.model_copy(deep=True) for r in self.coordinator.open_requests(state)]

    def balance(self) -> int:
        with self.transaction(mutating=False) as state:
            return state.balance
