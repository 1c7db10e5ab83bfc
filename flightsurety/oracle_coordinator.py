"""Oracle registration, flight status requests and quorum resolution."""

import hashlib
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .config import (
    MIN_ORACLE_RESPONSES,
    ORACLE_INDEX_COUNT,
    ORACLE_INDEX_SPACE,
    ORACLE_NONCE_RESET,
    ORACLE_REGISTRATION_FEE,
    STATUS_CODE_LATE_AIRLINE,
    STATUS_CODES,
)
from .errors import (
    AlreadyRegistered,
    InsufficientFee,
    InvalidState,
    StaleOrUnmatchedResponse,
    Unauthorized,
)
from .models.contract_state import ContractState
from .models.events import FLIGHT_STATUS_INFO, ORACLE_REPORT, ORACLE_REQUEST
from .models.oracle import FlightStatus, FlightStatusRequest, Oracle, flight_key, request_key
from .policy_ledger import PolicyLedger

logger = logging.getLogger(__name__)

Emit = Callable[[str, Dict[str, Any]], None]


class SubmissionOutcome(str, Enum):
    """What happened to an oracle response."""

    IGNORED = "IGNORED"
    ACCEPTED = "ACCEPTED"
    RESOLVED = "RESOLVED"


class OracleCoordinator:
    """Assigns oracle indexes and reduces oracle responses to a flight status."""

    def __init__(
        self,
        ledger: PolicyLedger,
        min_responses: int = MIN_ORACLE_RESPONSES,
        registration_fee: int = ORACLE_REGISTRATION_FEE,
        seed: str = "",
    ):
        """
        Initialize coordinator.

        Args:
            ledger: Policy ledger credited when a flight resolves late due to the airline
            min_responses: Matching responses needed to resolve a request
            registration_fee: Oracle registration fee in wei
            seed: Extra entropy mixed into index generation
        """
        self.ledger = ledger
        self.min_responses = min_responses
        self.registration_fee = registration_fee
        self.seed = seed

    # ------------------------------------------------------------------
    # Oracle registration
    # ------------------------------------------------------------------

    def register_oracle(self, state: ContractState, caller: str, value: int) -> Oracle:
        """
        Register the caller as an oracle and assign its index triple.

        Raises:
            AlreadyRegistered: If the caller is already an oracle
            InsufficientFee: If `value` is below the registration fee
        """
        if caller in state.oracles:
            raise AlreadyRegistered(f"Oracle {caller} is already registered", {"oracle": caller})
        if value < self.registration_fee:
            raise InsufficientFee(
                "Registration fee is required",
                {"value": value, "fee": self.registration_fee},
            )

        oracle = Oracle(address=caller, indexes=self._generate_indexes(state, caller), fee_paid=value)
        state.oracles[caller] = oracle
        state.balance += value
        logger.info(f"Oracle {caller} registered with indexes {oracle.indexes}")
        return oracle

    def get_my_indexes(self, state: ContractState, caller: str) -> List[int]:
        oracle = state.oracles.get(caller)
        if oracle is None:
            raise Unauthorized("Not registered as an oracle", {"caller": caller})
        return list(oracle.indexes)

    def _generate_indexes(self, state: ContractState, account: str) -> List[int]:
        indexes: List[int] = []
        while len(indexes) < ORACLE_INDEX_COUNT:
            candidate = self._random_index(state, account)
            attempts = 1
            while candidate in indexes and attempts < ORACLE_NONCE_RESET:
                candidate = self._random_index(state, account)
                attempts += 1
            if candidate in indexes:
                candidate = min(i for i in range(ORACLE_INDEX_SPACE) if i not in indexes)
            indexes.append(candidate)
        return indexes

    def _random_index(self, state: ContractState, account: str) -> int:
        digest = hashlib.sha3_256(f"{self.seed}:{state.nonce}:{account}".encode("utf-8")).digest()
        state.nonce = (state.nonce + 1) % ORACLE_NONCE_RESET
        return int.from_bytes(digest, "big") % ORACLE_INDEX_SPACE

    # ------------------------------------------------------------------
    # Requests and responses
    # ------------------------------------------------------------------

    def fetch_flight_status(
        self,
        state: ContractState,
        caller: str,
        airline: str,
        flight: str,
        timestamp: int,
        now: float,
        emit: Emit,
    ) -> FlightStatusRequest:
        """
        Open a status request at a random index and announce it to oracles.

        Resolution happens later through `submit_oracle_response`. An open
        request at the drawn index is re-announced as is; an expired one is
        replaced by a fresh request.

        Raises:
            InvalidState: If the flight is malformed or already has a final status
        """
        if not flight or not flight.strip():
            raise InvalidState("Flight identifier is required")
        if flight_key(airline, flight, timestamp) in state.flight_statuses:
            raise InvalidState(
                f"Flight {flight}@{timestamp} already has a final status",
                {"airline": airline, "flight": flight, "timestamp": timestamp},
            )

        index = self._random_index(state, caller)
        key = request_key(index, airline, flight, timestamp)
        request = state.requests.get(key)
        if request is None or request.expired:
            request = FlightStatusRequest(
                index=index,
                airline=airline,
                flight=flight,
                timestamp=timestamp,
                requester=caller,
                requested_at=now,
            )
            state.requests[key] = request
            logger.info(f"Flight status requested for {flight}@{timestamp} at index {index}")

        emit(ORACLE_REQUEST, {
            "index": index,
            "airline": airline,
            "flight": flight,
            "timestamp": timestamp,
        })
        return request

    def submit_oracle_response(
        self,
        state: ContractState,
        caller: str,
        index: int,
        airline: str,
        flight: str,
        timestamp: int,
        status_code: int,
        now: float,
        emit: Emit,
    ) -> SubmissionOutcome:
        """
        Record one oracle's status report.

        Reports that match no open request assigned to the oracle are ignored
        rather than rejected. Once `min_responses` oracles agree on a code the
        request resolves, the flight status is stored and, for airline-caused
        delays, insurees are credited.

        Raises:
            InvalidState: If the status code is unknown
        """
        if status_code not in STATUS_CODES:
            raise InvalidState(f"Unknown status code {status_code}", {"status_code": status_code})

        try:
            request = self._match_request(state, caller, index, airline, flight, timestamp)
        except StaleOrUnmatchedResponse as e:
            logger.info(f"Ignoring oracle response from {caller}: {e.message}")
            return SubmissionOutcome.IGNORED

        request.responses.setdefault(status_code, []).append(caller)
        emit(ORACLE_REPORT, {
            "airline": airline,
            "flight": flight,
            "timestamp": timestamp,
            "status": status_code,
        })
        count = len(request.responses[status_code])
        logger.debug(f"Oracle {caller} reported {status_code} for {flight}@{timestamp} ({count}/{self.min_responses})")

        if count < self.min_responses:
            return SubmissionOutcome.ACCEPTED

        self._resolve(state, request, status_code, now, emit)
        return SubmissionOutcome.RESOLVED

    def _match_request(
        self,
        state: ContractState,
        caller: str,
        index: int,
        airline: str,
        flight: str,
        timestamp: int,
    ) -> FlightStatusRequest:
        oracle = state.oracles.get(caller)
        if oracle is None:
            raise StaleOrUnmatchedResponse("not a registered oracle")
        if index not in oracle.indexes:
            raise StaleOrUnmatchedResponse(f"index {index} is not assigned to this oracle")

        request = state.requests.get(request_key(index, airline, flight, timestamp))
        if request is None:
            raise StaleOrUnmatchedResponse("flight or timestamp do not match an oracle request")
        if not request.is_open:
            raise StaleOrUnmatchedResponse("request is already closed")
        if caller in request.responders():
            raise StaleOrUnmatchedResponse("oracle already responded to this request")
        if flight_key(airline, flight, timestamp) in state.flight_statuses:
            raise StaleOrUnmatchedResponse("flight status is already final")
        return request

    def _resolve(
        self,
        state: ContractState,
        request: FlightStatusRequest,
        status_code: int,
        now: float,
        emit: Emit,
    ) -> None:
        key = flight_key(request.airline, request.flight, request.timestamp)
        request.is_open = False
        request.final_status = status_code
        # Requests drawn at other indexes for the same flight can no longer resolve
        for other in state.requests.values():
            if other.is_open and flight_key(other.airline, other.flight, other.timestamp) == key:
                other.is_open = False
        state.flight_statuses[key] = FlightStatus(
            airline=request.airline,
            flight=request.flight,
            timestamp=request.timestamp,
            status_code=status_code,
            updated_at=now,
        )
        emit(FLIGHT_STATUS_INFO, {
            "airline": request.airline,
            "flight": request.flight,
            "timestamp": request.timestamp,
            "status": status_code,
        })
        logger.info(f"Flight {request.flight}@{request.timestamp} resolved as {STATUS_CODES[status_code]}")

        if status_code == STATUS_CODE_LATE_AIRLINE:
            self.ledger.credit_insurees(state, request.airline, request.flight, request.timestamp)

    def expire_requests(self, state: ContractState, now: float, ttl_seconds: float) -> int:
        """
        Close open requests older than `ttl_seconds`.

        Returns:
            Number of requests expired
        """
        expired = 0
        for request in state.requests.values():
            if request.is_open and now - request.requested_at >= ttl_seconds:
                request.is_open = False
                request.expired = True
                expired += 1
        if expired:
            logger.info(f"Expired {expired} unresolved flight status requests")
        return expired

    def get_flight_status(self, state: ContractState, airline: str, flight: str, timestamp: int) -> Optional[FlightStatus]:
        return state.flight_statuses.get(flight_key(airline, flight, timestamp))

    def open_requests(self, state: ContractState) -> List[FlightStatusRequest]:
        return [r for r in state.requests.values() if r.is_open]
