"""Contract models package."""

from .airline import Airline, AirlineState
from .policy import InsurancePolicy, policy_key
from .oracle import Oracle, FlightStatusRequest, FlightStatus, request_key, flight_key
from .events import ContractEvent, ORACLE_REQUEST, ORACLE_REPORT, FLIGHT_STATUS_INFO
from .contract_state import ContractState

__all__ = [
    "Airline",
    "AirlineState",
    "InsurancePolicy",
    "policy_key",
    "Oracle",
    "FlightStatusRequest",
    "FlightStatus",
    "request_key",
    "flight_key",
    "ContractEvent",
    "ORACLE_REQUEST",
    "ORACLE_REPORT",
    "FLIGHT_STATUS_INFO",
    "ContractState",
]
