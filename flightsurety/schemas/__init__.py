"""API schemas for request/response models."""

from .common import TransactionRequest, PayableRequest, BoolResponse, MessageResponse
from .operations_schemas import (
    SetOperationalStatusRequest,
    AuthorizeCallerRequest,
    OperationalStatusResponse,
    ServiceStatusResponse,
    AccountsResponse,
    EventsResponse,
)
from .airline_schemas import RegisterAirlineRequest, VoteRequest, AirlineResponse
from .insurance_schemas import BuyPolicyRequest, PolicyResponse, EntitlementResponse, WithdrawResponse
from .oracle_schemas import (
    OracleResponse,
    IndexesResponse,
    FeeResponse,
    FetchFlightStatusRequest,
    FlightStatusRequestResponse,
    SubmitOracleResponseRequest,
    SubmissionResponse,
    FlightStatusResponse,
)

__all__ = [
    "TransactionRequest",
    "PayableRequest",
    "BoolResponse",
    "MessageResponse",
    "SetOperationalStatusRequest",
    "AuthorizeCallerRequest",
    "OperationalStatusResponse",
    "ServiceStatusResponse",
    "AccountsResponse",
    "EventsResponse",
    "RegisterAirlineRequest",
    "VoteRequest",
    "AirlineResponse",
    "BuyPolicyRequest",
    "PolicyResponse",
    "EntitlementResponse",
    "WithdrawResponse",
    "OracleResponse",
    "IndexesResponse",
    "FeeResponse",
    "FetchFlightStatusRequest",
    "FlightStatusRequestResponse",
    "SubmitOracleResponseRequest",
    "SubmissionResponse",
    "FlightStatusResponse",
]
