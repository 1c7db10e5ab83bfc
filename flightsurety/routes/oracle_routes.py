"""Routes for oracle registration, status requests and responses."""

import logging
from fastapi import APIRouter, Depends, HTTPException

from ..config import STATUS_CODES
from ..schemas.common import PayableRequest
from ..schemas.oracle_schemas import (
    FeeResponse,
    FetchFlightStatusRequest,
    FlightStatusRequestResponse,
    FlightStatusResponse,
    IndexesResponse,
    OracleResponse,
    SubmissionResponse,
    SubmitOracleResponseRequest,
)
from ..services.contract_service import ContractService
from ..services.singleton import get_contract_service
from ..utils import format_ether

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["oracles"])


@router.get("/oracles/fee", response_model=FeeResponse)
def get_registration_fee(service: ContractService = Depends(get_contract_service)):
    fee = service.app.oracle_registration_fee()
    return FeeResponse(fee=fee, fee_formatted=format_ether(fee))


@router.post("/oracles", response_model=OracleResponse)
def register_oracle(request: PayableRequest, service: ContractService = Depends(get_contract_service)):
    oracle = service.app.register_oracle(request.sender, request.value)
    return OracleResponse(address=oracle.address, indexes=oracle.indexes)


@router.get("/oracles/{address}/indexes", response_model=IndexesResponse)
def get_my_indexes(address: str, service: ContractService = Depends(get_contract_service)):
    return IndexesResponse(indexes=service.app.get_my_indexes(address))


@router.post("/oracles/responses", response_model=SubmissionResponse)
def submit_oracle_response(
    request: SubmitOracleResponseRequest,
    service: ContractService = Depends(get_contract_service),
):
    """
    Submit an oracle's flight status report.

    Unmatched or late reports come back as IGNORED rather than an error.
    """
    outcome = service.app.submit_oracle_response(
        request.index,
        request.airline,
        request.flight,
        request.timestamp,
        request.status_code,
        request.sender,
    )
    return SubmissionResponse(outcome=outcome)


@router.post("/flights/status/fetch", response_model=FlightStatusRequestResponse)
def fetch_flight_status(
    request: FetchFlightStatusRequest,
    service: ContractService = Depends(get_contract_service),
):
    """
    Ask oracles for a flight's status.

    Returns immediately; poll /api/flights/status or /api/events for the result.
    """
    status_request = service.app.fetch_flight_status(request.airline, request.flight, request.timestamp, request.sender)
    return FlightStatusRequestResponse(
        index=status_request.index,
        airline=status_request.airline,
        flight=status_request.flight,
        timestamp=status_request.timestamp,
        is_open=status_request.is_open,
        final_status=status_request.final_status,
    )


@router.get("/flights/status", response_model=FlightStatusResponse)
def get_flight_status(
    airline: str,
    flight: str,
    timestamp: int,
    service: ContractService = Depends(get_contract_service),
):
    status = service.app.get_flight_status(airline, flight, timestamp)
    if status is None:
        raise HTTPException(status_code=404, detail=f"No status for flight {flight}@{timestamp} yet")
    return FlightStatusResponse(
        airline=status.airline,
        flight=status.flight,
        timestamp=status.timestamp,
        status_code=status.status_code,
        status=STATUS_CODES[status.status_code],
        updated_at=status.updated_at,
    )
