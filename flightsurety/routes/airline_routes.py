"""Routes for airline registration, funding and votes."""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException

from ..schemas.airline_schemas import AirlineResponse, RegisterAirlineRequest, VoteRequest
from ..schemas.common import BoolResponse, PayableRequest
from ..services.contract_service import ContractService
from ..services.singleton import get_contract_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/airlines", tags=["airlines"])


@router.post("", response_model=AirlineResponse)
def register_airline(
    request: RegisterAirlineRequest,
    service: ContractService = Depends(get_contract_service),
):
    """
    Register an airline, sponsored by the sending airline.

    Returns:
        The new airline entry (approved only once accepted and funded)
    """
    airline = service.app.register_airline(request.address, request.name, request.sender)
    return AirlineResponse.from_airline(airline)


@router.post("/fund", response_model=AirlineResponse)
def fund_airline(request: PayableRequest, service: ContractService = Depends(get_contract_service)):
    airline = service.app.fund_airline(request.sender, request.value)
    return AirlineResponse.from_airline(airline)


@router.post("/vote", response_model=AirlineResponse)
def vote_for_airline(request: VoteRequest, service: ContractService = Depends(get_contract_service)):
    airline = service.app.vote_for_airline(request.address, request.sender)
    return AirlineResponse.from_airline(airline)


@router.get("", response_model=List[AirlineResponse])
def list_airlines(service: ContractService = Depends(get_contract_service)):
    return [AirlineResponse.from_airline(a) for a in service.app.list_airlines()]


@router.get("/{address}", response_model=AirlineResponse)
def get_airline(address: str, service: ContractService = Depends(get_contract_service)):
    airline = service.app.get_airline(address)
    if airline is None:
        raise HTTPException(status_code=404, detail=f"Airline {address} not found")
    return AirlineResponse.from_airline(airline)


@router.get("/{address}/registered", response_model=BoolResponse)
def is_airline_registered(address: str, service: ContractService = Depends(get_contract_service)):
    return BoolResponse(result=service.app.is_airline_registered(address))


@router.get("/{address}/funded", response_model=BoolResponse)
def is_airline_funded(address: str, service: ContractService = Depends(get_contract_service)):
    return BoolResponse(result=service.app.is_airline_funded(address))


@router.get("/{address}/approved", response_model=BoolResponse)
def is_airline_approved(address: str, service: ContractService = Depends(get_contract_service)):
    return BoolResponse(result=service.app.is_airline_approved(address))
