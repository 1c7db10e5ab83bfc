"""Routes for operational status, deployment info and events."""

import logging
from typing import Optional
from fastapi import APIRouter, Depends

from ..deployment import interface_descriptor
from ..schemas.common import MessageResponse
from ..schemas.operations_schemas import (
    AccountsResponse,
    AuthorizeCallerRequest,
    EventsResponse,
    OperationalStatusResponse,
    ServiceStatusResponse,
    SetOperationalStatusRequest,
)
from ..services.contract_service import ContractService
from ..services.singleton import get_contract_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["operations"])


@router.get("", response_model=MessageResponse)
async def api_root():
    """Health check for the dapp."""
    return MessageResponse(message="An API for use with your Dapp!")


@router.get("/operational", response_model=OperationalStatusResponse)
def get_operational_status(service: ContractService = Depends(get_contract_service)):
    return OperationalStatusResponse(operational=service.app.is_operational())


@router.post("/operational", response_model=OperationalStatusResponse)
def set_operational_status(
    request: SetOperationalStatusRequest,
    service: ContractService = Depends(get_contract_service),
):
    """
    Pause or resume the contract (owner only).

    Args:
        request: New mode and sending account

    Returns:
        Operational status after the call
    """
    service.app.set_operational_status(request.mode, request.sender)
    return OperationalStatusResponse(operational=service.app.is_operational())


@router.post("/authorize", response_model=MessageResponse)
def authorize_caller(
    request: AuthorizeCallerRequest,
    service: ContractService = Depends(get_contract_service),
):
    service.app.authorize_caller(request.address, request.sender)
    return MessageResponse(message=f"Caller {request.address} authorized")


@router.get("/status", response_model=ServiceStatusResponse)
def get_status(service: ContractService = Depends(get_contract_service)):
    """
    Get deployment status.

    Returns:
        Addresses, counters and contract balance
    """
    return ServiceStatusResponse(**service.get_status())


@router.get("/accounts", response_model=AccountsResponse)
def get_accounts(service: ContractService = Depends(get_contract_service)):
    return AccountsResponse(**service.get_accounts())


@router.get("/interface")
async def get_interface():
    """JSON interface descriptor of the app contract."""
    return interface_descriptor()


@router.get("/events", response_model=EventsResponse)
def get_events(
    since: int = 0,
    name: Optional[str] = None,
    service: ContractService = Depends(get_contract_service),
):
    """
    Poll contract events.

    Args:
        since: Last sequence number already seen
        name: Optional event name filter

    Returns:
        Events after `since` and the latest sequence number
    """
    events = service.app.get_events(since=since, name=name)
    return EventsResponse(events=events, last_sequence=len(service.app.events))
