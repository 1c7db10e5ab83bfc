"""Schemas for operational status, accounts and events endpoints."""

from pydantic import BaseModel, Field
from typing import List

from ..models.events import ContractEvent
from .common import TransactionRequest


class SetOperationalStatusRequest(TransactionRequest):
    mode: bool = Field(..., description="True to resume, False to pause")


class AuthorizeCallerRequest(TransactionRequest):
    address: str


class OperationalStatusResponse(BaseModel):
    operational: bool


class ServiceStatusResponse(BaseModel):
    """Response model for deployment status."""

    network: str
    data_address: str
    app_address: str
    operational: bool
    airlines: int
    oracles: int
    open_requests: int
    events: int
    balance: int
    balance_formatted: str
    running: bool


class AccountsResponse(BaseModel):
    owner: str
    airlines: List[str]
    passengers: List[str]
    oracles: List[str]


class EventsResponse(BaseModel):
    """Events after a sequence number, for polling clients."""

    events: List[ContractEvent]
    last_sequence: int
