"""Schemas for oracle and flight status endpoints."""

from pydantic import BaseModel, Field
from typing import List, Optional

from ..oracle_coordinator import SubmissionOutcome
from .common import TransactionRequest


class OracleResponse(BaseModel):
    address: str
    indexes: List[int]


class IndexesResponse(BaseModel):
    indexes: List[int]


class FeeResponse(BaseModel):
    fee: int
    fee_formatted: str


class FetchFlightStatusRequest(TransactionRequest):
    airline: str
    flight: str = Field(..., min_length=1)
    timestamp: int = Field(..., ge=0)


class FlightStatusRequestResponse(BaseModel):
    """The request oracles were asked to answer."""

    index: int
    airline: str
    flight: str
    timestamp: int
    is_open: bool
    final_status: Optional[int] = None


class SubmitOracleResponseRequest(TransactionRequest):
    index: int = Field(..., ge=0, le=255)
    airline: str
    flight: str
    timestamp: int = Field(..., ge=0)
    status_code: int = Field(..., ge=0, le=255)


class SubmissionResponse(BaseModel):
    outcome: SubmissionOutcome


class FlightStatusResponse(BaseModel):
    airline: str
    flight: str
    timestamp: int
    status_code: int
    status: str
    updated_at: float
