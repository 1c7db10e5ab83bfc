"""Schemas for airline endpoints."""

from pydantic import BaseModel, Field
from typing import List

from ..models.airline import Airline, AirlineState
from .common import TransactionRequest


class RegisterAirlineRequest(TransactionRequest):
    address: str = Field(..., description="Address of the airline to register")
    name: str = Field(..., min_length=1)


class VoteRequest(TransactionRequest):
    address: str = Field(..., description="Address of the proposed airline")


class AirlineResponse(BaseModel):
    """Response model for an airline entry."""

    address: str
    name: str
    state: AirlineState
    registered: bool = True
    funded: bool
    approved: bool
    funding: int
    votes: List[str]

    @classmethod
    def from_airline(cls, airline: Airline) -> "AirlineResponse":
        return cls(
            address=airline.address,
            name=airline.name,
            state=airline.state,
            funded=airline.is_funded,
            approved=airline.is_approved,
            funding=airline.funding,
            votes=list(airline.voters),
        )
