"""Airline model."""

from enum import Enum
from typing import List
from pydantic import BaseModel, Field

from ..config import AIRLINE_FUNDING_MINIMUM


class AirlineState(str, Enum):
    """Lifecycle stage of an airline."""

    PROPOSED = "PROPOSED"  # Awaiting consensus votes
    REGISTERED = "REGISTERED"  # Accepted, not yet funded
    FUNDED = "FUNDED"  # Funded, still awaiting consensus
    APPROVED = "APPROVED"


class Airline(BaseModel):
    """Represents an airline entry in the registry."""

    address: str
    name: str
    accepted: bool = False  # Passed auto-approval or consensus
    funding: int = 0  # Cumulative contribution in wei
    voters: List[str] = Field(default_factory=list)
    registered_by: str

    @property
    def is_funded(self) -> bool:
        return self.funding >= AIRLINE_FUNDING_MINIMUM

    @property
    def is_approved(self) -> bool:
        return self.accepted and self.is_funded

    @property
    def state(self) -> AirlineState:
        if self.is_approved:
            return AirlineState.APPROVED
        if self.is_funded:
            return AirlineState.FUNDED
        if self.accepted:
            return AirlineState.REGISTERED
        return AirlineState.PROPOSED

    class Config:
        json_schema_extra = {
            "example": {
                "address": "0xf17f52151ebef6c7334fad080c5704d77216b732",
                "name": "Second Airline",
                "accepted": True,
                "funding": 10000000000000000000,
                "voters": [],
                "registered_by": "0x627306090abab3a6e1400e9345bc60c78a8bef57",
            }
        }
