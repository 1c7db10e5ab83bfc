"""Oracle and flight status request models."""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from .keys import storage_key


def request_key(index: int, airline: str, flight: str, timestamp: int) -> str:
    return storage_key("request", index, airline, flight, timestamp)


def flight_key(airline: str, flight: str, timestamp: int) -> str:
    return storage_key("flight", airline, flight, timestamp)


class Oracle(BaseModel):
    """A registered oracle and its assigned indexes."""

    address: str
    indexes: List[int]
    fee_paid: int


class FlightStatusRequest(BaseModel):
    """
    Responses collected for one (index, airline, flight, timestamp) request.

    `responses` maps a status code to the oracles that reported it.
    """

    index: int
    airline: str
    flight: str
    timestamp: int
    requester: str
    requested_at: float
    is_open: bool = True
    responses: Dict[int, List[str]] = Field(default_factory=dict)
    final_status: Optional[int] = None
    expired: bool = False

    @property
    def key(self) -> str:
        return request_key(self.index, self.airline, self.flight, self.timestamp)

    @property
    def resolved(self) -> bool:
        return self.final_status is not None

    def responders(self) -> List[str]:
        return [oracle for oracles in self.responses.values() for oracle in oracles]


class FlightStatus(BaseModel):
    """Final status of a flight once an oracle quorum agreed."""

    airline: str
    flight: str
    timestamp: int
    status_code: int
    updated_at: float
