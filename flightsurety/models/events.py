"""Contract event model."""

from typing import Any, Dict
from pydantic import BaseModel

ORACLE_REQUEST = "OracleRequest"
ORACLE_REPORT = "OracleReport"
FLIGHT_STATUS_INFO = "FlightStatusInfo"


class ContractEvent(BaseModel):
    """An event emitted by a committed contract call."""

    sequence: int
    name: str
    args: Dict[str, Any]
    emitted_at: float
