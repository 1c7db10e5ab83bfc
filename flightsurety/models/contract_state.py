"""Contract storage model."""

from typing import Dict, List
from pydantic import BaseModel, Field

from .airline import Airline
from .policy import InsurancePolicy
from .oracle import Oracle, FlightStatusRequest, FlightStatus


class ContractState(BaseModel):
    """
    All persistent contract storage.

    Entries are only ever added or transitioned; nothing is deleted except
    entitlement balances, which are zeroed on withdrawal.
    """

    owner: str
    operational: bool = True
    authorized_callers: List[str] = Field(default_factory=list)

    # Registry
    airlines: Dict[str, Airline] = Field(default_factory=dict)  # address -> airline

    # Policy ledger
    policies: Dict[str, InsurancePolicy] = Field(default_factory=dict)  # policy key -> policy
    flight_policies: Dict[str, List[str]] = Field(default_factory=dict)  # flight key -> policy keys
    entitlements: Dict[str, int] = Field(default_factory=dict)  # passenger -> wei
    withdrawals_in_flight: List[str] = Field(default_factory=list)
    disbursed: Dict[str, int] = Field(default_factory=dict)  # passenger -> wei paid out

    # Oracles
    oracles: Dict[str, Oracle] = Field(default_factory=dict)
    requests: Dict[str, FlightStatusRequest] = Field(default_factory=dict)
    flight_statuses: Dict[str, FlightStatus] = Field(default_factory=dict)
    nonce: int = 0

    balance: int = 0  # wei held by the contract

    @property
    def registered_count(self) -> int:
        return len(self.airlines)
