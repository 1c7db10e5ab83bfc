"""Insurance policy model."""

from pydantic import BaseModel

from .keys import storage_key


def policy_key(passenger: str, airline: str, flight: str, timestamp: int) -> str:
    return storage_key("policy", passenger, airline, flight, timestamp)


class InsurancePolicy(BaseModel):
    """A passenger's insurance on one flight."""

    passenger: str
    airline: str
    flight: str
    timestamp: int
    premium: int  # wei
    payout: int = 0  # wei credited once the flight resolves late
    credited: bool = False

    @property
    def key(self) -> str:
        return policy_key(self.passenger, self.airline, self.flight, self.timestamp)

    class Config:
        json_schema_extra = {
            "example": {
                "passenger": "0x0d1d4e623d10f9fba5db95830f7d3839406c6af2",
                "airline": "0x627306090abab3a6e1400e9345bc60c78a8bef57",
                "flight": "ND1309",
                "timestamp": 1630021956,
                "premium": 800000000000000000,
                "payout": 0,
                "credited": False,
            }
        }
