"""Schemas for insurance endpoints."""

from pydantic import BaseModel, Field

from .common import PayableRequest


class BuyPolicyRequest(PayableRequest):
    airline: str
    flight: str = Field(..., min_length=1)
    timestamp: int = Field(..., ge=0, description="Scheduled flight time (unix seconds)")


class PolicyResponse(BaseModel):
    passenger: str
    airline: str
    flight: str
    timestamp: int
    premium: int
    payout: int
    credited: bool


class EntitlementResponse(BaseModel):
    passenger: str
    amount: int
    amount_formatted: str


class WithdrawResponse(BaseModel):
    passenger: str
    amount: int
    amount_formatted: str
