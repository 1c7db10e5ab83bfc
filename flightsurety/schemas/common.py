"""Shared schemas for contract calls."""

from pydantic import BaseModel, Field


class TransactionRequest(BaseModel):
    """Base request for a call sent from an account."""

    sender: str = Field(..., description="Account sending the transaction")


class PayableRequest(TransactionRequest):
    """Request carrying a payment."""

    value: int = Field(..., ge=0, description="Payment in wei")


class BoolResponse(BaseModel):
    result: bool


class MessageResponse(BaseModel):
    message: str
