"""Exception taxonomy for contract calls."""

from typing import Dict, Optional


class FlightSuretyError(Exception):
    """Base class for failed contract calls."""

    code = "CONTRACT_ERROR"

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict:
        return {"code": self.code, "message": self.message, "details": self.details}


class Unauthorized(FlightSuretyError):
    """Caller lacks the role or state the call requires."""

    code = "UNAUTHORIZED"


class InvalidState(FlightSuretyError):
    """Operation attempted outside the required lifecycle stage."""

    code = "INVALID_STATE"


class InvalidAirline(InvalidState):
    """Airline cannot underwrite insurance (not approved)."""

    code = "INVALID_AIRLINE"


class InvalidAddress(FlightSuretyError):
    """Malformed account address."""

    code = "INVALID_ADDRESS"


class InsufficientFunds(FlightSuretyError):
    """Payment below the required threshold."""

    code = "INSUFFICIENT_FUNDS"


class InsufficientFee(InsufficientFunds):
    """Oracle registration fee not covered."""

    code = "INSUFFICIENT_FEE"


class AlreadyExists(FlightSuretyError):
    """Entry for this key already exists."""

    code = "ALREADY_EXISTS"


class AlreadyRegistered(AlreadyExists):
    code = "ALREADY_REGISTERED"


class DuplicateVote(FlightSuretyError):
    code = "DUPLICATE_VOTE"


class ContractPaused(FlightSuretyError):
    """Operational gate is closed."""

    code = "CONTRACT_PAUSED"


class NoBalance(FlightSuretyError):
    code = "NO_BALANCE"


class ReentrancyRejected(FlightSuretyError):
    """A withdrawal for the same passenger is already in flight."""

    code = "REENTRANCY_REJECTED"


class StaleOrUnmatchedResponse(FlightSuretyError):
    """
    Oracle response that cannot be applied to any open request.

    Never surfaces to callers: the coordinator logs and ignores it so other
    oracles keep submitting.
    """

    code = "STALE_OR_UNMATCHED_RESPONSE"
