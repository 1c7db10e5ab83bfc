"""Process-wide ContractService shared by the API routes."""

from typing import Optional

from .contract_service import ContractService

_contract_service: Optional[ContractService] = None


def get_contract_service() -> ContractService:
    """
    FastAPI dependency returning the one deployed contract for this process.

    Deployment happens on first use with settings read from the environment.
    Tests replace it through `app.dependency_overrides`.
    """
    global _contract_service
    if _contract_service is None:
        _contract_service = ContractService()
    return _contract_service
