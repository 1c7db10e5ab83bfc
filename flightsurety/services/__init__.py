"""Services package."""

from .contract_service import ContractService
from .oracle_simulator import OracleSimulator

__all__ = ["ContractService", "OracleSimulator"]
