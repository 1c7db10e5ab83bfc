"""Operational gate and caller authorization."""

import logging

from .errors import ContractPaused, Unauthorized
from .models.contract_state import ContractState

logger = logging.getLogger(__name__)


class OperationalGate:
    """Owner-controlled pause flag and the list of callers allowed to mutate data."""

    def is_operational(self, state: ContractState) -> bool:
        return state.operational

    def require_operational(self, state: ContractState) -> None:
        """
        Block a mutating call while the contract is paused.

        Raises:
            ContractPaused: If the operational flag is clear
        """
        if not state.operational:
            raise ContractPaused("Contract is currently not operational")

    def require_owner(self, state: ContractState, caller: str) -> None:
        if caller != state.owner:
            raise Unauthorized("Caller is not contract owner", {"caller": caller})

    def set_operational_status(self, state: ContractState, caller: str, mode: bool) -> None:
        """
        Pause or resume the contract.

        Not gated by the flag itself, so a paused contract can be resumed.

        Args:
            state: Contract storage
            caller: Account sending the call
            mode: New operational flag
        """
        self.require_owner(state, caller)
        if state.operational == mode:
            logger.debug(f"Operational status already {mode}")
            return
        state.operational = mode
        logger.info(f"Operational status set to {mode} by {caller}")

    def authorize_caller(self, state: ContractState, caller: str, address: str) -> None:
        self.require_owner(state, caller)
        if address not in state.authorized_callers:
            state.authorized_callers.append(address)
            logger.info(f"Authorized caller {address}")

    def deauthorize_caller(self, state: ContractState, caller: str, address: str) -> None:
        self.require_owner(state, caller)
        if address in state.authorized_callers:
            state.authorized_callers.remove(address)
            logger.info(f"Deauthorized caller {address}")

    def require_authorized(self, state: ContractState, address: str) -> None:
        """
        Raises:
            Unauthorized: If `address` may not write to contract storage
        """
        if address not in state.authorized_callers:
            raise Unauthorized("Caller is not authorized to modify contract data", {"caller": address})
