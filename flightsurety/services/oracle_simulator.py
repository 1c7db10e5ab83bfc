"""Simulated oracle pool answering flight status requests with a fixed code."""

import logging
from typing import Callable, Dict, List, Optional

from ..config import STATUS_CODE_LATE_AIRLINE
from ..contract import FlightSuretyApp
from ..errors import AlreadyRegistered, FlightSuretyError
from ..models.events import ORACLE_REQUEST, ContractEvent
from ..oracle_coordinator import SubmissionOutcome

logger = logging.getLogger(__name__)


class OracleSimulator:
    """Registers a fixed set of oracle accounts and auto-responds to OracleRequest events."""

    def __init__(
        self,
        app: FlightSuretyApp,
        accounts: List[str],
        status_code: int = STATUS_CODE_LATE_AIRLINE,
    ):
        """
        Initialize simulator.

        Args:
            app: Contract to register with and respond to
            accounts: Oracle accounts (one oracle each)
            status_code: Status every oracle reports
        """
        self.app = app
        self.accounts = list(accounts)
        self.status_code = status_code
        self.indexes: Dict[str, List[int]] = {}
        self.responses_submitted = 0
        self._unsubscribe: Optional[Callable[[], None]] = None

    def register_oracles(self) -> Dict[str, List[int]]:
        """
        Register every account as an oracle, paying the registration fee.

        Accounts that are already oracles keep their indexes.

        Returns:
            Mapping of account to assigned indexes
        """
        fee = self.app.oracle_registration_fee()
        for account in self.accounts:
            try:
                self.app.register_oracle(account, fee)
            except AlreadyRegistered:
                logger.debug(f"Oracle {account} already registered")
            self.indexes[account] = self.app.get_my_indexes(account)
            logger.debug(f"Oracle indexes: {self.indexes[account]} for account: {account}")

        logger.info(f"[{len(self.indexes)}] Oracles registered")
        return dict(self.indexes)

    def start(self) -> None:
        """Listen for OracleRequest events."""
        if self._unsubscribe is None:
            self._unsubscribe = self.app.subscribe(ORACLE_REQUEST, self.on_oracle_request)
            logger.info("Oracle simulator listening for requests")

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
            logger.info("Oracle simulator stopped")

    def on_oracle_request(self, event: ContractEvent) -> None:
        """Submit a response from every oracle assigned the requested index."""
        args = event.args
        index = args["index"]
        for account, indexes in self.indexes.items():
            if index not in indexes:
                continue

            logger.info(f"Submitting oracle response for flight {args['flight']} at index {index} from {account}")
            try:
                outcome = self.app.submit_oracle_response(
                    index, args["airline"], args["flight"], args["timestamp"], self.status_code, account
                )
            except FlightSuretyError as e:
                logger.warning(f"Oracle {account} response rejected: {e.message}")
                continue

            self.responses_submitted += 1
            if outcome == SubmissionOutcome.RESOLVED:
                logger.info(f"Flight {args['flight']} resolved with status {self.status_code}")
