"""Service owning the deployed contract, its accounts and the oracle simulation."""

import logging
from typing import Dict, List, Optional

from ..accounts import generate_accounts
from ..config import Config
from ..contract import FlightSuretyApp
from ..deployment import Deployment, deploy, write_network_config
from ..event_bus import WILDCARD, EventBus
from ..logger import EventJournal
from ..utils import format_ether
from .oracle_simulator import OracleSimulator

logger = logging.getLogger(__name__)

AIRLINE_ACCOUNT_COUNT = 5
PASSENGER_ACCOUNT_COUNT = 5


class ContractService:
    """Deploys the contract on a local account set and runs its background parts."""

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize contract service.

        Args:
            config: Service configuration (defaults from the environment)
        """
        self.config = config or Config()
        self.accounts = generate_accounts(self.config.ACCOUNT_COUNT, self.config.ACCOUNT_SEED)
        self.owner = self.accounts[0]
        self.bus = EventBus()
        self.deployment: Deployment = deploy(
            self.owner,
            first_airline_name=self.config.FIRST_AIRLINE_NAME,
            network=self.config.NETWORK,
            url=self.config.NODE_URL,
            bus=self.bus,
            request_ttl=self.config.REQUEST_TTL_SECONDS,
        )
        self.journal: Optional[EventJournal] = None
        self.oracle_simulator: Optional[OracleSimulator] = None
        self.running = False

    @property
    def app(self) -> FlightSuretyApp:
        return self.deployment.app

    @property
    def oracle_accounts(self) -> List[str]:
        offset = self.config.ORACLE_ACCOUNT_OFFSET
        return self.accounts[offset:offset + self.config.ORACLE_COUNT]

    def start(self) -> None:
        """Write the network config, start event delivery and the oracle simulation."""
        if self.running:
            raise ValueError("Contract service already running")

        if self.config.NETWORK_CONFIG_FILE:
            write_network_config(self.config.NETWORK_CONFIG_FILE, self.deployment)

        if self.config.EVENT_LOG_FILE:
            self.journal = EventJournal(self.config.EVENT_LOG_FILE)
            self.bus.subscribe(WILDCARD, self.journal.record)

        if self.config.ORACLE_SIMULATION_ENABLED:
            self.oracle_simulator = OracleSimulator(
                self.app, self.oracle_accounts, status_code=self.config.SIMULATED_STATUS_CODE
            )
            self.oracle_simulator.register_oracles()
            self.oracle_simulator.start()

        self.bus.start_background()
        self.running = True
        logger.info(f"Contract service started on {self.config.NETWORK} (owner {self.owner})")

    def stop(self) -> None:
        if self.oracle_simulator is not None:
            self.oracle_simulator.stop()
        self.bus.stop()
        if self.journal is not None:
            self.journal.close()
            self.journal = None
        self.running = False
        logger.info("Contract service stopped")

    def get_accounts(self) -> Dict:
        """
        Account roles used by the demo dapp.

        Returns:
            Owner, airline, passenger and oracle accounts
        """
        airlines = self.accounts[1:1 + AIRLINE_ACCOUNT_COUNT]
        passengers = self.accounts[1 + AIRLINE_ACCOUNT_COUNT:1 + AIRLINE_ACCOUNT_COUNT + PASSENGER_ACCOUNT_COUNT]
        return {
            "owner": self.owner,
            "airlines": airlines,
            "passengers": passengers,
            "oracles": self.oracle_accounts,
        }

    def get_status(self) -> Dict:
        """
        Snapshot of the deployment for monitoring.

        Returns:
            Status dictionary
        """
        app = self.app
        balance = app.balance()
        return {
            "network": self.deployment.network,
            "data_address": self.deployment.data_address,
            "app_address": self.deployment.app_address,
            "operational": app.is_operational(),
            "airlines": len(app.list_airlines()),
            "oracles": len(app.state.oracles),
            "open_requests": len(app.open_requests()),
            "events": len(app.events),
            "balance": balance,
            "balance_formatted": format_ether(balance),
            "running": self.running,
        }
