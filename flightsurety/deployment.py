"""Deployment migration: data storage, app contract, network config and interface descriptor."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .accounts import contract_address
from .contract import FlightSuretyApp
from .event_bus import EventBus
from .models.contract_state import ContractState
from .models.events import FLIGHT_STATUS_INFO, ORACLE_REPORT, ORACLE_REQUEST
from .registry import AirlineRegistry
from .utils import normalize_address

logger = logging.getLogger(__name__)


# Call surface: (method, inputs, outputs, kind). kind is read, write or payable.
CALL_SURFACE: List[Dict] = [
    {"name": "isOperational", "inputs": [], "outputs": ["bool"], "kind": "read"},
    {"name": "setOperationalStatus", "inputs": [("mode", "bool")], "outputs": [], "kind": "write"},
    {"name": "registerAirline", "inputs": [("airline", "address"), ("name", "string")], "outputs": [], "kind": "write"},
    {"name": "fundAirline", "inputs": [], "outputs": [], "kind": "payable"},
    {"name": "voteForAirline", "inputs": [("airline", "address")], "outputs": [], "kind": "write"},
    {"name": "isAirlineRegistered", "inputs": [("airline", "address")], "outputs": ["bool"], "kind": "read"},
    {"name": "isAirlineFunded", "inputs": [("airline", "address")], "outputs": ["bool"], "kind": "read"},
    {"name": "isAirlineApproved", "inputs": [("airline", "address")], "outputs": ["bool"], "kind": "read"},
    {
        "name": "buyInsurancePolicy",
        "inputs": [("airline", "address"), ("flight", "string"), ("timestamp", "uint256")],
        "outputs": [],
        "kind": "payable",
    },
    {
        "name": "fetchFlightStatus",
        "inputs": [("airline", "address"), ("flight", "string"), ("timestamp", "uint256")],
        "outputs": [],
        "kind": "write",
    },
    {"name": "getPassengerEntitlement", "inputs": [("passenger", "address")], "outputs": ["uint256"], "kind": "read"},
    {"name": "withdrawInsuranceClaim", "inputs": [("passenger", "address")], "outputs": [], "kind": "write"},
    {"name": "oracleRegistrationFee", "inputs": [], "outputs": ["uint256"], "kind": "read"},
    {"name": "registerOracle", "inputs": [], "outputs": [], "kind": "payable"},
    {"name": "getMyIndexes", "inputs": [], "outputs": ["uint8[3]"], "kind": "read"},
    {
        "name": "submitOracleResponse",
        "inputs": [
            ("index", "uint8"),
            ("airline", "address"),
            ("flight", "string"),
            ("timestamp", "uint256"),
            ("statusCode", "uint8"),
        ],
        "outputs": [],
        "kind": "write",
    },
]

EVENTS: List[Dict] = [
    {
        "name": ORACLE_REQUEST,
        "inputs": [("index", "uint8"), ("airline", "address"), ("flight", "string"), ("timestamp", "uint256")],
    },
    {
        "name": ORACLE_REPORT,
        "inputs": [("airline", "address"), ("flight", "string"), ("timestamp", "uint256"), ("status", "uint8")],
    },
    {
        "name": FLIGHT_STATUS_INFO,
        "inputs": [("airline", "address"), ("flight", "string"), ("timestamp", "uint256"), ("status", "uint8")],
    },
]


@dataclass
class Deployment:
    """A deployed data/app contract pair on one network."""

    network: str
    url: str
    owner: str
    data_address: str
    app_address: str
    app: FlightSuretyApp

    def network_entry(self) -> Dict[str, str]:
        return {"url": self.url, "dataAddress": self.data_address, "appAddress": self.app_address}


def deploy(
    owner: str,
    first_airline_name: str = "First Airline",
    network: str = "localhost",
    url: str = "http://localhost:8545",
    bus: Optional[EventBus] = None,
    **app_kwargs,
) -> Deployment:
    """
    Deploy the data storage, then the app contract, and authorize the app.

    The owner becomes the first airline.

    Args:
        owner: Deploying account
        first_airline_name: Name registered for the owner's airline
        network: Network name the deployment is recorded under
        url: Node URL clients should use
        bus: Event bus for the app's events
        **app_kwargs: Passed through to FlightSuretyApp

    Returns:
        Deployment with the live app
    """
    owner = normalize_address(owner)
    data_address = contract_address(owner, 0)
    app_address = contract_address(owner, 1)

    state = ContractState(owner=owner)
    AirlineRegistry().bootstrap(state, owner, first_airline_name)

    app = FlightSuretyApp(state, app_address, bus=bus, **app_kwargs)
    app.authorize_caller(app_address, owner)

    logger.info(f"Deployed data contract at {data_address} and app contract at {app_address} on {network}")
    return Deployment(
        network=network,
        url=url,
        owner=owner,
        data_address=data_address,
        app_address=app_address,
        app=app,
    )


def write_network_config(path: str, deployment: Deployment) -> Dict[str, Dict[str, str]]:
    """
    Record the deployment under its network name, keeping other networks.

    Returns:
        The full config written
    """
    config_path = Path(path)
    config: Dict[str, Dict[str, str]] = {}
    if config_path.exists():
        with open(config_path) as f:
            config = json.load(f)

    config[deployment.network] = deployment.network_entry()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        json.dump(config, f, indent=2)

    logger.info(f"Network config for {deployment.network} written to {config_path}")
    return config


def load_network_config(path: str, network: str) -> Dict[str, str]:
    """
    Read one network's entry from the config file.

    Raises:
        FileNotFoundError: If the file does not exist
        KeyError: If the network is not in the file
    """
    with open(path) as f:
        config = json.load(f)
    if network not in config:
        raise KeyError(f"Network {network!r} not found in {path}")
    return config[network]


def _abi_inputs(inputs) -> List[Dict[str, str]]:
    return [{"name": name, "type": type_} for name, type_ in inputs]


def interface_descriptor() -> Dict:
    """JSON interface descriptor of the app contract."""
    abi = []
    for method in CALL_SURFACE:
        abi.append({
            "type": "function",
            "name": method["name"],
            "inputs": _abi_inputs(method["inputs"]),
            "outputs": [{"name": "", "type": t} for t in method["outputs"]],
            "stateMutability": {"read": "view", "write": "nonpayable", "payable": "payable"}[method["kind"]],
        })
    for event in EVENTS:
        abi.append({"type": "event", "name": event["name"], "inputs": _abi_inputs(event["inputs"])})
    return {"contractName": "FlightSuretyApp", "abi": abi}


def write_interface_descriptor(path: str) -> None:
    descriptor_path = Path(path)
    descriptor_path.parent.mkdir(parents=True, exist_ok=True)
    with open(descriptor_path, "w") as f:
        json.dump(interface_descriptor(), f, indent=2)
