"""Tests for deployment, network config and the interface descriptor."""

import json

import pytest

from flightsurety.accounts import contract_address, generate_accounts
from flightsurety.deployment import (
    deploy,
    interface_descriptor,
    load_network_config,
    write_interface_descriptor,
    write_network_config,
)


def test_deploy_authorizes_app_and_registers_owner(owner):
    deployment = deploy(owner, "Genesis Air")

    assert deployment.data_address == contract_address(owner, 0)
    assert deployment.app_address == contract_address(owner, 1)
    assert deployment.app.state.authorized_callers == [deployment.app_address]
    assert deployment.app.get_airline(owner).name == "Genesis Air"
    assert deployment.app.is_operational()


def test_accounts_are_deterministic():
    assert generate_accounts(5, "seed") == generate_accounts(5, "seed")
    assert generate_accounts(5, "seed") != generate_accounts(5, "other")
    assert len(set(generate_accounts(50))) == 50


def test_network_config_round_trip(tmp_path, owner):
    path = tmp_path / "config" / "network.json"
    local = deploy(owner, network="localhost", url="http://localhost:8545")
    staging = deploy(owner, network="staging", url="http://staging:8545")

    write_network_config(str(path), local)
    config = write_network_config(str(path), staging)

    assert set(config) == {"localhost", "staging"}
    assert load_network_config(str(path), "localhost") == {
        "url": "http://localhost:8545",
        "dataAddress": local.data_address,
        "appAddress": local.app_address,
    }
    with pytest.raises(KeyError):
        load_network_config(str(path), "mainnet")


def test_interface_descriptor_lists_calls_and_events(tmp_path):
    descriptor = interface_descriptor()
    by_name = {entry["name"]: entry for entry in descriptor["abi"]}

    assert descriptor["contractName"] == "FlightSuretyApp"
    assert by_name["registerOracle"]["stateMutability"] == "payable"
    assert by_name["isOperational"]["stateMutability"] == "view"
    assert [i["name"] for i in by_name["submitOracleResponse"]["inputs"]] == [
        "index", "airline", "flight", "timestamp", "statusCode",
    ]
    assert by_name["FlightStatusInfo"]["type"] == "event"

    path = tmp_path / "FlightSuretyApp.json"
    write_interface_descriptor(str(path))
    assert json.loads(path.read_text()) == descriptor
