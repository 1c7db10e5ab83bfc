"""
FlightSurety Package.

Flight delay insurance backed by a transactional contract core, served
over FastAPI.

Modules:
    models/               Pydantic models (Airline, InsurancePolicy, Oracle, events, ContractState)
    gate.py               Operational gate and caller authorization
    registry.py           Airline registration and funding
    consensus.py          Multi-party airline approval votes
    policy_ledger.py      Insurance policies, credits and withdrawals
    oracle_coordinator.py Oracle registration and flight status quorum
    contract.py           Transactional call surface tying the components together
    deployment.py         Deployment migration and network configuration
    services/             Contract service and oracle simulation
    routes/, schemas/     REST endpoints and their request/response models
    client.py             HTTP client for the REST surface
"""

__version__ = '1.0.0'
