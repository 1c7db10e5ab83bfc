"""Configuration module for contract constants and service settings."""

from typing import Dict, Optional
from pydantic_settings import BaseSettings


WEI_PER_ETHER = 10 ** 18

# Airline rules
AIRLINE_FUNDING_MINIMUM = 10 * WEI_PER_ETHER
AIRLINE_CONSENSUS_THRESHOLD = 4  # Registrations beyond this need votes

# Insurance rules
INSURANCE_PREMIUM_CAP = 1 * WEI_PER_ETHER
PAYOUT_NUMERATOR = 3  # Payout is 1.5x the premium
PAYOUT_DENOMINATOR = 2

# Oracle rules
ORACLE_REGISTRATION_FEE = 1 * WEI_PER_ETHER
MIN_ORACLE_RESPONSES = 3
ORACLE_INDEX_SPACE = 10  # Indexes are drawn from 0..9
ORACLE_INDEX_COUNT = 3
ORACLE_NONCE_RESET = 250


# Flight status codes reported by oracles
STATUS_CODE_UNKNOWN = 0
STATUS_CODE_ON_TIME = 10
STATUS_CODE_LATE_AIRLINE = 20
STATUS_CODE_LATE_WEATHER = 30
STATUS_CODE_LATE_TECHNICAL = 40
STATUS_CODE_LATE_OTHER = 50

STATUS_CODES: Dict[int, str] = {
    STATUS_CODE_UNKNOWN: "UNKNOWN",
    STATUS_CODE_ON_TIME: "ON_TIME",
    STATUS_CODE_LATE_AIRLINE: "LATE_AIRLINE",
    STATUS_CODE_LATE_WEATHER: "LATE_WEATHER",
    STATUS_CODE_LATE_TECHNICAL: "LATE_TECHNICAL",
    STATUS_CODE_LATE_OTHER: "LATE_OTHER",
}


class Config(BaseSettings):
    """Service configuration with environment variable support."""

    # Network / deployment
    NETWORK: str = "localhost"
    NODE_URL: str = "http://localhost:8545"
    NETWORK_CONFIG_FILE: str = "network_config.json"
    FIRST_AIRLINE_NAME: str = "First Airline"

    # Local accounts (index 0 is the owner and first airline)
    ACCOUNT_COUNT: int = 50
    ACCOUNT_SEED: str = "flightsurety"

    # Oracle simulation
    ORACLE_SIMULATION_ENABLED: bool = True
    ORACLE_COUNT: int = 10
    ORACLE_ACCOUNT_OFFSET: int = 20  # First account used for oracles
    SIMULATED_STATUS_CODE: int = STATUS_CODE_LATE_AIRLINE

    # Pending oracle requests are kept forever unless a TTL is set
    REQUEST_TTL_SECONDS: Optional[int] = None

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 3000

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "flightsurety.log"
    EVENT_LOG_FILE: Optional[str] = "events.jsonl"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }
