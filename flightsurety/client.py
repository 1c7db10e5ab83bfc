"""HTTP client for the FlightSurety API (the dapp's view of the contract)."""

import logging
import time
from typing import Callable, Dict, List, Optional, Union
from decimal import Decimal

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import AIRLINE_FUNDING_MINIMUM
from .utils import to_wei

logger = logging.getLogger(__name__)


class ContractCallError(Exception):
    """Raised when the API rejects a contract call."""

    def __init__(self, message: str, code: str = "CONTRACT_ERROR", status_code: Optional[int] = None, details: Optional[Dict] = None):
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.details = details or {}


class FlightSuretyClient:
    """HTTP client mirroring the contract call surface."""

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize API client.

        Args:
            base_url: Base URL of the FlightSurety API
            timeout: Request timeout in seconds
            sleep: Sleep function used between status polls
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.sleep = sleep

        # Only reads are retried; a retried write could be applied twice
        self.session = requests.Session()
        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[500, 502, 504],
            allowed_methods=["GET"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _make_request(
        self,
        method: str,
        endpoint: str,
        json_data: Optional[Dict] = None,
        params: Optional[Dict] = None,
    ) -> Union[Dict, List]:
        """
        Make HTTP request with error handling.

        Args:
            method: HTTP method (GET or POST)
            endpoint: API endpoint path
            json_data: JSON payload for POST requests
            params: Query parameters

        Returns:
            Parsed JSON response

        Raises:
            ContractCallError: For rejected contract calls (4xx/503)
            requests.RequestException: For transport errors
        """
        url = f"{self.base_url}{endpoint}"
        try:
            if method.upper() == "POST":
                response = self.session.post(url, json=json_data, params=params, timeout=self.timeout)
            else:
                response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.Timeout:
            logger.error(f"Request timeout for {endpoint}")
            raise
        except requests.RequestException as e:
            logger.error(f"Request error for {endpoint}: {e}")
            raise

        if response.status_code >= 400 and response.status_code != 500:
            try:
                error_details = response.json() if response.content else {}
            except ValueError:
                error_details = {}
            message = error_details.get("detail", f"HTTP {response.status_code}")
            if not isinstance(message, str):
                # Request validation errors carry a list of problems
                message = str(message)
            code = error_details.get("code", "HTTP_ERROR")
            logger.warning(f"{method} {endpoint} rejected: {code} {message}")
            raise ContractCallError(message, code, response.status_code, error_details.get("details"))

        response.raise_for_status()
        return response.json() if response.content else {}

    # ------------------------------------------------------------------
    # Operational status
    # ------------------------------------------------------------------

    def is_operational(self) -> bool:
        return self._make_request("GET", "/api/operational")["operational"]

    def set_operational_status(self, mode: bool, sender: str) -> bool:
        data = self._make_request("POST", "/api/operational", {"sender": sender, "mode": mode})
        return data["operational"]

    # ------------------------------------------------------------------
    # Airlines
    # ------------------------------------------------------------------

    def register_airline(self, airline_address: str, airline_name: str, sender: str) -> Dict:
        return self._make_request(
            "POST", "/api/airlines", {"sender": sender, "address": airline_address, "name": airline_name}
        )

    def fund_airline(self, airline_address: str, value: int = AIRLINE_FUNDING_MINIMUM) -> Dict:
        return self._make_request("POST", "/api/airlines/fund", {"sender": airline_address, "value": value})

    def vote_for_airline(self, airline_address: str, sender: str) -> Dict:
        return self._make_request("POST", "/api/airlines/vote", {"sender": sender, "address": airline_address})

    def is_airline_registered(self, airline_address: str) -> bool:
        return self._make_request("GET", f"/api/airlines/{airline_address}/registered")["result"]

    def is_airline_funded(self, airline_address: str) -> bool:
        return self._make_request("GET", f"/api/airlines/{airline_address}/funded")["result"]

    def is_airline_approved(self, airline_address: str) -> bool:
        return self._make_request("GET", f"/api/airlines/{airline_address}/approved")["result"]

    # ------------------------------------------------------------------
    # Insurance
    # ------------------------------------------------------------------

    def buy_insurance_policy(
        self,
        airline_address: str,
        flight_name: str,
        timestamp: int,
        amount: Union[str, Decimal],
        sender: str,
    ) -> Dict:
        """
        Buy insurance paying `amount` ether.

        Args:
            airline_address: Operating airline
            flight_name: Flight identifier
            timestamp: Scheduled flight time
            amount: Premium in ether, e.g. "0.8"
            sender: Passenger account
        """
        payload = {
            "sender": sender,
            "airline": airline_address,
            "flight": flight_name,
            "timestamp": int(timestamp),
            "value": to_wei(amount),
        }
        return self._make_request("POST", "/api/insurance", payload)

    def get_passenger_entitlement(self, passenger_address: str) -> int:
        return self._make_request("GET", f"/api/insurance/{passenger_address}/entitlement")["amount"]

    def withdraw_insurance_claim(self, passenger_address: str, sender: str) -> int:
        data = self._make_request("POST", f"/api/insurance/{passenger_address}/withdraw", {"sender": sender})
        return data["amount"]

    # ------------------------------------------------------------------
    # Oracles and flight status
    # ------------------------------------------------------------------

    def oracle_registration_fee(self) -> int:
        return self._make_request("GET", "/api/oracles/fee")["fee"]

    def register_oracle(self, sender: str, value: Optional[int] = None) -> List[int]:
        fee = self.oracle_registration_fee() if value is None else value
        return self._make_request("POST", "/api/oracles", {"sender": sender, "value": fee})["indexes"]

    def get_my_indexes(self, sender: str) -> List[int]:
        return self._make_request("GET", f"/api/oracles/{sender}/indexes")["indexes"]

    def submit_oracle_response(
        self,
        index: int,
        airline_address: str,
        flight_name: str,
        timestamp: int,
        status_code: int,
        sender: str,
    ) -> str:
        payload = {
            "sender": sender,
            "index": index,
            "airline": airline_address,
            "flight": flight_name,
            "timestamp": int(timestamp),
            "status_code": status_code,
        }
        return self._make_request("POST", "/api/oracles/responses", payload)["outcome"]

    def fetch_flight_status(self, flight_name: str, airline_address: str, timestamp: int, sender: str) -> Dict:
        payload = {
            "sender": sender,
            "airline": airline_address,
            "flight": flight_name,
            "timestamp": int(timestamp),
        }
        return self._make_request("POST", "/api/flights/status/fetch", payload)

    def get_flight_status(self, airline_address: str, flight_name: str, timestamp: int) -> Optional[Dict]:
        """Final flight status, or None while oracles have not agreed."""
        params = {"airline": airline_address, "flight": flight_name, "timestamp": int(timestamp)}
        try:
            return self._make_request("GET", "/api/flights/status", params=params)
        except ContractCallError as e:
            if e.status_code == 404:
                return None
            raise

    def get_events(self, since: int = 0, name: Optional[str] = None) -> Dict:
        params = {"since": since}
        if name:
            params["name"] = name
        return self._make_request("GET", "/api/events", params=params)

    def wait_for_flight_status(
        self,
        airline_address: str,
        flight_name: str,
        timestamp: int,
        timeout: float = 30.0,
        poll_interval: float = 0.5,
        backoff: float = 2.0,
        max_interval: float = 5.0,
    ) -> Optional[Dict]:
        """
        Poll until oracles resolve the flight or `timeout` elapses.

        Returns:
            Flight status dictionary, or None on timeout
        """
        waited = 0.0
        interval = poll_interval
        while True:
            status = self.get_flight_status(airline_address, flight_name, timestamp)
            if status is not None:
                return status
            if waited >= timeout:
                logger.warning(f"No status for {flight_name}@{timestamp} after {waited:.1f}s")
                return None
            self.sleep(interval)
            waited += interval
            interval = min(interval * backoff, max_interval)
