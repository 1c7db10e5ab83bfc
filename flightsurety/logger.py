"""Logging setup and JSON event journal."""

import json
import logging
import logging.handlers
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

from .models.events import ContractEvent

_configured = False


def configure_logging(level: str = "INFO", log_file: Optional[str] = "flightsurety.log") -> None:
    """
    Configure structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file, or None for console only
    """
    global _configured
    if _configured:
        return

    log_level = getattr(logging, level.upper(), logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=10 * 1024 * 1024, backupCount=5
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _configured = True


class EventJournal:
    """Appends contract events to a JSON-lines file for machine parsing."""

    def __init__(self, log_file: str = "events.jsonl"):
        """
        Initialize event journal.

        Args:
            log_file: Path to JSON log file
        """
        self.log_file = Path(log_file)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self.file_handle = open(self.log_file, "a")
        self._lock = threading.Lock()

    def record(self, event: ContractEvent) -> None:
        """
        Write one event as a JSON line.

        Args:
            event: Event emitted by the contract
        """
        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "sequence": event.sequence,
            "event": event.name,
            "args": event.args,
        }

        with self._lock:
            json.dump(log_entry, self.file_handle)
            self.file_handle.write("\n")
            self.file_handle.flush()

    def close(self) -> None:
        """Close log file."""
        self.file_handle.close()
