"""Runtime settings read from the environment (and a ``.env`` file, if any)."""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from proofcore.result import Err, Ok, Result

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    max_reported_errors: int = 50

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)

    @classmethod
    def from_env(cls) -> Result["Settings", Exception]:
        """Read PROOFCORE_LOG_LEVEL and PROOFCORE_MAX_REPORTED_ERRORS."""
        load_dotenv()
        level = os.getenv("PROOFCORE_LOG_LEVEL", "WARNING").strip().upper()
        if level not in _LEVELS:
            return Err(ValueError(f"PROOFCORE_LOG_LEVEL must be one of {_LEVELS}"))

        raw_limit = os.getenv("PROOFCORE_MAX_REPORTED_ERRORS", "50")
        match raw_limit.strip():
            case str(text) if text.isdigit() and int(text) > 0:
                return Ok(cls(log_level=level, max_reported_errors=int(text)))
            case _:
                return Err(
                    ValueError(
                        "PROOFCORE_MAX_REPORTED_ERRORS must be a positive integer."
                    )
                )
