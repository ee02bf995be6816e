import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigMissing
from .retry import RetryPolicy

PROJECT_ROOT = Path(__file__).parent.parent

load_dotenv(PROJECT_ROOT / ".env")
load_dotenv(find_dotenv(usecwd=True))


def _str_to_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _str_to_float(val: str | None, default: float) -> float:
    try:
        return float(val) if val is not None else default
    except ValueError:
        return default


def _str_to_int(val: str | None, default: int | None) -> int | None:
    try:
        return int(val) if val is not None else default
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Application configuration loaded from environment variables."""

    api_key: str
    session_id: str
    log_level: str = "WARNING"
    http_timeout: float = 30.0
    success_delay: float = 1.0
    rejected_delay: float = 2.0
    rate_limit_delay: float = 5.0
    error_delay: float = 2.0
    count_rejected_as_attempt: bool = False
    max_rate_limit_retries: int | None = None

    @property
    def policy(self) -> RetryPolicy:
        """Return the retry policy described by these settings."""
        return RetryPolicy(
            success_delay=self.success_delay,
            rejected_delay=self.rejected_delay,
            rate_limit_delay=self.rate_limit_delay,
            error_delay=self.error_delay,
            count_rejected_as_attempt=self.count_rejected_as_attempt,
            max_rate_limit_retries=self.max_rate_limit_retries,
        )

    @staticmethod
    def from_env() -> "Settings":
        """Load settings from environment variables."""
        api_key = os.getenv("API_KEY", "").strip()
        session_id = os.getenv("SESSION_ID", "").strip()
        if not api_key or not session_id:
            raise ConfigMissing("API_KEY or SESSION_ID not set in .env")

        log_level = os.getenv("LOG_LEVEL", "WARNING").upper()
        if log_level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            log_level = "WARNING"

        http_timeout = _str_to_float(os.getenv("HTTP_TIMEOUT"), 30.0)
        if http_timeout <= 0:
            http_timeout = 30.0

        max_rate_limit_retries = _str_to_int(os.getenv("MAX_RATE_LIMIT_RETRIES"), None)
        if max_rate_limit_retries is not None and max_rate_limit_retries < 0:
            max_rate_limit_retries = None

        return Settings(
            api_key=api_key,
            session_id=session_id,
            log_level=log_level,
            http_timeout=http_timeout,
            success_delay=max(0.0, _str_to_float(os.getenv("SUCCESS_DELAY"), 1.0)),
            rejected_delay=max(0.0, _str_to_float(os.getenv("REJECTED_DELAY"), 2.0)),
            rate_limit_delay=max(0.0, _str_to_float(os.getenv("RATE_LIMIT_DELAY"), 5.0)),
            error_delay=max(0.0, _str_to_float(os.getenv("ERROR_DELAY"), 2.0)),
            count_rejected_as_attempt=_str_to_bool(os.getenv("COUNT_REJECTED_AS_ATTEMPT"), False),
            max_rate_limit_retries=max_rate_limit_retries,
        )


def configure_logging(level: str) -> None:
    """Configure logging with the specified level."""
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s: %(message)s",
    )
