"""Runtime settings read from the environment (and an optional .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from .exceptions import ConfigError

DEFAULT_NAMESERVERS = "1.1.1.1,8.8.8.8,9.9.9.9"


def _getenv_int(name: str, default: int) -> int:
    v = os.getenv(name, str(default)).strip()
    try:
        return int(v)
    except ValueError as err:
        raise ConfigError(f"Environment variable {name} must be an integer; got {v!r}") from err


def _getenv_float(name: str, default: float) -> float:
    v = os.getenv(name, str(default)).strip()
    try:
        return float(v)
    except ValueError as err:
        raise ConfigError(f"Environment variable {name} must be a number; got {v!r}") from err


def _getenv_str(name: str, default: str) -> str:
    return os.getenv(name, default).strip()


def _getenv_list_str(name: str, default_csv: str) -> list[str]:
    raw = os.getenv(name, default_csv).strip()
    return [tok for tok in (t.strip() for t in raw.split(",")) if tok]


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8080
    nameservers: list[str] = field(default_factory=lambda: DEFAULT_NAMESERVERS.split(","))
    dns_timeout: float = 2.0
    dns_attempts: int = 2
    error_status: int = 404
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Build Settings from SPF_CHECK_* environment variables."""
    load_dotenv()

    settings = Settings(
        host=_getenv_str("SPF_CHECK_HOST", "0.0.0.0"),
        port=_getenv_int("SPF_CHECK_PORT", 8080),
        nameservers=_getenv_list_str("SPF_CHECK_NAMESERVERS", DEFAULT_NAMESERVERS),
        dns_timeout=_getenv_float("SPF_CHECK_DNS_TIMEOUT", 2.0),
        dns_attempts=_getenv_int("SPF_CHECK_DNS_ATTEMPTS", 2),
        error_status=_getenv_int("SPF_CHECK_ERROR_STATUS", 404),
        log_level=_getenv_str("SPF_CHECK_LOG_LEVEL", "INFO").upper(),
    )

    if not settings.nameservers:
        raise ConfigError("SPF_CHECK_NAMESERVERS must list at least one resolver")
    if settings.dns_timeout <= 0:
        raise ConfigError("SPF_CHECK_DNS_TIMEOUT must be positive")
    if settings.dns_attempts < 1:
        raise ConfigError("SPF_CHECK_DNS_ATTEMPTS must be at least 1")
    if not 400 <= settings.error_status <= 599:
        raise ConfigError(
            f"SPF_CHECK_ERROR_STATUS must be a 4xx or 5xx code; got {settings.error_status}"
        )
    return settings
