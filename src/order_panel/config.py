from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_HOST_URL = "https://order-panel"
DEFAULT_PAGE_SIZE = 5
DEFAULT_NOTIFICATION_TTL_SECONDS = 5.0


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class PanelConfig:
    env_name: str = "dev"
    host_url: str = DEFAULT_HOST_URL
    timeout_seconds: float = 10.0
    verify_ssl: bool = True
    page_size: int = DEFAULT_PAGE_SIZE
    notification_ttl_seconds: float = DEFAULT_NOTIFICATION_TTL_SECONDS
    log_level: str = "INFO"

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def load_config(env_file: str | None = None) -> PanelConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    env_name = (os.getenv("ORDER_PANEL_ENV") or "dev").strip()
    env_key = env_name.upper()

    host_url = (
        (os.getenv(f"ORDER_PANEL_HOST_URL_{env_key}") or "").strip()
        or (os.getenv("ORDER_PANEL_HOST_URL") or "").strip()
        or DEFAULT_HOST_URL
    )

    timeout_seconds = _read_float("ORDER_PANEL_TIMEOUT_SECONDS", "10")
    _validate(
        timeout_seconds > 0,
        f"Invalid ORDER_PANEL_TIMEOUT_SECONDS: expected > 0, got {timeout_seconds}",
    )

    page_size = _read_int("ORDER_PANEL_PAGE_SIZE", str(DEFAULT_PAGE_SIZE))
    _validate(page_size >= 1, f"Invalid ORDER_PANEL_PAGE_SIZE: expected >= 1, got {page_size}")

    notification_ttl_seconds = _read_float(
        "ORDER_PANEL_NOTIFICATION_TTL_SECONDS", str(DEFAULT_NOTIFICATION_TTL_SECONDS)
    )
    _validate(
        notification_ttl_seconds > 0,
        (
            "Invalid ORDER_PANEL_NOTIFICATION_TTL_SECONDS: "
            f"expected > 0, got {notification_ttl_seconds}"
        ),
    )

    log_level = (os.getenv("ORDER_PANEL_LOG_LEVEL") or "INFO").strip().upper()
    _validate(
        log_level in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"},
        f"Invalid ORDER_PANEL_LOG_LEVEL: got {log_level!r}",
    )

    return PanelConfig(
        env_name=env_name,
        host_url=host_url.rstrip("/"),
        timeout_seconds=timeout_seconds,
        verify_ssl=_coerce_bool(os.getenv("ORDER_PANEL_VERIFY_SSL"), True),
        page_size=page_size,
        notification_ttl_seconds=notification_ttl_seconds,
        log_level=log_level,
    )
