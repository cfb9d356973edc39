# config.py

"""Deployment settings for the table ordering service.

Each café install ships a ``config.json`` (ledger address, order prefix,
timezone, cache TTL, status transition policy). Environment variables win
over the file so containers can be configured without editing it.
"""

from __future__ import annotations

import json
import os
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class TransitionPolicy(str, Enum):
    """Determine which order status changes the ledger accepts.

    ``PERMISSIVE`` accepts any of the five statuses from any state.
    ``TERMINAL_LOCKED`` additionally refuses to move an order out of
    ``completed`` or ``cancelled``. ``FORWARD_ONLY`` only allows the edges of
    the fulfilment pipeline. The default application setting is
    ``TERMINAL_LOCKED``.
    """

    PERMISSIVE = "permissive"
    TERMINAL_LOCKED = "terminal_locked"
    FORWARD_ONLY = "forward_only"


class Settings(BaseSettings):
    """Ledger, cache, notification and QR settings for one café."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    redis_url: str = "redis://localhost:6379/0"
    ledger_url: str | None = None
    ledger_database_url: str = "sqlite+aiosqlite:///./ledger.db"
    order_prefix: str = "HPY"
    timezone: str = "Asia/Jakarta"
    ledger_read_timeout: float = 10.0
    ledger_write_timeout: float = 15.0
    cache_ttl_seconds: float = 3.0
    cache_max_entries: int = 256
    transition_policy: TransitionPolicy = TransitionPolicy.TERMINAL_LOCKED
    notification_email: str | None = None
    smtp_host: str | None = None
    smtp_port: int = 25
    smtp_sender: str = "orders@hapiyo.local"
    public_base_url: str = "http://localhost:3000"
    allowed_origins: str = "*"


CONFIG_FILE = Path(__file__).with_name("config.json")


def _load_file() -> dict:
    if not CONFIG_FILE.exists():
        return {}
    return {k: v for k, v in json.loads(CONFIG_FILE.read_text()).items() if v is not None}


def _load_env() -> dict:
    fields = Settings.model_fields
    return {k.lower(): v for k, v in os.environ.items() if k.lower() in fields}


@lru_cache
def get_settings() -> Settings:
    """Return the deployment settings, read once per process.

    ``config.json`` next to this module supplies the café's values and any
    environment variable named after a field (``LEDGER_URL``,
    ``TRANSITION_POLICY`` ...) replaces them. Call ``get_settings.cache_clear()``
    after changing the environment.
    """

    return Settings(**{**_load_file(), **_load_env()})
