"""Runtime configuration read from the environment.

Values come from process environment variables; a local `.env` file is
loaded first (via python-dotenv) so development setups don't need to export
anything. Server and client settings live side by side because the CLI
uses both.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv


ROLES = ("admin", "user")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass
class Settings:
    host: str = "0.0.0.0"
    port: int = 5000
    admin_api_key: Optional[str] = None
    keepalive_seconds: float = 30.0
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    subscriber_queue_size: int = 16
    log_level: str = "info"

    # client side
    server_url: str = "http://localhost:5000"
    role: str = "user"
    admin_token: Optional[str] = None

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build settings from environment variables (and `.env` when present)."""
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        origins = os.getenv("CORS_ORIGINS", "*")
        role = (os.getenv("ROLE") or "user").strip().lower()
        if role not in ROLES:
            raise ValueError(f"ROLE must be one of {', '.join(ROLES)}, got {role!r}")

        admin_key = os.getenv("ADMIN_API_KEY") or None
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=_int_env("PORT", 5000),
            admin_api_key=admin_key,
            keepalive_seconds=_float_env("KEEPALIVE_SECONDS", 30.0),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            subscriber_queue_size=_int_env("SUBSCRIBER_QUEUE_SIZE", 16),
            log_level=(os.getenv("LOG_LEVEL") or "info").lower(),
            server_url=(os.getenv("SERVER_URL") or "http://localhost:5000").rstrip("/"),
            role=role,
            admin_token=os.getenv("ADMIN_TOKEN") or admin_key,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
