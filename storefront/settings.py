from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

from .errors import ConfigurationError

# Load .env before reading any environment variables
load_dotenv()

DEFAULT_ALLOWED_HOSTS: List[str] = [
    "sabordeemociones.com",
    "www.sabordeemociones.com",
    "localhost:3000",
    "localhost",
    "127.0.0.1:3000",
    "127.0.0.1",
]
DEFAULT_WHATSAPP_NUMBER = "15719103088"


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _list_env(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    items = [p.strip() for p in raw.split(",") if p.strip()]
    return items or list(default)


@dataclass
class Settings:
    app_env: str = "production"
    allowed_hosts: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_HOSTS))
    rate_limit_window_seconds: int = 15 * 60
    rate_limit_max_requests: int = 5
    min_form_fill_ms: int = 3000
    whatsapp_number: str = DEFAULT_WHATSAPP_NUMBER

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


@dataclass
class EmailSettings:
    host: str
    port: int
    user: str
    password: str
    to: str
    from_name: str = "Sabor de Emociones"

    @property
    def implicit_tls(self) -> bool:
        return self.port == 465


def get_settings() -> Settings:
    return Settings(
        app_env=(os.getenv("APP_ENV", "production").strip().lower() or "production"),
        allowed_hosts=_list_env("ALLOWED_ORIGIN_HOSTS", DEFAULT_ALLOWED_HOSTS),
        rate_limit_window_seconds=_int_env("RATE_LIMIT_WINDOW_SECONDS", 15 * 60),
        rate_limit_max_requests=_int_env("RATE_LIMIT_MAX_REQUESTS", 5),
        min_form_fill_ms=_int_env("MIN_FORM_FILL_MS", 3000),
        whatsapp_number=(os.getenv("WHATSAPP_NUMBER") or DEFAULT_WHATSAPP_NUMBER).strip(),
    )


def email_configured() -> bool:
    return all(os.getenv(n) for n in ("EMAIL_HOST", "EMAIL_PORT", "EMAIL_USER", "EMAIL_PASS", "EMAIL_TO"))


def load_email_settings() -> EmailSettings:
    """Read the SMTP relay settings. Raises ConfigurationError if incomplete."""
    values = {}
    for name in ("EMAIL_HOST", "EMAIL_PORT", "EMAIL_USER", "EMAIL_PASS", "EMAIL_TO"):
        val = os.getenv(name)
        if not val:
            raise ConfigurationError(detail=f"{name} is not set")
        values[name] = val
    try:
        port = int(values["EMAIL_PORT"])
    except ValueError:
        raise ConfigurationError(detail="EMAIL_PORT is not an integer")
    return EmailSettings(
        host=values["EMAIL_HOST"],
        port=port,
        user=values["EMAIL_USER"],
        password=values["EMAIL_PASS"],
        to=values["EMAIL_TO"],
        from_name=os.getenv("EMAIL_FROM_NAME", "Sabor de Emociones"),
    )
