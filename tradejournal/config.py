"""TradeJournal — application configuration.

Loads .env variables into a typed config object.
Validates values on startup.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Config:
    """Typed configuration loaded from environment variables."""

    db_path: str
    log_level: str
    api_port: int
    account_currency: str  # ISO code, e.g. "USD"
    default_risk_pct: float
    monthly_limit: int


def _parse(name: str, default: str, cast):
    raw = os.environ.get(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from None


def load_config(env_path: str | None = None) -> Config:
    """Load configuration from environment variables.

    Raises ``ValueError`` with a message naming the variable when a value
    cannot be parsed or is out of range.
    """
    load_dotenv(dotenv_path=env_path)

    api_port = _parse("API_PORT", "8080", int)
    default_risk_pct = _parse("DEFAULT_RISK_PCT", "1.0", float)
    monthly_limit = _parse("MONTHLY_LIMIT", "12", int)
    account_currency = os.environ.get("ACCOUNT_CURRENCY", "USD").strip().upper()
    log_level = os.environ.get("LOG_LEVEL", "INFO").strip().upper()

    if log_level not in _LOG_LEVELS:
        raise ValueError(
            f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {log_level!r}"
        )
    if not 1 <= api_port <= 65535:
        raise ValueError(f"API_PORT must be 1–65535, got {api_port}")
    if not 0 < default_risk_pct <= 100:
        raise ValueError(f"DEFAULT_RISK_PCT must be in (0, 100], got {default_risk_pct}")
    if monthly_limit < 1:
        raise ValueError(f"MONTHLY_LIMIT must be at least 1, got {monthly_limit}")
    if len(account_currency) != 3 or not account_currency.isalpha():
        raise ValueError(
            f"ACCOUNT_CURRENCY must be a 3-letter code, got {account_currency!r}"
        )

    return Config(
        db_path=os.environ.get("DB_PATH", "data/tradejournal.db"),
        log_level=log_level,
        api_port=api_port,
        account_currency=account_currency,
        default_risk_pct=default_risk_pct,
        monthly_limit=monthly_limit,
    )
