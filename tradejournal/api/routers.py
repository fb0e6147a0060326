"""Internal API routers — /instruments, /calculator, /trades, /analytics endpoints.

No arithmetic here. Validates request bodies, delegates to the calculator,
the aggregator and the trade repository.
"""

import logging
import math
import re
from dataclasses import asdict
from datetime import date, datetime
from typing import Callable, Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from tradejournal.analytics import aggregator
from tradejournal.analytics.models import AggregatedTradeRecord
from tradejournal.economics.calculator import (
    calculate_position_size,
    evaluate_trade,
    pip_value,
    pips_between,
    trade_metrics,
)
from tradejournal.instruments.registry import list_instruments, normalize_symbol, resolve

logger = logging.getLogger("tradejournal")
router = APIRouter()

# ── Shared state (set during app startup) ────────────────────────────────

_trade_repo = None  # Set via configure_routers()
_monthly_limit: int = 12
_account_currency: str = "USD"
_default_risk_pct: float = 1.0

# Any change to these columns invalidates the stored profit/pips/RRR.
_METRIC_INPUTS = (
    "symbol", "direction", "entry_price", "exit_price",
    "volume", "stop_loss", "take_profit",
)

_TIME_RE = re.compile(r"^\d{2}:\d{2}(:\d{2})?$")


def configure_routers(
    trade_repo,
    monthly_limit: int = 12,
    account_currency: str = "USD",
    default_risk_pct: float = 1.0,
) -> None:
    """Inject dependencies from the application startup.

    Args:
        trade_repo: A ``TradeRepo`` instance (or duck-type for tests).
        monthly_limit: Number of months returned by the monthly rollup.
        account_currency: Default account currency for calculator previews.
        default_risk_pct: Risk percentage used when a sizing request omits it.
    """
    global _trade_repo, _monthly_limit, _account_currency, _default_risk_pct  # noqa: PLW0603
    _trade_repo = trade_repo
    _monthly_limit = monthly_limit
    _account_currency = account_currency
    _default_risk_pct = default_risk_pct


def _error(errors: list[str], status_code: int = 400) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "errors": errors},
    )


# ── Field validation ─────────────────────────────────────────────────────


def _take_symbol(body: dict, clean: dict, errors: list[str]) -> None:
    symbol = body.get("symbol")
    if not isinstance(symbol, str) or not 1 <= len(normalize_symbol(symbol)) <= 10:
        errors.append("symbol must be a string of 1–10 characters")
        return
    clean["symbol"] = normalize_symbol(symbol)


def _take_direction(body: dict, clean: dict, errors: list[str]) -> None:
    direction = body.get("direction")
    if not isinstance(direction, str) or direction.lower() not in ("buy", "sell"):
        errors.append("direction must be Buy or Sell")
        return
    clean["direction"] = direction.capitalize()


def _positive(key: str, required: bool = True) -> Callable:
    def take(body: dict, clean: dict, errors: list[str]) -> None:
        raw = body.get(key)
        if raw is None:
            if required:
                errors.append(f"{key} is required")
            else:
                clean[key] = None
            return
        try:
            value = float(raw)
        except (TypeError, ValueError):
            errors.append(f"{key} must be a number")
            return
        if not math.isfinite(value) or value <= 0:
            errors.append(f"{key} must be a positive number")
            return
        clean[key] = value
    return take


def _take_trade_date(body: dict, clean: dict, errors: list[str]) -> None:
    raw = body.get("trade_date")
    try:
        clean["trade_date"] = date.fromisoformat(str(raw)).isoformat()
    except ValueError:
        errors.append("trade_date must be a date in YYYY-MM-DD format")


def _take_trade_time(body: dict, clean: dict, errors: list[str]) -> None:
    raw = str(body.get("trade_time"))
    if not _TIME_RE.match(raw):
        errors.append("trade_time must be HH:MM or HH:MM:SS")
        return
    if len(raw) == 5:
        raw += ":00"
    try:
        datetime.strptime(raw, "%H:%M:%S")
    except ValueError:
        errors.append("trade_time must be a valid time of day")
        return
    clean["trade_time"] = raw


def _take_account_id(body: dict, clean: dict, errors: list[str]) -> None:
    raw = body.get("account_id")
    if raw is None:
        clean["account_id"] = None
    elif isinstance(raw, int) and not isinstance(raw, bool) and raw >= 1:
        clean["account_id"] = raw
    else:
        errors.append("account_id must be a positive integer")


def _take_notes(body: dict, clean: dict, errors: list[str]) -> None:
    raw = body.get("notes")
    if raw is None:
        clean["notes"] = None
    elif isinstance(raw, str) and len(raw) <= 2000:
        clean["notes"] = raw
    else:
        errors.append("notes must be a string of at most 2000 characters")


def _take_account_currency(body: dict, clean: dict, errors: list[str]) -> None:
    raw = body.get("account_currency")
    if raw is None:
        clean["account_currency"] = _account_currency
    elif isinstance(raw, str) and len(raw.strip()) == 3 and raw.strip().isalpha():
        clean["account_currency"] = raw.strip().upper()
    else:
        errors.append("account_currency must be a 3-letter currency code")


def _metrics_error(metrics: dict) -> list[str]:
    values = (metrics[k] for k in ("profit", "pips", "pip_value", "rrr"))
    if all(math.isfinite(v) for v in values if v is not None):
        return []
    return ["prices and volume produce values too large to represent"]


# (field, validator, required on create)
_TRADE_FIELDS: list[tuple[str, Callable, bool]] = [
    ("symbol", _take_symbol, True),
    ("direction", _take_direction, True),
    ("entry_price", _positive("entry_price"), True),
    ("exit_price", _positive("exit_price"), True),
    ("volume", _positive("volume"), True),
    ("stop_loss", _positive("stop_loss", required=False), False),
    ("take_profit", _positive("take_profit", required=False), False),
    ("trade_date", _take_trade_date, True),
    ("trade_time", _take_trade_time, True),
    ("account_id", _take_account_id, False),
    ("notes", _take_notes, False),
]


def validate_trade(body: dict, partial: bool = False) -> tuple[dict, list[str]]:
    """Validate a trade request body.

    With *partial* only the keys present in *body* are checked (updates).

    Returns:
        ``(clean_fields, errors)`` — *errors* is empty when the body is valid.
    """
    clean: dict = {}
    errors: list[str] = []
    for key, take, required in _TRADE_FIELDS:
        if key in body or (required and not partial):
            take(body, clean, errors)
    return clean, errors


def _filters_error(date_from: Optional[str], date_to: Optional[str]) -> list[str]:
    errors = []
    for name, value in (("date_from", date_from), ("date_to", date_to)):
        if value is None:
            continue
        try:
            date.fromisoformat(value)
        except ValueError:
            errors.append(f"{name} must be a date in YYYY-MM-DD format")
    return errors


def _load_records(
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    account_id: Optional[int] = None,
) -> list[AggregatedTradeRecord]:
    if _trade_repo is None:
        return []
    rows = _trade_repo.get_records(
        date_from=date_from, date_to=date_to, account_id=account_id,
    )
    return [AggregatedTradeRecord.from_row(r) for r in rows]


# ── Instruments ──────────────────────────────────────────────────────────


@router.get("/instruments")
async def get_instruments(category: Optional[str] = Query(default=None)):
    """Return the instrument registry, optionally filtered by category."""
    try:
        entries = list_instruments(category)
    except ValueError as exc:
        return _error([str(exc)])
    return {"instruments": [asdict(i) for i in entries]}


# ── Calculator ───────────────────────────────────────────────────────────


@router.post("/calculator/profit")
async def post_profit_preview(body: dict):
    """Preview profit, pips, pip value and RRR without saving anything."""
    clean, errors = validate_trade(
        {k: v for k, v in body.items() if k in _METRIC_INPUTS},
        partial=True,
    )
    for key in ("symbol", "direction", "entry_price", "exit_price", "volume"):
        if key not in body:
            errors.append(f"{key} is required")
    _take_account_currency(body, clean, errors)
    if errors:
        return _error(errors)

    result = await evaluate_trade(
        clean["symbol"], clean["direction"],
        clean["entry_price"], clean["exit_price"], clean["volume"],
        stop_loss=clean.get("stop_loss"),
        take_profit=clean.get("take_profit"),
        account_currency=clean["account_currency"],
    )
    errors = _metrics_error(asdict(result))
    if errors:
        return _error(errors)
    return {"symbol": clean["symbol"], **asdict(result)}


@router.post("/calculator/position-size")
async def post_position_size(body: dict):
    """Recommend a lot size for the given balance, risk and stop distance."""
    clean: dict = {}
    errors: list[str] = []
    _take_symbol(body, clean, errors)
    body = {"risk_percentage": _default_risk_pct, **body}
    for key in ("account_balance", "risk_percentage", "entry_price", "stop_loss"):
        _positive(key)(body, clean, errors)
    if "risk_percentage" in clean and clean["risk_percentage"] > 100:
        errors.append("risk_percentage must be at most 100")
    if errors:
        return _error(errors)

    lot_size = calculate_position_size(
        clean["symbol"], clean["account_balance"], clean["risk_percentage"],
        clean["entry_price"], clean["stop_loss"],
    )
    if not math.isfinite(lot_size):
        if clean["stop_loss"] == clean["entry_price"]:
            message = "stop_loss must differ from entry_price"
        else:
            message = "balance and stop distance produce a lot size too large to represent"
        logger.info("Rejected position size for %s: %s", clean["symbol"], message)
        return _error([message])

    return {
        "symbol": clean["symbol"],
        "lot_size": lot_size,
        "units": round(lot_size * 100_000),
        "risk_amount": round(clean["account_balance"] * clean["risk_percentage"] / 100, 2),
        "pip_distance": round(
            abs(pips_between(clean["symbol"], clean["entry_price"], clean["stop_loss"])), 1,
        ),
        "pip_size": pip_value(clean["symbol"]),
        "pip_decimal_place": resolve(clean["symbol"]).pip_decimal_place,
    }


# ── Trades ───────────────────────────────────────────────────────────────


@router.post("/trades", status_code=201)
async def create_trade(body: dict):
    """Validate a trade, compute its metrics and store it."""
    if _trade_repo is None:
        return _error(["Trade store not configured"], status_code=503)

    clean, errors = validate_trade(body)
    if errors:
        logger.info("Rejected trade: %s", "; ".join(errors))
        return _error(errors)

    metrics = await trade_metrics(
        clean["symbol"], clean["direction"],
        clean["entry_price"], clean["exit_price"], clean["volume"],
        stop_loss=clean.get("stop_loss"),
        take_profit=clean.get("take_profit"),
    )
    errors = _metrics_error(metrics)
    if errors:
        logger.info("Rejected trade: %s", "; ".join(errors))
        return _error(errors)
    trade_id = _trade_repo.insert_trade(**clean, **metrics)
    return _trade_repo.get_trade(trade_id)


@router.get("/trades")
async def get_trades(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    symbol: Optional[str] = Query(default=None),
    direction: Optional[str] = Query(default=None),
    date_from: Optional[str] = Query(default=None),
    date_to: Optional[str] = Query(default=None),
    account_id: Optional[int] = Query(default=None, ge=1),
):
    """Return a page of journal trades, newest first."""
    errors = _filters_error(date_from, date_to)
    if direction is not None and direction.lower() not in ("buy", "sell"):
        errors.append("direction must be Buy or Sell")
    if errors:
        return _error(errors)
    if _trade_repo is None:
        return {"trades": [], "total": 0}
    return _trade_repo.get_trades(
        limit=limit,
        offset=offset,
        symbol=normalize_symbol(symbol) if symbol else None,
        direction=direction.capitalize() if direction else None,
        date_from=date_from,
        date_to=date_to,
        account_id=account_id,
    )


@router.get("/trades/{trade_id}")
async def get_trade(trade_id: int):
    """Return a single trade."""
    trade = _trade_repo.get_trade(trade_id) if _trade_repo else None
    if trade is None:
        return _error([f"Trade {trade_id} not found"], status_code=404)
    return trade


@router.put("/trades/{trade_id}")
async def update_trade(trade_id: int, body: dict):
    """Apply a partial update, recomputing metrics when inputs change."""
    existing = _trade_repo.get_trade(trade_id) if _trade_repo else None
    if existing is None:
        return _error([f"Trade {trade_id} not found"], status_code=404)

    clean, errors = validate_trade(body, partial=True)
    if errors:
        return _error(errors)

    if any(key in clean for key in _METRIC_INPUTS):
        merged = {**existing, **clean}
        metrics = await trade_metrics(
            merged["symbol"], merged["direction"],
            merged["entry_price"], merged["exit_price"], merged["volume"],
            stop_loss=merged.get("stop_loss"),
            take_profit=merged.get("take_profit"),
        )
        errors = _metrics_error(metrics)
        if errors:
            return _error(errors)
        clean.update(metrics)

    _trade_repo.update_trade(trade_id, clean)
    return _trade_repo.get_trade(trade_id)


@router.delete("/trades/{trade_id}")
async def delete_trade(trade_id: int):
    """Delete a trade."""
    if _trade_repo is None or not _trade_repo.delete_trade(trade_id):
        return _error([f"Trade {trade_id} not found"], status_code=404)
    return {"status": "deleted", "id": trade_id}


# ── Analytics ────────────────────────────────────────────────────────────


@router.get("/analytics")
async def get_analytics(
    date_from: Optional[str] = Query(default=None),
    date_to: Optional[str] = Query(default=None),
    account_id: Optional[int] = Query(default=None, ge=1),
):
    """Return the dashboard analytics payload."""
    errors = _filters_error(date_from, date_to)
    if errors:
        return _error(errors)
    records = _load_records(date_from, date_to, account_id)
    return aggregator.summarize(records, monthly_limit=_monthly_limit)


@router.get("/analytics/risk-metrics")
async def get_risk_metrics(
    date_from: Optional[str] = Query(default=None),
    date_to: Optional[str] = Query(default=None),
    account_id: Optional[int] = Query(default=None, ge=1),
):
    """Return RRR, win/loss extremes, profit factor and max drawdown."""
    errors = _filters_error(date_from, date_to)
    if errors:
        return _error(errors)
    records = _load_records(date_from, date_to, account_id)
    return asdict(aggregator.risk_metrics(records))


@router.get("/analytics/performance-by-symbol")
async def get_performance_by_symbol(
    account_id: Optional[int] = Query(default=None, ge=1),
):
    """Return detailed per-symbol statistics."""
    records = _load_records(account_id=account_id)
    return {"symbols": [asdict(s) for s in aggregator.performance_by_symbol(records)]}


@router.get("/analytics/calendar")
async def get_calendar(
    year: Optional[int] = Query(default=None, ge=1970, le=9999),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    account_id: Optional[int] = Query(default=None, ge=1),
):
    """Return per-day totals for one month (defaults to the current month)."""
    today = date.today()
    year = year or today.year
    month = month or today.month
    records = _load_records(account_id=account_id)
    days = aggregator.calendar_month(records, year, month)
    return {"year": year, "month": month, "days": [asdict(d) for d in days]}


@router.get("/analytics/weekdays")
async def get_weekdays(
    account_id: Optional[int] = Query(default=None, ge=1),
):
    """Return profit and trade count per weekday."""
    records = _load_records(account_id=account_id)
    return {"weekdays": [asdict(w) for w in aggregator.profit_by_weekday(records)]}


@router.get("/analytics/insights")
async def get_insights(
    date_from: Optional[str] = Query(default=None),
    date_to: Optional[str] = Query(default=None),
    account_id: Optional[int] = Query(default=None, ge=1),
):
    """Return win/loss streaks, the Buy/Sell split and best/worst trades."""
    errors = _filters_error(date_from, date_to)
    if errors:
        return _error(errors)
    records = _load_records(date_from, date_to, account_id)
    return aggregator.insights(records)
