"""Trade economics — pure math, no I/O.

Turns price-space trade facts (symbol, direction, entry/exit, lot size,
stop-loss/take-profit) into money-space results: pips, pip value, profit,
win flag, risk-to-reward and position size.

Nothing here raises for business reasons.  Degenerate inputs come back as
``None`` (RRR) or a non-finite float (position size) and the caller decides
how to surface them.
"""

import math
from dataclasses import dataclass, replace
from typing import Optional

from tradejournal.economics.rates import DEFAULT_RATE_PROVIDER, RateProvider
from tradejournal.instruments.registry import STANDARD_LOT, resolve


@dataclass(frozen=True)
class TradeEconomicsResult:
    """Outcome of :func:`calculate_profit`."""

    profit: float
    pips: float
    pip_value: float  # value of one pip at the traded lot size
    is_win: bool
    rrr: Optional[float] = None
    approximate: bool = False  # True when no USD conversion was possible


def round_half_up(value: float, ndigits: int) -> float:
    """Round with halves going up (towards +inf).

    ``round()`` uses banker's rounding; stored trades were rounded with
    ``floor(x * 10**n + 0.5) / 10**n`` and must keep matching to the cent.
    Non-finite values, or values that overflow once scaled, are returned
    unchanged.
    """
    factor = 10 ** ndigits
    if not math.isfinite(value * factor):
        return value
    return math.floor(value * factor + 0.5) / factor


# ── Price arithmetic ─────────────────────────────────────────────────────


def pip_value(symbol: str) -> float:
    """Return the price increment of one pip (e.g. 0.0001 for EUR/USD)."""
    return 10 ** -resolve(symbol).pip_decimal_place


def pips_between(symbol: str, entry_price: float, exit_price: float) -> float:
    """Return the signed pip distance from *entry_price* to *exit_price*.

    The sign follows the price move, not the trade direction.
    """
    return (exit_price - entry_price) / pip_value(symbol)


async def conversion_rate_to_usd(
    symbol: str,
    current_price: float,
    rate_provider: Optional[RateProvider] = None,
) -> float:
    """Return the multiplier converting quote-currency value into USD."""
    provider = rate_provider or DEFAULT_RATE_PROVIDER
    return await provider.rate_to_usd(resolve(symbol), current_price)


# ── Profit ───────────────────────────────────────────────────────────────


async def calculate_profit(
    symbol: str,
    direction: str,
    entry_price: float,
    exit_price: float,
    lot_size: float,
    account_currency: str = "USD",
    rate_provider: Optional[RateProvider] = None,
) -> TradeEconomicsResult:
    """Calculate profit in account currency for a closed trade.

    Formula::

        pips    = (exit - entry) / pip        (negated for "Sell")
        units   = lot_size × 100 000
        profit  = pips × pip × units          (quote currency)
        profit *= rate(exit)                  (only when USD is the base)

    Args:
        symbol: Instrument symbol, e.g. ``"EURUSD"``.
        direction: ``"Buy"`` or ``"Sell"``.
        entry_price: Fill price on entry.
        exit_price: Fill price on exit.
        lot_size: Volume in standard lots.
        account_currency: Account currency.  Only ``"USD"`` is converted
            exactly; anything else marks the result approximate.
        rate_provider: Source of USD conversion rates.  Defaults to the
            price-derived registry heuristic.

    Returns:
        A :class:`TradeEconomicsResult` with profit rounded to 2 dp and
        pips to 1 dp.  ``rrr`` is left unset.
    """
    info = resolve(symbol)
    pip = pip_value(symbol)
    pips = pips_between(symbol, entry_price, exit_price)
    if direction.lower() == "sell":
        pips = -pips

    units = lot_size * STANDARD_LOT
    profit = pips * pip * units
    per_pip = pip * units

    if info.usd_is_base:
        rate = await conversion_rate_to_usd(symbol, exit_price, rate_provider)
        profit *= rate
        per_pip *= rate

    approximate = (
        not (info.usd_is_quote or info.usd_is_base)
        or account_currency.upper() != "USD"
    )

    profit = round_half_up(profit, 2)
    return TradeEconomicsResult(
        profit=profit,
        pips=round_half_up(pips, 1),
        pip_value=round_half_up(per_pip, 4),
        is_win=profit > 0,
        approximate=approximate,
    )


# ── Risk ─────────────────────────────────────────────────────────────────


def calculate_rrr(
    stop_loss: Optional[float],
    take_profit: Optional[float],
    entry_price: float,
) -> Optional[float]:
    """Return the reward-to-risk ratio rounded to 1 dp.

    Uses absolute distances, so it does not check that the stop and target
    sit on the correct side of entry.  Returns ``None`` when either bound is
    missing (or zero) or when the stop equals the entry.
    """
    if not stop_loss or not take_profit:
        return None

    risk = abs(entry_price - stop_loss)
    reward = abs(take_profit - entry_price)
    if risk == 0:
        return None
    return round_half_up(reward / risk, 1)


def calculate_position_size(
    symbol: str,
    account_balance: float,
    risk_percentage: float,
    entry_price: float,
    stop_loss: float,
) -> float:
    """Calculate the lot size that risks *risk_percentage* of the balance.

    Formula::

        risk_amount  = balance × (risk_pct / 100)
        pip_distance = |pips(entry → stop)|
        lots         = risk_amount / (pip_distance × pip × 100 000)

    Returns:
        Lot size rounded to 2 dp.  When the stop equals the entry the result
        is ``math.inf`` (``math.nan`` if the risk amount is also zero);
        callers must check ``math.isfinite`` before using it.
    """
    risk_amount = account_balance * (risk_percentage / 100.0)
    pip_distance = abs(pips_between(symbol, entry_price, stop_loss))
    denominator = pip_distance * pip_value(symbol) * STANDARD_LOT

    if denominator == 0:
        if risk_amount == 0:
            return math.nan
        return math.copysign(math.inf, risk_amount)

    return round_half_up(risk_amount / denominator, 2)


# ── Persisted metrics ────────────────────────────────────────────────────


async def evaluate_trade(
    symbol: str,
    direction: str,
    entry_price: float,
    exit_price: float,
    volume: float,
    stop_loss: Optional[float] = None,
    take_profit: Optional[float] = None,
    account_currency: str = "USD",
    rate_provider: Optional[RateProvider] = None,
) -> TradeEconomicsResult:
    """Run :func:`calculate_profit` and attach the trade's RRR."""
    result = await calculate_profit(
        symbol, direction, entry_price, exit_price, volume,
        account_currency=account_currency,
        rate_provider=rate_provider,
    )
    return replace(result, rrr=calculate_rrr(stop_loss, take_profit, entry_price))


async def trade_metrics(
    symbol: str,
    direction: str,
    entry_price: float,
    exit_price: float,
    volume: float,
    stop_loss: Optional[float] = None,
    take_profit: Optional[float] = None,
    rate_provider: Optional[RateProvider] = None,
) -> dict:
    """Return the derived columns stored alongside a trade row.

    Returns:
        ``{"profit", "pips", "pip_value", "rrr", "is_win"}``
    """
    result = await evaluate_trade(
        symbol, direction, entry_price, exit_price, volume,
        stop_loss=stop_loss,
        take_profit=take_profit,
        rate_provider=rate_provider,
    )
    return {
        "profit": result.profit,
        "pips": result.pips,
        "pip_value": result.pip_value,
        "rrr": result.rrr,
        "is_win": result.is_win,
    }
