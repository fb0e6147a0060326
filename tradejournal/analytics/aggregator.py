"""Portfolio analytics — pure reductions over persisted trade records.

Every function takes a list of :class:`AggregatedTradeRecord` and returns a
summary view.  Empty input always yields neutral values (``0.0``, ``None``
or ``[]``) rather than raising or producing NaN.
"""

import calendar
from dataclasses import asdict
from datetime import date, timedelta
from typing import Callable, Hashable, Optional

from tradejournal.analytics.models import (
    AggregatedTradeRecord,
    CalendarDay,
    DayProfit,
    DirectionPerformance,
    EquityPoint,
    MonthlyPerformance,
    RiskMetrics,
    SymbolPerformance,
    SymbolProfit,
    TradeStreaks,
    WeekdayProfit,
)


def _money(value: float) -> float:
    return round(value, 2)


def _group(
    trades: list[AggregatedTradeRecord],
    key: Callable[[AggregatedTradeRecord], Hashable],
) -> dict:
    """Group trades by *key*, keeping first-encountered order."""
    groups: dict = {}
    for t in trades:
        groups.setdefault(key(t), []).append(t)
    return groups


def _chronological(trades: list[AggregatedTradeRecord]) -> list[AggregatedTradeRecord]:
    return sorted(trades, key=lambda t: (t.date, t.time))


# ── Rates and breakdowns ─────────────────────────────────────────────────


def win_rate(trades: list[AggregatedTradeRecord]) -> float:
    """Percentage of trades flagged as wins, ``0.0`` for no trades."""
    if not trades:
        return 0.0
    wins = sum(1 for t in trades if t.is_win)
    return (wins / len(trades)) * 100.0


def _extreme_day(
    trades: list[AggregatedTradeRecord],
    better: Callable[[float, float], bool],
) -> Optional[DayProfit]:
    pick: Optional[DayProfit] = None
    for day, group in _group(trades, lambda t: t.date).items():
        profit = sum(t.profit for t in group)
        if pick is None or better(profit, pick.profit):
            pick = DayProfit(date=day.isoformat(), profit=profit, trades=len(group))
    if pick is None:
        return None
    return DayProfit(date=pick.date, profit=_money(pick.profit), trades=pick.trades)


def best_trading_day(trades: list[AggregatedTradeRecord]) -> Optional[DayProfit]:
    """Return the date with the highest summed profit.

    Ties go to the date encountered first.  ``None`` for no trades.
    """
    return _extreme_day(trades, lambda profit, current: profit > current)


def worst_trading_day(trades: list[AggregatedTradeRecord]) -> Optional[DayProfit]:
    """Return the date with the lowest summed profit.

    Ties go to the date encountered first.  ``None`` for no trades.
    """
    return _extreme_day(trades, lambda profit, current: profit < current)


def profit_by_symbol(trades: list[AggregatedTradeRecord]) -> list[SymbolProfit]:
    """Summed profit and trade count per symbol, most profitable first."""
    rows = [
        SymbolProfit(
            symbol=symbol,
            profit=_money(sum(t.profit for t in group)),
            trades=len(group),
        )
        for symbol, group in _group(trades, lambda t: t.symbol).items()
    ]
    return sorted(rows, key=lambda r: r.profit, reverse=True)


def profit_by_day(
    trades: list[AggregatedTradeRecord],
    days: int = 30,
    today: Optional[date] = None,
) -> list[DayProfit]:
    """Per-date totals for the trailing *days* window, oldest first."""
    today = today or date.today()
    cutoff = today - timedelta(days=days)
    recent = [t for t in trades if t.date >= cutoff]
    groups = _group(recent, lambda t: t.date)
    return [
        DayProfit(
            date=day.isoformat(),
            profit=_money(sum(t.profit for t in groups[day])),
            trades=len(groups[day]),
        )
        for day in sorted(groups)
    ]


def profit_by_weekday(trades: list[AggregatedTradeRecord]) -> list[WeekdayProfit]:
    """Per-weekday totals, Monday first, omitting weekdays with no trades."""
    groups = _group(trades, lambda t: t.date.weekday())
    return [
        WeekdayProfit(
            weekday=calendar.day_name[idx],
            profit=_money(sum(t.profit for t in groups[idx])),
            trades=len(groups[idx]),
        )
        for idx in sorted(groups)
    ]


def equity_curve(trades: list[AggregatedTradeRecord]) -> list[EquityPoint]:
    """Cumulative profit at the end of each trading day, oldest first."""
    groups = _group(trades, lambda t: t.date)
    cumulative = 0.0
    curve: list[EquityPoint] = []
    for day in sorted(groups):
        cumulative += sum(t.profit for t in groups[day])
        curve.append(EquityPoint(date=day.isoformat(), cumulative_equity=_money(cumulative)))
    return curve


def monthly_performance(
    trades: list[AggregatedTradeRecord],
    limit: int = 12,
) -> list[MonthlyPerformance]:
    """Monthly rollups, most recent month first, capped at *limit* entries."""
    groups = _group(trades, lambda t: f"{t.date.year:04d}-{t.date.month:02d}")
    months = sorted(groups, reverse=True)[:max(limit, 0)]
    result = []
    for month in months:
        group = groups[month]
        winning = sum(1 for t in group if t.is_win)
        result.append(MonthlyPerformance(
            month=month,
            profit=_money(sum(t.profit for t in group)),
            trades=len(group),
            winning_trades=winning,
            win_rate=(winning / len(group)) * 100.0,
        ))
    return result


def calendar_month(
    trades: list[AggregatedTradeRecord],
    year: int,
    month: int,
) -> list[CalendarDay]:
    """Per-day totals for one calendar month, ordered by day."""
    in_month = [t for t in trades if t.date.year == year and t.date.month == month]
    groups = _group(in_month, lambda t: t.date.day)
    days = []
    for day in sorted(groups):
        profit = _money(sum(t.profit for t in groups[day]))
        days.append(CalendarDay(day=day, profit=profit, trades=len(groups[day]), win=profit > 0))
    return days


def performance_by_symbol(trades: list[AggregatedTradeRecord]) -> list[SymbolPerformance]:
    """Detailed per-symbol statistics, highest total profit first."""
    rows = []
    for symbol, group in _group(trades, lambda t: t.symbol).items():
        n = len(group)
        winning = sum(1 for t in group if t.is_win)
        total_profit = sum(t.profit for t in group)
        total_pips = sum(t.pips for t in group)
        rows.append(SymbolPerformance(
            symbol=symbol,
            total_trades=n,
            winning_trades=winning,
            losing_trades=n - winning,
            total_profit=_money(total_profit),
            average_profit=_money(total_profit / n),
            win_rate=round((winning / n) * 100.0, 2),
            total_pips=round(total_pips, 1),
            average_pips=round(total_pips / n, 1),
        ))
    return sorted(rows, key=lambda r: r.total_profit, reverse=True)


def performance_by_direction(trades: list[AggregatedTradeRecord]) -> list[DirectionPerformance]:
    """Win rate and profit for Buy and Sell trades, Buy first.

    Directions with no trades are omitted.
    """
    groups = _group(trades, lambda t: (t.direction or "").capitalize())
    rows = []
    for direction in ("Buy", "Sell"):
        group = groups.get(direction)
        if not group:
            continue
        winning = sum(1 for t in group if t.is_win)
        rows.append(DirectionPerformance(
            direction=direction,
            trades=len(group),
            winning_trades=winning,
            win_rate=round((winning / len(group)) * 100.0, 2),
            profit=_money(sum(t.profit for t in group)),
        ))
    return rows


# ── Streaks and single trades ────────────────────────────────────────────


def trade_streaks(trades: list[AggregatedTradeRecord]) -> TradeStreaks:
    """Longest consecutive win and loss runs in chronological order.

    A breakeven trade ends both the current win run and the current loss run.
    """
    max_wins = max_losses = 0
    wins = losses = 0
    for t in _chronological(trades):
        if t.profit > 0:
            wins += 1
            losses = 0
            max_wins = max(max_wins, wins)
        elif t.profit < 0:
            losses += 1
            wins = 0
            max_losses = max(max_losses, losses)
        else:
            wins = losses = 0
    return TradeStreaks(max_win_streak=max_wins, max_loss_streak=max_losses)


def best_trade(trades: list[AggregatedTradeRecord]) -> Optional[AggregatedTradeRecord]:
    """Single most profitable trade, first encountered on ties."""
    best = None
    for t in trades:
        if best is None or t.profit > best.profit:
            best = t
    return best


def worst_trade(trades: list[AggregatedTradeRecord]) -> Optional[AggregatedTradeRecord]:
    """Single least profitable trade, first encountered on ties."""
    worst = None
    for t in trades:
        if worst is None or t.profit < worst.profit:
            worst = t
    return worst


# ── Risk ─────────────────────────────────────────────────────────────────


def risk_metrics(trades: list[AggregatedTradeRecord]) -> RiskMetrics:
    """Compute risk statistics in one chronological pass.

    Drawdown is measured on the cumulative profit series ordered by date
    then intraday time, against a running peak that starts at zero.
    """
    rrr_sum = 0.0
    rrr_count = 0
    gross_win = 0.0
    win_count = 0
    gross_loss = 0.0
    loss_count = 0
    largest_win: Optional[float] = None
    smallest: Optional[float] = None

    cumulative = 0.0
    peak = 0.0
    max_dd = 0.0

    for t in _chronological(trades):
        if t.rrr is not None:
            rrr_sum += t.rrr
            rrr_count += 1
        if t.profit > 0:
            gross_win += t.profit
            win_count += 1
        elif t.profit < 0:
            gross_loss += abs(t.profit)
            loss_count += 1
        if largest_win is None or t.profit > largest_win:
            largest_win = t.profit
        if smallest is None or t.profit < smallest:
            smallest = t.profit

        cumulative += t.profit
        if cumulative > peak:
            peak = cumulative
        dd = peak - cumulative
        if dd > max_dd:
            max_dd = dd

    return RiskMetrics(
        average_rrr=round(rrr_sum / rrr_count, 2) if rrr_count else None,
        largest_win=_money(largest_win) if largest_win is not None else 0.0,
        largest_loss=_money(abs(smallest)) if smallest is not None else 0.0,
        average_win=_money(gross_win / win_count) if win_count else 0.0,
        average_loss=_money(gross_loss / loss_count) if loss_count else 0.0,
        profit_factor=round(gross_win / gross_loss, 4) if gross_loss > 0 else 0.0,
        max_drawdown=_money(max_dd),
    )


# ── Dashboard payload ────────────────────────────────────────────────────


def summarize(
    trades: list[AggregatedTradeRecord],
    today: Optional[date] = None,
    monthly_limit: int = 12,
) -> dict:
    """Build the dashboard analytics payload.

    Returns:
        Dict with ``total_trades``, ``winning_trades``, ``losing_trades``,
        ``win_rate``, ``total_profit``, ``best_day``, ``worst_day``,
        ``profit_by_symbol``, ``profit_by_day``, ``equity_curve`` and
        ``monthly_performance``.
    """
    today = today or date.today()
    winning = sum(1 for t in trades if t.is_win)
    empty_day = DayProfit(date=today.isoformat(), profit=0.0, trades=0)
    best = best_trading_day(trades) or empty_day
    worst = worst_trading_day(trades) or empty_day
    return {
        "total_trades": len(trades),
        "winning_trades": winning,
        "losing_trades": len(trades) - winning,
        "win_rate": round(win_rate(trades), 2),
        "total_profit": _money(sum(t.profit for t in trades)),
        "best_day": asdict(best),
        "worst_day": asdict(worst),
        "profit_by_symbol": [asdict(r) for r in profit_by_symbol(trades)],
        "profit_by_day": [asdict(r) for r in profit_by_day(trades, today=today)],
        "equity_curve": [asdict(p) for p in equity_curve(trades)],
        "monthly_performance": [asdict(m) for m in monthly_performance(trades, monthly_limit)],
    }


def insights(trades: list[AggregatedTradeRecord]) -> dict:
    """Build the trading-insights payload: streaks, direction split and
    the best and worst single trades (``None`` when there are no trades).
    """
    def trade_view(t: Optional[AggregatedTradeRecord]) -> Optional[dict]:
        if t is None:
            return None
        return {
            "date": t.date.isoformat(),
            "time": t.time,
            "symbol": t.symbol,
            "direction": t.direction,
            "profit": _money(t.profit),
            "pips": t.pips,
        }

    return {
        **asdict(trade_streaks(trades)),
        "directions": [asdict(d) for d in performance_by_direction(trades)],
        "best_trade": trade_view(best_trade(trades)),
        "worst_trade": trade_view(worst_trade(trades)),
    }
