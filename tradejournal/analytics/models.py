"""Analytics data models — typed views over persisted trade rows."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class AggregatedTradeRecord:
    """One persisted trade as seen by the aggregator."""

    date: date
    time: str  # "HH:MM:SS", intraday ordering key
    profit: float
    pips: float
    is_win: bool
    symbol: str
    rrr: Optional[float] = None
    direction: Optional[str] = None  # "Buy" or "Sell"

    @classmethod
    def from_row(cls, row: dict) -> "AggregatedTradeRecord":
        """Build a record from a ``trades`` row dict.

        Accepts ``trade_date``/``trade_time`` column names as well as
        ``date``/``time``, and ISO strings or ``date`` objects for the day.
        """
        day = row.get("trade_date", row.get("date"))
        if isinstance(day, datetime):
            day = day.date()
        elif isinstance(day, str):
            day = date.fromisoformat(day[:10])
        rrr = row.get("rrr")
        return cls(
            date=day,
            time=str(row.get("trade_time", row.get("time")) or "00:00:00"),
            profit=float(row.get("profit") or 0.0),
            pips=float(row.get("pips") or 0.0),
            is_win=bool(row.get("is_win")),
            symbol=row["symbol"],
            rrr=float(rrr) if rrr is not None else None,
            direction=row.get("direction"),
        )


@dataclass(frozen=True)
class EquityPoint:
    """Cumulative profit at the close of one trading day."""

    date: str
    cumulative_equity: float


@dataclass(frozen=True)
class DayProfit:
    date: str
    profit: float
    trades: int


@dataclass(frozen=True)
class SymbolProfit:
    symbol: str
    profit: float
    trades: int


@dataclass(frozen=True)
class WeekdayProfit:
    weekday: str  # "Monday" … "Sunday"
    profit: float
    trades: int


@dataclass(frozen=True)
class MonthlyPerformance:
    month: str  # "YYYY-MM"
    profit: float
    trades: int
    winning_trades: int
    win_rate: float


@dataclass(frozen=True)
class CalendarDay:
    day: int
    profit: float
    trades: int
    win: bool


@dataclass(frozen=True)
class SymbolPerformance:
    symbol: str
    total_trades: int
    winning_trades: int
    losing_trades: int
    total_profit: float
    average_profit: float
    win_rate: float
    total_pips: float
    average_pips: float


@dataclass(frozen=True)
class RiskMetrics:
    """Risk statistics over a chronologically ordered trade set."""

    average_rrr: Optional[float]
    largest_win: float
    largest_loss: float
    average_win: float
    average_loss: float
    profit_factor: float
    max_drawdown: float


@dataclass(frozen=True)
class TradeStreaks:
    """Longest runs of consecutive wins and losses."""

    max_win_streak: int
    max_loss_streak: int


@dataclass(frozen=True)
class DirectionPerformance:
    direction: str  # "Buy" or "Sell"
    trades: int
    winning_trades: int
    win_rate: float
    profit: float
