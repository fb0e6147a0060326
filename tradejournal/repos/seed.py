"""Sample journal data for demos and local development."""

import logging

from tradejournal.economics.calculator import trade_metrics
from tradejournal.repos.trade_repo import TradeRepo

logger = logging.getLogger("tradejournal")

SAMPLE_TRADES: list[dict] = [
    {
        "symbol": "EURUSD", "direction": "Buy",
        "entry_price": 1.0850, "exit_price": 1.0920,
        "stop_loss": 1.0800, "take_profit": 1.0950, "volume": 1.00,
        "trade_date": "2024-01-15", "trade_time": "09:30:00",
        "notes": "Strong bullish momentum after ECB announcement",
    },
    {
        "symbol": "GBPUSD", "direction": "Sell",
        "entry_price": 1.2650, "exit_price": 1.2580,
        "stop_loss": 1.2700, "take_profit": 1.2550, "volume": 0.50,
        "trade_date": "2024-01-16", "trade_time": "14:15:00",
        "notes": "Brexit concerns weighing on GBP",
    },
    {
        "symbol": "USDJPY", "direction": "Buy",
        "entry_price": 148.50, "exit_price": 148.20,
        "stop_loss": 148.00, "take_profit": 149.50, "volume": 0.75,
        "trade_date": "2024-01-17", "trade_time": "11:45:00",
        "notes": "Stopped out due to BoJ intervention rumors",
    },
    {
        "symbol": "XAUUSD", "direction": "Buy",
        "entry_price": 2020.50, "exit_price": 2035.80,
        "stop_loss": 2010.00, "take_profit": 2040.00, "volume": 0.10,
        "trade_date": "2024-01-18", "trade_time": "16:20:00",
        "notes": "Gold rally on safe haven demand",
    },
    {
        "symbol": "EURUSD", "direction": "Sell",
        "entry_price": 1.0880, "exit_price": 1.0830,
        "stop_loss": 1.0920, "take_profit": 1.0820, "volume": 1.50,
        "trade_date": "2024-01-19", "trade_time": "08:00:00",
        "notes": "Reversal at resistance level",
    },
]


async def seed_sample_trades(repo: TradeRepo, account_id: int | None = None) -> list[int]:
    """Insert :data:`SAMPLE_TRADES` with calculated metrics.

    Returns:
        The ids of the inserted trades, in insertion order.
    """
    ids = []
    for trade in SAMPLE_TRADES:
        metrics = await trade_metrics(
            trade["symbol"], trade["direction"],
            trade["entry_price"], trade["exit_price"], trade["volume"],
            stop_loss=trade["stop_loss"], take_profit=trade["take_profit"],
        )
        ids.append(repo.insert_trade(**trade, **metrics, account_id=account_id))
    logger.info("Seeded %d sample trades", len(ids))
    return ids
