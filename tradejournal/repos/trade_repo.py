"""Trade repository — SQLite CRUD for the trades table."""

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Optional

from tradejournal.repos.db import get_connection

logger = logging.getLogger("tradejournal")

_UPDATABLE_COLUMNS = (
    "account_id", "symbol", "direction", "entry_price", "exit_price",
    "stop_loss", "take_profit", "volume", "profit", "pips", "pip_value",
    "rrr", "is_win", "trade_date", "trade_time", "notes",
)


def _row_to_dict(row: sqlite3.Row) -> dict:
    trade = dict(row)
    trade["is_win"] = bool(trade["is_win"])
    return trade


def _where(
    symbol: Optional[str] = None,
    direction: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    account_id: Optional[int] = None,
) -> tuple[str, list]:
    """Build a ``WHERE`` clause and its parameters from optional filters."""
    conditions: list[str] = []
    params: list = []

    if symbol:
        conditions.append("symbol = ?")
        params.append(symbol)
    if direction:
        conditions.append("direction = ?")
        params.append(direction)
    if date_from:
        conditions.append("trade_date >= ?")
        params.append(date_from)
    if date_to:
        conditions.append("trade_date <= ?")
        params.append(date_to)
    if account_id is not None:
        conditions.append("account_id = ?")
        params.append(account_id)

    if not conditions:
        return "", params
    return "WHERE " + " AND ".join(conditions), params


class TradeRepo:
    """Data access layer for journal trades.

    Args:
        db_path: Path to the SQLite database file.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    # ── Write ────────────────────────────────────────────────────────────

    def insert_trade(
        self,
        symbol: str,
        direction: str,
        entry_price: float,
        exit_price: float,
        volume: float,
        profit: float,
        pips: float,
        pip_value: float,
        rrr: Optional[float],
        is_win: bool,
        trade_date: str,
        trade_time: str,
        stop_loss: Optional[float] = None,
        take_profit: Optional[float] = None,
        account_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Insert a trade with its computed metrics and return its ``id``."""
        conn = get_connection(self._db_path)
        try:
            cur = conn.execute(
                """
                INSERT INTO trades
                    (account_id, symbol, direction, entry_price, exit_price,
                     stop_loss, take_profit, volume, profit, pips, pip_value,
                     rrr, is_win, trade_date, trade_time, notes)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    account_id, symbol, direction, entry_price, exit_price,
                    stop_loss, take_profit, volume, profit, pips, pip_value,
                    rrr, int(is_win), trade_date, trade_time, notes,
                ),
            )
            conn.commit()
            logger.info("Trade %d recorded: %s %s profit=%.2f",
                        cur.lastrowid, direction, symbol, profit)
            return cur.lastrowid
        finally:
            conn.close()

    def update_trade(self, trade_id: int, fields: dict) -> bool:
        """Update the given columns of a trade.

        Unknown keys in *fields* are ignored.  Returns ``True`` when a row
        was updated.
        """
        columns = [c for c in _UPDATABLE_COLUMNS if c in fields]
        if not columns:
            return self.get_trade(trade_id) is not None

        values = [
            int(fields[c]) if c == "is_win" else fields[c]
            for c in columns
        ]
        assignments = ", ".join(f"{c} = ?" for c in columns)
        updated_at = datetime.now(timezone.utc).isoformat()

        conn = get_connection(self._db_path)
        try:
            cur = conn.execute(
                f"UPDATE trades SET {assignments}, updated_at = ? WHERE id = ?",
                (*values, updated_at, trade_id),
            )
            conn.commit()
            if cur.rowcount:
                logger.info("Trade %d updated: %s", trade_id, ", ".join(columns))
            return cur.rowcount > 0
        finally:
            conn.close()

    def delete_trade(self, trade_id: int) -> bool:
        """Delete a trade.  Returns ``True`` when a row was removed."""
        conn = get_connection(self._db_path)
        try:
            cur = conn.execute("DELETE FROM trades WHERE id = ?", (trade_id,))
            conn.commit()
            if cur.rowcount:
                logger.info("Trade %d deleted", trade_id)
            return cur.rowcount > 0
        finally:
            conn.close()

    # ── Read ─────────────────────────────────────────────────────────────

    def get_trade(self, trade_id: int) -> Optional[dict]:
        """Return a single trade, or ``None``."""
        conn = get_connection(self._db_path)
        try:
            row = conn.execute(
                "SELECT * FROM trades WHERE id = ?", (trade_id,)
            ).fetchone()
            return _row_to_dict(row) if row else None
        finally:
            conn.close()

    def get_trades(
        self,
        limit: int = 20,
        offset: int = 0,
        symbol: Optional[str] = None,
        direction: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        account_id: Optional[int] = None,
    ) -> dict:
        """Return a page of trades, newest first.

        Returns:
            ``{"trades": [...], "total": int}``
        """
        where_clause, params = _where(symbol, direction, date_from, date_to, account_id)
        conn = get_connection(self._db_path)
        try:
            rows = conn.execute(
                f"SELECT * FROM trades {where_clause} "
                "ORDER BY trade_date DESC, trade_time DESC, id DESC LIMIT ? OFFSET ?",
                (*params, limit, offset),
            ).fetchall()
            total = conn.execute(
                f"SELECT COUNT(*) FROM trades {where_clause}",
                params,
            ).fetchone()[0]
            return {"trades": [_row_to_dict(r) for r in rows], "total": total}
        finally:
            conn.close()

    def get_records(
        self,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        account_id: Optional[int] = None,
    ) -> list[dict]:
        """Return every matching trade in chronological order for analytics."""
        where_clause, params = _where(
            date_from=date_from, date_to=date_to, account_id=account_id,
        )
        conn = get_connection(self._db_path)
        try:
            rows = conn.execute(
                f"SELECT * FROM trades {where_clause} "
                "ORDER BY trade_date ASC, trade_time ASC, id ASC",
                params,
            ).fetchall()
            return [_row_to_dict(r) for r in rows]
        finally:
            conn.close()
