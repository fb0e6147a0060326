"""Tests for the SQLite trade repository and sample seeding."""

import pytest

from tradejournal.repos.db import get_connection, init_db
from tradejournal.repos.seed import SAMPLE_TRADES, seed_sample_trades
from tradejournal.repos.trade_repo import TradeRepo


@pytest.fixture
def repo(tmp_path):
    db_path = str(tmp_path / "journal" / "test.db")
    init_db(db_path)
    return TradeRepo(db_path)


def _insert(repo, **overrides):
    trade = dict(
        symbol="EURUSD", direction="Buy", entry_price=1.0850,
        exit_price=1.0920, volume=1.0, profit=700.0, pips=70.0,
        pip_value=10.0, rrr=2.0, is_win=True,
        trade_date="2024-01-15", trade_time="09:30:00",
        stop_loss=1.0800, take_profit=1.0950,
    )
    trade.update(overrides)
    return repo.insert_trade(**trade)


class TestInitDb:
    def test_creates_parent_directory_and_schema(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "journal.db"
        init_db(str(db_path))
        assert db_path.exists()
        conn = get_connection(str(db_path))
        try:
            row = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='trades'"
            ).fetchone()
        finally:
            conn.close()
        assert row is not None

    def test_idempotent(self, tmp_path):
        db_path = str(tmp_path / "journal.db")
        init_db(db_path)
        repo = TradeRepo(db_path)
        _insert(repo)
        init_db(db_path)
        assert repo.get_trades()["total"] == 1


class TestInsertAndGet:
    def test_round_trip(self, repo):
        trade_id = _insert(repo, notes="breakout")
        trade = repo.get_trade(trade_id)
        assert trade["symbol"] == "EURUSD"
        assert trade["direction"] == "Buy"
        assert trade["profit"] == 700.0
        assert trade["is_win"] is True
        assert trade["notes"] == "breakout"
        assert trade["created_at"]

    def test_missing_trade(self, repo):
        assert repo.get_trade(999) is None

    def test_direction_constraint(self, repo):
        import sqlite3

        with pytest.raises(sqlite3.IntegrityError):
            _insert(repo, direction="Long")


class TestListing:
    def test_newest_first_with_total(self, repo):
        _insert(repo, trade_date="2024-01-15")
        _insert(repo, trade_date="2024-01-17")
        _insert(repo, trade_date="2024-01-16")
        page = repo.get_trades(limit=2)
        assert page["total"] == 3
        assert [t["trade_date"] for t in page["trades"]] == ["2024-01-17", "2024-01-16"]

    def test_offset(self, repo):
        for day in ("2024-01-15", "2024-01-16", "2024-01-17"):
            _insert(repo, trade_date=day)
        page = repo.get_trades(limit=2, offset=2)
        assert [t["trade_date"] for t in page["trades"]] == ["2024-01-15"]

    def test_filters(self, repo):
        _insert(repo, symbol="EURUSD", direction="Buy", trade_date="2024-01-15")
        _insert(repo, symbol="GBPUSD", direction="Sell", trade_date="2024-01-16")
        _insert(repo, symbol="EURUSD", direction="Sell", trade_date="2024-02-01")

        assert repo.get_trades(symbol="EURUSD")["total"] == 2
        assert repo.get_trades(direction="Sell")["total"] == 2
        assert repo.get_trades(date_from="2024-01-16", date_to="2024-01-31")["total"] == 1

    def test_account_filter(self, repo):
        _insert(repo, account_id=1)
        _insert(repo, account_id=2)
        assert repo.get_trades(account_id=2)["total"] == 1

    def test_records_are_chronological(self, repo):
        _insert(repo, trade_date="2024-01-16", trade_time="08:00:00")
        _insert(repo, trade_date="2024-01-15", trade_time="15:00:00")
        _insert(repo, trade_date="2024-01-15", trade_time="09:00:00")
        records = repo.get_records()
        assert [(r["trade_date"], r["trade_time"]) for r in records] == [
            ("2024-01-15", "09:00:00"),
            ("2024-01-15", "15:00:00"),
            ("2024-01-16", "08:00:00"),
        ]


class TestUpdateDelete:
    def test_update_fields(self, repo):
        trade_id = _insert(repo)
        assert repo.update_trade(trade_id, {"notes": "revised", "is_win": False}) is True
        trade = repo.get_trade(trade_id)
        assert trade["notes"] == "revised"
        assert trade["is_win"] is False
        assert trade["updated_at"] is not None

    def test_update_ignores_unknown_columns(self, repo):
        trade_id = _insert(repo)
        repo.update_trade(trade_id, {"id": 42, "created_at": "never"})
        assert repo.get_trade(trade_id)["id"] == trade_id

    def test_update_missing(self, repo):
        assert repo.update_trade(999, {"notes": "x"}) is False

    def test_delete(self, repo):
        trade_id = _insert(repo)
        assert repo.delete_trade(trade_id) is True
        assert repo.get_trade(trade_id) is None
        assert repo.delete_trade(trade_id) is False


class TestSeed:
    @pytest.mark.asyncio
    async def test_inserts_sample_trades_with_metrics(self, repo):
        ids = await seed_sample_trades(repo)
        assert len(ids) == len(SAMPLE_TRADES)

        eurusd = repo.get_trade(ids[0])
        assert eurusd["profit"] == 700.0
        assert eurusd["pips"] == 70.0
        assert eurusd["rrr"] == 2.0
        assert eurusd["is_win"] is True

        usdjpy = repo.get_trade(ids[2])
        assert usdjpy["profit"] == -151.82
        assert usdjpy["is_win"] is False

    @pytest.mark.asyncio
    async def test_account_id_applied(self, repo):
        await seed_sample_trades(repo, account_id=7)
        assert repo.get_trades(account_id=7)["total"] == len(SAMPLE_TRADES)
