"""Tests for tradejournal.config — environment variable loading and validation."""

import pytest

from tradejournal.config import Config, load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Ensure journal env vars are cleared between tests."""
    for var in [
        "DB_PATH",
        "LOG_LEVEL",
        "API_PORT",
        "ACCOUNT_CURRENCY",
        "DEFAULT_RISK_PCT",
        "MONTHLY_LIMIT",
    ]:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def env_path(tmp_path):
    # Non-existent file so load_dotenv doesn't pick up a developer .env
    return str(tmp_path / "nonexistent.env")


class TestLoadConfig:
    def test_defaults(self, env_path):
        cfg = load_config(env_path=env_path)
        assert isinstance(cfg, Config)
        assert cfg.db_path == "data/tradejournal.db"
        assert cfg.log_level == "INFO"
        assert cfg.api_port == 8080
        assert cfg.account_currency == "USD"
        assert cfg.default_risk_pct == 1.0
        assert cfg.monthly_limit == 12

    def test_overrides(self, monkeypatch, env_path):
        monkeypatch.setenv("DB_PATH", "/tmp/journal.db")
        monkeypatch.setenv("API_PORT", "9000")
        monkeypatch.setenv("ACCOUNT_CURRENCY", "eur")
        monkeypatch.setenv("DEFAULT_RISK_PCT", "2.5")
        monkeypatch.setenv("MONTHLY_LIMIT", "6")
        cfg = load_config(env_path=env_path)
        assert cfg.db_path == "/tmp/journal.db"
        assert cfg.api_port == 9000
        assert cfg.account_currency == "EUR"
        assert cfg.default_risk_pct == 2.5
        assert cfg.monthly_limit == 6

    def test_reads_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("API_PORT=8181\nACCOUNT_CURRENCY=GBP\n")
        cfg = load_config(env_path=str(env_file))
        assert cfg.api_port == 8181
        assert cfg.account_currency == "GBP"

    def test_frozen(self, env_path):
        cfg = load_config(env_path=env_path)
        with pytest.raises(AttributeError):
            cfg.api_port = 1


class TestValidation:
    def test_unparseable_port(self, monkeypatch, env_path):
        monkeypatch.setenv("API_PORT", "eighty")
        with pytest.raises(ValueError, match="API_PORT"):
            load_config(env_path=env_path)

    def test_port_out_of_range(self, monkeypatch, env_path):
        monkeypatch.setenv("API_PORT", "70000")
        with pytest.raises(ValueError, match="API_PORT"):
            load_config(env_path=env_path)

    def test_risk_pct_must_be_positive(self, monkeypatch, env_path):
        monkeypatch.setenv("DEFAULT_RISK_PCT", "0")
        with pytest.raises(ValueError, match="DEFAULT_RISK_PCT"):
            load_config(env_path=env_path)

    def test_monthly_limit_at_least_one(self, monkeypatch, env_path):
        monkeypatch.setenv("MONTHLY_LIMIT", "0")
        with pytest.raises(ValueError, match="MONTHLY_LIMIT"):
            load_config(env_path=env_path)

    def test_bad_log_level(self, monkeypatch, env_path):
        monkeypatch.setenv("LOG_LEVEL", "VERBOSE")
        with pytest.raises(ValueError, match="LOG_LEVEL"):
            load_config(env_path=env_path)

    def test_log_level_case_insensitive(self, monkeypatch, env_path):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert load_config(env_path=env_path).log_level == "DEBUG"

    def test_bad_currency_code(self, monkeypatch, env_path):
        monkeypatch.setenv("ACCOUNT_CURRENCY", "DOLLARS")
        with pytest.raises(ValueError, match="ACCOUNT_CURRENCY"):
            load_config(env_path=env_path)
