"""TradeJournal — application entry point.

Boots the FastAPI server and provides the CLI entry point for the serve,
seed, and report modes.
"""

import logging

from fastapi import FastAPI

from tradejournal.api.routers import router

app = FastAPI(title="TradeJournal API", version="0.1.0")
app.include_router(router)

logger = logging.getLogger("tradejournal")


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok"}


# ── CLI ──────────────────────────────────────────────────────────────────


def _run_cli() -> None:
    """Parse CLI arguments and dispatch to the appropriate mode."""
    import argparse
    import asyncio

    from tradejournal.api.routers import configure_routers
    from tradejournal.config import load_config
    from tradejournal.repos.db import init_db
    from tradejournal.repos.seed import seed_sample_trades
    from tradejournal.repos.trade_repo import TradeRepo

    parser = argparse.ArgumentParser(description="TradeJournal trading journal")
    parser.add_argument(
        "--mode",
        choices=["serve", "seed", "report"],
        default="serve",
        help="Run mode (default: serve)",
    )
    parser.add_argument("--port", type=int, help="API port (overrides API_PORT)")
    parser.add_argument("--env", help="Path to a .env file")
    args = parser.parse_args()

    config = load_config(env_path=args.env)

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    init_db(config.db_path)
    trade_repo = TradeRepo(config.db_path)

    if args.mode == "seed":
        asyncio.run(seed_sample_trades(trade_repo))
    elif args.mode == "report":
        _run_report(trade_repo, config.account_currency, config.monthly_limit)
    else:
        configure_routers(
            trade_repo=trade_repo,
            monthly_limit=config.monthly_limit,
            account_currency=config.account_currency,
            default_risk_pct=config.default_risk_pct,
        )
        _serve(args.port or config.api_port)


def _serve(port: int) -> None:
    """Run the API server until interrupted."""
    import uvicorn

    logger.info("TradeJournal API available at http://localhost:%d", port)
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")
    logger.info("TradeJournal stopped.")


def _run_report(trade_repo, currency: str, monthly_limit: int) -> None:
    """Print a console summary of the whole journal."""
    from tradejournal.analytics.aggregator import risk_metrics, summarize
    from tradejournal.analytics.models import AggregatedTradeRecord
    from tradejournal.cli.report import print_report

    records = [AggregatedTradeRecord.from_row(r) for r in trade_repo.get_records()]
    print_report(
        summarize(records, monthly_limit=monthly_limit),
        risk_metrics(records),
        currency=currency,
    )


if __name__ == "__main__":
    _run_cli()
