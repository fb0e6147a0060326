"""CLI report — prints journal performance to the console."""

from tradejournal.analytics.models import RiskMetrics
from tradejournal.economics.formatting import format_currency


def print_report(summary: dict, risk: RiskMetrics, currency: str = "USD") -> str:
    """Format and print the journal summary.

    Args:
        summary: Payload returned by ``aggregator.summarize``.
        risk: Metrics returned by ``aggregator.risk_metrics``.
        currency: Account currency used for money columns.

    Returns:
        The formatted string (also printed to stdout).
    """
    def money(value: float) -> str:
        return format_currency(value, currency)

    def day(key: str) -> str:
        entry = summary.get(key) or {}
        if not entry.get("trades"):
            return "N/A"
        return f"{entry['date']} ({money(entry['profit'])}, {entry['trades']} trades)"

    rrr_str = f"{risk.average_rrr:.2f}" if risk.average_rrr is not None else "N/A"
    pf_str = f"{risk.profit_factor:.2f}" if risk.profit_factor else "N/A"

    lines = [
        "─────────────── TradeJournal Report ───────────────",
        f"  Trades:          {summary.get('total_trades', 0)}"
        f" ({summary.get('winning_trades', 0)}W / {summary.get('losing_trades', 0)}L)",
        f"  Win Rate:        {summary.get('win_rate', 0.0):.2f}%",
        f"  Net Profit:      {money(summary.get('total_profit', 0.0))}",
        f"  Best Day:        {day('best_day')}",
        f"  Worst Day:       {day('worst_day')}",
        f"  Largest Win:     {money(risk.largest_win)}",
        f"  Largest Loss:    {money(risk.largest_loss)}",
        f"  Avg Win / Loss:  {money(risk.average_win)} / {money(risk.average_loss)}",
        f"  Profit Factor:   {pf_str}",
        f"  Avg R:R:         {rrr_str}",
        f"  Max Drawdown:    {money(risk.max_drawdown)}",
    ]

    symbols = summary.get("profit_by_symbol") or []
    if symbols:
        lines.append("  By Symbol:")
        for row in symbols:
            lines.append(
                f"    {row['symbol']:<10}{money(row['profit']):>14}  ({row['trades']} trades)"
            )

    lines.append("──────────────────────────────────────────────────")
    output = "\n".join(lines)
    print(output)
    return output
