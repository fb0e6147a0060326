"""Display formatting for money and pips."""

_CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "AUD": "A$",
    "CAD": "CA$",
    "NZD": "NZ$",
}

# Currencies displayed without minor units.
_ZERO_DECIMAL = {"JPY", "HUF"}


def format_currency(value: float, currency: str = "USD") -> str:
    """Format *value* as ``$1,234.56`` / ``-$225.00`` / ``CHF 10.00``."""
    code = currency.upper()
    decimals = 0 if code in _ZERO_DECIMAL else 2
    amount = f"{abs(value):,.{decimals}f}"
    symbol = _CURRENCY_SYMBOLS.get(code)
    body = f"{symbol}{amount}" if symbol else f"{code} {amount}"
    if value < 0 and float(amount.replace(",", "")) != 0:
        return f"-{body}"
    return body


def format_pips(pips: float) -> str:
    """Format a pip count with an explicit plus sign, e.g. ``+70.0``."""
    sign = "+" if pips > 0 else ""
    return f"{sign}{pips:.1f}"
