"""Instrument registry — static symbol metadata, no I/O.

Maps a trading symbol to the decimal place that defines one pip and to its
relationship with USD (quote currency, base currency, or neither).  Symbols
missing from the table fall back to a 4-decimal pip with no USD conversion so
that custom symbols still produce a number.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional


# ── Lot sizes (units of base currency) ───────────────────────────────────

STANDARD_LOT = 100_000
MINI_LOT = 10_000
MICRO_LOT = 1_000

DEFAULT_PIP_DECIMAL_PLACE = 4

CATEGORIES = (
    "forex_major",
    "forex_minor",
    "forex_exotic",
    "index",
    "commodity",
    "crypto",
)


@dataclass(frozen=True)
class InstrumentInfo:
    """Pip precision and USD relationship of a single instrument."""

    symbol: str
    pip_decimal_place: int
    usd_is_quote: bool
    usd_is_base: bool
    category: str = "custom"


def _build(category: str, rows: list[tuple[str, int, bool, bool]]) -> dict[str, InstrumentInfo]:
    return {
        symbol: InstrumentInfo(symbol, places, quote, base, category)
        for symbol, places, quote, base in rows
    }


# (symbol, pip decimal place, usd_is_quote, usd_is_base)
_FOREX_MAJORS = [
    ("EURUSD", 4, True, False),
    ("GBPUSD", 4, True, False),
    ("AUDUSD", 4, True, False),
    ("NZDUSD", 4, True, False),
    ("USDJPY", 2, False, True),
    ("USDCAD", 4, False, True),
    ("USDCHF", 4, False, True),
]

_FOREX_MINORS = [
    ("EURJPY", 2, False, False),
    ("GBPJPY", 2, False, False),
    ("EURGBP", 4, False, False),
    ("AUDCAD", 4, False, False),
    ("AUDNZD", 4, False, False),
    ("EURAUD", 4, False, False),
    ("EURNZD", 4, False, False),
    ("EURCAD", 4, False, False),
    ("EURCHF", 4, False, False),
    ("GBPAUD", 4, False, False),
    ("GBPNZD", 4, False, False),
    ("GBPCAD", 4, False, False),
    ("GBPCHF", 4, False, False),
    ("AUDCHF", 4, False, False),
    ("AUDJPY", 2, False, False),
    ("NZDJPY", 2, False, False),
    ("NZDCAD", 4, False, False),
    ("NZDCHF", 4, False, False),
    ("CADJPY", 2, False, False),
    ("CADCHF", 4, False, False),
    ("CHFJPY", 2, False, False),
]

_FOREX_EXOTICS = [
    ("USDSEK", 4, False, True),
    ("USDNOK", 4, False, True),
    ("USDDKK", 4, False, True),
    ("USDPLN", 4, False, True),
    ("USDHUF", 2, False, True),
    ("USDCZK", 4, False, True),
    ("USDTRY", 4, False, True),
    ("USDZAR", 4, False, True),
    ("USDMXN", 4, False, True),
    ("USDSGD", 4, False, True),
    ("USDHKD", 4, False, True),
]

# Index CFDs quoted in their home currency carry no USD leg.
_INDICES = [
    ("US30", 0, True, False),
    ("SPX500", 1, True, False),
    ("NAS100", 1, True, False),
    ("UK100", 0, False, False),
    ("GER40", 0, False, False),
    ("FRA40", 0, False, False),
    ("ESP35", 0, False, False),
    ("ITA40", 0, False, False),
    ("AUS200", 0, False, False),
    ("JPN225", 0, False, False),
    ("HK50", 0, False, False),
    ("CHINA50", 0, False, False),
    ("EUSTX50", 0, False, False),
]

_COMMODITIES = [
    ("XAUUSD", 2, True, False),
    ("XAGUSD", 3, True, False),
    ("XPTUSD", 2, True, False),
    ("XPDUSD", 2, True, False),
    ("USOIL", 2, True, False),
    ("UKOIL", 2, True, False),
    ("NATGAS", 3, True, False),
]

_CRYPTO = [
    ("BTCUSD", 2, True, False),
    ("ETHUSD", 2, True, False),
    ("LTCUSD", 2, True, False),
    ("XRPUSD", 4, True, False),
    ("ADAUSD", 4, True, False),
    ("DOTUSD", 3, True, False),
    ("LINKUSD", 3, True, False),
    ("SOLUSD", 2, True, False),
]

INSTRUMENTS: Mapping[str, InstrumentInfo] = MappingProxyType({
    **_build("forex_major", _FOREX_MAJORS),
    **_build("forex_minor", _FOREX_MINORS),
    **_build("forex_exotic", _FOREX_EXOTICS),
    **_build("index", _INDICES),
    **_build("commodity", _COMMODITIES),
    **_build("crypto", _CRYPTO),
})


# ── Lookup ───────────────────────────────────────────────────────────────


def normalize_symbol(symbol: str) -> str:
    """Return *symbol* upper-cased with separators removed.

    ``"EUR/USD"``, ``"eur_usd"`` and ``"EUR-USD"`` all become ``"EURUSD"``.
    """
    cleaned = symbol.strip().upper()
    for sep in ("/", "_", "-", " "):
        cleaned = cleaned.replace(sep, "")
    return cleaned


def lookup(symbol: str) -> Optional[InstrumentInfo]:
    """Return the registry entry for *symbol*, or ``None`` when unknown."""
    return INSTRUMENTS.get(normalize_symbol(symbol))


def resolve(symbol: str) -> InstrumentInfo:
    """Return the registry entry, falling back to the default policy.

    Unknown symbols get a 4-decimal pip and no USD relationship.
    """
    info = lookup(symbol)
    if info is not None:
        return info
    return InstrumentInfo(
        symbol=normalize_symbol(symbol),
        pip_decimal_place=DEFAULT_PIP_DECIMAL_PLACE,
        usd_is_quote=False,
        usd_is_base=False,
    )


def list_instruments(category: Optional[str] = None) -> list[InstrumentInfo]:
    """Return registry entries sorted by symbol, optionally by category.

    Raises:
        ValueError: If *category* is not a known category name.
    """
    if category is not None and category not in CATEGORIES:
        raise ValueError(
            f"category must be one of {', '.join(CATEGORIES)}, got {category!r}"
        )
    entries = [
        info for info in INSTRUMENTS.values()
        if category is None or info.category == category
    ]
    return sorted(entries, key=lambda info: info.symbol)
