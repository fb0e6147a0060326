"""Rate providers — conversion of quote-currency profit into USD.

The calculator receives a provider instead of reaching for live FX data, so
tests can pin rates.  The default provider derives the rate from the traded
price itself and leaves cross pairs unconverted.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tradejournal.instruments.registry import InstrumentInfo


@runtime_checkable
class RateProvider(Protocol):
    """Interface for anything that can price an instrument's quote in USD."""

    async def rate_to_usd(self, info: InstrumentInfo, current_price: float) -> float:
        """Return the multiplier that converts quote-currency value to USD."""
        ...


class RegistryRateProvider:
    """Price-derived conversion using the registry's USD flags.

    * USD is the quote currency (EUR/USD) → ``current_price``
    * USD is the base currency (USD/JPY) → ``1 / current_price``
    * no USD leg (EUR/GBP, UK100, unknown symbols) → ``1``
    """

    async def rate_to_usd(self, info: InstrumentInfo, current_price: float) -> float:
        if info.usd_is_quote:
            return current_price
        if info.usd_is_base:
            return 1 / current_price
        # Cross pairs would need a second live rate; not modelled.
        return 1.0


class FixedRateProvider:
    """Returns pinned rates per symbol, deferring to a fallback otherwise.

    Args:
        rates: Mapping of normalised symbol → USD conversion multiplier.
        fallback: Provider used for symbols missing from *rates*.
    """

    def __init__(
        self,
        rates: dict[str, float],
        fallback: RateProvider | None = None,
    ) -> None:
        self._rates = dict(rates)
        self._fallback = fallback or RegistryRateProvider()

    async def rate_to_usd(self, info: InstrumentInfo, current_price: float) -> float:
        if info.symbol in self._rates:
            return self._rates[info.symbol]
        return await self._fallback.rate_to_usd(info, current_price)


DEFAULT_RATE_PROVIDER = RegistryRateProvider()
