from __future__ import annotations

from signalfeed.config.settings import Settings
from signalfeed.exchanges.base import ProviderAdapter
from signalfeed.exchanges.binance_adapter import BinanceAdapter, BinanceUSAdapter
from signalfeed.exchanges.coincap_adapter import CoinCapAdapter
from signalfeed.exchanges.coingecko_adapter import CoinGeckoAdapter
from signalfeed.utils.symbol_mapper import Provider

_ADAPTER_CLASSES: dict[Provider, type[ProviderAdapter]] = {
    Provider.BINANCE: BinanceAdapter,
    Provider.BINANCE_US: BinanceUSAdapter,
    Provider.COINGECKO: CoinGeckoAdapter,
    Provider.COINCAP: CoinCapAdapter,
}


def build_adapter(provider: Provider, config: Settings) -> ProviderAdapter:
    adapter_cls = _ADAPTER_CLASSES[provider]
    return adapter_cls(
        base_url=getattr(config, f"{provider.value}_base_url"),
        timeout_seconds=getattr(config, f"{provider.value}_timeout_seconds"),
        quote_currency=config.quote_currency,
        enforce_contiguous=config.enforce_contiguous_series,
    )


def build_adapters(config: Settings) -> list[ProviderAdapter]:
    """Instantiate adapters in the configured priority order."""
    adapters: list[ProviderAdapter] = []
    for name in config.provider_order:
        try:
            provider = Provider(name.strip().lower())
        except ValueError as exc:
            raise ValueError(f"unknown provider in provider_order: {name!r}") from exc
        adapters.append(build_adapter(provider, config))
    return adapters
