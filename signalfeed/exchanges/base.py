from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from signalfeed.exchanges.http_client import get_json
from signalfeed.models.market import Candle, Quote
from signalfeed.utils.interval_mapper import IntervalTranslation
from signalfeed.utils.symbol_mapper import Provider, to_provider_symbol
from signalfeed.utils.validators import validate_series


class ProviderAdapter(ABC):
    """One external data source.

    Subclasses own the request shape and the mapping of their native payload into
    Quote/Candle values; everything they raise is a ProviderError.
    """

    provider: Provider

    def __init__(self, base_url: str, timeout_seconds: float, quote_currency: str = "usd", enforce_contiguous: bool = True):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.quote_currency = quote_currency.lower()
        self.enforce_contiguous = enforce_contiguous

    @property
    def name(self) -> str:
        return self.provider.value

    def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        return get_json(self.name, f"{self.base_url}{path}", params, self.timeout_seconds)

    def fetch_quote(self, symbol: str) -> Quote:
        provider_symbol = to_provider_symbol(symbol, self.provider)
        payload = self._request_quote(provider_symbol)
        return self.parse_quote(symbol, provider_symbol, payload)

    def fetch_candles(self, symbol: str, translation: IntervalTranslation, limit: int) -> list[Candle]:
        provider_symbol = to_provider_symbol(symbol, self.provider)
        payload = self._request_candles(provider_symbol, translation, limit)
        candles = self.parse_candles(payload, translation)
        return validate_series(candles, self.name, translation.delivered_seconds, self.enforce_contiguous, limit=limit)

    @abstractmethod
    def _request_quote(self, provider_symbol: str) -> Any:
        raise NotImplementedError

    @abstractmethod
    def _request_candles(self, provider_symbol: str, translation: IntervalTranslation, limit: int) -> Any:
        raise NotImplementedError

    @abstractmethod
    def parse_quote(self, symbol: str, provider_symbol: str, payload: Any) -> Quote:
        raise NotImplementedError

    @abstractmethod
    def parse_candles(self, payload: Any, translation: IntervalTranslation) -> list[Candle]:
        raise NotImplementedError
