from __future__ import annotations

from typing import Any

from signalfeed.errors import ProviderMalformedResponse
from signalfeed.exchanges.base import ProviderAdapter
from signalfeed.models.market import Candle, Quote
from signalfeed.utils.interval_mapper import IntervalTranslation
from signalfeed.utils.symbol_mapper import Provider
from signalfeed.utils.validators import normalize_epoch_seconds, require_list, to_native_float, to_price

_MAX_KLINES = 1000


class BinanceAdapter(ProviderAdapter):
    provider = Provider.BINANCE

    def _request_quote(self, provider_symbol: str) -> Any:
        return self._get_json("/ticker/24hr", {"symbol": provider_symbol})

    def _request_candles(self, provider_symbol: str, translation: IntervalTranslation, limit: int) -> Any:
        return self._get_json(
            "/klines",
            {"symbol": provider_symbol, "interval": translation.native, "limit": min(limit, _MAX_KLINES)},
        )

    def parse_quote(self, symbol: str, provider_symbol: str, payload: Any) -> Quote:
        if not isinstance(payload, dict) or "lastPrice" not in payload:
            raise ProviderMalformedResponse(self.name, f"ticker for {provider_symbol} has no lastPrice")
        return Quote(
            symbol=symbol,
            price=to_price(payload.get("lastPrice"), self.name, "lastPrice"),
            change_percent=to_native_float(payload.get("priceChangePercent")),
            high=to_native_float(payload.get("highPrice"), default=None),
            low=to_native_float(payload.get("lowPrice"), default=None),
            volume=to_native_float(payload.get("volume"), default=None),
            provider=self.name,
            timestamp=normalize_epoch_seconds(payload.get("closeTime"), self.name),
        )

    def parse_candles(self, payload: Any, translation: IntervalTranslation) -> list[Candle]:
        rows = require_list(payload, self.name, "klines")
        candles: list[Candle] = []
        for row in rows:
            if not isinstance(row, list) or len(row) < 6:
                raise ProviderMalformedResponse(self.name, f"kline row too short: {row!r}")
            candles.append(
                Candle(
                    time=normalize_epoch_seconds(row[0], self.name),
                    open=to_price(row[1], self.name, "open"),
                    high=to_price(row[2], self.name, "high"),
                    low=to_price(row[3], self.name, "low"),
                    close=to_price(row[4], self.name, "close"),
                    volume=to_native_float(row[5]),
                )
            )
        return candles


class BinanceUSAdapter(BinanceAdapter):
    """Regional mirror; same endpoints and payload shapes as the primary exchange."""

    provider = Provider.BINANCE_US
