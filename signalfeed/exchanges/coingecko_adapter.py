from __future__ import annotations

import math
import time
from typing import Any

from signalfeed.errors import ProviderMalformedResponse
from signalfeed.exchanges.base import ProviderAdapter
from signalfeed.models.market import Candle, Quote
from signalfeed.utils.interval_mapper import IntervalTranslation
from signalfeed.utils.symbol_mapper import Provider
from signalfeed.utils.validators import normalize_epoch_seconds, require_list, to_native_float, to_price

# The OHLC endpoint widens its buckets with the window: 1-2 days -> 30m, 3-30 days -> 4h.
_DAYS_BOUNDS = {"30m": (1, 2), "4h": (3, 30)}


def days_for(translation: IntervalTranslation, limit: int) -> int:
    low, high = _DAYS_BOUNDS[translation.delivered]
    needed = math.ceil(limit * translation.delivered_seconds / 86400)
    return max(low, min(high, needed))


class CoinGeckoAdapter(ProviderAdapter):
    provider = Provider.COINGECKO

    def _request_quote(self, provider_symbol: str) -> Any:
        return self._get_json(
            "/simple/price",
            {
                "ids": provider_symbol,
                "vs_currencies": self.quote_currency,
                "include_24hr_change": "true",
                "include_24hr_vol": "true",
                "include_last_updated_at": "true",
            },
        )

    def _request_candles(self, provider_symbol: str, translation: IntervalTranslation, limit: int) -> Any:
        return self._get_json(
            f"/coins/{provider_symbol}/ohlc",
            {"vs_currency": self.quote_currency, "days": days_for(translation, limit)},
        )

    def parse_quote(self, symbol: str, provider_symbol: str, payload: Any) -> Quote:
        entry = payload.get(provider_symbol) if isinstance(payload, dict) else None
        if not isinstance(entry, dict) or self.quote_currency not in entry:
            raise ProviderMalformedResponse(self.name, f"no {self.quote_currency} price for {provider_symbol}")
        currency = self.quote_currency
        stamp = entry.get("last_updated_at")
        return Quote(
            symbol=symbol,
            price=to_price(entry.get(currency), self.name, currency),
            change_percent=to_native_float(entry.get(f"{currency}_24h_change")),
            volume=to_native_float(entry.get(f"{currency}_24h_vol"), default=None),
            provider=self.name,
            timestamp=normalize_epoch_seconds(stamp, self.name) if stamp is not None else int(time.time()),
        )

    def parse_candles(self, payload: Any, translation: IntervalTranslation) -> list[Candle]:
        rows = require_list(payload, self.name, "ohlc rows")
        width = translation.delivered_seconds
        candles: list[Candle] = []
        for row in rows:
            if not isinstance(row, list) or len(row) < 5:
                raise ProviderMalformedResponse(self.name, f"ohlc row too short: {row!r}")
            # Rows are stamped with the bucket close time.
            candles.append(
                Candle(
                    time=normalize_epoch_seconds(row[0], self.name) - width,
                    open=to_price(row[1], self.name, "open"),
                    high=to_price(row[2], self.name, "high"),
                    low=to_price(row[3], self.name, "low"),
                    close=to_price(row[4], self.name, "close"),
                    volume=0.0,
                )
            )
        return candles
