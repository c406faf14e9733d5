from __future__ import annotations

import time
from typing import Any

from signalfeed.errors import ProviderMalformedResponse
from signalfeed.exchanges.base import ProviderAdapter
from signalfeed.models.market import Candle, Quote
from signalfeed.utils.interval_mapper import IntervalTranslation
from signalfeed.utils.symbol_mapper import Provider
from signalfeed.utils.validators import normalize_epoch_seconds, require_list, to_native_float, to_price


class CoinCapAdapter(ProviderAdapter):
    """Historical-quote service. Quotes are USD only.

    History points are single price snapshots, so every candle is flat
    (open == high == low == close) and carries no volume.
    """

    provider = Provider.COINCAP

    def _request_quote(self, provider_symbol: str) -> Any:
        return self._get_json(f"/assets/{provider_symbol}", {})

    def _request_candles(self, provider_symbol: str, translation: IntervalTranslation, limit: int) -> Any:
        width_ms = translation.delivered_seconds * 1000
        end_ms = int(time.time() * 1000)
        # One spare bucket so the in-progress point does not cut the window short.
        start_ms = end_ms - (limit + 1) * width_ms
        return self._get_json(
            f"/assets/{provider_symbol}/history",
            {"interval": translation.native, "start": start_ms, "end": end_ms},
        )

    def parse_quote(self, symbol: str, provider_symbol: str, payload: Any) -> Quote:
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict) or "priceUsd" not in data:
            raise ProviderMalformedResponse(self.name, f"asset {provider_symbol} has no priceUsd")
        stamp = payload.get("timestamp")
        return Quote(
            symbol=symbol,
            price=to_price(data.get("priceUsd"), self.name, "priceUsd"),
            change_percent=to_native_float(data.get("changePercent24Hr")),
            volume=to_native_float(data.get("volumeUsd24Hr"), default=None),
            provider=self.name,
            timestamp=normalize_epoch_seconds(stamp, self.name) if stamp is not None else int(time.time()),
        )

    def parse_candles(self, payload: Any, translation: IntervalTranslation) -> list[Candle]:
        data = payload.get("data") if isinstance(payload, dict) else None
        points = require_list(data, self.name, "history points")
        candles: list[Candle] = []
        for point in points:
            if not isinstance(point, dict):
                raise ProviderMalformedResponse(self.name, f"history point is not an object: {point!r}")
            price = to_price(point.get("priceUsd"), self.name, "priceUsd")
            candles.append(
                Candle(
                    time=normalize_epoch_seconds(point.get("time"), self.name),
                    open=price,
                    high=price,
                    low=price,
                    close=price,
                    volume=0.0,
                )
            )
        return candles
