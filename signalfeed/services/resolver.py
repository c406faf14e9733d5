"""
Cascading resolver.
Tries provider adapters one at a time in priority order and returns the first
structurally valid, normalized result.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Sequence, TypeVar

from signalfeed.errors import AllSourcesExhausted, ProviderAttempt, ProviderError
from signalfeed.exchanges.base import ProviderAdapter
from signalfeed.internal_metrics import MetricsCollector
from signalfeed.models.market import CandleSeries, Quote
from signalfeed.utils.interval_mapper import Interval, parse_interval, translate_interval

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CascadingResolver:
    """Single-flight fallback chain over an ordered list of adapters.

    Provider failures never reach the caller; only AllSourcesExhausted does, once
    every adapter has been tried. No results are merged across providers.
    """

    def __init__(self, adapters: Sequence[ProviderAdapter], metrics: Optional[MetricsCollector] = None):
        self.adapters = list(adapters)
        self.metrics = metrics

    @property
    def provider_names(self) -> list[str]:
        return [adapter.name for adapter in self.adapters]

    def _cascade(self, operation: str, symbol: str, call: Callable[[ProviderAdapter], T]) -> T:
        attempts: list[ProviderAttempt] = []
        for adapter in self.adapters:
            started = time.perf_counter()
            try:
                result = call(adapter)
            except ProviderError as exc:
                latency_ms = (time.perf_counter() - started) * 1000
                attempts.append(ProviderAttempt(adapter.name, exc.kind, exc.message, round(latency_ms, 3)))
                if self.metrics:
                    self.metrics.record_attempt(adapter.name, success=False, latency_ms=latency_ms, failure_kind=exc.kind)
                logger.warning(
                    f"{operation} via {adapter.name} failed, trying next source",
                    extra={"provider": adapter.name, "symbol": symbol, "failure_kind": exc.kind, "detail": exc.message},
                )
                continue

            latency_ms = (time.perf_counter() - started) * 1000
            if self.metrics:
                self.metrics.record_attempt(adapter.name, success=True, latency_ms=latency_ms)
            logger.info(
                f"{operation} via {adapter.name} succeeded",
                extra={"provider": adapter.name, "symbol": symbol, "latency_ms": round(latency_ms, 2), "attempt": len(attempts) + 1},
            )
            return result

        if self.metrics:
            self.metrics.record_exhausted()
        error = AllSourcesExhausted(operation, symbol, attempts)
        logger.error(str(error), extra={"symbol": symbol, "providers_tried": error.providers_tried})
        raise error

    def resolve_quote(self, symbol: str) -> Quote:
        return self._cascade("quote", symbol, lambda adapter: adapter.fetch_quote(symbol))

    def resolve_candles(self, symbol: str, interval: Interval | str, limit: int) -> CandleSeries:
        """Cascade a candle request; a string interval the logical set lacks resolves to 15m."""
        if limit <= 0:
            raise ValueError("limit must be positive")
        requested = parse_interval(interval)

        def _fetch(adapter: ProviderAdapter) -> CandleSeries:
            translation = translate_interval(requested, adapter.provider)
            candles = adapter.fetch_candles(symbol, translation, limit)
            return CandleSeries(
                symbol=symbol,
                requested_interval=requested.value,
                interval=translation.delivered,
                provider=adapter.name,
                candles=tuple(candles),
                note=translation.note(),
            )

        return self._cascade("candles", symbol, _fetch)
