from __future__ import annotations

import math
from typing import Any, Iterable

from signalfeed.errors import ProviderMalformedResponse
from signalfeed.models.market import Candle

# Anything above this is a millisecond epoch (year 5138 in seconds).
_MS_EPOCH_THRESHOLD = 100_000_000_000


def to_native_float(value: Any, default: float | None = 0.0) -> float | None:
    if value is None:
        return default
    try:
        casted = float(value)
        if casted != casted or math.isinf(casted):
            return default
        return casted
    except (TypeError, ValueError):
        return default


def to_price(value: Any, provider: str, field: str) -> float:
    """Strict price coercion: missing, non-numeric or negative values reject the payload."""
    price = to_native_float(value, default=None)
    if price is None:
        raise ProviderMalformedResponse(provider, f"non-numeric {field}: {value!r}")
    if not is_valid_price(price):
        raise ProviderMalformedResponse(provider, f"negative {field}: {price}")
    return price


def normalize_epoch_seconds(value: Any, provider: str) -> int:
    if isinstance(value, bool):
        raise ProviderMalformedResponse(provider, f"invalid timestamp: {value!r}")
    try:
        raw = int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ProviderMalformedResponse(provider, f"invalid timestamp: {value!r}") from exc
    if raw <= 0:
        raise ProviderMalformedResponse(provider, f"invalid timestamp: {value!r}")
    if raw >= _MS_EPOCH_THRESHOLD:
        return raw // 1000
    return raw


def is_valid_price(price: float) -> bool:
    return price >= 0


def require_list(payload: Any, provider: str, what: str) -> list:
    if not isinstance(payload, list):
        raise ProviderMalformedResponse(provider, f"expected a list of {what}, got {type(payload).__name__}")
    if not payload:
        raise ProviderMalformedResponse(provider, f"empty {what}")
    return payload


def validate_series(
    candles: Iterable[Candle],
    provider: str,
    interval_seconds: int,
    enforce_contiguous: bool = True,
    limit: int | None = None,
) -> list[Candle]:
    """Order candles by time, drop duplicate buckets and check the series is usable.

    A later duplicate replaces an earlier one (providers repeat the still-open bucket).
    Only the most recent `limit` candles are kept; with `enforce_contiguous`, every
    step among them must equal the delivered interval.
    """
    by_time: dict[int, Candle] = {}
    for candle in candles:
        if candle.high < candle.low:
            raise ProviderMalformedResponse(provider, f"high below low at {candle.time}")
        by_time[candle.time] = candle

    ordered = [by_time[key] for key in sorted(by_time)]
    if not ordered:
        raise ProviderMalformedResponse(provider, "empty candle series")
    if limit is not None:
        ordered = ordered[-limit:]

    if enforce_contiguous:
        for prev, curr in zip(ordered, ordered[1:]):
            step = curr.time - prev.time
            if step != interval_seconds:
                raise ProviderMalformedResponse(
                    provider,
                    f"gap in series: {prev.time} -> {curr.time} (expected step {interval_seconds}s)",
                )
    return ordered
