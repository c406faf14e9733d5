from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from signalfeed.errors import UnsupportedInterval
from signalfeed.utils.symbol_mapper import Provider


class Interval(str, Enum):
    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    M30 = "30m"
    H1 = "1h"
    H4 = "4h"
    D1 = "1d"


DEFAULT_INTERVAL = Interval.M15

_UNIT_SECONDS = {"m": 60, "h": 3600, "d": 86400}

# (delivered width, native token), finest first.
_ALL_NATIVE = [(interval.value, interval.value) for interval in Interval]

_NATIVE_INTERVALS: dict[Provider, list[tuple[str, str]]] = {
    Provider.BINANCE: _ALL_NATIVE,
    Provider.BINANCE_US: _ALL_NATIVE,
    # CoinGecko picks granularity from the `days` window: 1-2 days -> 30m, 3-30 days -> 4h.
    Provider.COINGECKO: [("30m", "1"), ("4h", "7")],
    Provider.COINCAP: [
        ("1m", "m1"),
        ("5m", "m5"),
        ("15m", "m15"),
        ("30m", "m30"),
        ("1h", "h1"),
        ("2h", "h2"),
        ("6h", "h6"),
        ("12h", "h12"),
        ("1d", "d1"),
    ],
}


def interval_seconds(width: str) -> int:
    try:
        return int(width[:-1]) * _UNIT_SECONDS[width[-1]]
    except (KeyError, ValueError, IndexError) as exc:
        raise ValueError(f"invalid interval width: {width!r}") from exc


def parse_interval(value: Any, default: Interval = DEFAULT_INTERVAL) -> Interval:
    """Map a requested interval onto the logical set; unrecognized values use the default."""
    if isinstance(value, Interval):
        return value
    try:
        return Interval(str(value).strip().lower())
    except ValueError:
        return default


@dataclass(frozen=True)
class IntervalTranslation:
    provider: Provider
    requested: Interval
    native: str
    delivered: str

    @property
    def substituted(self) -> bool:
        return self.delivered != self.requested.value

    @property
    def delivered_seconds(self) -> int:
        return interval_seconds(self.delivered)

    def note(self) -> str | None:
        if not self.substituted:
            return None
        return (
            f"{self.provider.value} does not provide {self.requested.value} candles; "
            f"delivered {self.delivered} instead"
        )


def supported_intervals(provider: Provider) -> list[str]:
    return [delivered for delivered, _ in _NATIVE_INTERVALS[provider]]


def translate_interval(requested: Any, provider: Provider) -> IntervalTranslation:
    interval = parse_interval(requested)
    wanted = interval_seconds(interval.value)
    for delivered, native in _NATIVE_INTERVALS[provider]:
        if interval_seconds(delivered) >= wanted:
            return IntervalTranslation(provider=provider, requested=interval, native=native, delivered=delivered)
    raise UnsupportedInterval(provider.value, f"no granularity at or above {interval.value}")
