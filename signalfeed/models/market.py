"""
Canonical market data values produced by the acquisition layer.
Every provider response is normalized into these shapes; they are never mutated.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Candle:
    """One OHLCV bucket. `time` is the bucket start in UTC seconds."""

    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


@dataclass(frozen=True)
class CandleSeries:
    """An ordered candle sequence plus where it came from and what width it really has."""

    symbol: str
    requested_interval: str
    interval: str
    provider: str
    candles: tuple[Candle, ...]
    note: Optional[str] = None

    @property
    def substituted(self) -> bool:
        return self.interval != self.requested_interval

    def closes(self) -> list[float]:
        return [candle.close for candle in self.candles]

    def __len__(self) -> int:
        return len(self.candles)


@dataclass(frozen=True)
class Quote:
    """Current price snapshot; `change_percent` covers a provider-defined window (24h for all current sources)."""

    symbol: str
    price: float
    change_percent: float
    provider: str
    timestamp: int
    high: Optional[float] = None
    low: Optional[float] = None
    volume: Optional[float] = None
