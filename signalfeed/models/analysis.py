"""
Indicator and signal values derived from a CandleSeries.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SignalDirection(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"


@dataclass(frozen=True)
class BollingerBands:
    upper: list[Optional[float]]
    middle: list[Optional[float]]
    lower: list[Optional[float]]


@dataclass(frozen=True)
class IndicatorSet:
    """Indicator arrays aligned index-for-index with the candle series they were computed from.

    `None` marks warm-up positions. The first `rsi_period` RSI entries hold the neutral
    seed 50 and are placeholders, not computed values.
    """

    ema_fast: list[float]
    ema_slow: list[float]
    bollinger: BollingerBands
    rsi: list[float]
    rsi_period: int = 14

    def __len__(self) -> int:
        return len(self.rsi)

    def rsi_is_placeholder(self, index: int) -> bool:
        return index < self.rsi_period


@dataclass(frozen=True)
class Signal:
    direction: SignalDirection
    index: int
    time: int
    entry_price: float
    take_profit: float
    stop_loss: float
    strength: int
    reasons: tuple[str, ...]
    rsi: float
    ema_fast: float
    ema_slow: float
