"""Technical indicators over a closing-price sequence.

Every function is pure and returns a list aligned index-for-index with its input.
Positions before an indicator's warm-up window closes hold `None`, never NaN.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from signalfeed.models.analysis import BollingerBands, IndicatorSet

RSI_NEUTRAL = 50.0


def ema(prices: Sequence[float], period: int) -> list[float]:
    """Exponential moving average seeded with the mean of the first `period` prices.

    Unlike SMA there is no warm-up gap: index 0 holds the seed and every later
    index applies the 2/(period+1) smoothing to the previous value.
    """
    if period < 1:
        raise ValueError("period must be >= 1")
    if not prices:
        return []

    seed_count = min(period, len(prices))
    result = [sum(prices[:seed_count]) / seed_count]
    multiplier = 2 / (period + 1)
    for price in prices[1:]:
        result.append((price - result[-1]) * multiplier + result[-1])
    return result


def sma(prices: Sequence[float], period: int) -> list[Optional[float]]:
    if period < 1:
        raise ValueError("period must be >= 1")
    result: list[Optional[float]] = []
    for i in range(len(prices)):
        if i < period - 1:
            result.append(None)
        else:
            window = prices[i - period + 1:i + 1]
            result.append(sum(window) / period)
    return result


def stddev(prices: Sequence[float], period: int, means: Optional[Sequence[Optional[float]]] = None) -> list[Optional[float]]:
    """Population standard deviation over the same trailing window as `sma`."""
    if means is None:
        means = sma(prices, period)
    result: list[Optional[float]] = []
    for i, mean in enumerate(means):
        if mean is None:
            result.append(None)
            continue
        window = prices[i - period + 1:i + 1]
        variance = sum((value - mean) ** 2 for value in window) / period
        result.append(math.sqrt(variance))
    return result


def bollinger_bands(prices: Sequence[float], period: int = 20, multiplier: float = 2.0) -> BollingerBands:
    middle = sma(prices, period)
    deviations = stddev(prices, period, middle)
    upper: list[Optional[float]] = []
    lower: list[Optional[float]] = []
    for mean, deviation in zip(middle, deviations):
        if mean is None or deviation is None:
            upper.append(None)
            lower.append(None)
        else:
            upper.append(mean + multiplier * deviation)
            lower.append(mean - multiplier * deviation)
    return BollingerBands(upper=upper, middle=middle, lower=lower)


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def rsi(prices: Sequence[float], period: int = 14) -> list[float]:
    """Relative Strength Index with Wilder smoothing.

    The first `period` entries are the neutral seed 50 (placeholders, not computed
    values). The first real value uses plain means of the first `period` deltas.
    """
    if period < 1:
        raise ValueError("period must be >= 1")
    if len(prices) <= period:
        return [RSI_NEUTRAL] * len(prices)

    gains: list[float] = []
    losses: list[float] = []
    for prev, curr in zip(prices, prices[1:]):
        change = curr - prev
        gains.append(change if change > 0 else 0.0)
        losses.append(-change if change < 0 else 0.0)

    result = [RSI_NEUTRAL] * period
    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period
    result.append(_rsi_value(avg_gain, avg_loss))

    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period
        result.append(_rsi_value(avg_gain, avg_loss))
    return result


@dataclass(frozen=True)
class IndicatorParams:
    ema_fast: int = 9
    ema_slow: int = 21
    bollinger_period: int = 20
    bollinger_multiplier: float = 2.0
    rsi_period: int = 14


def compute_indicators(closes: Sequence[float], params: IndicatorParams = IndicatorParams()) -> IndicatorSet:
    return IndicatorSet(
        ema_fast=ema(closes, params.ema_fast),
        ema_slow=ema(closes, params.ema_slow),
        bollinger=bollinger_bands(closes, params.bollinger_period, params.bollinger_multiplier),
        rsi=rsi(closes, params.rsi_period),
        rsi_period=params.rsi_period,
    )
