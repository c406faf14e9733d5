"""
Rule-based trade signal detection over a candle series and its indicators.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from signalfeed.models.analysis import IndicatorSet, Signal, SignalDirection
from signalfeed.models.market import Candle

EMA_GOLDEN_CROSS = "EMA Golden Cross"
BB_LOWER_BOUNCE = "BB Lower Bounce"
RSI_OVERSOLD_RECOVERY = "RSI Oversold Recovery"
EMA_DEATH_CROSS = "EMA Death Cross"
BB_UPPER_REJECTION = "BB Upper Rejection"
RSI_OVERBOUGHT_REJECTION = "RSI Overbought Rejection"

CROSS_SCORE = 40
BAND_SCORE = 30
RSI_SCORE = 30
TREND_BONUS = 10
MOMENTUM_BONUS = 10


@dataclass(frozen=True)
class SignalRules:
    take_profit_percent: float = 1.5
    stop_loss_percent: float = 0.8
    min_strength: int = 30
    min_history: int = 25
    start_index: int = 22
    rsi_oversold: float = 30.0
    rsi_overbought: float = 70.0
    rsi_neutral: float = 50.0


def _crossed_above(prev_a: float, prev_b: float, curr_a: float, curr_b: float) -> bool:
    return prev_a <= prev_b and curr_a > curr_b


def _crossed_below(prev_a: float, prev_b: float, curr_a: float, curr_b: float) -> bool:
    return prev_a >= prev_b and curr_a < curr_b


def _defined(*values: Optional[float]) -> bool:
    return all(value is not None for value in values)


def _build_signal(
    direction: SignalDirection,
    index: int,
    candle: Candle,
    strength: int,
    reasons: list[str],
    indicators: IndicatorSet,
    rules: SignalRules,
) -> Signal:
    price = candle.close
    profit = rules.take_profit_percent / 100
    loss = rules.stop_loss_percent / 100
    if direction is SignalDirection.LONG:
        take_profit, stop_loss = price * (1 + profit), price * (1 - loss)
    else:
        take_profit, stop_loss = price * (1 - profit), price * (1 + loss)
    return Signal(
        direction=direction,
        index=index,
        time=candle.time,
        entry_price=price,
        take_profit=take_profit,
        stop_loss=stop_loss,
        strength=min(strength, 100),
        reasons=tuple(reasons),
        rsi=indicators.rsi[index],
        ema_fast=indicators.ema_fast[index],
        ema_slow=indicators.ema_slow[index],
    )


def detect_signals(
    candles: Sequence[Candle],
    indicators: IndicatorSet,
    rules: SignalRules = SignalRules(),
) -> list[Signal]:
    """Scan the series once and return every LONG/SHORT signal in index order.

    Short history is not an error: fewer than `rules.min_history` candles yields [].
    LONG and SHORT rules are evaluated independently, so one index can carry both.
    """
    if len(candles) < rules.min_history:
        return []
    if len(indicators) != len(candles) or len(indicators.ema_fast) != len(candles):
        raise ValueError("indicator arrays are not aligned with the candle series")

    fast, slow, rsi = indicators.ema_fast, indicators.ema_slow, indicators.rsi
    upper, lower = indicators.bollinger.upper, indicators.bollinger.lower
    signals: list[Signal] = []

    for i in range(max(rules.start_index, 1), len(candles)):
        candle, prev_candle = candles[i], candles[i - 1]
        price = candle.close
        rsi_ready = not indicators.rsi_is_placeholder(i - 1)
        curr_rsi, prev_rsi = rsi[i], rsi[i - 1]

        # LONG
        golden_cross = _crossed_above(fast[i - 1], slow[i - 1], fast[i], slow[i])
        lower_bounce = (
            _defined(lower[i - 1], lower[i])
            and prev_candle.low <= lower[i - 1]
            and price > lower[i]
            and price > prev_candle.close
        )
        rsi_below_neutral = rsi_ready and curr_rsi < rules.rsi_neutral
        oversold_recovery = rsi_ready and prev_rsi <= rules.rsi_oversold and curr_rsi > rules.rsi_oversold

        if golden_cross or (lower_bounce and rsi_below_neutral) or oversold_recovery:
            strength, reasons = 0, []
            if golden_cross:
                strength += CROSS_SCORE
                reasons.append(EMA_GOLDEN_CROSS)
            if lower_bounce:
                strength += BAND_SCORE
                reasons.append(BB_LOWER_BOUNCE)
            if oversold_recovery:
                strength += RSI_SCORE
                reasons.append(RSI_OVERSOLD_RECOVERY)
            if fast[i] > slow[i]:
                strength += TREND_BONUS
            if rsi_below_neutral:
                strength += MOMENTUM_BONUS
            if strength >= rules.min_strength:
                signals.append(_build_signal(SignalDirection.LONG, i, candle, strength, reasons, indicators, rules))

        # SHORT
        death_cross = _crossed_below(fast[i - 1], slow[i - 1], fast[i], slow[i])
        upper_rejection = (
            _defined(upper[i - 1], upper[i])
            and prev_candle.high >= upper[i - 1]
            and price < upper[i]
            and price < prev_candle.close
        )
        rsi_above_neutral = rsi_ready and curr_rsi > rules.rsi_neutral
        overbought_rejection = rsi_ready and prev_rsi >= rules.rsi_overbought and curr_rsi < rules.rsi_overbought

        if death_cross or (upper_rejection and rsi_above_neutral) or overbought_rejection:
            strength, reasons = 0, []
            if death_cross:
                strength += CROSS_SCORE
                reasons.append(EMA_DEATH_CROSS)
            if upper_rejection:
                strength += BAND_SCORE
                reasons.append(BB_UPPER_REJECTION)
            if overbought_rejection:
                strength += RSI_SCORE
                reasons.append(RSI_OVERBOUGHT_REJECTION)
            if fast[i] < slow[i]:
                strength += TREND_BONUS
            if rsi_above_neutral:
                strength += MOMENTUM_BONUS
            if strength >= rules.min_strength:
                signals.append(_build_signal(SignalDirection.SHORT, i, candle, strength, reasons, indicators, rules))

    return signals
