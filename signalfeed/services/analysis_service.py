"""
Acquisition -> indicators -> signals pipeline.
Each stage's output is handed to the next explicitly; nothing is kept between runs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from signalfeed.config.settings import Settings
from signalfeed.indicators.technical import IndicatorParams, compute_indicators
from signalfeed.models.analysis import IndicatorSet, Signal
from signalfeed.models.market import CandleSeries
from signalfeed.services.market_data_service import MarketDataService
from signalfeed.signals.detector import SignalRules, detect_signals

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    series: CandleSeries
    indicators: IndicatorSet
    signals: list[Signal]


def params_from_settings(config: Settings) -> tuple[IndicatorParams, SignalRules]:
    params = IndicatorParams(
        ema_fast=config.ema_fast_period,
        ema_slow=config.ema_slow_period,
        bollinger_period=config.bollinger_period,
        bollinger_multiplier=config.bollinger_multiplier,
        rsi_period=config.rsi_period,
    )
    rules = SignalRules(
        take_profit_percent=config.take_profit_percent,
        stop_loss_percent=config.stop_loss_percent,
        min_strength=config.min_signal_strength,
        rsi_oversold=config.rsi_oversold,
        rsi_overbought=config.rsi_overbought,
    )
    return params, rules


def analyze_series(series: CandleSeries, params: IndicatorParams, rules: SignalRules) -> AnalysisResult:
    indicators = compute_indicators(series.closes(), params)
    signals = detect_signals(series.candles, indicators, rules)
    return AnalysisResult(series=series, indicators=indicators, signals=signals)


class AnalysisService:
    def __init__(self, market_data: MarketDataService, params: IndicatorParams, rules: SignalRules):
        self.market_data = market_data
        self.params = params
        self.rules = rules

    def analyze(self, symbol: str, interval: str, limit: int) -> AnalysisResult:
        series = self.market_data.get_candles(symbol, interval, limit)
        result = analyze_series(series, self.params, self.rules)
        if len(series) < self.rules.min_history:
            logger.info(
                f"Only {len(series)} candles for {series.symbol}; signal detection skipped",
                extra={"symbol": series.symbol, "provider": series.provider},
            )
        return result
