from signalfeed.config.settings import Settings
from signalfeed.models.analysis import SignalDirection
from signalfeed.models.market import Candle, CandleSeries
from signalfeed.services.analysis_service import AnalysisService, analyze_series, params_from_settings
from signalfeed.services.market_data_service import MarketDataService


class StubResolver:
    def __init__(self, series):
        self.series = series
        self.calls = []

    def resolve_candles(self, symbol, interval, limit):
        self.calls.append((symbol, interval, limit))
        return self.series


def _v_shaped_series():
    closes = [100.0 - i * 0.5 for i in range(30)] + [85.0 + i * 0.8 for i in range(40)]
    candles = tuple(
        Candle(time=1704067200 + i * 300, open=c, high=c * 1.002, low=c * 0.998, close=c, volume=5.0)
        for i, c in enumerate(closes)
    )
    return CandleSeries(symbol="NEARUSDT", requested_interval="5m", interval="5m", provider="binance", candles=candles)


def test_params_from_settings():
    params, rules = params_from_settings(Settings(ema_fast_period=5, take_profit_percent=2.0))
    assert params.ema_fast == 5
    assert params.ema_slow == 21
    assert rules.take_profit_percent == 2.0
    assert rules.stop_loss_percent == 0.8


def test_analyze_series_passes_values_between_stages():
    params, rules = params_from_settings(Settings())
    result = analyze_series(_v_shaped_series(), params, rules)

    assert len(result.indicators) == len(result.series)
    assert any(s.direction is SignalDirection.LONG for s in result.signals)
    for signal in result.signals:
        assert 30 <= signal.strength <= 100
        if signal.direction is SignalDirection.LONG:
            assert signal.take_profit > signal.entry_price > signal.stop_loss
        else:
            assert signal.take_profit < signal.entry_price < signal.stop_loss


def test_service_normalizes_request():
    resolver = StubResolver(_v_shaped_series())
    params, rules = params_from_settings(Settings())
    service = AnalysisService(MarketDataService(resolver, max_limit=500, default_interval="15m"), params, rules)

    service.analyze(" nearusdt ", "3m", 900)

    symbol, interval, limit = resolver.calls[0]
    assert symbol == "NEARUSDT"
    assert interval.value == "15m"
    assert limit == 500
