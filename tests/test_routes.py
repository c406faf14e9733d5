import json

from signalfeed.api import routes
from signalfeed.errors import AllSourcesExhausted, ProviderAttempt
from signalfeed.models.market import Candle, CandleSeries, Quote


def _series(n, interval="5m", requested="5m", provider="binance", note=None):
    step = 300 if interval == "5m" else 1800
    candles = tuple(
        Candle(time=1704067200 + i * step, open=10.0 + i, high=10.5 + i, low=9.5 + i, close=10.2 + i, volume=1.0)
        for i in range(n)
    )
    return CandleSeries(symbol="NEARUSDT", requested_interval=requested, interval=interval, provider=provider, candles=candles, note=note)


def _exhausted(*args):
    raise AllSourcesExhausted(
        "quote",
        "NEARUSDT",
        [ProviderAttempt("binance", "timeout", "timed out"), ProviderAttempt("coingecko", "unavailable", "HTTP 429")],
    )


def test_health_payload():
    payload = routes.health()
    assert payload["status"] == "ok"
    assert payload["schema_version"] == "1.0"


def test_providers_status_lists_configured_order():
    payload = routes.providers_status()
    assert list(payload["providers"]) == ["binance", "binance_us", "coingecko", "coincap"]
    assert payload["providers"]["binance"]["priority"] == 1


def test_price_success(monkeypatch):
    quote = Quote(symbol="NEARUSDT", price=5.12, change_percent=1.5, provider="binance", timestamp=1704067200, high=5.3, low=5.0)
    monkeypatch.setattr(routes.resolver, "resolve_quote", lambda symbol: quote)

    response = routes.price("nearusdt")
    assert response.source == "binance"
    assert response.price == 5.12
    assert response.high_24h == 5.3
    assert response.data_status == "live"


def test_price_all_sources_failed(monkeypatch):
    monkeypatch.setattr(routes.resolver, "resolve_quote", _exhausted)

    response = routes.price("NEARUSDT")
    assert response.status_code == 503
    body = json.loads(response.body)
    assert body["error_code"] == "NO_SOURCE_AVAILABLE"
    assert body["providers_tried"] == ["binance", "coingecko"]


def test_invalid_symbol_rejected():
    response = routes.price("NEAR/USDT")
    assert response.status_code == 400
    assert json.loads(response.body)["error_code"] == "INVALID_INPUT"


def test_klines_rejects_non_positive_limit():
    assert routes.klines("NEARUSDT", interval="5m", limit=0).status_code == 400


def test_klines_flags_substitution_as_degraded(monkeypatch):
    series = _series(3, interval="30m", requested="5m", provider="coingecko", note="coingecko does not provide 5m candles; delivered 30m instead")
    monkeypatch.setattr(routes.resolver, "resolve_candles", lambda symbol, interval, limit: series)

    response = routes.klines("NEARUSDT", interval="5m", limit=3)
    assert response.source == "coingecko"
    assert response.requested_interval == "5m"
    assert response.interval == "30m"
    assert response.substituted is True
    assert response.data_status == "degraded"
    assert response.count == 3
    assert response.candles[0].time == 1704067200


def test_klines_limit_clamped(monkeypatch):
    seen = {}

    def fake_resolve(symbol, interval, limit):
        seen["limit"] = limit
        return _series(2)

    monkeypatch.setattr(routes.resolver, "resolve_candles", fake_resolve)
    routes.klines("NEARUSDT", interval="5m", limit=50_000)
    assert seen["limit"] == routes.settings.max_candle_limit


def test_signals_pipeline(monkeypatch):
    monkeypatch.setattr(routes.resolver, "resolve_candles", lambda symbol, interval, limit: _series(40))

    response = routes.signals("NEARUSDT", interval="5m", limit=40)
    assert response.series.count == 40
    assert len(response.indicators.rsi) == 40
    assert len(response.indicators.bollinger.upper) == 40
    assert response.indicators.bollinger.upper[0] is None
    assert response.signal_count == len(response.signals)
    assert response.insufficient_history is False


def test_signals_short_history(monkeypatch):
    monkeypatch.setattr(routes.resolver, "resolve_candles", lambda symbol, interval, limit: _series(10))

    response = routes.signals("NEARUSDT", interval="5m", limit=10)
    assert response.signals == []
    assert response.insufficient_history is True
