import json

import pytest

from signalfeed.errors import ProviderMalformedResponse
from signalfeed.exchanges.binance_adapter import BinanceAdapter, BinanceUSAdapter
from signalfeed.exchanges.coincap_adapter import CoinCapAdapter
from signalfeed.exchanges.coingecko_adapter import CoinGeckoAdapter, days_for
from signalfeed.schemas.candle import CandleItem
from signalfeed.utils.interval_mapper import translate_interval
from signalfeed.utils.symbol_mapper import Provider


def _binance(cls=BinanceAdapter):
    return cls(base_url="https://binance.test/api/v3", timeout_seconds=5)


def test_binance_klines_sorted_seconds_and_native(monkeypatch):
    adapter = _binance()
    calls = []

    def fake_get_json(path, params):
        calls.append((path, params))
        return [
            [1704067500000, "2.00000000", "2.10000000", "1.90000000", "2.05000000", "120.5", 1704067799999],
            [1704067200000, "1.00000000", "1.10000000", "0.90000000", "1.05000000", "100", 1704067499999],
        ]

    monkeypatch.setattr(adapter, "_get_json", fake_get_json)
    candles = adapter.fetch_candles("NEARUSDT", translate_interval("5m", Provider.BINANCE), 2)

    assert calls == [("/klines", {"symbol": "NEARUSDT", "interval": "5m", "limit": 2})]
    assert [c.time for c in candles] == [1704067200, 1704067500]
    assert isinstance(candles[0].open, float)
    assert candles[1].volume == 120.5


def test_binance_quote_maps_ticker_fields(monkeypatch):
    adapter = _binance(BinanceUSAdapter)
    monkeypatch.setattr(
        adapter,
        "_get_json",
        lambda path, params: {
            "symbol": "NEARUSDT",
            "lastPrice": "5.12340000",
            "priceChangePercent": "-1.250",
            "highPrice": "5.30000000",
            "lowPrice": "5.00000000",
            "volume": "123456.7",
            "closeTime": 1704067799999,
        },
    )
    quote = adapter.fetch_quote("NEARUSDT")
    assert quote.provider == "binance_us"
    assert quote.price == 5.1234
    assert quote.change_percent == -1.25
    assert quote.high == 5.3 and quote.low == 5.0
    assert quote.timestamp == 1704067799


def test_binance_rejects_non_numeric_price(monkeypatch):
    adapter = _binance()
    monkeypatch.setattr(adapter, "_get_json", lambda path, params: [[1704067200000, "abc", "1", "1", "1", "1"]])
    with pytest.raises(ProviderMalformedResponse):
        adapter.fetch_candles("NEARUSDT", translate_interval("5m", Provider.BINANCE), 10)


def test_binance_rejects_empty_series(monkeypatch):
    adapter = _binance()
    monkeypatch.setattr(adapter, "_get_json", lambda path, params: [])
    with pytest.raises(ProviderMalformedResponse):
        adapter.fetch_candles("NEARUSDT", translate_interval("5m", Provider.BINANCE), 10)


def test_binance_rejects_infinite_open_time(monkeypatch):
    adapter = _binance()
    monkeypatch.setattr(adapter, "_get_json", lambda path, params: json.loads('[[Infinity,"1","2","0.5","1.5","10"]]'))
    with pytest.raises(ProviderMalformedResponse, match="timestamp"):
        adapter.fetch_candles("NEARUSDT", translate_interval("5m", Provider.BINANCE), 10)


def test_binance_error_payload_is_malformed(monkeypatch):
    adapter = _binance()
    monkeypatch.setattr(adapter, "_get_json", lambda path, params: {"code": -1121, "msg": "Invalid symbol."})
    with pytest.raises(ProviderMalformedResponse):
        adapter.fetch_quote("NOPEUSDT")


def test_coingecko_ohlc_shifted_to_bucket_start_with_zero_volume(monkeypatch):
    adapter = CoinGeckoAdapter(base_url="https://gecko.test/api/v3", timeout_seconds=10)
    calls = []

    def fake_get_json(path, params):
        calls.append((path, params))
        return [
            [1704069000000, 1.0, 1.2, 0.9, 1.1],
            [1704070800000, 1.1, 1.3, 1.0, 1.25],
        ]

    monkeypatch.setattr(adapter, "_get_json", fake_get_json)
    translation = translate_interval("5m", Provider.COINGECKO)
    candles = adapter.fetch_candles("NEARUSDT", translation, 40)

    assert translation.substituted and translation.delivered == "30m"
    assert calls == [("/coins/near/ohlc", {"vs_currency": "usd", "days": 1})]
    assert [c.time for c in candles] == [1704067200, 1704069000]
    assert all(c.volume == 0.0 for c in candles)


def test_coingecko_days_window_follows_limit():
    assert days_for(translate_interval("30m", Provider.COINGECKO), 48) == 1
    assert days_for(translate_interval("30m", Provider.COINGECKO), 100) == 2
    assert days_for(translate_interval("4h", Provider.COINGECKO), 10) == 3
    assert days_for(translate_interval("1h", Provider.COINGECKO), 100) == 17
    assert days_for(translate_interval("4h", Provider.COINGECKO), 1000) == 30


def test_coingecko_quote_uses_asset_id(monkeypatch):
    adapter = CoinGeckoAdapter(base_url="https://gecko.test/api/v3", timeout_seconds=10)
    monkeypatch.setattr(
        adapter,
        "_get_json",
        lambda path, params: {"near": {"usd": 5.12, "usd_24h_change": 2.5, "usd_24h_vol": 1000.0, "last_updated_at": 1704067200}},
    )
    quote = adapter.fetch_quote("NEARUSDT")
    assert quote.provider == "coingecko"
    assert quote.price == 5.12
    assert quote.change_percent == 2.5
    assert quote.high is None and quote.low is None


def test_coincap_history_is_flat_candles(monkeypatch):
    adapter = CoinCapAdapter(base_url="https://coincap.test/v2", timeout_seconds=15)
    monkeypatch.setattr(
        adapter,
        "_get_json",
        lambda path, params: {
            "data": [
                {"priceUsd": "5.0100000000000000", "time": 1704067200000},
                {"priceUsd": "5.0200000000000000", "time": 1704070800000},
            ]
        },
    )
    candles = adapter.fetch_candles("NEARUSDT", translate_interval("1h", Provider.COINCAP), 10)
    assert [c.time for c in candles] == [1704067200, 1704070800]
    assert candles[0].open == candles[0].high == candles[0].low == candles[0].close == 5.01


def test_gapped_series_rejected(monkeypatch):
    adapter = CoinCapAdapter(base_url="https://coincap.test/v2", timeout_seconds=15)
    monkeypatch.setattr(
        adapter,
        "_get_json",
        lambda path, params: {
            "data": [
                {"priceUsd": "5.01", "time": 1704067200000},
                {"priceUsd": "5.03", "time": 1704074400000},
            ]
        },
    )
    with pytest.raises(ProviderMalformedResponse):
        adapter.fetch_candles("NEARUSDT", translate_interval("1h", Provider.COINCAP), 10)


def test_normalized_candles_reserialize_without_precision_loss(monkeypatch):
    adapter = _binance()
    raw = [[1704067200000, "5.12345678", "5.99999999", "5.00000001", "5.55555555", "98765.4321"]]
    monkeypatch.setattr(adapter, "_get_json", lambda path, params: raw)
    candle = adapter.fetch_candles("NEARUSDT", translate_interval("1m", Provider.BINANCE), 1)[0]

    wire = CandleItem(time=candle.time, open=candle.open, high=candle.high, low=candle.low, close=candle.close, volume=candle.volume)
    dumped = wire.model_dump()
    assert dumped["open"] == float(raw[0][1])
    assert dumped["high"] == float(raw[0][2])
    assert dumped["low"] == float(raw[0][3])
    assert dumped["close"] == float(raw[0][4])
    assert dumped["volume"] == float(raw[0][5])
    assert CandleItem.model_validate_json(wire.model_dump_json()) == wire
