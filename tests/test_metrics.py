from signalfeed.internal_metrics import MetricsCollector


def test_metrics_counters_increment():
    m = MetricsCollector()
    m.record_attempt("binance", success=True, latency_ms=100)
    m.record_attempt("binance", success=False, latency_ms=200, failure_kind="timeout")

    status = m.provider_status()["binance"]
    assert status["total_attempts"] == 2
    assert status["successful_attempts"] == 1
    assert status["failed_attempts"] == 1
    assert status["failures_by_kind"] == {"timeout": 1}
    assert status["average_latency_ms"] == 150.0


def test_global_metrics_counts_exhaustion():
    m = MetricsCollector()
    m.record_attempt("binance", success=False, latency_ms=10, failure_kind="unavailable")
    m.record_attempt("coingecko", success=False, latency_ms=30, failure_kind="malformed")
    m.record_exhausted()

    out = m.global_metrics()
    assert out["attempt_count"] == 2
    assert out["failure_rate"] == 1.0
    assert out["sources_exhausted"] == 1
    assert set(out["per_provider"]) == {"binance", "coingecko"}
