from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock


@dataclass
class ProviderMetrics:
    total_attempts: int = 0
    successful_attempts: int = 0
    failed_attempts: int = 0
    failures_by_kind: dict[str, int] = field(default_factory=dict)
    latency_total_ms: float = 0.0

    def avg_latency_ms(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return self.latency_total_ms / self.total_attempts


class MetricsCollector:
    """Per-provider attempt counters. Read-only for the resolver's decisions."""

    def __init__(self):
        self._per_provider: dict[str, ProviderMetrics] = {}
        self._exhausted = 0
        self._lock = Lock()

    def _get(self, provider: str) -> ProviderMetrics:
        if provider not in self._per_provider:
            self._per_provider[provider] = ProviderMetrics()
        return self._per_provider[provider]

    def record_attempt(self, provider: str, success: bool, latency_ms: float, failure_kind: str | None = None):
        with self._lock:
            m = self._get(provider)
            m.total_attempts += 1
            m.latency_total_ms += max(latency_ms, 0.0)
            if success:
                m.successful_attempts += 1
            else:
                m.failed_attempts += 1
                kind = failure_kind or "unknown"
                m.failures_by_kind[kind] = m.failures_by_kind.get(kind, 0) + 1

    def record_exhausted(self):
        with self._lock:
            self._exhausted += 1

    def provider_status(self) -> dict[str, dict[str, float | int | dict]]:
        with self._lock:
            out: dict[str, dict[str, float | int | dict]] = {}
            for name, m in self._per_provider.items():
                failure_rate = 0.0 if m.total_attempts == 0 else (m.failed_attempts / m.total_attempts)
                out[name] = {
                    "total_attempts": m.total_attempts,
                    "successful_attempts": m.successful_attempts,
                    "failed_attempts": m.failed_attempts,
                    "failures_by_kind": dict(m.failures_by_kind),
                    "failure_rate": round(failure_rate, 4),
                    "average_latency_ms": round(m.avg_latency_ms(), 3),
                }
            return out

    def global_metrics(self) -> dict[str, float | int | dict]:
        per = self.provider_status()
        total_attempts = sum(v["total_attempts"] for v in per.values())
        total_failures = sum(v["failed_attempts"] for v in per.values())
        weighted_latency = sum((v["average_latency_ms"] * v["total_attempts"]) for v in per.values())
        failure_rate = 0.0 if total_attempts == 0 else (total_failures / total_attempts)
        average_latency = 0.0 if total_attempts == 0 else (weighted_latency / total_attempts)
        with self._lock:
            exhausted = self._exhausted
        return {
            "attempt_count": total_attempts,
            "failure_rate": round(failure_rate, 4),
            "average_latency_ms": round(average_latency, 3),
            "sources_exhausted": exhausted,
            "per_provider": per,
        }
