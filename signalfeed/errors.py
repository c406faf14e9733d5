"""
Error taxonomy for market data acquisition.

Adapters raise ProviderError subclasses only. The cascading resolver catches them,
records the attempt and moves on to the next provider; AllSourcesExhausted is the
single failure surfaced to callers.
"""
from __future__ import annotations

from dataclasses import dataclass


class ProviderError(Exception):
    """A single provider attempt failed. Never surfaced to callers directly."""

    kind = "provider_error"

    def __init__(self, provider: str, message: str):
        super().__init__(f"[{provider}] {message}")
        self.provider = provider
        self.message = message


class ProviderTimeout(ProviderError):
    kind = "timeout"


class ProviderUnavailable(ProviderError):
    """Connection, DNS or non-2xx status."""

    kind = "unavailable"


class ProviderMalformedResponse(ProviderError):
    """Schema violation, empty series, non-numeric price."""

    kind = "malformed"


class UnsupportedInterval(ProviderError):
    """The provider has no granularity at least as coarse as the one requested."""

    kind = "unsupported_interval"


@dataclass(frozen=True)
class ProviderAttempt:
    provider: str
    kind: str
    message: str
    latency_ms: float = 0.0


class AllSourcesExhausted(Exception):
    """Every provider in priority order failed for one request."""

    def __init__(self, operation: str, symbol: str, attempts: list[ProviderAttempt]):
        self.operation = operation
        self.symbol = symbol
        self.attempts = list(attempts)
        tried = ", ".join(f"{a.provider}:{a.kind}" for a in self.attempts) or "none configured"
        super().__init__(f"no source available for {operation} {symbol} (tried {tried})")

    @property
    def providers_tried(self) -> list[str]:
        return [attempt.provider for attempt in self.attempts]
