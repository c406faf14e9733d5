from signalfeed.config.settings import settings
from signalfeed.models.market import CandleSeries, Quote
from signalfeed.services.resolver import CascadingResolver
from signalfeed.utils.interval_mapper import parse_interval
from signalfeed.utils.symbol_mapper import normalize_symbol


class MarketDataService:
    def __init__(self, resolver: CascadingResolver, max_limit: int = settings.max_candle_limit, default_interval: str = settings.default_interval):
        self.resolver = resolver
        self.max_limit = max_limit
        self.default_interval = parse_interval(default_interval)

    def get_quote(self, symbol: str) -> Quote:
        return self.resolver.resolve_quote(normalize_symbol(symbol))

    def get_candles(self, symbol: str, interval: str, limit: int) -> CandleSeries:
        if limit <= 0:
            raise ValueError("limit must be positive")
        requested = parse_interval(interval, default=self.default_interval)
        return self.resolver.resolve_candles(normalize_symbol(symbol), requested, min(limit, self.max_limit))
