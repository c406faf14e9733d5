import re
from enum import Enum


class Provider(str, Enum):
    BINANCE = "binance"
    BINANCE_US = "binance_us"
    COINGECKO = "coingecko"
    COINCAP = "coincap"


_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9]{2,20}$")

_QUOTE_SUFFIXES = ("USDT", "BUSD", "USDC", "USD")

# Pair-quoted exchanges take the logical symbol as-is; aggregators key by asset id.
_SYMBOL_MAP = {
    "NEARUSDT": {Provider.COINGECKO: "near", Provider.COINCAP: "near-protocol"},
    "BTCUSDT": {Provider.COINGECKO: "bitcoin", Provider.COINCAP: "bitcoin"},
    "ETHUSDT": {Provider.COINGECKO: "ethereum", Provider.COINCAP: "ethereum"},
    "SOLUSDT": {Provider.COINGECKO: "solana", Provider.COINCAP: "solana"},
}


def normalize_symbol(symbol: str) -> str:
    cleaned = symbol.strip().upper()
    if not cleaned or not _SYMBOL_PATTERN.match(cleaned):
        raise ValueError("invalid symbol")
    return cleaned


def base_asset(symbol: str) -> str:
    upper = symbol.upper()
    for suffix in _QUOTE_SUFFIXES:
        if upper.endswith(suffix) and len(upper) > len(suffix):
            return upper[: -len(suffix)]
    return upper


def to_provider_symbol(symbol: str, provider: Provider) -> str:
    upper = symbol.upper()
    mapped = _SYMBOL_MAP.get(upper, {}).get(provider)
    if mapped:
        return mapped
    if provider in (Provider.BINANCE, Provider.BINANCE_US):
        return upper
    return base_asset(upper).lower()
