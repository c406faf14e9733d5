from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Signal Feed Gateway"
    app_version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    schema_version: str = "1.0"

    # Fastest/most reliable source first; every entry must be a known provider name.
    provider_order: list[str] = ["binance", "binance_us", "coingecko", "coincap"]

    binance_base_url: str = "https://api.binance.com/api/v3"
    binance_us_base_url: str = "https://api.binance.us/api/v3"
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    coincap_base_url: str = "https://api.coincap.io/v2"

    binance_timeout_seconds: float = 5.0
    binance_us_timeout_seconds: float = 8.0
    coingecko_timeout_seconds: float = 10.0
    coincap_timeout_seconds: float = 15.0

    quote_currency: str = "usd"
    enforce_contiguous_series: bool = True

    default_interval: str = "15m"
    default_candle_limit: int = 100
    max_candle_limit: int = 1000

    ema_fast_period: int = 9
    ema_slow_period: int = 21
    bollinger_period: int = 20
    bollinger_multiplier: float = 2.0
    rsi_period: int = 14
    rsi_overbought: float = 70.0
    rsi_oversold: float = 30.0

    take_profit_percent: float = 1.5
    stop_loss_percent: float = 0.8
    min_signal_strength: int = 30

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


settings = Settings()
