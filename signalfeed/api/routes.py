from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from signalfeed.config.settings import settings
from signalfeed.errors import AllSourcesExhausted
from signalfeed.exchanges.registry import build_adapters
from signalfeed.internal_metrics import MetricsCollector
from signalfeed.models.market import CandleSeries, Quote
from signalfeed.schemas.analysis import AnalysisResponseSchema, BollingerSchema, IndicatorSetSchema, SignalSchema
from signalfeed.schemas.candle import CandleItem, CandleResponseSchema
from signalfeed.schemas.quote import QuoteSchema
from signalfeed.services.analysis_service import AnalysisResult, AnalysisService, params_from_settings
from signalfeed.services.market_data_service import MarketDataService
from signalfeed.services.resolver import CascadingResolver
from signalfeed.utils.symbol_mapper import normalize_symbol

logger = logging.getLogger(__name__)
router = APIRouter()

metrics = MetricsCollector()
resolver = CascadingResolver(build_adapters(settings), metrics=metrics)
market_data = MarketDataService(resolver, max_limit=settings.max_candle_limit)
indicator_params, signal_rules = params_from_settings(settings)
analysis_service = AnalysisService(market_data, indicator_params, signal_rules)


def error_response(error_code: str, message: str, status_code: int = 400, **context):
    payload = {
        "schema_version": settings.schema_version,
        "status": "error",
        "error_code": error_code,
        "message": message,
        **context,
    }
    return JSONResponse(payload, status_code=status_code, headers={"x-error-code": error_code})


def _exhausted_response(exc: AllSourcesExhausted):
    return error_response(
        "NO_SOURCE_AVAILABLE",
        "All data sources failed",
        status_code=503,
        providers_tried=exc.providers_tried,
        attempts=[{"provider": a.provider, "kind": a.kind} for a in exc.attempts],
    )


def _candle_response(series: CandleSeries) -> CandleResponseSchema:
    return CandleResponseSchema(
        schema_version=settings.schema_version,
        symbol=series.symbol,
        source=series.provider,
        requested_interval=series.requested_interval,
        interval=series.interval,
        substituted=series.substituted,
        note=series.note,
        count=len(series.candles),
        candles=[
            CandleItem(time=c.time, open=c.open, high=c.high, low=c.low, close=c.close, volume=c.volume)
            for c in series.candles
        ],
        data_status="degraded" if series.substituted else "live",
    )


def _quote_response(quote: Quote) -> QuoteSchema:
    return QuoteSchema(
        schema_version=settings.schema_version,
        symbol=quote.symbol,
        source=quote.provider,
        price=quote.price,
        price_change_percent=quote.change_percent,
        high_24h=quote.high,
        low_24h=quote.low,
        volume_24h=quote.volume,
        timestamp=quote.timestamp,
    )


def _analysis_response(result: AnalysisResult) -> AnalysisResponseSchema:
    indicators = result.indicators
    return AnalysisResponseSchema(
        schema_version=settings.schema_version,
        series=_candle_response(result.series),
        indicators=IndicatorSetSchema(
            ema_fast=indicators.ema_fast,
            ema_slow=indicators.ema_slow,
            bollinger=BollingerSchema(
                upper=indicators.bollinger.upper,
                middle=indicators.bollinger.middle,
                lower=indicators.bollinger.lower,
            ),
            rsi=indicators.rsi,
            rsi_warmup=indicators.rsi_period,
        ),
        signals=[
            SignalSchema(
                type=s.direction.value,
                index=s.index,
                time=s.time,
                price=s.entry_price,
                take_profit=s.take_profit,
                stop_loss=s.stop_loss,
                strength=s.strength,
                reasons=list(s.reasons),
                rsi=s.rsi,
                ema_fast=s.ema_fast,
                ema_slow=s.ema_slow,
            )
            for s in result.signals
        ],
        signal_count=len(result.signals),
        insufficient_history=len(result.series) < signal_rules.min_history,
    )


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, version=settings.app_version)

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        response = None
        start = time.perf_counter()
        try:
            response = await call_next(request)
            return response
        finally:
            latency_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.info(
                "request_complete",
                extra={
                    "request_id": request_id,
                    "path": request.url.path,
                    "latency_ms": latency_ms,
                    "status_code": response.status_code if response else None,
                    "error_code": response.headers.get("x-error-code") if response else None,
                },
            )

    app.include_router(router)
    return app


@router.get("/health")
def health():
    return {"schema_version": settings.schema_version, "status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/metrics")
def all_metrics():
    output = metrics.global_metrics()
    output["schema_version"] = settings.schema_version
    return output


@router.get("/providers/status")
def providers_status():
    per_provider = metrics.provider_status()
    out = {}
    for position, adapter in enumerate(resolver.adapters):
        item = per_provider.get(adapter.name, {"total_attempts": 0, "failure_rate": 0.0, "average_latency_ms": 0.0})
        out[adapter.name] = {
            "priority": position + 1,
            "timeout_seconds": adapter.timeout_seconds,
            "total_attempts": item["total_attempts"],
            "failure_rate": item["failure_rate"],
            "average_latency_ms": item["average_latency_ms"],
        }
    return {"schema_version": settings.schema_version, "providers": out}


@router.get("/api/price/{symbol}", response_model=QuoteSchema)
def price(symbol: str):
    try:
        clean_symbol = normalize_symbol(symbol)
    except ValueError:
        return error_response("INVALID_INPUT", "Invalid symbol", symbol=symbol)
    try:
        quote = market_data.get_quote(clean_symbol)
    except AllSourcesExhausted as exc:
        return _exhausted_response(exc)
    return _quote_response(quote)


@router.get("/api/klines/{symbol}", response_model=CandleResponseSchema)
def klines(symbol: str, interval: str = "5m", limit: int = settings.default_candle_limit):
    if limit <= 0:
        return error_response("INVALID_INPUT", "limit must be a positive integer", symbol=symbol)
    try:
        clean_symbol = normalize_symbol(symbol)
    except ValueError:
        return error_response("INVALID_INPUT", "Invalid symbol", symbol=symbol)
    try:
        series = market_data.get_candles(clean_symbol, interval, limit)
    except AllSourcesExhausted as exc:
        return _exhausted_response(exc)
    return _candle_response(series)


@router.get("/api/signals/{symbol}", response_model=AnalysisResponseSchema)
def signals(symbol: str, interval: str = "5m", limit: int = settings.default_candle_limit):
    if limit <= 0:
        return error_response("INVALID_INPUT", "limit must be a positive integer", symbol=symbol)
    try:
        clean_symbol = normalize_symbol(symbol)
    except ValueError:
        return error_response("INVALID_INPUT", "Invalid symbol", symbol=symbol)
    try:
        result = analysis_service.analyze(clean_symbol, interval, limit)
    except AllSourcesExhausted as exc:
        return _exhausted_response(exc)
    return _analysis_response(result)
