from typing import Optional

from pydantic import BaseModel

from signalfeed.schemas.candle import CandleResponseSchema


class BollingerSchema(BaseModel):
    upper: list[Optional[float]]
    middle: list[Optional[float]]
    lower: list[Optional[float]]


class IndicatorSetSchema(BaseModel):
    ema_fast: list[float]
    ema_slow: list[float]
    bollinger: BollingerSchema
    rsi: list[float]
    rsi_warmup: int


class SignalSchema(BaseModel):
    type: str
    index: int
    time: int
    price: float
    take_profit: float
    stop_loss: float
    strength: int
    reasons: list[str]
    rsi: float
    ema_fast: float
    ema_slow: float


class AnalysisResponseSchema(BaseModel):
    schema_version: str
    series: CandleResponseSchema
    indicators: IndicatorSetSchema
    signals: list[SignalSchema]
    signal_count: int
    insufficient_history: bool = False
