from typing import Optional

from pydantic import BaseModel


class CandleItem(BaseModel):
    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float


class CandleResponseSchema(BaseModel):
    schema_version: str
    symbol: str
    source: str
    requested_interval: str
    interval: str
    substituted: bool = False
    note: Optional[str] = None
    count: int
    candles: list[CandleItem]
    data_status: str = "live"
