from typing import Optional

from pydantic import BaseModel


class QuoteSchema(BaseModel):
    schema_version: str
    symbol: str
    source: str
    price: float
    price_change_percent: float
    high_24h: Optional[float] = None
    low_24h: Optional[float] = None
    volume_24h: Optional[float] = None
    timestamp: int
    data_status: str = "live"
