"""
Pydantic schemas for API responses.
Defines the contract between the API and the charting client.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Error payload returned by every failing API endpoint."""

    error: str

    model_config = ConfigDict(
        json_schema_extra={"example": {"error": "failed to query candles for BBG004730N88 CANDLE_INTERVAL_DAY"}}
    )


class CandleResponse(BaseModel):
    """One chart point: millisecond timestamp plus OHLCV."""

    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: int

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "timestamp": 1704153600000,
                "open": 100.0,
                "high": 110.0,
                "low": 95.0,
                "close": 105.0,
                "volume": 12345,
            }
        },
    )


class InstrumentResponse(BaseModel):
    """Response model for an enabled instrument."""

    figi: str
    ticker: str
    name: str
    instrument_type: str
    currency: str
    lot_size: int
    min_price_increment: float
    trading_status: str
    enabled: bool

    model_config = ConfigDict(from_attributes=True)


class IntervalResponse(BaseModel):
    """A supported interval as offered to the client."""

    value: str
    label: str

    model_config = ConfigDict(from_attributes=True)


class DebugResponse(BaseModel):
    """Diagnostic view of the candle store contents."""

    available_figis: List[str]
    available_intervals: List[str]
    total_records: int

    model_config = ConfigDict(from_attributes=True)


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    service: str
    database: str
    timestamp: datetime


class ApiLatencyMetrics(BaseModel):
    request_count: int
    average: float
    max: float
    last: float


class StoreMetrics(BaseModel):
    failures: int
    last_failure: Optional[datetime]


class MetricsResponse(BaseModel):
    """Response model for runtime service metrics."""

    service: str
    process_started_at: datetime
    uptime_seconds: float
    store: StoreMetrics
    api_latency_ms: ApiLatencyMetrics
    timestamp: datetime
