"""
FastAPI endpoints and the chart page.
All endpoints are read-only; store failures surface as {"error": message}.
"""
from datetime import datetime, timezone
import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from visualizer.candles import query_candles, resolve_candle_query, summarize_store, to_chart_points
from visualizer.catalog import list_enabled_instruments
from visualizer.config import settings
from visualizer.dashboard import render_chart_page
from visualizer.database import StoreError, check_connection, get_db
from visualizer.intervals import list_supported_intervals
from visualizer.observability import RequestTimer, observability
from visualizer.schemas import (
    CandleResponse,
    DebugResponse,
    ErrorResponse,
    HealthResponse,
    InstrumentResponse,
    IntervalResponse,
    MetricsResponse,
)

logger = logging.getLogger(__name__)


NOT_FOUND_MESSAGE = "Page not found"


api = FastAPI(
    title=settings.app_title,
    description=(
        "Historical OHLCV candles for charting.\n\n"
        "All endpoints are read-only. Candle timestamps are Unix epoch milliseconds. "
        "Errors use the shape `{error}`."
    ),
    version="1.0.0",
)


ERROR_RESPONSES = {
    500: {
        "model": ErrorResponse,
        "description": "Store failure",
        "content": {"application/json": {"example": {"error": "failed to query enabled instruments: connection refused"}}},
    },
}


@api.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"Store failure on {request.url.path}: {exc}")
    observability.mark_store_failure()
    payload = ErrorResponse(error=str(exc))
    return JSONResponse(status_code=500, content=payload.model_dump())


@api.exception_handler(StarletteHTTPException)
async def http_exception_handler(_: Request, exc: StarletteHTTPException):
    # Unknown paths and unsupported methods on known paths are both "not found"
    if exc.status_code in (404, 405):
        return PlainTextResponse(NOT_FOUND_MESSAGE, status_code=404)
    details = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    payload = ErrorResponse(error=details)
    return JSONResponse(status_code=exc.status_code, content=payload.model_dump())


@api.exception_handler(Exception)
async def unhandled_exception_handler(_: Request, exc: Exception):
    logger.error(f"Unhandled API exception: {exc}", exc_info=True)
    payload = ErrorResponse(error="Unexpected server error")
    return JSONResponse(status_code=500, content=payload.model_dump())


@api.middleware("http")
async def measure_request_latency(request: Request, call_next):
    """Capture basic request latency metrics for all API calls."""
    timer = RequestTimer()
    response = await call_next(request)
    elapsed_ms = timer.elapsed_ms()
    observability.mark_request_timing(elapsed_ms)
    logger.debug(f"{request.method} {request.url.path} -> {response.status_code} in {elapsed_ms:.1f}ms")
    return response


@api.get("/", response_class=HTMLResponse, include_in_schema=False)
def index(db: Session = Depends(get_db)):
    """Chart page seeded with the enabled instruments and supported intervals."""
    try:
        instruments = list_enabled_instruments(db)
    except StoreError as exc:
        # The page stays usable without a catalog; the selector falls back to the default FIGI
        logger.error(f"Error fetching instruments for chart page: {exc}")
        observability.mark_store_failure()
        instruments = []

    return render_chart_page(
        title=settings.app_title,
        instruments=instruments,
        intervals=list_supported_intervals(),
        default_figi=settings.default_figi,
        default_interval=settings.default_interval,
    )


@api.get("/api/candles", response_model=List[CandleResponse], responses=ERROR_RESPONSES, summary="OHLCV candles", description="Returns the full candle series for an instrument and interval, oldest first.")
def get_candles(
    figi: Optional[str] = Query(None, description="Instrument FIGI; defaults to the configured instrument", examples=["BBG004730N88"]),
    interval: Optional[str] = Query(None, description="Interval code; defaults to the configured interval", examples=["CANDLE_INTERVAL_DAY"]),
    db: Session = Depends(get_db),
):
    """Get the ordered candle series for an instrument and interval."""
    query = resolve_candle_query(figi, interval, settings)
    candles = query_candles(db, query.figi, query.interval)
    points = to_chart_points(candles)
    logger.info(f"Returning {len(points)} candles for {query.figi} {query.interval}")
    return [CandleResponse.model_validate(p) for p in points]


@api.get("/api/instruments", response_model=List[InstrumentResponse], responses=ERROR_RESPONSES, summary="Enabled instruments", description="Returns instruments in normal trading with charting enabled, sorted by ticker.")
def get_instruments(db: Session = Depends(get_db)):
    instruments = list_enabled_instruments(db)
    logger.info(f"Returning {len(instruments)} instruments")
    return [InstrumentResponse.model_validate(i) for i in instruments]


@api.get("/api/intervals", response_model=List[IntervalResponse], summary="Supported intervals")
def get_intervals():
    return [IntervalResponse.model_validate(i) for i in list_supported_intervals()]


@api.get("/api/debug", response_model=DebugResponse, responses=ERROR_RESPONSES, summary="Store diagnostics", description="Returns a sample of FIGIs, the interval codes present and the total candle count.")
def get_debug(db: Session = Depends(get_db)):
    summary = summarize_store(db, settings.debug_figi_sample_limit)
    return DebugResponse.model_validate(summary)


@api.get("/health", response_model=HealthResponse, responses={503: {"model": ErrorResponse, "description": "Store unreachable"}}, summary="Service health")
def health_check(db: Session = Depends(get_db)):
    """Health check endpoint. Returns service status and database connectivity."""
    try:
        check_connection(db)
    except StoreError as exc:
        logger.error(f"Health check failed: {exc}")
        observability.mark_store_failure()
        payload = ErrorResponse(error="Service unavailable")
        return JSONResponse(status_code=503, content=payload.model_dump())

    return HealthResponse(
        status="healthy",
        service="candle-visualizer",
        database="healthy",
        timestamp=datetime.now(timezone.utc),
    )


@api.get("/metrics", response_model=MetricsResponse, summary="Runtime metrics")
def metrics():
    """Runtime metrics endpoint for uptime, latency and store failures."""
    request_metrics = observability.request_metrics()

    return {
        "service": "candle-visualizer",
        "process_started_at": observability.process_started_at,
        "uptime_seconds": round(observability.uptime_seconds(), 3),
        "store": {
            "failures": observability.store_failures(),
            "last_failure": observability.last_store_failure(),
        },
        "api_latency_ms": {
            "request_count": request_metrics.request_count,
            "average": request_metrics.average_ms,
            "max": request_metrics.max_ms,
            "last": request_metrics.last_ms,
        },
        "timestamp": datetime.now(timezone.utc),
    }
