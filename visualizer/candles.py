"""
Candle query engine.
Reads ordered OHLCV series for an (instrument, interval) pair and converts
them into chart points with millisecond timestamps.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import and_, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from visualizer.config import Settings
from visualizer.database import StoreError
from visualizer.models import Candle

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class CandleQuery:
    """Effective candle request after defaults are applied."""

    figi: str
    interval: str


@dataclass(frozen=True)
class ChartPoint:
    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: int


@dataclass
class StoreSummary:
    """Diagnostic snapshot of what the candles table holds."""

    available_figis: list[str]
    available_intervals: list[str]
    total_records: int


def resolve_candle_query(figi: Optional[str], interval: Optional[str], settings: Settings) -> CandleQuery:
    """Substitute configured defaults for absent or empty parameters.

    Values are passed through otherwise; unknown identifiers and interval
    codes simply match no rows.
    """
    return CandleQuery(
        figi=figi or settings.default_figi,
        interval=interval or settings.default_interval,
    )


def _ensure_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def to_epoch_millis(ts: datetime) -> int:
    """Convert a timestamp to Unix epoch milliseconds. Naive values are UTC."""
    delta = _ensure_utc(ts) - _EPOCH
    # Integer arithmetic keeps microsecond inputs exact; floors to the millisecond
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def query_candles(db: Session, figi: str, interval: str) -> list[Candle]:
    """
    Return the candles for an instrument and interval, oldest first.

    A pair with no stored rows yields an empty list. Store failures raise
    StoreError and are never reported as an empty series.
    """
    try:
        candles = (
            db.query(Candle)
            .filter(
                and_(
                    Candle.figi == figi,
                    Candle.interval_type == interval,
                )
            )
            .order_by(Candle.time.asc())
            .all()
        )
    except SQLAlchemyError as exc:
        raise StoreError(f"failed to query candles for {figi} {interval}: {exc}") from exc

    logger.debug(f"Loaded {len(candles)} candles for {figi} {interval}")
    return list(candles)


def to_chart_points(candles: Iterable[Candle]) -> list[ChartPoint]:
    return [
        ChartPoint(
            timestamp=to_epoch_millis(candle.time),
            open=candle.open_price,
            high=candle.high_price,
            low=candle.low_price,
            close=candle.close_price,
            volume=candle.volume,
        )
        for candle in candles
    ]


def summarize_store(db: Session, sample_limit: int) -> StoreSummary:
    """Collect a bounded sample of FIGIs, the interval codes present and the row count."""
    try:
        figis = [
            row[0]
            for row in db.query(Candle.figi).distinct().order_by(Candle.figi).limit(sample_limit).all()
        ]
        intervals = [
            row[0]
            for row in db.query(Candle.interval_type).distinct().order_by(Candle.interval_type).all()
        ]
        total = db.query(func.count()).select_from(Candle).scalar()
    except SQLAlchemyError as exc:
        raise StoreError(f"failed to summarize candle store: {exc}") from exc

    return StoreSummary(
        available_figis=figis,
        available_intervals=intervals,
        total_records=int(total or 0),
    )
