"""Instrument catalog backed by the instruments table."""
from __future__ import annotations

import logging

from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from visualizer.database import StoreError
from visualizer.models import NORMAL_TRADING_STATUS, Instrument

logger = logging.getLogger(__name__)


def list_enabled_instruments(db: Session) -> list[Instrument]:
    """
    Return instruments eligible for charting, sorted by ticker.

    Only rows in normal trading with the enabled flag set are returned. Store
    failures raise StoreError; an empty catalog is an empty list.
    """
    try:
        instruments = (
            db.query(Instrument)
            .filter(
                and_(
                    Instrument.trading_status == NORMAL_TRADING_STATUS,
                    Instrument.enabled.is_(True),
                )
            )
            .order_by(Instrument.ticker.asc(), Instrument.figi.asc())
            .all()
        )
    except SQLAlchemyError as exc:
        raise StoreError(f"failed to query enabled instruments: {exc}") from exc

    logger.debug(f"Loaded {len(instruments)} enabled instruments")
    return list(instruments)
