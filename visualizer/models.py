"""
Database models for the candle visualizer.
Maps the instruments and candles tables populated by the loader.
"""
from sqlalchemy import BigInteger, Boolean, Column, DateTime, Float, Index, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()

NORMAL_TRADING_STATUS = "SECURITY_TRADING_STATUS_NORMAL_TRADING"


class Instrument(Base):
    """Represents a tradable instrument keyed by its FIGI."""
    __tablename__ = "instruments"

    figi = Column(String(32), primary_key=True)
    ticker = Column(String(32), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    instrument_type = Column(String(32), nullable=False)
    currency = Column(String(16), nullable=False)
    lot_size = Column(Integer, nullable=False)
    min_price_increment = Column(Float, nullable=False)
    trading_status = Column(String(64), nullable=False)
    enabled = Column(Boolean, nullable=False, default=False)

    def __repr__(self):
        return f"<Instrument(figi={self.figi}, ticker={self.ticker})>"


class Candle(Base):
    """Represents one OHLCV bar for an instrument and interval."""
    __tablename__ = "candles"

    # (figi, interval_type, time) is unique; the loader guarantees it
    figi = Column(String(32), primary_key=True)
    interval_type = Column(String(32), primary_key=True)
    time = Column(DateTime(timezone=True), primary_key=True)
    open_price = Column(Float, nullable=False)
    high_price = Column(Float, nullable=False)
    low_price = Column(Float, nullable=False)
    close_price = Column(Float, nullable=False)
    volume = Column(BigInteger, nullable=False)

    __table_args__ = (
        Index("ix_candles_figi_interval_time", "figi", "interval_type", "time"),
    )

    def __repr__(self):
        return (
            f"<Candle(figi={self.figi}, interval={self.interval_type}, "
            f"time={self.time})>"
        )
