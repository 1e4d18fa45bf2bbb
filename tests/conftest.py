import os

# The module-level engine is built at import time; keep it off PostgreSQL in tests
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from visualizer.api import api
from visualizer.database import get_db
from visualizer.models import NORMAL_TRADING_STATUS, Base, Candle, Instrument


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    api.dependency_overrides[get_db] = override_get_db
    yield TestClient(api)
    api.dependency_overrides.clear()


class BrokenSession:
    """Session stand-in whose every round-trip fails like a lost connection."""

    def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    query = _fail
    execute = _fail

    def close(self):
        pass


@pytest.fixture
def broken_client():
    def override_get_db():
        yield BrokenSession()

    api.dependency_overrides[get_db] = override_get_db
    yield TestClient(api)
    api.dependency_overrides.clear()


@pytest.fixture
def add_instrument(db):
    def _add(figi, ticker, **overrides):
        values = {
            "figi": figi,
            "ticker": ticker,
            "name": f"{ticker} plc",
            "instrument_type": "share",
            "currency": "rub",
            "lot_size": 10,
            "min_price_increment": 0.01,
            "trading_status": NORMAL_TRADING_STATUS,
            "enabled": True,
        }
        values.update(overrides)
        instrument = Instrument(**values)
        db.add(instrument)
        db.commit()
        return instrument

    return _add


@pytest.fixture
def add_candle(db):
    def _add(figi, interval, time, ohlcv):
        open_price, high_price, low_price, close_price, volume = ohlcv
        candle = Candle(
            figi=figi,
            interval_type=interval,
            time=time,
            open_price=open_price,
            high_price=high_price,
            low_price=low_price,
            close_price=close_price,
            volume=volume,
        )
        db.add(candle)
        db.commit()
        return candle

    return _add


@pytest.fixture
def broken_session():
    return BrokenSession()
