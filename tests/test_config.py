from visualizer.config import Settings


def test_url_assembled_from_parts():
    s = Settings(
        _env_file=None,
        database_url=None,
        db_host="db.internal",
        db_port=6432,
        db_user="reader",
        db_password="p@ss:word",
        db_name="market",
        db_sslmode="require",
    )

    url = s.sqlalchemy_url()

    assert url.drivername == "postgresql+psycopg2"
    assert url.host == "db.internal"
    assert url.port == 6432
    assert url.username == "reader"
    assert url.password == "p@ss:word"
    assert url.database == "market"
    assert url.query["sslmode"] == "require"


def test_full_url_wins():
    s = Settings(_env_file=None, database_url="postgresql+psycopg2://u:p@h:5433/d", db_host="ignored")

    url = s.sqlalchemy_url()

    assert url.host == "h"
    assert url.port == 5433


def test_serving_defaults():
    s = Settings(_env_file=None)

    assert s.default_figi == "BBG004730N88"
    assert s.default_interval == "CANDLE_INTERVAL_DAY"
