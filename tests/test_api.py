from datetime import datetime, timezone

from visualizer.config import settings

FIGI = "BBG004730N88"
DAY = "CANDLE_INTERVAL_DAY"
SCENARIO_BAR = {
    "timestamp": 1704153600000,
    "open": 100,
    "high": 110,
    "low": 95,
    "close": 105,
    "volume": 12345,
}


def _seed_scenario_bar(add_candle):
    add_candle(FIGI, DAY, datetime(2024, 1, 2, tzinfo=timezone.utc), (100, 110, 95, 105, 12345))


def test_candles_for_explicit_pair(client, add_candle):
    _seed_scenario_bar(add_candle)

    response = client.get("/api/candles", params={"figi": FIGI, "interval": DAY})

    assert response.status_code == 200
    assert response.json() == [SCENARIO_BAR]


def test_candles_default_parameters(client, add_candle, monkeypatch):
    monkeypatch.setattr(settings, "default_figi", FIGI)
    monkeypatch.setattr(settings, "default_interval", DAY)
    _seed_scenario_bar(add_candle)

    assert client.get("/api/candles").json() == [SCENARIO_BAR]
    assert client.get("/api/candles", params={"figi": "", "interval": ""}).json() == [SCENARIO_BAR]


def test_candles_unknown_instrument_is_empty_array(client, add_candle):
    _seed_scenario_bar(add_candle)

    response = client.get("/api/candles", params={"figi": "UNKNOWN", "interval": DAY})

    assert response.status_code == 200
    assert response.text == "[]"


def test_candles_unknown_interval_is_empty_array(client, add_candle):
    _seed_scenario_bar(add_candle)

    response = client.get("/api/candles", params={"figi": FIGI, "interval": "CANDLE_INTERVAL_YEAR"})

    assert response.status_code == 200
    assert response.json() == []


def test_candles_are_time_ascending(client, add_candle):
    add_candle(FIGI, DAY, datetime(2024, 1, 3, tzinfo=timezone.utc), (105, 107, 104, 106, 2))
    add_candle(FIGI, DAY, datetime(2024, 1, 2, tzinfo=timezone.utc), (100, 110, 95, 105, 1))

    body = client.get("/api/candles", params={"figi": FIGI, "interval": DAY}).json()

    assert [c["timestamp"] for c in body] == [1704153600000, 1704240000000]
    assert set(body[0]) == {"timestamp", "open", "high", "low", "close", "volume"}


def test_candles_store_failure(broken_client):
    response = broken_client.get("/api/candles", params={"figi": FIGI, "interval": DAY})

    assert response.status_code == 500
    body = response.json()
    assert list(body) == ["error"]
    assert "failed to query candles" in body["error"]


def test_instruments_listing(client, add_instrument):
    add_instrument("BBG004731354", "ROSN")
    add_instrument(FIGI, "SBER", name="Sberbank", lot_size=10, min_price_increment=0.01)
    add_instrument("BBG004731032", "LKOH", enabled=False)

    body = client.get("/api/instruments").json()

    assert [i["ticker"] for i in body] == ["ROSN", "SBER"]
    assert body[1] == {
        "figi": FIGI,
        "ticker": "SBER",
        "name": "Sberbank",
        "instrument_type": "share",
        "currency": "rub",
        "lot_size": 10,
        "min_price_increment": 0.01,
        "trading_status": "SECURITY_TRADING_STATUS_NORMAL_TRADING",
        "enabled": True,
    }


def test_instruments_empty_is_array(client, add_instrument):
    add_instrument("BBG004731032", "LKOH", enabled=False)

    response = client.get("/api/instruments")

    assert response.status_code == 200
    assert response.text == "[]"


def test_instruments_store_failure(broken_client):
    response = broken_client.get("/api/instruments")

    assert response.status_code == 500
    assert "enabled instruments" in response.json()["error"]


def test_intervals_listing(client):
    body = client.get("/api/intervals").json()

    assert len(body) == 13
    assert body[0] == {"value": "CANDLE_INTERVAL_1_MIN", "label": "1 minute"}
    assert {"value": DAY, "label": "1 day"} in body


def test_intervals_do_not_touch_the_store(broken_client):
    assert broken_client.get("/api/intervals").status_code == 200


def test_index_page_lists_instruments_and_intervals(client, add_instrument):
    add_instrument(FIGI, "SBER", name="Sberbank")

    response = client.get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert f'value="{FIGI}"' in response.text
    assert "SBER - Sberbank" in response.text
    assert 'value="CANDLE_INTERVAL_MONTH"' in response.text


def test_index_page_without_instruments(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "No instruments available" in response.text


def test_index_page_survives_store_failure(broken_client):
    response = broken_client.get("/")

    assert response.status_code == 200
    assert "No instruments available" in response.text
    assert 'value="CANDLE_INTERVAL_DAY"' in response.text


def test_index_page_escapes_instrument_names(client, add_instrument):
    add_instrument("F1", "ABC", name="<script>alert(1)</script>")

    text = client.get("/").text

    assert "<script>alert(1)</script>" not in text
    assert "&lt;script&gt;" in text


def test_debug_summary(client, add_candle):
    _seed_scenario_bar(add_candle)
    add_candle(FIGI, "CANDLE_INTERVAL_HOUR", datetime(2024, 1, 2, 10, tzinfo=timezone.utc), (1, 2, 1, 2, 3))

    body = client.get("/api/debug").json()

    assert body == {
        "available_figis": [FIGI],
        "available_intervals": ["CANDLE_INTERVAL_HOUR", DAY],
        "total_records": 2,
    }


def test_debug_store_failure(broken_client):
    response = broken_client.get("/api/debug")

    assert response.status_code == 500
    assert "error" in response.json()


def test_unmatched_route_is_plain_text_404(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "Page not found"


def test_wrong_method_on_known_path_is_plain_text_404(client):
    response = client.post("/api/candles")

    assert response.status_code == 404
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "Page not found"


def test_wrong_method_on_index_is_404(client):
    assert client.delete("/").status_code == 404


def test_health(client):
    body = client.get("/health").json()

    assert body["status"] == "healthy"
    assert body["database"] == "healthy"


def test_health_store_down(broken_client):
    response = broken_client.get("/health")

    assert response.status_code == 503
    assert response.json() == {"error": "Service unavailable"}


def test_metrics_shape(client):
    client.get("/api/intervals")

    body = client.get("/metrics").json()

    assert body["service"] == "candle-visualizer"
    assert body["api_latency_ms"]["request_count"] >= 1
    assert "failures" in body["store"]


def test_metrics_report_store_failures(broken_client):
    broken_client.get("/api/instruments")

    store = broken_client.get("/metrics").json()["store"]

    assert store["failures"] >= 1
    assert store["last_failure"] is not None
