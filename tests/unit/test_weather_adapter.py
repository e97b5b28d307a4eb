"""Tests for weather adapter."""

from datetime import date, datetime, timezone

import httpx
import pytest

from backend.app.config import TIMEOUTS
from backend.app.adapters.weather import WeatherClient, daily_summaries
from backend.app.models.common import Geo
from backend.app.orchestration.templates import SEASONAL_WEATHER, seasonal_weather
from backend.app.tools.errors import OperationTimeoutError, UpstreamError


def _slot(day: date, hour: int, low: float, high: float, desc: str, pop: float) -> dict:
    dt = datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc)
    return {
        "dt": int(dt.timestamp()),
        "main": {"temp_min": low, "temp_max": high},
        "weather": [{"description": desc}],
        "pop": pop,
    }


FORECAST = {
    "list": [
        _slot(date(2025, 12, 1), 0, 21.0, 24.0, "clear sky", 0.0),
        _slot(date(2025, 12, 1), 12, 25.0, 31.5, "clear sky", 0.1),
        _slot(date(2025, 12, 1), 18, 23.0, 27.0, "few clouds", 0.0),
        _slot(date(2025, 12, 2), 6, 20.5, 22.0, "light rain", 0.7),
        _slot(date(2025, 12, 2), 15, 22.0, 26.0, "light rain", 0.4),
    ]
}


def test_daily_summaries_collapse_slots() -> None:
    days = daily_summaries(FORECAST["list"])

    assert [d.date for d in days] == [date(2025, 12, 1), date(2025, 12, 2)]
    first, second = days
    assert first.temp_c_high == 31.5
    assert first.temp_c_low == 21.0
    assert first.description == "clear sky"
    assert first.precip_prob == 0.1
    assert second.precip_prob == 0.7
    assert second.as_text() == "Light rain, 20-26°C, 70% chance of rain"


@pytest.mark.asyncio
async def test_forecast_parses_openweather_response() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=FORECAST)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = WeatherClient(http, "weather-key")

    days = await client.forecast(Geo(lat=18.94, lon=72.83))

    assert len(days) == 2
    params = seen[0].url.params
    assert seen[0].url.path.endswith("/forecast")
    assert params["appid"] == "weather-key"
    assert params["units"] == "metric"
    assert float(params["lat"]) == 18.94

    await http.aclose()


@pytest.mark.asyncio
async def test_forecast_unconfigured_raises_without_request() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(200, json=FORECAST)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = WeatherClient(http, None)

    assert client.configured is False
    with pytest.raises(UpstreamError):
        await client.forecast(Geo(lat=0, lon=0))
    assert calls == 0

    await http.aclose()


@pytest.mark.asyncio
async def test_forecast_error_status() -> None:
    http = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda r: httpx.Response(401, json={"message": "bad key"}))
    )
    client = WeatherClient(http, "bad")

    with pytest.raises(UpstreamError) as exc_info:
        await client.forecast(Geo(lat=0, lon=0))
    assert exc_info.value.status_code == 401

    await http.aclose()


@pytest.mark.asyncio
async def test_forecast_malformed_body() -> None:
    http = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"cod": "200"}))
    )
    client = WeatherClient(http, "key")

    with pytest.raises(UpstreamError):
        await client.forecast(Geo(lat=0, lon=0))

    await http.aclose()


@pytest.mark.asyncio
async def test_forecast_read_timeout_is_operation_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = WeatherClient(http, "key")

    with pytest.raises(OperationTimeoutError) as exc_info:
        await client.forecast(Geo(lat=0, lon=0))
    assert exc_info.value.timeout_ms == TIMEOUTS.WEATHER

    await http.aclose()

def test_seasonal_table_covers_every_month() -> None:
    assert sorted(SEASONAL_WEATHER) == list(range(1, 13))
    assert seasonal_weather(7) == SEASONAL_WEATHER[7]
