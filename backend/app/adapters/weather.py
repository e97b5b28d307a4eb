"""Weather adapter using the OpenWeatherMap 5-day / 3-hour forecast."""

from collections import Counter, defaultdict
from datetime import date, datetime, timezone

import httpx

from backend.app.config import TIMEOUTS
from backend.app.models.common import Geo
from backend.app.models.tool_results import WeatherDay
from backend.app.tools.errors import UpstreamError
from backend.app.tools.timeout import request_with_timeout

SERVICE_NAME = "openweather"


def daily_summaries(entries: list[dict]) -> list[WeatherDay]:
    """Collapse 3-hour forecast entries into one summary per date.

    High/low are the extremes over the day, precipitation probability the
    maximum, and the description the most frequent one.
    """
    by_date: dict[date, list[dict]] = defaultdict(list)
    for entry in entries:
        day = datetime.fromtimestamp(entry["dt"], tz=timezone.utc).date()
        by_date[day].append(entry)

    days = []
    for day in sorted(by_date):
        slots = by_date[day]
        descriptions = Counter(
            slot["weather"][0]["description"] for slot in slots if slot.get("weather")
        )
        days.append(
            WeatherDay(
                date=day,
                description=descriptions.most_common(1)[0][0] if descriptions else "unknown",
                temp_c_high=max(slot["main"]["temp_max"] for slot in slots),
                temp_c_low=min(slot["main"]["temp_min"] for slot in slots),
                precip_prob=max(float(slot.get("pop", 0.0)) for slot in slots),
            )
        )
    return days


class WeatherClient:
    """OpenWeatherMap forecast client. Resilience is applied by the caller."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str | None,
        base_url: str = "https://api.openweathermap.org/data/2.5",
    ):
        """Initialize client.

        Args:
            http: Shared httpx client
            api_key: OpenWeatherMap API key; None means unconfigured
            base_url: OpenWeatherMap API base URL
        """
        self.http = http
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def forecast(self, location: Geo) -> list[WeatherDay]:
        """Fetch the daily forecast for the next five days.

        Args:
            location: Geographic coordinates

        Returns:
            One WeatherDay per forecast date, in date order

        Raises:
            UpstreamError: unconfigured, non-2xx status or unreadable body
            OperationTimeoutError: no response within the weather deadline
        """
        if not self.api_key:
            raise UpstreamError(SERVICE_NAME, "API key not configured")

        response = await request_with_timeout(
            self.http,
            "GET",
            f"{self.base_url}/forecast",
            timeout_ms=TIMEOUTS.WEATHER,
            operation="weather_forecast",
            params={
                "lat": location.lat,
                "lon": location.lon,
                "appid": self.api_key,
                "units": "metric",
            },
        )
        if response.status_code >= 400:
            raise UpstreamError(SERVICE_NAME, response.text[:200], response.status_code)

        try:
            return daily_summaries(response.json()["list"])
        except (ValueError, KeyError, TypeError, IndexError) as e:
            raise UpstreamError(SERVICE_NAME, f"invalid forecast response: {e}") from e
