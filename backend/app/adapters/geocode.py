"""Geocoding and point-of-interest adapter (Nominatim + Overpass, keyless)."""

import logging

import httpx

from backend.app.config import TIMEOUTS
from backend.app.models.common import Geo
from backend.app.models.tool_results import GeocodedPlace
from backend.app.tools.errors import UpstreamError
from backend.app.tools.timeout import request_with_timeout

logger = logging.getLogger(__name__)

SERVICE_NAME = "nominatim"

_POI_TAGS = 'tourism~"attraction|museum|viewpoint|gallery"'


def overpass_query(geo: Geo, radius_m: int, limit: int) -> str:
    """Overpass QL for named tourist sights around ``geo``."""
    timeout_s = TIMEOUTS.GEOCODE // 1000
    return (
        f"[out:json][timeout:{timeout_s}];"
        f"(node(around:{radius_m},{geo.lat},{geo.lon})[{_POI_TAGS}][name];"
        f"way(around:{radius_m},{geo.lat},{geo.lon})[{_POI_TAGS}][name];);"
        f"out tags {limit * 3};"
    )


class GeocodeClient:
    """Place-name lookups. An empty answer is "no data", not a failure."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str = "https://nominatim.openstreetmap.org",
        overpass_url: str = "https://overpass-api.de/api/interpreter",
        user_agent: str = "itinerary-orchestrator/0.1",
    ):
        """Initialize client.

        Args:
            http: Shared httpx client
            base_url: Nominatim base URL
            overpass_url: Overpass interpreter URL
            user_agent: Identifying User-Agent required by the Nominatim usage policy
        """
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.overpass_url = overpass_url
        self.headers = {"User-Agent": user_agent}

    async def geocode(self, name: str) -> GeocodedPlace | None:
        """Resolve ``name`` to coordinates.

        Returns:
            The best match, or None when Nominatim knows no such place

        Raises:
            UpstreamError: non-2xx status or unreadable body
            OperationTimeoutError: no response within the geocoding deadline
        """
        response = await request_with_timeout(
            self.http,
            "GET",
            f"{self.base_url}/search",
            timeout_ms=TIMEOUTS.GEOCODE,
            operation="geocode",
            params={"q": name, "format": "json", "limit": 1},
            headers=self.headers,
        )
        if response.status_code >= 400:
            raise UpstreamError(SERVICE_NAME, response.text[:200], response.status_code)

        try:
            results = response.json()
            if not results:
                logger.info(f"No geocoding result for '{name}'")
                return None
            top = results[0]
            return GeocodedPlace(
                name=top.get("name") or name,
                display_name=top.get("display_name", name),
                geo=Geo(lat=float(top["lat"]), lon=float(top["lon"])),
            )
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise UpstreamError(SERVICE_NAME, f"invalid search response: {e}") from e

    async def points_of_interest(
        self, geo: Geo, limit: int = 9, radius_m: int = 5000
    ) -> list[str]:
        """Distinct names of tourist sights near ``geo``, at most ``limit``.

        Raises:
            UpstreamError: non-2xx status or unreadable body
            OperationTimeoutError: no response within the geocoding deadline
        """
        response = await request_with_timeout(
            self.http,
            "POST",
            self.overpass_url,
            timeout_ms=TIMEOUTS.GEOCODE,
            operation="points_of_interest",
            data={"data": overpass_query(geo, radius_m, limit)},
            headers=self.headers,
        )
        if response.status_code >= 400:
            raise UpstreamError("overpass", response.text[:200], response.status_code)

        try:
            elements = response.json().get("elements") or []
        except (ValueError, AttributeError) as e:
            raise UpstreamError("overpass", f"invalid response: {e}") from e

        names: list[str] = []
        for element in elements:
            name = (element.get("tags") or {}).get("name")
            if name and name not in names:
                names.append(name)
            if len(names) >= limit:
                break
        return names
