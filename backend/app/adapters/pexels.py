"""Image search adapter using the Pexels API."""

import logging
import random

import httpx

from backend.app.config import (
    IMAGE_CANDIDATE_WINDOW,
    IMAGE_MIN_HEIGHT,
    IMAGE_MIN_WIDTH,
    TIMEOUTS,
)
from backend.app.models.common import ImageSize, PlaceCategory
from backend.app.models.images import LocationImage
from backend.app.tools.errors import UpstreamError
from backend.app.tools.timeout import request_with_timeout

logger = logging.getLogger(__name__)

SERVICE_NAME = "pexels"

# Query suffix per category; categories not listed search the bare query
_QUERY_SUFFIXES = {
    PlaceCategory.restaurant: "restaurant food dining",
    PlaceCategory.food: "restaurant food dining",
    PlaceCategory.attraction: "landmark attraction tourist",
    PlaceCategory.landmark: "landmark attraction tourist",
    PlaceCategory.city: "city skyline urban",
    PlaceCategory.culture: "culture traditional heritage",
}


def search_params(
    query: str, category: PlaceCategory | None, size: ImageSize
) -> dict[str, str | int]:
    """Query parameters for one search, adjusted by category."""
    suffix = _QUERY_SUFFIXES.get(category) if category else None
    food = category in (PlaceCategory.restaurant, PlaceCategory.food)
    return {
        "query": f"{query} {suffix}" if suffix else query,
        "per_page": 15 if food else 10,
        "orientation": "landscape",
        "size": size.value,
    }


def select_image(
    photos: list[LocationImage], rng: random.Random | None = None
) -> LocationImage | None:
    """Pick one image from ranked search results.

    Among the top candidates, images meeting the minimum resolution are
    preferred and one is chosen at random. If none qualify the first raw
    result is returned. No results gives None.
    """
    if not photos:
        return None
    candidates = [
        p
        for p in photos[:IMAGE_CANDIDATE_WINDOW]
        if p.meets_resolution(IMAGE_MIN_WIDTH, IMAGE_MIN_HEIGHT)
    ]
    if not candidates:
        logger.info("No image meets the resolution bar, using first result")
        return photos[0]
    return (rng or random).choice(candidates)


class PexelsClient:
    """Thin Pexels search client. Resilience is applied by the caller."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str | None,
        base_url: str = "https://api.pexels.com/v1",
        rng: random.Random | None = None,
    ):
        """Initialize client.

        Args:
            http: Shared httpx client
            api_key: Pexels API key; None means the service is unconfigured
            base_url: Pexels API base URL
            rng: Random source for image selection (seed it in tests)
        """
        self.http = http
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.rng = rng or random.Random()

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def search(
        self,
        query: str,
        category: PlaceCategory | None = None,
        size: ImageSize = ImageSize.medium,
    ) -> LocationImage | None:
        """Search one image for ``query``.

        Returns:
            The selected image, or None when unconfigured (no request is made)
            or when the search has no results

        Raises:
            UpstreamError: non-2xx status or unreadable body
            OperationTimeoutError: no response within the Pexels deadline
            httpx.HTTPError: transport failure
        """
        if not self.api_key:
            return None

        response = await request_with_timeout(
            self.http,
            "GET",
            f"{self.base_url}/search",
            timeout_ms=TIMEOUTS.PEXELS,
            operation="pexels_search",
            params=search_params(query, category, size),
            headers={"Authorization": self.api_key},
        )
        if response.status_code >= 400:
            raise UpstreamError(SERVICE_NAME, response.text[:200], response.status_code)

        try:
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            photos = [LocationImage.model_validate(p) for p in data.get("photos") or []]
        except ValueError as e:
            raise UpstreamError(SERVICE_NAME, f"invalid search response: {e}") from e

        logger.debug(f"Pexels returned {len(photos)} photos for '{query}'")
        return select_image(photos, self.rng)
