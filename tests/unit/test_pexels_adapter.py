"""Tests for the Pexels image search adapter."""

import random
from typing import Any

import httpx
import pytest

from backend.app.adapters.pexels import PexelsClient, search_params, select_image
from backend.app.models.common import ImageSize, PlaceCategory
from backend.app.models.images import LocationImage
from backend.app.tools.errors import UpstreamError


def _client(handler: Any, api_key: str | None = "test-key") -> PexelsClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return PexelsClient(http, api_key, rng=random.Random(7))


class TestSearchParams:
    def test_food_category_widens_page(self) -> None:
        params = search_params("Trishna", PlaceCategory.restaurant, ImageSize.medium)
        assert params["query"] == "Trishna restaurant food dining"
        assert params["per_page"] == 15
        assert params["orientation"] == "landscape"
        assert params["size"] == "medium"

    @pytest.mark.parametrize(
        ("category", "suffix"),
        [
            (PlaceCategory.attraction, "landmark attraction tourist"),
            (PlaceCategory.landmark, "landmark attraction tourist"),
            (PlaceCategory.city, "city skyline urban"),
            (PlaceCategory.culture, "culture traditional heritage"),
        ],
    )
    def test_category_suffixes(self, category: PlaceCategory, suffix: str) -> None:
        params = search_params("Red Fort", category, ImageSize.large)
        assert params["query"] == f"Red Fort {suffix}"
        assert params["per_page"] == 10

    def test_nature_and_none_use_bare_query(self) -> None:
        assert search_params("Juhu Beach", PlaceCategory.nature, ImageSize.small)["query"] == (
            "Juhu Beach"
        )
        assert search_params("Juhu Beach", None, ImageSize.small)["query"] == "Juhu Beach"


class TestSelectImage:
    def _photos(self, pexels_photo: Any, sizes: list[tuple[int, int]]) -> list[LocationImage]:
        return [
            LocationImage.model_validate(pexels_photo(i + 1, w, h))
            for i, (w, h) in enumerate(sizes)
        ]

    def test_picks_only_images_meeting_resolution(self, pexels_photo: Any) -> None:
        photos = self._photos(
            pexels_photo, [(640, 480), (1920, 1080), (500, 900), (800, 600), (300, 200)]
        )
        rng = random.Random(0)
        for _ in range(20):
            chosen = select_image(photos, rng)
            assert chosen is not None
            assert chosen.id in {2, 4}

    def test_only_top_five_considered(self, pexels_photo: Any) -> None:
        photos = self._photos(pexels_photo, [(100, 100)] * 5 + [(4000, 3000)])
        # Nothing in the window qualifies: first raw result
        assert select_image(photos).id == 1

    def test_first_raw_result_when_none_qualify(self, pexels_photo: Any) -> None:
        photos = self._photos(pexels_photo, [(640, 480), (700, 700)])
        assert select_image(photos).id == 1

    def test_no_results(self) -> None:
        assert select_image([]) is None


@pytest.mark.asyncio
async def test_search_sends_authorized_request(pexels_photo: Any) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"photos": [pexels_photo(11)], "total_results": 1})

    client = _client(handler)
    image = await client.search("Gateway of India", PlaceCategory.attraction, ImageSize.large)

    assert image is not None
    assert image.id == 11
    assert image.src.medium.endswith("?h=350")
    request = seen[0]
    assert request.url.path == "/v1/search"
    assert request.headers["Authorization"] == "test-key"
    assert request.url.params["query"] == "Gateway of India landmark attraction tourist"
    assert request.url.params["size"] == "large"
    await client.http.aclose()


@pytest.mark.asyncio
async def test_search_without_key_makes_no_request() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(200, json={"photos": []})

    client = _client(handler, api_key=None)
    assert client.configured is False
    assert await client.search("Mumbai") is None
    assert calls == 0
    await client.http.aclose()


@pytest.mark.asyncio
async def test_search_with_no_results_returns_none() -> None:
    client = _client(lambda request: httpx.Response(200, json={"photos": []}))
    assert await client.search("Nowhere") is None
    await client.http.aclose()


@pytest.mark.asyncio
async def test_non_2xx_raises_upstream_error() -> None:
    client = _client(lambda request: httpx.Response(429, text="rate limited"))
    with pytest.raises(UpstreamError) as exc_info:
        await client.search("Mumbai")
    assert exc_info.value.status_code == 429
    assert exc_info.value.service == "pexels"
    await client.http.aclose()


@pytest.mark.asyncio
async def test_unreadable_body_raises_upstream_error() -> None:
    client = _client(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(UpstreamError):
        await client.search("Mumbai")
    await client.http.aclose()
