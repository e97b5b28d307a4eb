"""Shared pytest fixtures for all test suites."""

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from backend.app.config import Settings


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SleepRecorder:
    """Async sleep replacement that records requested delays (seconds)."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        await asyncio.sleep(0)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Settings isolated from the environment and any .env file."""

    def factory(**overrides: Any) -> Settings:
        return Settings(_env_file=None, **overrides)

    return factory


@pytest.fixture
def pexels_photo() -> Callable[..., dict[str, Any]]:
    """Build one photo entry of a Pexels search response."""

    def factory(photo_id: int, width: int = 1920, height: int = 1080) -> dict[str, Any]:
        url = f"https://images.pexels.com/photos/{photo_id}/pexels-photo-{photo_id}.jpeg"
        return {
            "id": photo_id,
            "width": width,
            "height": height,
            "url": f"https://www.pexels.com/photo/{photo_id}/",
            "photographer": "Test Photographer",
            "photographer_url": "https://www.pexels.com/@test",
            "avg_color": "#556677",
            "src": {
                "original": url,
                "large2x": f"{url}?w=1880",
                "large": f"{url}?h=650",
                "medium": f"{url}?h=350",
                "small": f"{url}?h=130",
                "portrait": f"{url}?h=1200&w=800",
                "landscape": f"{url}?h=627&w=1200",
                "tiny": f"{url}?h=200&w=280",
            },
        }

    return factory
