"""Diverse location-image collection with per-item fallbacks.

Location names are searched in fixed-size batches; every item in a batch
settles before the next batch starts and batches are paced apart. Each item
retries through the resilient executor and then walks its category's
fallback queries. A failing item never affects the others. A total deadline
bounds the collection: once it passes, whatever has settled is returned and
no further batches are started; requests already in flight are left to
finish and their results are ignored.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass

from backend.app.adapters.pexels import SERVICE_NAME, PexelsClient
from backend.app.config import (
    IMAGE_BATCH_DELAY_MS,
    IMAGE_BATCH_SIZE,
    IMAGE_RETRY_ATTEMPTS,
    IMAGE_RETRY_BASE_DELAY_MS,
    TIMEOUTS,
)
from backend.app.models.common import ImageSize, PlaceCategory
from backend.app.models.images import ImageSources, LocationImage
from backend.app.models.result import Err, FailureReason, Ok
from backend.app.tools.executor import ResilientExecutor
from backend.app.tools.monitor import PerformanceMonitor
from backend.app.tools.retry import OperationSpec, RetryPolicy

logger = logging.getLogger(__name__)

IMAGE_SEARCH = OperationSpec(
    name="pexels-search",
    timeout_ms=TIMEOUTS.PEXELS,
    retry=RetryPolicy(IMAGE_RETRY_ATTEMPTS, IMAGE_RETRY_BASE_DELAY_MS),
)


@dataclass(frozen=True)
class ImageTarget:
    """A location name with its search category and fallback queries."""

    name: str
    category: PlaceCategory
    fallback_queries: tuple[str, ...]


# (keywords, category, fallback query templates); first match wins
_KEYWORD_RULES: list[tuple[tuple[str, ...], PlaceCategory, tuple[str, ...]]] = [
    (
        ("restaurant", "cafe", "bar", "dining"),
        PlaceCategory.restaurant,
        ("{name} food", "restaurant interior", "fine dining"),
    ),
    (
        ("museum", "gallery"),
        PlaceCategory.culture,
        ("{name} art", "museum interior", "art gallery"),
    ),
    (
        ("park", "garden"),
        PlaceCategory.nature,
        ("{name} nature", "beautiful park", "garden landscape"),
    ),
    (
        ("temple", "mosque", "church", "shrine"),
        PlaceCategory.culture,
        ("{name} architecture", "religious architecture", "temple interior"),
    ),
    (
        ("palace", "fort", "castle"),
        PlaceCategory.attraction,
        ("{name} architecture", "historic palace", "ancient architecture"),
    ),
    (
        ("market", "bazaar"),
        PlaceCategory.culture,
        ("{name} market", "traditional market", "local bazaar"),
    ),
    (
        ("beach", "lake"),
        PlaceCategory.nature,
        ("{name} water", "beautiful beach", "scenic lake"),
    ),
]
_DEFAULT_QUERIES = ("{name} landmark", "{name} tourism", "city attraction")

# Fallback queries for names whose category the caller already knows
_TAGGED_QUERIES: dict[PlaceCategory, tuple[str, ...]] = {
    PlaceCategory.restaurant: ("{name} food", "restaurant interior", "fine dining"),
    PlaceCategory.food: ("{name} food", "local cuisine", "street food"),
    PlaceCategory.culture: ("{name} heritage", "traditional culture", "museum interior"),
    PlaceCategory.nature: ("{name} nature", "beautiful park", "scenic landscape"),
    PlaceCategory.attraction: _DEFAULT_QUERIES,
    PlaceCategory.landmark: ("{name} architecture", "{name} landmark", "historic landmark"),
    PlaceCategory.city: ("{name} skyline", "{name} streets", "city skyline"),
}


def categorize(name: str, category: PlaceCategory | None = None) -> ImageTarget:
    """Search category and fallback queries for ``name``.

    A known ``category`` is used as given; otherwise it is inferred from
    keywords in the name.
    """
    if category is not None:
        queries = _TAGGED_QUERIES[category]
    else:
        lowered = name.lower()
        for keywords, category, queries in _KEYWORD_RULES:
            if any(keyword in lowered for keyword in keywords):
                break
        else:
            category, queries = PlaceCategory.attraction, _DEFAULT_QUERIES
    return ImageTarget(
        name=name,
        category=category,
        fallback_queries=tuple(q.format(name=name) for q in queries),
    )


class DiverseImageFetcher:
    """Collects one image per location name from the image-search upstream."""

    def __init__(
        self,
        pexels: PexelsClient,
        executor: ResilientExecutor,
        *,
        batch_size: int = IMAGE_BATCH_SIZE,
        batch_delay_ms: int = IMAGE_BATCH_DELAY_MS,
        deadline_ms: int = TIMEOUTS.IMAGES,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.pexels = pexels
        self.executor = executor
        self.batch_size = batch_size
        self.batch_delay_ms = batch_delay_ms
        self.deadline_ms = deadline_ms
        self._sleep = sleep
        # Collections still running after their deadline passed
        self._stragglers: set[asyncio.Task[None]] = set()

    async def fetch(
        self,
        names: list[str],
        size: ImageSize = ImageSize.medium,
        categories: Mapping[str, PlaceCategory] | None = None,
    ) -> dict[str, LocationImage]:
        """Map each location name to an image; names without one are absent.

        ``categories`` tags names whose kind is already known (the city
        itself, a restaurant); untagged names are categorized by keyword.

        Returns an empty mapping without any request when image search is
        unconfigured. Never raises for upstream failures.
        """
        tags = categories or {}
        targets = [categorize(name, tags.get(name)) for name in dict.fromkeys(names) if name]
        if not targets or not self.pexels.configured:
            return {}

        monitor = PerformanceMonitor(f"Diverse location images: {len(targets)} locations")
        results: dict[str, LocationImage] = {}
        stop = asyncio.Event()
        task = asyncio.create_task(self._collect(targets, size, results, stop))

        done, _ = await asyncio.wait({task}, timeout=self.deadline_ms / 1000)
        if task in done:
            # Per-item failures are absorbed; anything left is a bug worth surfacing
            task.result()
        else:
            stop.set()
            self._stragglers.add(task)
            task.add_done_callback(self._forget)
            monitor.log(
                f"Deadline of {self.deadline_ms}ms reached with "
                f"{len(results)}/{len(targets)} images, returning partial result"
            )

        found = dict(results)
        monitor.log(f"Fetched {len(found)}/{len(targets)} location images")
        monitor.finish(bool(found))
        return found

    def _forget(self, task: asyncio.Task[None]) -> None:
        self._stragglers.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning(f"Image collection failed after its deadline: {task.exception()}")

    async def _collect(
        self,
        targets: list[ImageTarget],
        size: ImageSize,
        results: dict[str, LocationImage],
        stop: asyncio.Event,
    ) -> None:
        batches = [
            targets[i : i + self.batch_size] for i in range(0, len(targets), self.batch_size)
        ]
        for index, batch in enumerate(batches):
            if stop.is_set():
                return
            if index > 0:
                await self._sleep(self.batch_delay_ms / 1000)
                if stop.is_set():
                    return
            outcomes = await asyncio.gather(
                *(self._fetch_one(target, size) for target in batch),
                return_exceptions=True,
            )
            for target, outcome in zip(batch, outcomes):
                if isinstance(outcome, LocationImage):
                    results[target.name] = outcome
                elif isinstance(outcome, BaseException):
                    logger.warning(f"Image fetch for '{target.name}' failed: {outcome}")

    async def _fetch_one(self, target: ImageTarget, size: ImageSize) -> LocationImage | None:
        """Primary query first, then the fallback queries in order."""
        for query in (target.name, *target.fallback_queries):
            result = await self.executor.attempt(
                SERVICE_NAME,
                IMAGE_SEARCH,
                lambda q=query: self.pexels.search(q, target.category, size),
            )
            match result:
                case Ok(value=None):
                    continue
                case Ok(value=image):
                    if query != target.name:
                        logger.info(f"Found fallback image for {target.name}: {query}")
                    return image
                case Err(reason=FailureReason.BREAKER_OPEN):
                    return None
                case Err(detail=detail):
                    logger.info(f"Image search '{query}' failed: {detail}")
        return None


_CURATED_PHOTOS = {
    "mumbai": 789750,
    "tokyo": 2070033,
    "delhi": 1542620,
}
_DEFAULT_PHOTO = 2070033


def _curated_image(photo_id: int) -> LocationImage:
    base = f"https://images.pexels.com/photos/{photo_id}/pexels-photo-{photo_id}.jpeg"

    def sized(width: int) -> str:
        return f"{base}?auto=compress&cs=tinysrgb&w={width}"

    return LocationImage(
        id=photo_id,
        width=1200,
        height=800,
        url=base,
        photographer="Fallback Image",
        photographer_url="",
        avg_color="#2C3E50",
        src=ImageSources(
            original=base,
            large2x=sized(1200),
            large=sized(1200),
            medium=sized(800),
            small=sized(400),
            portrait=sized(400),
            landscape=sized(800),
            tiny=sized(200),
        ),
    )


FALLBACK_CITY_IMAGES: dict[str, LocationImage] = {
    city: _curated_image(photo_id) for city, photo_id in _CURATED_PHOTOS.items()
}
DEFAULT_FALLBACK_IMAGE = _curated_image(_DEFAULT_PHOTO)


def get_fallback_city_image(city: str) -> LocationImage:
    """Curated image for ``city``, or the generic default."""
    return FALLBACK_CITY_IMAGES.get(city.strip().lower(), DEFAULT_FALLBACK_IMAGE)
