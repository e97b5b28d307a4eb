"""Image search results.

Field names follow the stock-photo API's own payload so search results
validate directly and reach the UI unchanged.
"""

from pydantic import BaseModel, ConfigDict


class ImageSources(BaseModel):
    """Image URLs at several resolutions."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    original: str = ""
    large2x: str = ""
    large: str = ""
    medium: str = ""
    small: str = ""
    portrait: str = ""
    landscape: str = ""
    tiny: str = ""


class LocationImage(BaseModel):
    """One photo from the image-search upstream or the curated table."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    width: int = 0
    height: int = 0
    url: str = ""
    photographer: str = ""
    photographer_url: str = ""
    avg_color: str | None = None
    src: ImageSources = ImageSources()

    def meets_resolution(self, min_width: int, min_height: int) -> bool:
        return self.width >= min_width and self.height >= min_height
