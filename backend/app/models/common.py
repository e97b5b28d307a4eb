"""Common types shared across all models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys for the UI.

    Accepts both camelCase and snake_case on input and keeps unknown fields,
    since upstream (LLM) documents often carry extra detail worth passing on.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )


class Geo(BaseModel):
    """Geographic coordinates (WGS84)."""

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class ImageSize(str, Enum):
    """Requested image size for the stock-photo search."""

    small = "small"
    medium = "medium"
    large = "large"


class PlaceCategory(str, Enum):
    """Semantic category used to tune image search queries."""

    restaurant = "restaurant"
    food = "food"
    culture = "culture"
    nature = "nature"
    attraction = "attraction"
    landmark = "landmark"
    city = "city"
