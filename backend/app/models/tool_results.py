"""Tool result models - external data shapes."""

from datetime import date

from pydantic import BaseModel

from backend.app.models.common import Geo


class GeocodedPlace(BaseModel):
    """Geocoding result for a place name."""

    name: str
    display_name: str
    geo: Geo


class WeatherDay(BaseModel):
    """Daily weather summary."""

    date: date
    description: str
    temp_c_high: float
    temp_c_low: float
    precip_prob: float = 0.0

    def as_text(self) -> str:
        text = f"{self.description.capitalize()}, {self.temp_c_low:.0f}-{self.temp_c_high:.0f}°C"
        if self.precip_prob >= 0.3:
            text += f", {self.precip_prob:.0%} chance of rain"
        return text
