"""Typed settings configuration - single source of truth.

Credentials come from the environment. Resilience tuning (timeouts, retry
policies, breaker thresholds, batching) is static and lives in the constants
below; it is not runtime tunable.
"""

from dataclasses import dataclass
from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # AI provider (OpenAI-compatible chat completions)
    perplexity_api_key: SecretStr | None = None
    perplexity_model: str = "llama-3.1-sonar-small-128k-online"
    perplexity_base_url: str = "https://api.perplexity.ai"

    # Image search
    pexels_api_key: SecretStr | None = None
    pexels_base_url: str = "https://api.pexels.com/v1"

    # Weather
    openweather_api_key: SecretStr | None = None
    openweather_base_url: str = "https://api.openweathermap.org/data/2.5"

    # Geocoding / points of interest
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    overpass_base_url: str = "https://overpass-api.de/api/interpreter"
    nominatim_user_agent: str = "itinerary-orchestrator/0.1"

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def secret_value(secret: SecretStr | None) -> str | None:
    """Return the secret's value, or None when it is unset or blank."""
    if secret is None:
        return None
    value = secret.get_secret_value().strip()
    return value or None


# Timeouts (milliseconds)
@dataclass(frozen=True)
class Timeouts:
    GLOBAL: int = 30000
    AI: int = 15000
    IMAGES: int = 20000
    PEXELS: int = 8000
    GEOCODE: int = 5000
    WEATHER: int = 5000


TIMEOUTS = Timeouts()

# Retry policies: (max attempts, base delay ms)
AI_RETRY_ATTEMPTS = 3
AI_RETRY_BASE_DELAY_MS = 2000
IMAGE_RETRY_ATTEMPTS = 2
IMAGE_RETRY_BASE_DELAY_MS = 500
LOOKUP_RETRY_ATTEMPTS = 2
LOOKUP_RETRY_BASE_DELAY_MS = 300

# Circuit breakers: service -> (failure threshold, reset timeout seconds)
BREAKER_SETTINGS: dict[str, tuple[int, float]] = {
    "perplexity": (3, 60.0),
    "pexels": (5, 30.0),
    "nominatim": (5, 30.0),
    "openweather": (5, 30.0),
}

# Image collection
IMAGE_BATCH_SIZE = 3
IMAGE_BATCH_DELAY_MS = 200
IMAGE_MIN_WIDTH = 800
IMAGE_MIN_HEIGHT = 600
IMAGE_CANDIDATE_WINDOW = 5
MAX_LOCATION_IMAGES = 20

# Request bounds
MIN_TRIP_DAYS = 1
MAX_TRIP_DAYS = 14

# Response-repair parser
MAX_PARSE_ATTEMPTS = 5

APP_VERSION = "0.1.0"
