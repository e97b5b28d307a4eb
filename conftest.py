"""Global pytest configuration."""

import os

# Tests never reach real upstreams; keep credentials from the environment out
for _key in ("PERPLEXITY_API_KEY", "PEXELS_API_KEY", "OPENWEATHER_API_KEY"):
    os.environ.pop(_key, None)
os.environ.setdefault("LOG_LEVEL", "WARNING")
