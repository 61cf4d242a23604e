"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ─────────────────────────────────────────────────
#
# Values are read from (in priority order):
#
#   1. Environment variables, e.g. GOOGLE_PLACES_API_KEY=AIza...
#   2. A .env file in the project root (local development)
#
# Field ``verification_min_samples`` maps to env var
# ``VERIFICATION_MIN_SAMPLES``; the defaults below apply when neither
# source sets a value.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """pinaFinder application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Storage ===
    verification_db_path: str = "data/verifications.db"
    review_db_path: str = "data/reviews.db"

    # === Verification policy ===
    # A bar is "verified" once at least min_samples users voted and at
    # least min_ratio of them said yes.
    verification_min_samples: int = Field(default=3, ge=1)
    verification_min_ratio: float = Field(default=0.6, gt=0.0, le=1.0)
    stats_fanout_concurrency: int = Field(default=8, ge=1)

    # === Places search ===
    # Empty key = search disabled (the /bars/search route answers 503).
    google_places_api_key: str = ""
    places_default_radius_m: int = Field(default=5000, ge=100, le=50000)
    places_query: str = "bar piña colada cocktail tropical drinks"

    # === Auth ===
    # Empty secret = development mode: the X-User-Id header is trusted.
    session_secret: str = ""
    session_ttl_hours: int = 168

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    def places_enabled(self) -> bool:
        """Return ``True`` when a places API key is configured."""
        return bool(self.google_places_api_key)
