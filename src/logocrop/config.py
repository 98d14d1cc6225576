"""logocrop configuration using pydantic-settings.

All configuration is strongly typed and supports environment variables
and .env files.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # "console" or "json"

    # Crop dialog controls
    ZOOM_MIN: float = 1.0
    ZOOM_MAX: float = 5.0
    DEFAULT_ASPECT_RATIO: float = 1.0  # Square logos by default

    # Raster limits
    # 40M RGBA pixels is ~160MB per surface; compose holds two at once.
    MAX_SURFACE_PIXELS: int = 40_000_000

    # Image loading
    FETCH_TIMEOUT_SECONDS: float = 30.0


# Singleton instance for import convenience
settings = Settings()
