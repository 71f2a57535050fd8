"""
Application configuration loaded from environment variables with sensible
defaults for local development.

All settings are validated at startup via Pydantic ``BaseSettings``.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "ads.json"


class Settings(BaseSettings):
    """Central configuration for the Ridelytics backend."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -- Application --
    app_name: str = "Ridelytics API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    port: int = 3001

    # -- API --
    api_prefix: str = "/api"
    frontend_url: str = "http://localhost:3000"

    # -- Catalog --
    catalog_path: str = str(_DEFAULT_CATALOG_PATH)

    # -- Routing (OSRM) --
    routing_base_url: str = "https://router.project-osrm.org"
    routing_profile: str = "driving"
    routing_timeout_seconds: float = 5.0

    # -- Reverse geocoding (Nominatim) --
    geocoder_base_url: str = "https://nominatim.openstreetmap.org"
    geocoder_user_agent: str = "Ridelytics-PWA/1.0"
    geocoder_timeout_seconds: float = 5.0

    # -- Text generation (Gemini) --
    gemini_api_key: str = ""
    gemini_model: str = "gemini-3-flash-preview"
    gemini_temperature: float = 0.7
    gemini_max_tokens: int = 500
    gemini_timeout_seconds: float = 30.0

    # -- Conversational assistant --
    chat_radius_ceiling_meters: float = 20_000.0
    chat_max_businesses: int = 5
    assistant_prompt_path: str = ""


settings = Settings()
