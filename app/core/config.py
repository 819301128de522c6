"""Application configuration from environment."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Mystery Tours"
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Database (key-value table lives here)
    database_url: str = "sqlite+aiosqlite:///./mystery_tours.db"

    # Storage keys
    tours_key: str = "mystery_served_tours"
    stops_key: str = "mystery_served_stops"
    version_key: str = "ms_data_version"

    # Bumping this triggers migrations (or a reseed for unknown markers)
    data_version: str = "3"
    migrate_on_version_bump: bool = True

    # Session cookie for players
    session_cookie_name: str = "mt_session_id"
    session_cookie_max_age: int = 60 * 60 * 24  # 1 day


def get_settings() -> Settings:
    return Settings()
