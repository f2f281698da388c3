"""Application settings loaded from environment variables and `.env`.

Hey future me - nested sections are filled from env vars with a double underscore,
e.g. DATABASE__URL, AUTH__ALLOWED_EMAIL, PROVIDERS__TIMEOUT. get_settings() is cached,
so tests that tweak the environment must call get_settings.cache_clear() afterwards.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseModel):
    """Database connection settings."""

    url: str = "sqlite+aiosqlite:///./albumshelf.db"
    echo: bool = False
    pool_pre_ping: bool = True
    # Pool settings only apply to PostgreSQL
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800


class AuthSettings(BaseModel):
    """Admin page access settings.

    allowed_email=None means nobody is allowed onto the import page.
    """

    allowed_email: str | None = None
    signin_url: str = "/api/auth/signin"
    session_cookie_name: str = "session_id"
    session_ttl_hours: int = Field(default=24 * 30, ge=1)


class ProviderSettings(BaseModel):
    """Upstream metadata provider settings."""

    itunes_base_url: str = "https://itunes.apple.com"
    deezer_base_url: str = "https://api.deezer.com"
    timeout: float = Field(default=15.0, gt=0)
    user_agent: str = "AlbumShelf/0.1"


class ObservabilitySettings(BaseModel):
    """Logging settings."""

    log_json_format: bool = False
    log_request_body: bool = False


class Settings(BaseSettings):
    """Root settings object."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    app_name: str = "albumshelf"
    debug: bool = False
    log_level: str = "INFO"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    providers: ProviderSettings = Field(default_factory=ProviderSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    def _get_sqlite_db_path(self) -> Path | None:
        """Return the SQLite database file path, or None for other engines/in-memory."""
        url = self.database.url
        if not url.startswith("sqlite"):
            return None
        _, _, path = url.partition(":///")
        if not path or path.startswith(":memory:"):
            return None
        return Path(path)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
