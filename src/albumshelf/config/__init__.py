"""Configuration module for AlbumShelf."""

from .settings import (
    AuthSettings,
    DatabaseSettings,
    ObservabilitySettings,
    ProviderSettings,
    Settings,
    get_settings,
)

__all__ = [
    "AuthSettings",
    "DatabaseSettings",
    "ObservabilitySettings",
    "ProviderSettings",
    "Settings",
    "get_settings",
]
