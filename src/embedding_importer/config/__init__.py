"""Configuration management for the embedding importer."""

from embedding_importer.config.settings import (
    EMBEDDING_SIZE,
    Settings,
    get_settings,
)

__all__ = [
    "EMBEDDING_SIZE",
    "Settings",
    "get_settings",
]
