"""Configuration: settings and logging."""

from address_book_service.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
