"""Configuration module for CoinCompare.

Usage:
    from coincompare.config import get_settings

    settings = get_settings()  # Cached singleton
    print(settings.cache_backend)
"""

from coincompare.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
