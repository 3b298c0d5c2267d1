"""Environment settings."""

import os
from typing import Optional


class Settings:
    """Application settings from environment variables."""

    @staticmethod
    def get(key: str, default: Optional[str] = None) -> str:
        """
        Get environment variable value.

        Args:
            key: Environment variable name
            default: Default value if not set

        Returns:
            str: Environment variable value, empty if unset without default
        """
        return os.getenv(key, default) or ""

    # Convenience accessors
    CONFIG_PATH = property(lambda self: Settings.get("WATCH_EXPORTER_CONFIG", "config/config.yaml"))
    LOG_LEVEL = property(lambda self: Settings.get("LOG_LEVEL", "INFO"))
