"""Application Settings and Configuration.

This module provides application-wide settings that combine configuration
from the configuration manager with application-specific defaults.
"""

import os
from typing import Optional

from src.infrastructure.config_manager import ConfigManager, PricingConfig

# Application metadata
APP_NAME = "Guarded-Entities"
APP_VERSION = "0.1.0"


class Settings:
    """Application settings loaded from the environment.

    Environment Variables:
        - GE_APP_NAME: Application name shown by the CLI
        - GE_LOG_LEVEL: Logging level (default INFO)
        - GE_LOG_JSON: "true" for JSON log lines
        - GE_CONFIG_FILE: Optional JSON pricing configuration file; when unset,
          pricing is read from GE_* environment variables
    """

    def __init__(self):
        """Initialize settings from environment."""
        self._config_manager: Optional[ConfigManager] = None

        self.app_name = os.getenv("GE_APP_NAME", APP_NAME)

        # Logging
        self.log_level = os.getenv("GE_LOG_LEVEL", "INFO")
        self.log_json = os.getenv("GE_LOG_JSON", "false").lower() == "true"

        # Pricing configuration source
        self.config_file = os.getenv("GE_CONFIG_FILE") or None

    @property
    def config_manager(self) -> ConfigManager:
        """Configuration manager, loaded lazily on first access."""
        if self._config_manager is None:
            if self.config_file:
                self._config_manager = ConfigManager.from_file(self.config_file)
            else:
                self._config_manager = ConfigManager.from_environment()
        return self._config_manager

    @property
    def pricing(self) -> PricingConfig:
        return self.config_manager.get_pricing_config()


# Global settings instance
settings = Settings()
