"""
Environment variable overrides for solr-post configuration.
"""

import logging
import os
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)

# environment variable -> (section, key)
ENV_OVERRIDES: Dict[str, Tuple[str, str]] = {
    "SOLR_POST_HOST": ("solr", "host"),
    "SOLR_POST_PORT": ("solr", "port"),
    "SOLR_POST_COLLECTION": ("solr", "collection"),
    "SOLR_POST_URL": ("solr", "url"),
    "SOLR_POST_USER": ("solr", "user"),
    "SOLR_POST_CONCURRENCY": ("ingest", "concurrency"),
    "SOLR_POST_LOG_LEVEL": ("logging", "level"),
}

CONFIG_PATH_ENV_VAR = "SOLR_POST_CONFIG_PATH"


class EnvironmentManager:
    """Manages environment variable integration."""

    def get_config_overrides(self) -> Dict[str, str]:
        """Get the configuration overrides that are set in the environment."""

        overrides = {
            name: os.environ[name] for name in ENV_OVERRIDES if os.getenv(name)
        }
        if overrides:
            logger.debug(f"Environment overrides: {', '.join(sorted(overrides))}")
        return overrides

    def get_config_path(self) -> Optional[str]:
        """Get the configuration file path override, if any."""
        return os.getenv(CONFIG_PATH_ENV_VAR) or None

    def apply_overrides(self, config_data: Dict[str, Dict[str, object]]) -> None:
        """Apply environment variable overrides to raw configuration data."""

        for name, value in self.get_config_overrides().items():
            section, key = ENV_OVERRIDES[name]
            if not isinstance(config_data.get(section), dict):
                config_data[section] = {}
            config_data[section][key] = value

    def source_of(self, section: str, key: str) -> Optional[str]:
        """Name of the environment variable currently overriding a key."""
        for name, target in ENV_OVERRIDES.items():
            if target == (section, key) and os.getenv(name):
                return name
        return None
