"""
Layered configuration: defaults, YAML file, environment, command line.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from ..models.config_models import (
    EndpointConfig,
    InclusionRule,
    IngestionConfig,
    SolrPostConfig,
)
from ..models.ingest_models import ConfigurationError
from .environment_manager import EnvironmentManager
from .yaml_parser import YAMLConfigParser

logger = logging.getLogger(__name__)


def format_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic error into one readable line per problem."""
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        message = item["msg"].removeprefix("Value error, ")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages)


class ConfigurationManager:
    """Loads the configuration file and builds validated run configurations."""

    def __init__(self) -> None:
        self.yaml_parser = YAMLConfigParser()
        self.env_manager = EnvironmentManager()
        self.current_config: Optional[SolrPostConfig] = None
        self.config_path: Optional[Path] = None

    async def load_config(self, config_path: Optional[Path] = None) -> SolrPostConfig:
        """
        Load configuration from file (if present) with environment overrides.

        A missing configuration file is not an error; defaults are used.

        Raises:
            ConfigurationError: If the file cannot be parsed or fails validation
        """
        if not config_path:
            config_path = self._get_default_config_path()
        self.config_path = config_path

        config_data: Dict[str, Any] = {}
        if config_path.exists():
            try:
                config_data = self.yaml_parser.load_yaml_config(config_path)
            except (OSError, ValueError) as e:
                raise ConfigurationError(
                    f"Failed to load configuration from {config_path}: {e}"
                ) from e
        else:
            logger.debug(f"No configuration file at {config_path}, using defaults")

        self.env_manager.apply_overrides(config_data)

        try:
            validated_config = SolrPostConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration: {format_validation_error(e)}"
            ) from e

        self.current_config = validated_config
        return validated_config

    async def generate_default_config(
        self, config_path: Optional[Path] = None, force: bool = False
    ) -> Path:
        """
        Write a commented default configuration file.

        Returns:
            Path of the configuration file

        Raises:
            ConfigurationError: If the file cannot be written
        """
        if not config_path:
            config_path = self._get_default_config_path()
        self.config_path = config_path

        if config_path.exists() and not force:
            logger.warning(f"Configuration file already exists at {config_path}")
            return config_path

        try:
            self.yaml_parser.save_yaml_config(SolrPostConfig().model_dump(), config_path)
        except RuntimeError as e:
            raise ConfigurationError(str(e)) from e

        logger.info(f"Default configuration generated at {config_path}")
        return config_path

    def build_ingestion_config(
        self,
        directory: Union[str, Path],
        config: Optional[SolrPostConfig] = None,
        **overrides: Any,
    ) -> IngestionConfig:
        """
        Merge file configuration with command line overrides into a run config.

        Overrides use the file-level key names (``host``, ``port``,
        ``collection``, ``url``, ``user``, ``timeout``, ``file_extensions``,
        ``glob``, ``exclude_regex``, ``include_regex``, ``concurrency``);
        ``None`` values are ignored.

        Raises:
            ConfigurationError: If the merged configuration is invalid
        """
        config = config or self.current_config or SolrPostConfig()
        solr = config.solr.model_dump()
        ingest = config.ingest.model_dump()

        for key, value in overrides.items():
            if value is None:
                continue
            if key in solr:
                solr[key] = value
            elif key in ingest:
                ingest[key] = value
            else:
                raise ConfigurationError(f"Unknown configuration option: {key}")

        # an explicit extension list on the command line beats a configured glob
        if overrides.get("file_extensions") is not None and overrides.get("glob") is None:
            ingest["glob"] = None

        try:
            if ingest["glob"]:
                inclusion = InclusionRule(glob=ingest["glob"])
            elif isinstance(ingest["file_extensions"], str):
                inclusion = InclusionRule.from_extensions(ingest["file_extensions"])
            else:
                inclusion = InclusionRule(extensions=tuple(ingest["file_extensions"]))

            return IngestionConfig(
                directory=Path(directory).expanduser(),
                inclusion=inclusion,
                exclude_pattern=ingest["exclude_regex"],
                include_pattern=ingest["include_regex"],
                endpoint=EndpointConfig(
                    scheme=solr["scheme"],
                    host=solr["host"],
                    port=solr["port"],
                    collection=solr["collection"],
                    update_url=solr["url"],
                ),
                credentials=solr["user"],
                concurrency=ingest["concurrency"],
                request_timeout=solr["timeout"],
            )
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration: {format_validation_error(e)}"
            ) from e

    def _get_default_config_path(self) -> Path:
        """Get default configuration file path."""
        env_path = self.env_manager.get_config_path()
        if env_path:
            return Path(env_path).expanduser()
        return Path.home() / ".solr-post" / "config.yaml"
