"""
Reading and writing the solr-post YAML configuration file.

Values may reference the environment as ``${NAME}`` or ``${NAME:fallback}``;
references inside comment lines are left alone.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List

import yaml

logger = logging.getLogger(__name__)

ENV_REFERENCE = re.compile(r"\$\{(?P<name>[^}:]+)(?::(?P<fallback>[^}]*))?\}")

SECTION_TITLES = {
    "solr": "Solr server",
    "ingest": "File selection and upload",
    "logging": "Logging",
}

FIELD_COMMENTS = {
    ("solr", "scheme"): "URL scheme (http or https)",
    ("solr", "host"): "Solr host",
    ("solr", "port"): "Solr port",
    ("solr", "collection"): "Collection documents are posted to",
    ("solr", "url"): "Full update URL; overrides scheme, host, port and collection",
    ("solr", "user"): "Basic auth credentials 'user:pass' (or set SOLR_POST_USER)",
    ("solr", "timeout"): "Per-request timeout in seconds (null = no timeout)",
    ("ingest", "file_extensions"): "Extensions scanned for (ignored when glob is set)",
    ("ingest", "glob"): "Explicit glob such as '**/*.html'",
    ("ingest", "exclude_regex"): "Skip files whose content matches; wins over include",
    ("ingest", "include_regex"): "Only post files whose content matches",
    ("ingest", "concurrency"): "Maximum concurrent uploads",
    ("logging", "level"): "DEBUG, INFO, WARNING, ERROR or CRITICAL",
    ("logging", "file_path"): "Also write log records to this file",
}


class YAMLConfigParser:
    """Loads and writes the configuration file."""

    def load_yaml_config(self, config_path: Path) -> Dict[str, Any]:
        """
        Parse a configuration file after environment substitution.

        Returns:
            The top-level mapping (empty for an empty file)

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the YAML is invalid, is not a mapping, or references
                an unset variable without a fallback
        """
        raw = config_path.read_text(encoding="utf-8")

        try:
            data = yaml.safe_load(self.expand_environment(raw))
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{config_path} must contain a YAML mapping at the top level")

        logger.debug(f"Loaded configuration from {config_path}")
        return data

    def save_yaml_config(self, config_data: Dict[str, Any], config_path: Path) -> None:
        """
        Write configuration data with explanatory comments.

        The file is written next to its destination and renamed into place.

        Raises:
            RuntimeError: If the file cannot be written
        """
        staging = config_path.with_name(config_path.name + ".tmp")
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            staging.write_text(self.render(config_data), encoding="utf-8")
            staging.replace(config_path)
        except OSError as e:
            staging.unlink(missing_ok=True)
            raise RuntimeError(f"Cannot write configuration file {config_path}: {e}") from e

        logger.info(f"Saved configuration to {config_path}")

    def expand_environment(self, content: str) -> str:
        """Replace ``${NAME}`` references on every non-comment line."""

        def lookup(match: "re.Match[str]") -> str:
            name = match.group("name")
            value = os.environ.get(name, match.group("fallback"))
            if value is None:
                raise ValueError(f"Environment variable '{name}' is not set")
            return value

        expanded: List[str] = []
        for number, line in enumerate(content.splitlines(), start=1):
            if line.lstrip().startswith("#"):
                expanded.append(line)
                continue
            try:
                expanded.append(ENV_REFERENCE.sub(lookup, line))
            except ValueError as e:
                raise ValueError(f"line {number}: {e}") from e
        return "\n".join(expanded)

    def render(self, config_data: Dict[str, Any]) -> str:
        """Render sections as block YAML with one comment per known field."""
        out = [
            "# solr-post configuration",
            "# Values may use ${NAME} or ${NAME:fallback} to read the environment",
            "",
        ]

        for section, fields in config_data.items():
            out.append(f"# {SECTION_TITLES.get(section, section)}")
            if not isinstance(fields, dict):
                out.append(yaml.safe_dump({section: fields}, sort_keys=False).rstrip())
                out.append("")
                continue

            out.append(f"{section}:")
            for name, value in fields.items():
                comment = FIELD_COMMENTS.get((section, name))
                if comment:
                    out.append(f"  # {comment}")
                # flow style keeps lists on one line; strip the enclosing braces
                entry = yaml.safe_dump(
                    {name: value}, default_flow_style=True, sort_keys=False, width=1_000_000
                ).strip()[1:-1]
                out.append(f"  {entry.strip()}")
            out.append("")

        return "\n".join(out)
