"""
Logging configuration for CLI runs
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from ...models.config_models import LoggingConfig

# upload and commit failures are reported on stderr
stderr_console = Console(stderr=True)


def install_console_logging(console: Optional[Console] = None) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console or stderr_console, rich_tracebacks=True)],
    )


def enable_verbose_logging() -> None:
    """Log every indexed file, and debug details from solr_post itself."""
    logging.getLogger().setLevel(logging.INFO)
    logging.getLogger("solr_post").setLevel(logging.DEBUG)


def apply_logging_config(config: LoggingConfig, verbose: bool = False) -> None:
    """
    Apply the configured level (``--verbose`` wins) and optional log file.
    """
    root_logger = logging.getLogger()

    if verbose:
        enable_verbose_logging()
    else:
        root_logger.setLevel(config.level)

    if config.file_path:
        file_handler = logging.FileHandler(config.file_path, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        root_logger.addHandler(file_handler)
