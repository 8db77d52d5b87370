"""
Configuration management commands
"""

from pathlib import Path
from typing import Any, Dict, Optional

import click
from rich.console import Console

from ...core.config_manager import ConfigurationManager
from ...models.ingest_models import ConfigurationError
from ..ui.display import create_config_table, create_error_display
from ..utils.async_runner import async_command

_CONFIG_OPTION_HELP = "Configuration file [default: ~/.solr-post/config.yaml]"


@click.group()
def config() -> None:
    """
    Configuration management commands.

    Manage solr-post defaults: Solr endpoint, credentials, file selection,
    concurrency and logging. Values from the configuration file are
    overridden by SOLR_POST_* environment variables and command-line options.
    """
    pass


@config.command()
@click.option(
    "--config", "config_path", type=click.Path(dir_okay=False), help=_CONFIG_OPTION_HELP
)
@click.pass_context
@async_command
async def show(ctx: click.Context, config_path: Optional[str]) -> None:
    """
    Display current configuration with sources.

    Shows the effective values from the configuration file, environment
    variables and built-in defaults. Credentials are masked.
    """
    console: Console = ctx.obj["console"]

    config_manager = ConfigurationManager()
    try:
        settings = await config_manager.load_config(
            Path(config_path).expanduser() if config_path else None
        )
    except ConfigurationError as e:
        console.print(create_error_display(e, "Configuration Error"))
        ctx.exit(1)

    file_exists = bool(config_manager.config_path and config_manager.config_path.exists())
    file_data: Dict[str, Any] = {}
    if file_exists and config_manager.config_path:
        file_data = config_manager.yaml_parser.load_yaml_config(
            config_manager.config_path
        )

    config_data = {}
    for section_name, section in settings.model_dump().items():
        for key, value in section.items():
            config_data[f"{section_name}.{key}"] = {
                "value": value,
                "source": _get_value_source(
                    config_manager, file_data, section_name, key
                ),
            }

    console.print(create_config_table(config_data, "solr-post Configuration"))
    console.print(f"\n[dim]Configuration file: {config_manager.config_path}[/dim]")

    if not file_exists:
        console.print(
            "[yellow]Configuration file does not exist. "
            "Run 'solr-post config init' to create one.[/yellow]"
        )


@config.command()
@click.option("--force", is_flag=True, help="Overwrite an existing configuration file")
@click.option(
    "--config", "config_path", type=click.Path(dir_okay=False), help=_CONFIG_OPTION_HELP
)
@click.pass_context
@async_command
async def init(ctx: click.Context, force: bool, config_path: Optional[str]) -> None:
    """
    Write a commented default configuration file.

    Every setting is written with its default value and a short comment.
    An existing file is left untouched unless --force is given.
    """
    console: Console = ctx.obj["console"]

    config_manager = ConfigurationManager()
    target = (
        Path(config_path).expanduser()
        if config_path
        else config_manager._get_default_config_path()
    )

    if target.exists() and not force:
        console.print(f"[yellow]Configuration file already exists at {target}[/yellow]")
        console.print("Use --force to overwrite it.")
        return

    try:
        written = await config_manager.generate_default_config(target, force=force)
    except ConfigurationError as e:
        console.print(create_error_display(e, "Configuration Error"))
        ctx.exit(1)

    console.print(f"[green]✓[/green] Default configuration created at: {written}")
    console.print("Run 'solr-post config show' to see the effective configuration.")


def _get_value_source(
    config_manager: ConfigurationManager,
    file_data: Dict[str, Any],
    section: str,
    key: str,
) -> str:
    """Determine the source of a configuration value"""
    env_var = config_manager.env_manager.source_of(section, key)
    if env_var:
        return f"environment ({env_var})"
    section_data = file_data.get(section)
    if isinstance(section_data, dict) and key in section_data:
        return "config file"
    return "default"
