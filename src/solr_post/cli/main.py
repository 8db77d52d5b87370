"""
solr-post command line entry point
"""

import sys

import click
from rich.console import Console
from rich.traceback import install

from .. import __version__
from .utils.logging_setup import (
    enable_verbose_logging,
    install_console_logging,
    stderr_console,
)

install()

# progress, summaries and panels go to stdout; log records to stderr
console = Console()
install_console_logging(stderr_console)


@click.group()
@click.version_option(version=__version__, prog_name="solr-post")
@click.option(
    "--verbose", "-v", is_flag=True, help="Log every indexed file and debug details"
)
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, no_color: bool) -> None:
    """
    solr-post - Bulk Solr Indexer

    Walks a directory tree, selects files by extension or glob, filters them
    by content and posts them concurrently to a Solr collection.

    Examples:
      solr-post post -d ./public -c portal          # Index a site into 'portal'
      solr-post post -d ./docs -f html,txt --dry-run # Preview what would be posted
      solr-post config init                         # Write a default config file
      solr-post config show                         # Show effective configuration
    """
    ctx.ensure_object(dict)
    ctx.obj["console"] = (
        Console(force_terminal=False, no_color=True) if no_color else console
    )
    ctx.obj["verbose"] = verbose
    ctx.obj["no_color"] = no_color

    if verbose:
        enable_verbose_logging()


# Registered at import time so tests can invoke ``cli`` directly
from .commands import config, post  # noqa: E402

for command in (post.post, config.config):
    cli.add_command(command)


def main() -> None:
    """Console script entry point"""
    try:
        cli()
    except KeyboardInterrupt:
        stderr_console.print("\n[yellow]Indexing interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        stderr_console.print(f"[red]Unexpected error: {e}[/red]")
        if "--verbose" in sys.argv or "-v" in sys.argv:
            stderr_console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
