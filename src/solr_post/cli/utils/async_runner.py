"""
Run ``async def`` click callbacks
"""

import asyncio
from functools import update_wrapper
from typing import Any, Awaitable, Callable

import click

from ...models.ingest_models import SolrPostError
from .logging_setup import stderr_console


def async_command(f: Callable[..., Awaitable[Any]]) -> Callable[..., Any]:
    """
    Run a coroutine command to completion on a fresh event loop.

    Ctrl-C exits with status 130. A ``SolrPostError`` the command did not
    handle itself is printed on stderr and exits with status 1.
    """

    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return asyncio.run(f(*args, **kwargs))
        except KeyboardInterrupt:
            stderr_console.print("\n[yellow]Indexing interrupted by user[/yellow]")
            raise click.exceptions.Exit(130)
        except SolrPostError as e:
            stderr_console.print(f"[red]{type(e).__name__}: {e}[/red]")
            raise click.exceptions.Exit(1)

    return update_wrapper(wrapper, f)
