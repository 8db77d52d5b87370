"""
Post command implementation with Rich progress visualization
"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from ...core.config_manager import ConfigurationManager
from ...core.runner import IngestionRunner
from ...models.config_models import IngestionConfig
from ...models.ingest_models import SolrPostError
from ..ui.display import create_error_display
from ..ui.progress import IndexingProgressTracker, create_dry_run_display
from ..utils.async_runner import async_command
from ..utils.logging_setup import apply_logging_config
from ..utils.validation import (
    get_validation_suggestions,
    show_validation_error,
    validate_concurrency_limit,
    validate_directory,
    validate_regex,
    validate_update_url,
)


@click.command()
@click.option(
    "--directory",
    "-d",
    required=True,
    type=click.Path(),
    help="The directory to search for files to post",
)
@click.option("--collection", "-c", help="The Solr collection to post to")
@click.option("--host", "-h", help="The host of the Solr server [default: localhost]")
@click.option(
    "--port", "-p", type=int, help="The port of the Solr server [default: 8983]"
)
@click.option(
    "--url",
    help="Base Solr update URL, e.g. http://localhost:8983/solr/my_collection/update. "
    "If set, collection, host and port are ignored",
)
@click.option("--user", "-u", help="Basic auth user credentials, e.g. 'username:password'")
@click.option(
    "--file-extensions",
    "-f",
    help="Comma separated file extensions to post, e.g. 'html,txt,json'",
)
@click.option(
    "--glob",
    "glob_pattern",
    help="Explicit glob selecting files to post, e.g. '**/*.html' (overrides -f)",
)
@click.option(
    "--concurrency",
    type=int,
    help="The number of concurrent requests to the Solr server [default: 8]",
)
@click.option(
    "--exclude-regex",
    "-e",
    help="Exclude files whose content matches this case-insensitive regex; "
    "takes precedence over --include-regex",
)
@click.option(
    "--include-regex",
    "-i",
    help="Only post files whose content matches this case-insensitive regex",
)
@click.option("--timeout", type=float, help="Per-request timeout in seconds")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Configuration file [default: ~/.solr-post/config.yaml]",
)
@click.option(
    "--dry-run", is_flag=True, help="Show which files would be posted without posting"
)
@click.pass_context
@async_command
async def post(
    ctx: click.Context,
    directory: str,
    collection: Optional[str],
    host: Optional[str],
    port: Optional[int],
    url: Optional[str],
    user: Optional[str],
    file_extensions: Optional[str],
    glob_pattern: Optional[str],
    concurrency: Optional[int],
    exclude_regex: Optional[str],
    include_regex: Optional[str],
    timeout: Optional[float],
    config_path: Optional[str],
    dry_run: bool,
) -> None:
    """
    Post files in a directory tree to a Solr collection.

    Files are selected by extension (or glob), optionally filtered by content,
    and posted to the collection's update/extract handler with bounded
    concurrency. A commit is issued once all uploads have finished.

    Examples:
      solr-post post -d ./public -c portal
      solr-post post -d ./docs -c docs -f html,txt --concurrency 4
      solr-post post -d ./site --url https://solr.example.com/solr/site/update/extract -u admin:secret
      solr-post post -d ./docs -c docs -e no_index --dry-run
    """
    console: Console = ctx.obj["console"]
    verbose: bool = ctx.obj.get("verbose", False)

    # Validate inputs
    is_valid, error_msg, directory_path = validate_directory(directory)
    if not is_valid:
        suggestions = get_validation_suggestions("directory", directory)
        show_validation_error(console, error_msg or "", suggestions)
        ctx.exit(2)

    if concurrency is not None:
        is_valid, error_msg = validate_concurrency_limit(concurrency)
        if not is_valid:
            suggestions = get_validation_suggestions("concurrency", str(concurrency))
            show_validation_error(console, error_msg or "", suggestions)
            ctx.exit(2)

    for pattern in (exclude_regex, include_regex):
        if pattern is None:
            continue
        is_valid, error_msg = validate_regex(pattern)
        if not is_valid:
            suggestions = get_validation_suggestions("regex", pattern)
            show_validation_error(console, error_msg or "", suggestions)
            ctx.exit(2)

    if url is not None:
        is_valid, error_msg = validate_update_url(url)
        if not is_valid:
            suggestions = get_validation_suggestions("url", url)
            show_validation_error(console, error_msg or "", suggestions)
            ctx.exit(2)

    config_manager = ConfigurationManager()
    try:
        file_config = await config_manager.load_config(
            Path(config_path).expanduser() if config_path else None
        )
        apply_logging_config(file_config.logging, verbose=verbose)

        ingestion_config = config_manager.build_ingestion_config(
            directory_path or directory,
            config=file_config,
            collection=collection,
            host=host,
            port=port,
            url=url,
            user=user,
            file_extensions=file_extensions,
            glob=glob_pattern,
            concurrency=concurrency,
            exclude_regex=exclude_regex,
            include_regex=include_regex,
            timeout=timeout,
        )
    except SolrPostError as e:
        console.print(create_error_display(e, "Configuration Error"))
        ctx.exit(1)

    if dry_run:
        await _show_dry_run_info(console, ingestion_config, verbose)
        return

    await _execute_post_with_progress(console, ingestion_config, verbose)


async def _show_dry_run_info(
    console: Console, config: IngestionConfig, verbose: bool
) -> None:
    """Scan and filter without uploading, then list the work set"""

    runner = IngestionRunner(config)
    try:
        with console.status(f"[cyan]Scanning {config.directory}[/cyan]"):
            work_set = runner.build_work_set()
    except SolrPostError as e:
        console.print(create_error_display(e, "Scan Error"))
        if verbose:
            console.print_exception()
        click.get_current_context().exit(1)

    console.print(
        create_dry_run_display(
            directory=str(config.directory),
            expression=config.inclusion.expression,
            work_set=work_set,
            target_url=config.endpoint.extract_url,
        )
    )


async def _execute_post_with_progress(
    console: Console, config: IngestionConfig, verbose: bool
) -> None:
    """Run the ingestion with a Rich progress bar as the observer"""

    progress_tracker = IndexingProgressTracker(console, config.concurrency)
    runner = IngestionRunner(config, observer=progress_tracker)

    try:
        await runner.run()
    except SolrPostError as e:
        progress_tracker.progress.stop()
        console.print(create_error_display(e, "Indexing Error"))
        if verbose:
            console.print_exception()
        click.get_current_context().exit(1)

    progress_tracker.show_completion_summary(runner.summary)
