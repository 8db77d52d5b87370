"""
Rich progress tracking components
"""

from datetime import datetime
from typing import Iterable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

from ...models.ingest_models import RunSummary


class IndexingProgressTracker:
    """
    Progress observer rendering a Rich progress bar for an indexing run.

    Implements the ``on_start``/``on_next``/``on_finish`` observer hooks; the
    bar is created on start and torn down on finish.
    """

    def __init__(self, console: Console, concurrency: int):
        self.console = console
        self.concurrency = concurrency
        self.start_time = datetime.now()
        self.total = 0
        self.completed = 0
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.2f}%"),
            TimeElapsedColumn(),
            TimeRemainingColumn(elapsed_when_finished=True),
            console=console,
            expand=True,
        )
        self.task_id: Optional[TaskID] = None

    def on_start(self, total: int) -> None:
        self.total = total
        self.console.print(
            f"Start indexing {total} files with concurrency {self.concurrency}"
        )
        self.task_id = self.progress.add_task("indexed", total=total)
        self.progress.start()

    def on_next(self, completed: int) -> None:
        self.completed = completed
        if self.task_id is not None:
            self.progress.update(self.task_id, completed=completed)

    def on_finish(self) -> None:
        self.progress.stop()
        self.console.print("Finished indexing.")

    def show_completion_summary(self, summary: RunSummary) -> None:
        """Show indexing completion summary"""
        duration = datetime.now() - self.start_time

        summary_text = [
            f"Documents: {summary.total}",
            f"Indexed: {summary.succeeded}",
            f"Failed: {summary.failed}",
            f"Duration: {duration.total_seconds():.1f}s",
        ]
        if summary.completed:
            summary_text.append(f"Success rate: {summary.success_rate:.1f}%")
        if summary.scan_errors:
            summary_text.append(f"Unreadable entries skipped: {len(summary.scan_errors)}")

        if summary.committed:
            summary_text.append("Commit: [green]ok[/green]")
        else:
            summary_text.append("Commit: [yellow]failed[/yellow]")

        clean = summary.failed == 0 and summary.committed
        border_style = "green" if clean else "yellow"
        title = "Indexing Complete" if clean else "Indexing Finished With Errors"

        self.console.print(
            Panel(
                "\n".join(summary_text),
                title=f"[{border_style}]{title}[/{border_style}]",
                border_style=border_style,
            )
        )


def create_dry_run_display(
    directory: str,
    expression: str,
    work_set: Iterable[str],
    target_url: str,
    max_listed: int = 20,
) -> Panel:
    """Create dry-run information display"""

    paths = sorted(work_set)

    dry_run_text = [
        f"Directory: {directory}",
        f"Match expression: {expression}",
        f"Target: {target_url}",
        f"Files to index: {len(paths)}",
        "",
    ]
    for path in paths[:max_listed]:
        dry_run_text.append(f"  • {path}")
    if len(paths) > max_listed:
        dry_run_text.append(f"  • ... and {len(paths) - max_listed} more files")
    dry_run_text.append("")
    dry_run_text.append("Use the command without --dry-run to post these files.")

    return Panel(
        "\n".join(dry_run_text),
        title="[blue]Dry Run - What Would Be Indexed[/blue]",
        border_style="blue",
    )
