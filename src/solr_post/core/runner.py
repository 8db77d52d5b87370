"""
Run orchestration: scan, filter, upload, commit.
"""

import logging
from typing import FrozenSet, Optional

import httpx

from ..integration.solr_client import SolrClient
from ..models.config_models import IngestionConfig
from ..models.ingest_models import RunState, RunSummary, UploadOutcome
from .commit_trigger import CommitTrigger
from .content_filter import ContentFilter
from .matcher import FileMatcher
from .progress_reporter import CallbackObserver, ProgressObserver, RunContext
from .upload_pipeline import UploadPipeline
from .work_set import WorkSetBuilder

logger = logging.getLogger(__name__)


class IngestionRunner:
    """
    Drives one ingestion run through its lifecycle.

    ``Idle -> Scanning -> Filtering -> Uploading -> Committing -> Done``.
    Per-entry scan errors and per-document upload failures are absorbed;
    filter read errors and client setup errors abort the run.
    """

    def __init__(
        self,
        config: IngestionConfig,
        observer: Optional[ProgressObserver] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        filter_workers: Optional[int] = None,
    ):
        """
        Initialize ingestion runner.

        Args:
            config: Validated run configuration
            observer: Progress hooks (start, per completion, finish)
            transport: Optional HTTP transport override (used by tests)
            filter_workers: Thread pool size for content filtering
        """
        self.config = config
        self.context = RunContext(observer=observer or CallbackObserver())
        self.transport = transport
        self.matcher = FileMatcher(config.inclusion)
        self.content_filter = ContentFilter(
            exclude_pattern=config.exclude_pattern,
            include_pattern=config.include_pattern,
        )
        self.work_set_builder = WorkSetBuilder(
            self.content_filter, max_workers=filter_workers
        )

    @property
    def summary(self) -> RunSummary:
        return self.context.summary

    def build_work_set(self) -> FrozenSet[str]:
        """Scan the directory and filter candidates into the work set."""
        self.context.advance(RunState.SCANNING)
        candidates = self.matcher.scan(self.config.directory)
        self.context.summary.scan_errors = list(self.matcher.scan_errors)

        self.context.advance(RunState.FILTERING)
        return self.work_set_builder.build(candidates)

    async def run(self) -> int:
        """
        Execute the full run.

        Returns:
            Number of documents admitted into the work set
        """
        client = SolrClient(
            self.config.endpoint,
            credentials=self.config.credentials,
            timeout=self.config.request_timeout,
            transport=self.transport,
        )

        try:
            work_set = self.build_work_set()
            total = len(work_set)

            self.context.advance(RunState.UPLOADING)
            self.context.start(total)

            pipeline = UploadPipeline(client, concurrency=self.config.concurrency)
            await pipeline.run(work_set, self._on_outcome)

            self.context.advance(RunState.COMMITTING)
            self.context.summary.committed = await CommitTrigger(client).commit()
        finally:
            await client.aclose()

        self.context.advance(RunState.DONE)
        logger.info(
            f"indexing complete: {self.summary.succeeded}/{total} succeeded "
            f"in {self.context.duration_seconds:.2f}s"
        )
        self.context.finish()
        return total

    def _on_outcome(self, outcome: UploadOutcome) -> None:
        self.context.record(outcome)


async def solr_post(
    config: IngestionConfig,
    observer: Optional[ProgressObserver] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    """
    Post files to Solr concurrently based on the configuration.

    ``observer.on_start`` receives the number of files to index,
    ``observer.on_next`` the running count of finished uploads, and
    ``observer.on_finish`` is called once after the commit.

    Returns:
        Total number of files admitted for indexing
    """
    runner = IngestionRunner(config, observer=observer, transport=transport)
    return await runner.run()
