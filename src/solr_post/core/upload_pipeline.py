"""
Bounded-concurrency upload of the work set to Solr.
"""

import asyncio
import logging
import mimetypes
import os
import time
from contextlib import aclosing
from typing import AsyncIterator, Awaitable, Callable, Iterable, Iterator, Set
from urllib.parse import quote

import httpx

from ..integration.solr_client import SolrClient
from ..models.ingest_models import UploadOutcome, UploadTask

logger = logging.getLogger(__name__)

OutcomeCallback = Callable[[UploadOutcome], None]

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def build_upload_task(path: str, extract_url: str) -> UploadTask:
    """
    Derive the upload request for one work set member.

    The absolute path, percent-encoded with no safe characters, serves as both
    ``resource.name`` and ``literal.id``.
    """
    absolute_path = os.path.realpath(path)
    document_id = quote(absolute_path, safe="")
    content_type = mimetypes.guess_type(absolute_path)[0] or DEFAULT_CONTENT_TYPE
    separator = "&" if "?" in extract_url else "?"
    url = (
        f"{extract_url}{separator}resource.name={document_id}"
        f"&literal.id={document_id}"
    )
    return UploadTask(
        source_path=path,
        absolute_path=absolute_path,
        document_id=document_id,
        content_type=content_type,
        url=url,
    )


async def buffer_unordered(
    jobs: Iterable[Callable[[], Awaitable[UploadOutcome]]], limit: int
) -> AsyncIterator[UploadOutcome]:
    """
    Run jobs with at most ``limit`` in flight, yielding results as they finish.

    Jobs are pulled from the iterable lazily: a new one starts only when a
    running one has completed and its result has been consumed.
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    pending_jobs: Iterator[Callable[[], Awaitable[UploadOutcome]]] = iter(jobs)
    in_flight: Set["asyncio.Future[UploadOutcome]"] = set()

    def admit_next() -> None:
        job = next(pending_jobs, None)
        if job is not None:
            in_flight.add(asyncio.ensure_future(job()))

    try:
        for _ in range(limit):
            admit_next()

        while in_flight:
            done, _ = await asyncio.wait(in_flight, return_when=asyncio.FIRST_COMPLETED)
            for future in done:
                in_flight.discard(future)
                yield future.result()
                admit_next()
    finally:
        for future in in_flight:
            future.cancel()
        await asyncio.gather(*in_flight, return_exceptions=True)


class UploadPipeline:
    """
    Streams work set members to Solr with a fixed bound on in-flight requests.

    Every task yields exactly one ``UploadOutcome``. Request failures and
    non-2xx responses are logged with the source file and reported as failed
    outcomes; they never abort the stream and are not retried.
    """

    def __init__(self, client: SolrClient, concurrency: int = 8):
        """
        Initialize upload pipeline.

        Args:
            client: Solr client used for every request
            concurrency: Maximum simultaneous uploads (>= 1)
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")

        self.client = client
        self.concurrency = concurrency
        self.in_flight = 0
        self.max_in_flight = 0

    async def run(self, work_set: Iterable[str], on_outcome: OutcomeCallback) -> int:
        """
        Upload every member of the work set.

        Args:
            work_set: Accepted paths
            on_outcome: Called once per finished task, in completion order,
                before the next completion is awaited

        Returns:
            Number of documents in the work set
        """
        paths = list(work_set)
        total = len(paths)
        start_time = time.time()
        extract_url = self.client.extract_url

        logger.info(f"indexing {total} files with concurrency {self.concurrency}")

        def make_job(path: str) -> Callable[[], Awaitable[UploadOutcome]]:
            return lambda: self._upload(build_upload_task(path, extract_url))

        succeeded = 0
        async with aclosing(
            buffer_unordered((make_job(path) for path in paths), self.concurrency)
        ) as outcomes:
            async for outcome in outcomes:
                if outcome.succeeded:
                    succeeded += 1
                on_outcome(outcome)

        logger.info(
            f"Uploaded {succeeded}/{total} documents in "
            f"{time.time() - start_time:.2f}s (peak in flight: {self.max_in_flight})"
        )
        return total

    async def _upload(self, task: UploadTask) -> UploadOutcome:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            return await self._send(task)
        finally:
            self.in_flight -= 1

    async def _send(self, task: UploadTask) -> UploadOutcome:
        try:
            with open(task.absolute_path, "rb") as f:
                body = f.read()
        except OSError as e:
            logger.error(f"failed to read file for upload: {task.absolute_path}: {e}")
            return UploadOutcome(task=task, error=f"read error: {e}")

        try:
            response = await self.client.post_document(task, body)
        except httpx.RequestError as e:
            logger.error(
                f"{type(e).__name__}: {e} while posting {task.absolute_path}\n"
                "Is Solr server running and collection available?"
            )
            return UploadOutcome(task=task, error=f"{type(e).__name__}: {e}")

        outcome = UploadOutcome(
            task=task,
            status_code=response.status_code,
            response_url=str(response.url),
        )

        if outcome.succeeded:
            logger.info(f"indexed: {task.absolute_path}")
        else:
            outcome.error = f"HTTP {response.status_code}"
            logger.error(
                f"POST {response.url} {response.status_code}\n"
                f"Is collection correct?\n"
                f"failed to index file: {task.absolute_path}"
            )

        return outcome
