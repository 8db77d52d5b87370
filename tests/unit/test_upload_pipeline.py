"""
Unit tests for the bounded-concurrency upload stream.
"""

import asyncio
import os
from urllib.parse import quote

import httpx
import pytest

from solr_post.core.upload_pipeline import (
    DEFAULT_CONTENT_TYPE,
    UploadPipeline,
    buffer_unordered,
    build_upload_task,
)
from solr_post.integration.solr_client import SolrClient
from solr_post.models.config_models import EndpointConfig

EXTRACT_URL = "http://localhost:8983/solr/docs/update/extract"


def docs_client(fake_solr):
    return SolrClient(EndpointConfig(collection="docs"), transport=fake_solr.transport)


class TestUploadTask:
    """Test request derivation for a single document."""

    def test_id_is_encoded_absolute_path(self, tmp_path):
        path = tmp_path / "my docs" / "page one.html"
        path.parent.mkdir()
        path.write_text("<html/>")

        task = build_upload_task(str(path), EXTRACT_URL)

        absolute = os.path.realpath(str(path))
        assert task.absolute_path == absolute
        assert task.document_id == quote(absolute, safe="")
        assert "/" not in task.document_id
        assert " " not in task.document_id
        assert task.url == (
            f"{EXTRACT_URL}?resource.name={task.document_id}"
            f"&literal.id={task.document_id}"
        )

    def test_content_type_guessed(self, tmp_path):
        assert build_upload_task(str(tmp_path / "a.html"), EXTRACT_URL).content_type == (
            "text/html"
        )
        assert build_upload_task(str(tmp_path / "a.pdf"), EXTRACT_URL).content_type == (
            "application/pdf"
        )

    def test_unknown_extension_falls_back(self, tmp_path):
        task = build_upload_task(str(tmp_path / "data.unknownext"), EXTRACT_URL)
        assert task.content_type == DEFAULT_CONTENT_TYPE

    def test_extract_url_with_query(self, tmp_path):
        task = build_upload_task(str(tmp_path / "a.txt"), f"{EXTRACT_URL}?wt=json")
        assert task.url.startswith(f"{EXTRACT_URL}?wt=json&resource.name=")

    def test_relative_path_resolved(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        task = build_upload_task("a.txt", EXTRACT_URL)

        assert task.source_path == "a.txt"
        assert task.absolute_path == os.path.realpath(str(tmp_path / "a.txt"))


class TestBufferUnordered:
    """Test the generic bounded stream."""

    @pytest.mark.asyncio
    async def test_limit_must_be_positive(self):
        with pytest.raises(ValueError):
            async for _ in buffer_unordered([], 0):
                pass

    @pytest.mark.asyncio
    async def test_respects_limit_and_yields_all(self):
        running = 0
        peak = 0

        def make_job(value, delay):
            async def job():
                nonlocal running, peak
                running += 1
                peak = max(peak, running)
                await asyncio.sleep(delay)
                running -= 1
                return value

            return job

        jobs = [make_job(i, 0.001 * (i % 4)) for i in range(20)]
        results = [value async for value in buffer_unordered(jobs, 3)]

        assert sorted(results) == list(range(20))
        assert peak == 3

    @pytest.mark.asyncio
    async def test_jobs_pulled_lazily(self):
        started = []

        def jobs():
            for i in range(10):
                started.append(i)

                async def job(i=i):
                    return i

                yield job

        stream = buffer_unordered(jobs(), 2)
        first = await stream.__anext__()
        await stream.aclose()

        assert first in (0, 1)
        assert len(started) <= 3

    @pytest.mark.asyncio
    async def test_close_cancels_and_awaits_running_jobs(self):
        cancelled = []

        def make_job(value, delay):
            async def job():
                try:
                    await asyncio.sleep(delay)
                except asyncio.CancelledError:
                    cancelled.append(value)
                    raise
                return value

            return job

        jobs = [make_job(0, 0), make_job(1, 60), make_job(2, 60)]
        stream = buffer_unordered(jobs, 3)
        first = await stream.__anext__()
        await stream.aclose()

        assert first == 0
        assert sorted(cancelled) == [1, 2]


@pytest.fixture
def files(make_tree):
    names = [f"page{i}.html" for i in range(10)]
    root = make_tree({name: f"<p>{name}</p>" for name in names})
    return [os.path.join(str(root), name) for name in names]


class TestUploadPipeline:
    """Test uploads against a fake Solr."""

    @pytest.mark.asyncio
    async def test_in_flight_bounded_by_concurrency(self, fake_solr, files):
        outcomes = []
        async with docs_client(fake_solr) as client:
            pipeline = UploadPipeline(client, concurrency=3)
            total = await pipeline.run(files, outcomes.append)

        assert total == 10
        assert len(outcomes) == 10
        assert all(outcome.succeeded for outcome in outcomes)
        assert pipeline.max_in_flight == 3
        assert fake_solr.max_in_flight <= 3
        assert pipeline.in_flight == 0

    @pytest.mark.asyncio
    async def test_fewer_files_than_concurrency(self, fake_solr, files):
        async with docs_client(fake_solr) as client:
            pipeline = UploadPipeline(client, concurrency=8)
            await pipeline.run(files[:2], lambda outcome: None)

        assert pipeline.max_in_flight <= 2
        assert fake_solr.posted_names() == {"page0.html", "page1.html"}

    @pytest.mark.asyncio
    async def test_request_shape(self, fake_solr, files):
        async with docs_client(fake_solr) as client:
            await UploadPipeline(client, concurrency=1).run(files[:1], lambda outcome: None)

        (request,) = fake_solr.posts
        absolute = os.path.realpath(files[0])
        assert request.url.path == "/solr/docs/update/extract"
        assert request.url.params["resource.name"] == absolute
        assert request.url.params["literal.id"] == absolute
        assert request.headers["Content-Type"] == "text/html"
        assert request.content == b"<p>page0.html</p>"

    @pytest.mark.asyncio
    async def test_http_error_is_a_failed_outcome(self, fake_solr, files, caplog):
        fake_solr.fail_names = {"page3.html"}
        outcomes = []

        async with docs_client(fake_solr) as client:
            await UploadPipeline(client, concurrency=4).run(files, outcomes.append)

        failed = [o for o in outcomes if not o.succeeded]
        assert len(outcomes) == 10
        assert len(failed) == 1
        assert failed[0].status_code == 500
        assert failed[0].error == "HTTP 500"
        assert "failed to index file" in caplog.text
        assert "page3.html" in caplog.text

    @pytest.mark.asyncio
    async def test_transport_error_is_a_failed_outcome(self, fake_solr, files):
        fake_solr.refuse_names = {"page1.html", "page2.html"}
        outcomes = []

        async with docs_client(fake_solr) as client:
            await UploadPipeline(client, concurrency=4).run(files, outcomes.append)

        failed = [o for o in outcomes if not o.succeeded]
        assert len(outcomes) == 10
        assert len(failed) == 2
        assert all(o.status_code is None for o in failed)
        assert all(o.error.startswith("ConnectError") for o in failed)

    @pytest.mark.asyncio
    async def test_undecodable_response_is_a_failed_outcome(self, files, caplog):
        def corrupt(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, headers={"Content-Encoding": "gzip"}, content=b"not gzip"
            )

        outcomes = []
        async with SolrClient(
            EndpointConfig(collection="docs"), transport=httpx.MockTransport(corrupt)
        ) as client:
            total = await UploadPipeline(client, concurrency=2).run(
                files[:4], outcomes.append
            )

        assert total == 4
        assert len(outcomes) == 4
        assert not any(o.succeeded for o in outcomes)
        assert all(o.error.startswith("DecodingError") for o in outcomes)
        assert "page0.html" in caplog.text

    @pytest.mark.asyncio
    async def test_file_removed_before_upload(self, fake_solr, files):
        os.remove(files[0])
        outcomes = []

        async with docs_client(fake_solr) as client:
            await UploadPipeline(client, concurrency=2).run(files[:3], outcomes.append)

        failed = [o for o in outcomes if not o.succeeded]
        assert len(outcomes) == 3
        assert len(failed) == 1
        assert failed[0].error.startswith("read error")
        assert len(fake_solr.posts) == 2

    @pytest.mark.asyncio
    async def test_empty_work_set(self, fake_solr):
        async with docs_client(fake_solr) as client:
            total = await UploadPipeline(client).run([], lambda outcome: None)

        assert total == 0
        assert fake_solr.requests == []

    def test_concurrency_must_be_positive(self):
        client = SolrClient(EndpointConfig())
        with pytest.raises(ValueError):
            UploadPipeline(client, concurrency=0)
