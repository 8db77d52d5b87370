"""
Shared fixtures: directory trees and an in-process fake Solr.
"""

import asyncio
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set, Union

import httpx
import pytest

from solr_post.core.environment_manager import CONFIG_PATH_ENV_VAR, ENV_OVERRIDES


class FakeSolr:
    """
    Mock Solr endpoint for ``httpx.MockTransport``.

    Records every request, tracks how many POSTs are in flight at once and
    answers with configurable status codes.
    """

    def __init__(self, delay: float = 0.01):
        self.delay = delay
        self.requests: List[httpx.Request] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.fail_names: Set[str] = set()
        self.refuse_names: Set[str] = set()
        self.commit_status = 200

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.method == "GET":
            return httpx.Response(
                self.commit_status, json={"responseHeader": {"status": 0}}
            )

        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1

        name = os.path.basename(request.url.params["resource.name"])
        if name in self.refuse_names:
            raise httpx.ConnectError("Connection refused", request=request)
        if name in self.fail_names:
            return httpx.Response(500, text="Internal Server Error")
        return httpx.Response(200, json={"responseHeader": {"status": 0}})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def posts(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]

    @property
    def commits(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]

    def posted_names(self) -> Set[str]:
        return {os.path.basename(r.url.params["resource.name"]) for r in self.posts}


class RecordingObserver:
    """Progress observer that remembers every hook invocation."""

    def __init__(self) -> None:
        self.started: List[int] = []
        self.completed: List[int] = []
        self.finished = 0

    def on_start(self, total: int) -> None:
        self.started.append(total)

    def on_next(self, completed: int) -> None:
        self.completed.append(completed)

    def on_finish(self) -> None:
        self.finished += 1


@pytest.fixture
def fake_solr() -> FakeSolr:
    """Fake Solr server with a short per-request delay."""
    return FakeSolr()


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[..., Path]:
    """
    Factory writing ``{relative path: content}`` below a fresh directory.
    """

    def _make_tree(
        files: Dict[str, Union[str, bytes]], name: str = "site"
    ) -> Path:
        root = tmp_path / name
        root.mkdir(exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _make_tree


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Optional[Path]:
    """Keep the user's configuration file and SOLR_POST_* variables out of tests."""
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)

    config_path = tmp_path / "config" / "config.yaml"
    monkeypatch.setenv(CONFIG_PATH_ENV_VAR, str(config_path))
    return config_path
