"""
Data models and exceptions for the ingestion run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SolrPostError(Exception):
    """Base exception for solr-post errors."""

    pass


class ConfigurationError(SolrPostError):
    """Raised when the run configuration is invalid or cannot be loaded."""

    pass


class ClientSetupError(SolrPostError):
    """Raised when the HTTP client or endpoint cannot be prepared."""

    pass


class FilterReadError(SolrPostError):
    """Raised when a candidate file cannot be read during content filtering."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


@dataclass(frozen=True)
class ScanError:
    """A filesystem entry that could not be scanned."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class RunState(Enum):
    """Lifecycle state of a single ingestion run."""

    IDLE = "idle"
    SCANNING = "scanning"
    FILTERING = "filtering"
    UPLOADING = "uploading"
    COMMITTING = "committing"
    DONE = "done"


@dataclass
class CandidateFile:
    """A discovered file and the bytes read from it at scan time."""

    path: str
    content: bytes

    @property
    def text(self) -> str:
        """Content decoded for pattern matching."""
        return self.content.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class UploadTask:
    """One document upload derived from a work set member."""

    source_path: str
    absolute_path: str
    document_id: str
    content_type: str
    url: str


@dataclass
class UploadOutcome:
    """Terminal result of one upload task."""

    task: UploadTask
    status_code: Optional[int] = None
    response_url: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        """True for a 2xx response with no transport error."""
        return (
            self.error is None
            and self.status_code is not None
            and 200 <= self.status_code < 300
        )


@dataclass
class RunSummary:
    """Counters describing a finished (or in-progress) run."""

    total: int = 0
    completed: int = 0
    succeeded: int = 0
    failed: int = 0
    committed: bool = False
    scan_errors: list[ScanError] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        """Percentage of completed uploads that succeeded."""
        if self.completed == 0:
            return 0.0
        return (self.succeeded / self.completed) * 100.0
