"""
Configuration models for solr-post.

The file-level models (``SolrPostConfig`` and its sections) mirror the YAML
configuration file. ``IngestionConfig`` is the immutable, fully validated
configuration of a single run.
"""

import re
from pathlib import Path
from typing import List, Optional, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_FILE_EXTENSIONS: Tuple[str, ...] = (
    "xml",
    "json",
    "jsonl",
    "csv",
    "pdf",
    "doc",
    "docx",
    "ppt",
    "pptx",
    "xls",
    "xlsx",
    "odt",
    "odp",
    "ods",
    "ott",
    "otp",
    "ots",
    "rtf",
    "htm",
    "html",
    "txt",
    "log",
)

DEFAULT_CONCURRENCY = 8


def compile_content_pattern(pattern: str) -> "re.Pattern[str]":
    """Compile a content regex the way the filter applies it (case-insensitive)."""
    return re.compile(pattern, re.IGNORECASE)


def expand_braces(pattern: str) -> List[str]:
    """
    Expand ``{a,b}`` alternatives into separate patterns.

    The outermost group expands first, keeping alternatives in written order:
    ``"*.{htm{,l},txt}"`` -> ``["*.htm", "*.html", "*.txt"]``.
    An unbalanced ``{`` is kept literally.
    """
    start = pattern.find("{")
    while start != -1:
        depth = 0
        commas: List[int] = []
        for end in range(start, len(pattern)):
            char = pattern[end]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    break
            elif char == "," and depth == 1:
                commas.append(end)
        else:
            start = pattern.find("{", start + 1)
            continue

        head, tail = pattern[:start], pattern[end + 1 :]
        bounds = [start] + commas + [end]
        expanded: List[str] = []
        for left, right in zip(bounds, bounds[1:]):
            for candidate in expand_braces(head + pattern[left + 1 : right] + tail):
                if candidate not in expanded:
                    expanded.append(candidate)
        return expanded

    return [pattern]


def glob_to_regex(pattern: str) -> "re.Pattern[str]":
    """
    Translate a single (brace-free) glob into a regex over POSIX relative paths.

    ``**`` matches across directories, ``*`` and ``?`` stay within one path
    segment, and ``[...]`` is a character class (``[!...]`` negates). A ``]``
    right after the opening bracket is part of the class; a bracket without a
    closing ``]`` is literal.

    Raises:
        re.error: If a character class is invalid, e.g. ``[z-a]``
    """
    parts: List[str] = []
    i = 0
    n = len(pattern)

    while i < n:
        if pattern.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif pattern[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            parts.append("[^/]")
            i += 1
        elif pattern[i] == "[":
            j = i + 1
            if j < n and pattern[j] == "!":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            end = pattern.find("]", j)
            if end == -1:
                parts.append(re.escape("["))
                i += 1
                continue
            body = pattern[i + 1 : end].replace("\\", "\\\\")
            if body.startswith("!"):
                body = "^" + body[1:]
            elif body.startswith("^"):
                body = "\\" + body
            parts.append(f"[{body}]")
            i = end + 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1

    return re.compile("".join(parts) + r"\Z")


def compile_inclusion_patterns(expression: str) -> List["re.Pattern[str]"]:
    """
    Compile a (possibly brace-containing) glob expression into path regexes.

    Raises:
        ValueError: If any expanded glob is not a valid pattern
    """
    try:
        return [glob_to_regex(glob) for glob in expand_braces(expression)]
    except re.error as e:
        raise ValueError(f"Invalid glob pattern '{expression}': {e}") from e


class SolrConfig(BaseModel):
    """Solr server section of the configuration file."""

    scheme: str = Field(default="http", description="URL scheme of the Solr server")
    host: str = Field(default="localhost", description="Solr host")
    port: int = Field(default=8983, ge=1, le=65535, description="Solr port")
    collection: str = Field(default="collection1", description="Target collection")
    url: Optional[str] = Field(
        default=None,
        description="Update URL overriding scheme, host, port and collection",
    )
    user: Optional[str] = Field(
        default=None, description="Basic auth credentials as 'user:pass'"
    )
    timeout: Optional[float] = Field(
        default=None, gt=0, description="Per-request timeout in seconds"
    )


class IngestSection(BaseModel):
    """Ingest section of the configuration file."""

    file_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FILE_EXTENSIONS)
    )
    glob: Optional[str] = None
    exclude_regex: Optional[str] = None
    include_regex: Optional[str] = None
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1)


class LoggingConfig(BaseModel):
    """Logging section of the configuration file."""

    level: str = Field(default="WARNING", description="Logging level")
    file_path: Optional[str] = Field(default=None, description="Optional log file")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v.upper()


class SolrPostConfig(BaseModel):
    """Complete file-level configuration."""

    solr: SolrConfig = Field(default_factory=SolrConfig)
    ingest: IngestSection = Field(default_factory=IngestSection)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class InclusionRule(BaseModel):
    """Which files the scan considers: an extension list or a glob, never both."""

    model_config = ConfigDict(frozen=True)

    extensions: Optional[Tuple[str, ...]] = None
    glob: Optional[str] = None

    @model_validator(mode="after")
    def check_exactly_one(self) -> "InclusionRule":
        if (self.extensions is None) == (self.glob is None):
            raise ValueError("Inclusion rule needs either extensions or a glob")
        if self.extensions is not None and not self.extensions:
            raise ValueError("Extension list cannot be empty")
        if self.glob is not None and not self.glob.strip():
            raise ValueError("Glob pattern cannot be empty")
        compile_inclusion_patterns(self.expression)
        return self

    @classmethod
    def from_extensions(cls, extensions: str) -> "InclusionRule":
        """Build a rule from a comma separated list such as ``"html,txt"``."""
        parts = tuple(ext.strip() for ext in extensions.split(",") if ext.strip())
        return cls(extensions=parts)

    @property
    def expression(self) -> str:
        if self.glob is not None:
            return self.glob
        return "**/*.{" + ",".join(self.extensions or ()) + "}"


class EndpointConfig(BaseModel):
    """Where documents are posted and committed."""

    model_config = ConfigDict(frozen=True)

    scheme: str = "http"
    host: str = "localhost"
    port: int = Field(default=8983, ge=1, le=65535)
    collection: str = "collection1"
    update_url: Optional[str] = None

    @field_validator("update_url")
    @classmethod
    def validate_update_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            url = httpx.URL(v)
        except httpx.InvalidURL as e:
            raise ValueError(f"Malformed update URL '{v}': {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(
                f"Malformed update URL '{v}': expected an absolute http(s) URL"
            )
        return v.rstrip("/")

    @field_validator("scheme")
    @classmethod
    def validate_scheme(cls, v: str) -> str:
        if v not in ("http", "https"):
            raise ValueError(f"Unsupported scheme '{v}' (use http or https)")
        return v

    @property
    def base_url(self) -> str:
        """Collection base URL, e.g. ``http://localhost:8983/solr/collection1``."""
        return f"{self.scheme}://{self.host}:{self.port}/solr/{self.collection}"

    @property
    def extract_url(self) -> str:
        """URL documents are POSTed to."""
        if self.update_url:
            return self.update_url
        return f"{self.base_url}/update/extract"

    @property
    def commit_url(self) -> str:
        """Update handler of the same collection, used for the commit."""
        if not self.update_url:
            return f"{self.base_url}/update"

        url = self.update_url
        if url.endswith("/extract"):
            url = url[: -len("/extract")]
        if not url.endswith("/update"):
            url = f"{url}/update"
        return url


class IngestionConfig(BaseModel):
    """Immutable configuration of one ingestion run."""

    model_config = ConfigDict(frozen=True)

    directory: Path
    inclusion: InclusionRule = Field(
        default_factory=lambda: InclusionRule(extensions=DEFAULT_FILE_EXTENSIONS)
    )
    exclude_pattern: Optional[str] = None
    include_pattern: Optional[str] = None
    endpoint: EndpointConfig = Field(default_factory=EndpointConfig)
    credentials: Optional[str] = None
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1)
    request_timeout: Optional[float] = Field(default=None, gt=0)

    @field_validator("directory")
    @classmethod
    def validate_directory(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Directory does not exist: {v}")
        if not v.is_dir():
            raise ValueError(f"Path is not a directory: {v}")
        return v

    @field_validator("exclude_pattern", "include_pattern")
    @classmethod
    def validate_pattern(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            compile_content_pattern(v)
        except re.error as e:
            raise ValueError(f"Invalid regex pattern '{v}': {e}") from e
        return v
