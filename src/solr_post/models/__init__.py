"""
Data models for solr-post.
"""

from .config_models import (
    DEFAULT_CONCURRENCY,
    DEFAULT_FILE_EXTENSIONS,
    EndpointConfig,
    InclusionRule,
    IngestionConfig,
    SolrPostConfig,
)
from .ingest_models import (
    CandidateFile,
    ClientSetupError,
    ConfigurationError,
    FilterReadError,
    RunState,
    RunSummary,
    ScanError,
    SolrPostError,
    UploadOutcome,
    UploadTask,
)

__all__ = [
    # Configuration
    "DEFAULT_CONCURRENCY",
    "DEFAULT_FILE_EXTENSIONS",
    "EndpointConfig",
    "InclusionRule",
    "IngestionConfig",
    "SolrPostConfig",
    # Run data
    "CandidateFile",
    "RunState",
    "RunSummary",
    "ScanError",
    "UploadOutcome",
    "UploadTask",
    # Errors
    "SolrPostError",
    "ConfigurationError",
    "ClientSetupError",
    "FilterReadError",
]
