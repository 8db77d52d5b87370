"""
Core ingestion pipeline and configuration management.
"""

from .commit_trigger import CommitTrigger
from .config_manager import ConfigurationManager
from .content_filter import ContentFilter
from .matcher import FileMatcher
from .progress_reporter import CallbackObserver, ProgressObserver, RunContext
from .runner import IngestionRunner, solr_post
from .upload_pipeline import UploadPipeline
from .work_set import WorkSetBuilder

__all__ = [
    # Pipeline stages
    "FileMatcher",
    "ContentFilter",
    "WorkSetBuilder",
    "UploadPipeline",
    "CommitTrigger",
    # Orchestration
    "IngestionRunner",
    "solr_post",
    "ProgressObserver",
    "CallbackObserver",
    "RunContext",
    # Configuration
    "ConfigurationManager",
]
