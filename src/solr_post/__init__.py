"""
solr-post - concurrent document ingestion for Solr

Scans a directory tree, filters files by extension and content, and posts
them to a Solr ``update/extract`` (Tika) handler with bounded concurrency.
"""

__version__ = "1.0.0"

from .core.runner import IngestionRunner, solr_post
from .models.config_models import EndpointConfig, InclusionRule, IngestionConfig

__all__ = [
    "solr_post",
    "IngestionRunner",
    "IngestionConfig",
    "InclusionRule",
    "EndpointConfig",
]
