"""
External service integrations.
"""

from .solr_client import SolrClient, basic_auth_header

__all__ = ["SolrClient", "basic_auth_header"]
