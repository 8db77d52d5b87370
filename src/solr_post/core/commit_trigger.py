"""
Final commit request issued after all uploads have drained.
"""

import logging

import httpx

from ..integration.solr_client import SolrClient

logger = logging.getLogger(__name__)


class CommitTrigger:
    """Fires the collection commit; failures are reported, never raised."""

    def __init__(self, client: SolrClient):
        self.client = client

    async def commit(self) -> bool:
        """
        Commit the collection.

        Returns:
            True if Solr acknowledged the commit with a 2xx status
        """
        try:
            response = await self.client.commit()
        except httpx.RequestError as e:
            logger.warning(
                f"commit failed: {type(e).__name__}: {e}\n"
                "Is Solr server running and collection available?"
            )
            return False

        if response.is_success:
            logger.info("commit successful")
            return True

        logger.warning(
            f"commit failed: GET {response.url} {response.status_code}; "
            "uploaded documents may not be searchable until the next commit"
        )
        return False
