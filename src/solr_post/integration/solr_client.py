"""
Solr HTTP client for the Tika ``update/extract`` handler.
"""

import base64
import logging
from typing import Dict, Optional

import httpx

from .. import __version__
from ..models.config_models import EndpointConfig
from ..models.ingest_models import ClientSetupError, UploadTask

logger = logging.getLogger(__name__)


def basic_auth_header(credentials: str) -> str:
    """Encode ``"user:pass"`` as a Basic ``Authorization`` header value."""
    encoded = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


class SolrClient:
    """
    Thin async wrapper around ``httpx.AsyncClient`` bound to one collection.

    Credentials, when given, become a default ``Authorization`` header sent
    with every request (uploads and commit alike).
    """

    def __init__(
        self,
        endpoint: EndpointConfig,
        credentials: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Solr client.

        Args:
            endpoint: Upload/commit endpoint configuration
            credentials: Basic auth credentials as ``"user:pass"``
            timeout: Per-request timeout in seconds (``None`` disables it)
            transport: Optional custom transport (used by tests)
        """
        self.endpoint = endpoint
        self.timeout = timeout
        self.session_headers: Dict[str, str] = {
            "User-Agent": f"solr-post/{__version__}",
        }
        if credentials:
            self.session_headers["Authorization"] = basic_auth_header(credentials)

        try:
            self._client = httpx.AsyncClient(
                headers=self.session_headers,
                timeout=httpx.Timeout(timeout),
                transport=transport,
            )
        except (TypeError, ValueError) as e:
            raise ClientSetupError(f"Failed to build HTTP client: {e}") from e

        logger.debug(f"SolrClient initialized for {self.endpoint.extract_url}")

    @property
    def extract_url(self) -> str:
        return self.endpoint.extract_url

    @property
    def commit_url(self) -> str:
        return self.endpoint.commit_url

    async def post_document(self, task: UploadTask, body: bytes) -> httpx.Response:
        """
        POST one document body to the extract handler.

        Raises:
            httpx.RequestError: On connection, timeout, DNS or response decoding failures
        """
        return await self._client.post(
            task.url,
            content=body,
            headers={"Content-Type": task.content_type},
        )

    async def commit(self) -> httpx.Response:
        """
        Ask the collection to commit pending documents.

        Raises:
            httpx.TransportError: On connection, timeout or DNS failures
        """
        return await self._client.get(self.commit_url, params={"commit": "true"})

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "SolrClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
