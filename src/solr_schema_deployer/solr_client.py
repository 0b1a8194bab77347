"""
Solr client bound to the deployment endpoint.

Queries issued through this client always go to the single core the configset is
deployed to; it is used to verify that the core answers after a deployment.
"""

import logging
from typing import Any, Optional

import pysolr
import requests

from .endpoint import Endpoint

logger = logging.getLogger(__name__)


class SOLRClientError(Exception):
    """Base exception for Solr client errors."""

    pass


class SOLRQueryError(SOLRClientError):
    """Raised when a Solr query fails."""

    pass


class SOLRClient:
    """
    pysolr wrapper that always uses the configured core.

    The underlying ``pysolr.Solr`` is created lazily so constructing the client
    never touches the network.
    """

    def __init__(
        self,
        endpoint: Endpoint,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
    ):
        self.endpoint = endpoint
        self.session = session
        self.timeout = timeout
        self._solr: Optional[pysolr.Solr] = None

    @property
    def solr(self) -> pysolr.Solr:
        if self._solr is None:
            self._solr = pysolr.Solr(
                self.endpoint.core_base_uri,
                timeout=self.timeout,
                session=self.session,
            )
        return self._solr

    def ping(self) -> bool:
        """
        Test the Solr connection.

        Returns:
            True if the core answers, False otherwise.
        """
        try:
            self.solr.ping()
            return True
        except Exception as e:
            logger.warning(f"Solr ping failed: {e}")
        return False

    def search(self, query: str, **params: Any) -> pysolr.Results:
        """
        Run a query against the configured core.

        Raises:
            SOLRQueryError: If the query fails.
        """
        try:
            logger.debug(f"Executing Solr search {query!r} with params: {params}")
            return self.solr.search(query, **params)
        except pysolr.SolrError as e:
            logger.error(f"Solr query error: {e}")
            raise SOLRQueryError(f"Solr query failed: {e}") from e
        except requests.RequestException as e:
            logger.error(f"Unexpected error during search: {e}")
            raise SOLRQueryError(f"Unexpected error during search: {e}") from e

    def close(self) -> None:
        """Forget the underlying connection."""
        if self._solr is not None:
            self._solr = None
            logger.info("Solr connection closed")

    def __enter__(self) -> "SOLRClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
