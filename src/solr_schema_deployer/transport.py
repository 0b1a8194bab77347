"""
HTTP transport for talking to Solr.

Connection pooling, TLS verification, authentication and retries all live on the
``requests.Session`` built here; the uploaders only prepare and send requests.
"""

import logging

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import SOLRConfig

logger = logging.getLogger(__name__)


def create_session(config: SOLRConfig) -> requests.Session:
    """
    Create a requests session with connection pooling and retries.

    Args:
        config: Solr configuration object.

    Returns:
        A configured session.
    """
    session = requests.Session()

    # urllib3 only retries idempotent methods by default, so uploads (POST)
    # are never replayed behind the deployer's back.
    retry_strategy = Retry(
        total=config.max_retries,
        backoff_factor=1,
        status_forcelist=[429, 500, 502, 503, 504],
        raise_on_status=False,
    )

    adapter = HTTPAdapter(
        max_retries=retry_strategy, pool_connections=10, pool_maxsize=20
    )

    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.headers.update({"Connection": "keep-alive"})
    session.verify = config.verify_ssl

    if config.username and config.password:
        session.auth = (config.username, config.password)

    logger.debug(
        f"Created Solr session (retries={config.max_retries}, "
        f"verify_ssl={config.verify_ssl})"
    )
    return session
