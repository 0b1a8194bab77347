"""Read back configset files deployed on a Solr core."""

import logging
from typing import Optional

import requests

from .endpoint import Endpoint

logger = logging.getLogger(__name__)


class SchemaViewer:
    """Fetches deployed configset files for inspection."""

    def __init__(self, session: requests.Session, endpoint: Endpoint, timeout: int = 30):
        self.session = session
        self.endpoint = endpoint
        self.timeout = timeout

    def view_schema(self, filename: str = "schema.xml") -> Optional[str]:
        """
        View a configset file on the Solr core.

        This is a diagnostic read: every failure is logged and swallowed.

        Args:
            filename: The file to view. Default is schema.xml.

        Returns:
            The text of the file, or None on error or if the file doesn't exist.
        """
        try:
            uri = self.endpoint.file_view_uri
            logger.debug(f"View url: {uri}")
            request = requests.Request(
                "GET", uri, params={"action": "VIEW", "file": filename}
            )
            response = self.session.send(
                self.session.prepare_request(request), timeout=self.timeout
            )
            message = (
                f"File: {filename}, Status code: {response.status_code} - "
                f"{response.reason}"
            )
            if not 200 <= response.status_code < 300:
                logger.error(
                    message,
                    extra={
                        "config_file": filename,
                        "status_code": response.status_code,
                        "reason": response.reason,
                    },
                )
                return None

            logger.debug(message)
            return response.text
        except Exception as e:
            status_code = getattr(getattr(e, "response", None), "status_code", 0) or 0
            logger.error(
                f"File: {filename}, Status code: {status_code} - {e}",
                extra={"config_file": filename, "status_code": status_code},
            )
        return None
