"""
Configset deployment to a Solr core.

This module posts the schema and config files of a configset to Solr. Two
strategies are selected automatically from the execution environment:

* on the managed platform every file is base64 encoded into a single JSON
  document and POSTed to the schema upload endpoint;
* against a local development Solr the files are zipped and PUT to the configset
  API.

A third, per-file upload is available for manual use but is never picked by
:meth:`SchemaPoster.post_schema`.

Failures loading the files or building the archive are raised. A response with
a non-success status is reported in the returned result and logged, never
raised; callers that want an exception use
:meth:`DeploymentResult.raise_for_status`.
"""

import base64
import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

import requests
from pydantic import BaseModel, ConfigDict

from .archive import ArchiveBuilder, temporary_archive
from .endpoint import CONFIGSET_NAME, Endpoint
from .exceptions import NonSuccessStatusError, TransportError
from .files import ConfigFileProvider

logger = logging.getLogger(__name__)

# Whole-call uploads accept 204; the per-file and batch checks do not.
SUCCESS_STATUSES = frozenset({200, 201, 202, 203, 204})
FILE_SUCCESS_STATUSES = frozenset({200, 201, 202, 203})


class DeploymentStrategy(str, Enum):
    """How a configset is pushed to Solr."""

    DIRECT_MULTI_FILE = "direct_multi_file"
    ZIP_ARCHIVE = "zip_archive"
    PER_FILE_SEQUENTIAL = "per_file_sequential"


class UploadOutcome(BaseModel):
    """Result of a single upload request."""

    target: str
    status_code: int = 0
    reason: str = ""
    success: bool
    message: str

    model_config = ConfigDict(frozen=True)


class DeploymentResult(BaseModel):
    """Ordered outcomes of one deployment call."""

    strategy: DeploymentStrategy
    outcomes: Tuple[UploadOutcome, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def success(self) -> bool:
        return bool(self.outcomes) and all(o.success for o in self.outcomes)

    @property
    def messages(self) -> List[str]:
        return [o.message for o in self.outcomes]

    @property
    def status_code(self) -> int:
        return self.outcomes[-1].status_code if self.outcomes else 0

    @property
    def reason(self) -> str:
        return self.outcomes[-1].reason if self.outcomes else ""

    def raise_for_status(self) -> None:
        """Raise NonSuccessStatusError unless every upload succeeded."""
        if not self.success:
            raise NonSuccessStatusError(
                "; ".join(self.messages) or "Nothing was uploaded",
                status_code=self.status_code,
                reason=self.reason,
            )


def resolve_strategy(
    managed_platform: bool, local_development: bool
) -> Optional[DeploymentStrategy]:
    """
    Pick the single upload strategy for the current environment.

    The managed platform takes precedence when both signals are present.

    Returns:
        The strategy, or None when the environment is not recognised.
    """
    if managed_platform:
        return DeploymentStrategy.DIRECT_MULTI_FILE
    if local_development:
        return DeploymentStrategy.ZIP_ARCHIVE
    return None


def infer_content_type(filename: str) -> str:
    """Content type Solr should store a configset file with."""
    if filename.lower().endswith(".xml"):
        return "application/xml"
    return "text/plain"


def _as_bytes(contents: Union[bytes, str]) -> bytes:
    if isinstance(contents, str):
        return contents.encode("utf-8")
    return contents


class SchemaPoster:
    """
    Posts configset files to the Solr core described by an endpoint.

    Collaborators are injected: the HTTP session (retries, TLS and auth are its
    concern), the endpoint addressing the core, and the provider that loads the
    configset for a server id.
    """

    def __init__(
        self,
        session: requests.Session,
        endpoint: Endpoint,
        file_provider: ConfigFileProvider,
        managed_platform: bool = False,
        local_development: bool = False,
        archive_builder: Optional[ArchiveBuilder] = None,
        timeout: int = 30,
    ):
        self.session = session
        self.endpoint = endpoint
        self.file_provider = file_provider
        self.managed_platform = managed_platform
        self.local_development = local_development
        self.archive_builder = archive_builder or ArchiveBuilder()
        self.timeout = timeout

    def post_schema(self, server_id: str) -> DeploymentResult:
        """
        Post the configset of a server to Solr.

        Args:
            server_id: Server id whose configset is deployed.

        Returns:
            A result with a single outcome and summary message.

        Raises:
            ServerNotFoundError: If the server configuration does not exist.
            ConfigRetrievalError: If the configset cannot be read.
            ArchiveError: If the zip archive cannot be built.
            TransportError: If no response was received, including when the
                environment matches no strategy.
        """
        strategy = resolve_strategy(self.managed_platform, self.local_development)
        if strategy is None:
            raise TransportError("Cannot post schema to environment url.")

        files = self.file_provider.get_files(server_id)
        logger.debug(
            f"Posting {len(files)} files for {server_id} using {strategy.value}"
        )

        if strategy is DeploymentStrategy.DIRECT_MULTI_FILE:
            response = self.upload_schema_files(files)
        else:
            response = self.upload_schema_as_zip(files)

        success = response.status_code in SUCCESS_STATUSES
        logger.log(
            logging.INFO if success else logging.ERROR,
            f"Files uploaded: {response.status_code} {response.reason}",
            extra={"status_code": response.status_code, "reason": response.reason},
        )
        message = "Result: {} Status code: {} - {}".format(
            "UPLOADED" if success else "NOT UPLOADED",
            response.status_code,
            response.reason,
        )
        outcome = UploadOutcome(
            target=server_id,
            status_code=response.status_code,
            reason=response.reason or "",
            success=success,
            message=message,
        )
        return DeploymentResult(strategy=strategy, outcomes=(outcome,))

    def upload_schema_files(self, files: Dict[str, bytes]) -> requests.Response:
        """
        Upload every file in one JSON document.

        Args:
            files: Mapping of filename to contents.

        Returns:
            The raw response for status inspection.

        Raises:
            TransportError: If the request could not be sent.
        """
        uri = self.endpoint.schema_upload_uri
        logger.debug(f"Upload url: {uri}")

        to_send: Dict[str, List[Dict[str, str]]] = {"files": []}
        for filename, contents in files.items():
            logger.info(
                f"Encoding file: {filename}", extra={"config_file": filename}
            )
            to_send["files"].append(
                {
                    "filename": filename,
                    "content": base64.b64encode(_as_bytes(contents)).decode("ascii"),
                }
            )

        response = self._send(
            "POST",
            uri,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            data=json.dumps(to_send).encode("utf-8"),
        )

        success = response.status_code in FILE_SUCCESS_STATUSES
        logger.log(
            logging.INFO if success else logging.ERROR,
            f"Files uploaded: {response.status_code} {response.reason}",
            extra={"status_code": response.status_code, "reason": response.reason},
        )
        return response

    def upload_one_at_a_time(self, files: Dict[str, bytes]) -> List[str]:
        """
        Upload the files one request at a time.

        Every file is attempted, whatever happened to the previous ones.

        Args:
            files: Mapping of filename to contents.

        Returns:
            One status message per file, in input order.
        """
        return self.upload_files_sequentially(files).messages

    def upload_files_sequentially(self, files: Dict[str, bytes]) -> DeploymentResult:
        """Upload the files one request at a time, keeping every outcome."""
        outcomes = tuple(
            self._upload_file(filename, contents)
            for filename, contents in files.items()
        )
        return DeploymentResult(
            strategy=DeploymentStrategy.PER_FILE_SEQUENTIAL, outcomes=outcomes
        )

    def upload_server_one_at_a_time(self, server_id: str) -> DeploymentResult:
        """Load the configset of a server and upload it file by file."""
        return self.upload_files_sequentially(self.file_provider.get_files(server_id))

    def upload_schema_as_zip(self, files: Dict[str, bytes]) -> requests.Response:
        """
        Upload the files as a zip archive through the configset API.

        Raises:
            ArchiveError: If the archive cannot be built.
            TransportError: If the request could not be sent.
        """
        uri = self.endpoint.configset_upload_uri
        logger.debug(f"Upload url: {uri}")

        with temporary_archive(files, self.archive_builder) as path:
            body = path.read_bytes()

        return self._send(
            "PUT",
            uri,
            params={
                "action": "UPLOAD",
                "name": CONFIGSET_NAME,
                "overwrite": "TRUE",
                "configSet": CONFIGSET_NAME,
                "create": "TRUE",
            },
            headers={"Content-Type": "application/octet-stream"},
            data=body,
        )

    def _upload_file(self, filename: str, contents: bytes) -> UploadOutcome:
        try:
            response = self._send(
                "POST",
                self.endpoint.schema_upload_uri,
                params={
                    "action": "UPLOAD",
                    "name": CONFIGSET_NAME,
                    "filePath": filename,
                    "contentType": infer_content_type(filename),
                    "overwrite": "true",
                },
                headers={"Content-Type": "application/octet-stream"},
                data=_as_bytes(contents),
            )
            status_code = response.status_code
            reason = response.reason or ""
        except TransportError as e:
            status_code, reason = 0, str(e)

        success = status_code in FILE_SUCCESS_STATUSES
        message = f"File: {filename}, Status code: {status_code} - {reason}"
        logger.log(
            logging.INFO if success else logging.ERROR,
            message,
            extra={
                "config_file": filename,
                "status_code": status_code,
                "reason": reason,
            },
        )
        return UploadOutcome(
            target=filename,
            status_code=status_code,
            reason=reason,
            success=success,
            message=message,
        )

    def _send(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[bytes] = None,
    ) -> requests.Response:
        request = requests.Request(
            method, url, params=params, headers=headers, data=data
        )
        prepared = self.session.prepare_request(request)
        try:
            return self.session.send(prepared, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise TransportError(f"{method} {url} failed: {e}") from e
