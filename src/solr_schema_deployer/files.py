"""
Configset file provider.

Configsets are stored on disk, one directory per server id::

    configsets/
        default/
            schema.xml
            solrconfig.xml
            lang/stopwords_en.txt

The provider turns such a directory into the ``{filename: contents}`` mapping the
uploaders consume.
"""

import logging
from pathlib import Path, PurePosixPath
from typing import Dict, Union

from .exceptions import ConfigRetrievalError, ServerNotFoundError

logger = logging.getLogger(__name__)


class ConfigFileProvider:
    """Loads the configset files registered for a server id."""

    def __init__(self, configsets_dir: Union[str, Path]):
        self.configsets_dir = Path(configsets_dir)

    def get_server_dir(self, server_id: str) -> Path:
        """
        Resolve the configset directory for a server id.

        Raises:
            ServerNotFoundError: If the id is invalid or has no directory.
        """
        if not server_id or PurePosixPath(server_id).is_absolute():
            raise ServerNotFoundError(f"Invalid server id: {server_id!r}")

        root = self.configsets_dir.resolve()
        server_dir = (root / server_id).resolve()
        if server_dir == root or root not in server_dir.parents:
            raise ServerNotFoundError(f"Invalid server id: {server_id!r}")

        if not server_dir.is_dir():
            raise ServerNotFoundError(
                f"Cannot retrieve the Solr server configuration for {server_id!r}"
            )
        return server_dir

    def get_files(self, server_id: str) -> Dict[str, bytes]:
        """
        Get the schema and config files for posting to the Solr server.

        Args:
            server_id: Name of the configset directory to load.

        Returns:
            Mapping of relative POSIX filename to file contents, in sorted order.

        Raises:
            ServerNotFoundError: If the server configuration is absent.
            ConfigRetrievalError: If the files cannot be read.
        """
        server_dir = self.get_server_dir(server_id)

        files: Dict[str, bytes] = {}
        try:
            for path in sorted(p for p in server_dir.rglob("*") if p.is_file()):
                filename = path.relative_to(server_dir).as_posix()
                files[filename] = path.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read configset for {server_id}: {e}")
            raise ConfigRetrievalError(
                f"Failed to read configset for {server_id!r}: {e}"
            ) from e

        if not files:
            raise ConfigRetrievalError(f"Configset for {server_id!r} is empty")

        logger.debug(f"Loaded {len(files)} configset files for {server_id}")
        return files
