"""Zip packaging of configset files."""

import logging
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

from .exceptions import ArchiveError

logger = logging.getLogger(__name__)


class ArchiveBuilder:
    """Packages a configset file mapping into a zip archive on local disk."""

    def __init__(
        self,
        temp_dir: Optional[Union[str, Path]] = None,
        prefix: str = "search_api_solr-",
    ):
        self.temp_dir = Path(temp_dir) if temp_dir else None
        self.prefix = prefix

    def build_zip(self, files: Dict[str, bytes]) -> Path:
        """
        Write every file into a new, uniquely named zip archive.

        Args:
            files: Mapping of member name to contents.

        Returns:
            Path to the closed archive. The caller owns the file.

        Raises:
            ArchiveError: If the archive or one of its members cannot be written.
        """
        try:
            fd, name = tempfile.mkstemp(
                prefix=self.prefix,
                suffix=".zip",
                dir=str(self.temp_dir) if self.temp_dir else None,
            )
        except OSError as e:
            raise ArchiveError(f"Cannot create configset archive: {e}") from e

        path = Path(name)
        try:
            with open(fd, "wb") as handle:
                with zipfile.ZipFile(handle, "w", zipfile.ZIP_DEFLATED) as archive:
                    for filename, contents in files.items():
                        archive.writestr(filename, contents)
        except (OSError, zipfile.BadZipFile, ValueError) as e:
            path.unlink(missing_ok=True)
            raise ArchiveError(f"Cannot write configset archive {path}: {e}") from e

        logger.debug(f"Built configset archive {path} with {len(files)} files")
        return path


@contextmanager
def temporary_archive(
    files: Dict[str, bytes], builder: Optional[ArchiveBuilder] = None
) -> Iterator[Path]:
    """Build an archive for the duration of the block and delete it afterwards."""
    path = (builder or ArchiveBuilder()).build_zip(files)
    try:
        yield path
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove configset archive {path}: {e}")
