"""
Unit tests for configset archive packaging.
"""

import zipfile
from unittest.mock import patch

import pytest

from solr_schema_deployer.archive import ArchiveBuilder, temporary_archive
from solr_schema_deployer.exceptions import ArchiveError


class TestArchiveBuilder:
    """Test cases for building zip archives."""

    def test_build_zip_contents(self, tmp_path, configset_files):
        """Test that members match the input byte for byte."""
        path = ArchiveBuilder(temp_dir=tmp_path).build_zip(configset_files)

        with zipfile.ZipFile(path) as archive:
            assert sorted(archive.namelist()) == sorted(configset_files)
            for filename, contents in configset_files.items():
                assert archive.read(filename) == contents

    def test_build_zip_binary_and_nested(self, tmp_path):
        """Test that binary content and nested names are not transcoded."""
        files = {"lang/stopwords_fr.txt": "à\n".encode("latin-1"), "blob.bin": bytes(range(256))}

        path = ArchiveBuilder(temp_dir=tmp_path).build_zip(files)

        with zipfile.ZipFile(path) as archive:
            assert archive.read("lang/stopwords_fr.txt") == files["lang/stopwords_fr.txt"]
            assert archive.read("blob.bin") == files["blob.bin"]

    def test_build_zip_unique_names(self, tmp_path, configset_files):
        """Test that each call creates a new archive."""
        builder = ArchiveBuilder(temp_dir=tmp_path)

        first = builder.build_zip(configset_files)
        second = builder.build_zip(configset_files)

        assert first != second
        assert first.name.startswith("search_api_solr-")
        assert first.suffix == ".zip"
        assert first.parent == tmp_path

    def test_build_zip_empty(self, tmp_path):
        """Test that an empty mapping produces an empty archive."""
        path = ArchiveBuilder(temp_dir=tmp_path).build_zip({})

        with zipfile.ZipFile(path) as archive:
            assert archive.namelist() == []

    def test_build_zip_missing_dir(self, tmp_path):
        """Test that an unusable temp dir raises ArchiveError."""
        builder = ArchiveBuilder(temp_dir=tmp_path / "missing")

        with pytest.raises(ArchiveError, match="Cannot create"):
            builder.build_zip({"schema.xml": b"<schema/>"})

    def test_build_zip_write_failure_cleans_up(self, tmp_path):
        """Test that a failed member write removes the partial archive."""
        builder = ArchiveBuilder(temp_dir=tmp_path)

        with patch(
            "solr_schema_deployer.archive.zipfile.ZipFile.writestr",
            side_effect=OSError("disk full"),
        ):
            with pytest.raises(ArchiveError, match="disk full"):
                builder.build_zip({"schema.xml": b"<schema/>"})

        assert list(tmp_path.iterdir()) == []


class TestTemporaryArchive:
    """Test cases for the scoped archive."""

    def test_deleted_after_use(self, tmp_path, configset_files):
        """Test that the archive is removed when the block exits."""
        with temporary_archive(configset_files, ArchiveBuilder(temp_dir=tmp_path)) as path:
            assert path.exists()

        assert not path.exists()

    def test_deleted_on_error(self, tmp_path, configset_files):
        """Test that the archive is removed when the block raises."""
        with pytest.raises(RuntimeError):
            with temporary_archive(configset_files, ArchiveBuilder(temp_dir=tmp_path)) as path:
                raise RuntimeError("boom")

        assert not path.exists()
