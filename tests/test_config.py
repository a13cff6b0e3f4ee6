"""Tests for sync directory configuration."""

import pytest

from bwss.config import (
    DEFAULT_FOLDER_NAME,
    SyncConfig,
    read_folder_name,
    write_folder_name,
)
from bwss.exceptions import BwssConfigError


class TestReadFolderName:
    def test_default_without_config(self, temp_dir):
        assert read_folder_name(temp_dir) == DEFAULT_FOLDER_NAME == "bwss"

    def test_reads_and_strips(self, temp_dir):
        (temp_dir / ".bwss").write_text("  ssh keys \n")
        assert read_folder_name(temp_dir) == "ssh keys"

    def test_empty_config_is_an_error(self, temp_dir):
        (temp_dir / ".bwss").write_text("\n")
        with pytest.raises(BwssConfigError, match=".bwss file is empty"):
            read_folder_name(temp_dir)


class TestWriteFolderName:
    def test_writes_name(self, temp_dir):
        path = write_folder_name(temp_dir, "work")

        assert path == temp_dir / ".bwss"
        assert path.read_text() == "work\n"
        assert read_folder_name(temp_dir) == "work"

    def test_rejects_blank_name(self, temp_dir):
        with pytest.raises(BwssConfigError, match="cannot be empty"):
            write_folder_name(temp_dir, "   ")
        assert not (temp_dir / ".bwss").exists()


class TestSyncConfig:
    """Tests for SyncConfig.load."""

    def test_defaults(self, temp_dir):
        config = SyncConfig.load(temp_dir)

        assert config.root == temp_dir
        assert config.folder_name == "bwss"
        assert config.ignore_patterns == []

    def test_loads_folder_and_patterns(self, temp_dir):
        (temp_dir / ".bwss").write_text("vault\n")
        (temp_dir / ".bwssignore").write_text("# comment\n*.log\n")

        config = SyncConfig.load(temp_dir)

        assert config.folder_name == "vault"
        assert config.ignore_patterns == ["*.log"]

    def test_missing_directory(self, temp_dir):
        with pytest.raises(BwssConfigError, match="does not exist"):
            SyncConfig.load(temp_dir / "missing")

    def test_not_a_directory(self, temp_dir):
        path = temp_dir / "file"
        path.write_text("x")
        with pytest.raises(BwssConfigError, match="not a directory"):
            SyncConfig.load(path)
