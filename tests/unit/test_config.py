"""
Tests for ssync.core.config module.
"""

import json
import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from ssync.core.config import (
    LoggingConfig,
    SsyncConfig,
    TransferConfig,
    WatchConfig,
    load_config,
    parse_change_list,
)
from ssync.core.errors import ConfigurationError


class TestLoggingConfig:
    """Tests for LoggingConfig."""

    def test_default_values(self) -> None:
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.file_enabled is False
        assert config.console_enabled is True
        assert config.json_format is False

    def test_custom_values(self) -> None:
        config = LoggingConfig(level="DEBUG", json_format=True)
        assert config.level == "DEBUG"
        assert config.json_format is True

    def test_path_expansion(self) -> None:
        config = LoggingConfig(log_directory="~/logs")
        assert "~" not in str(config.log_directory)

    def test_invalid_level(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")


class TestTransferConfig:
    """Tests for TransferConfig."""

    def test_default_values(self) -> None:
        config = TransferConfig()
        assert config.rsync_path == "rsync"
        assert config.compress is True
        assert config.verbose is True
        assert config.progress is True
        assert config.delete is False
        assert config.extra_args == []


class TestWatchConfig:
    """Tests for WatchConfig."""

    def test_default_changes(self) -> None:
        config = WatchConfig()
        assert config.enabled is True
        assert config.changes == ["write", "remove", "chmod", "rename"]

    def test_changes_from_string(self) -> None:
        config = WatchConfig(changes="Write, CREATE")
        assert config.changes == ["write", "create"]

    def test_unknown_change_rejected(self) -> None:
        with pytest.raises(ValidationError):
            WatchConfig(changes=["write", "delete"])


class TestParseChangeList:
    """Tests for parse_change_list."""

    def test_trims_and_lowercases(self) -> None:
        assert parse_change_list(" write ,REMOVE") == ["write", "remove"]

    def test_drops_duplicates_and_blanks(self) -> None:
        assert parse_change_list("write,,write,chmod,") == ["write", "chmod"]

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError, match="Unknown change kind"):
            parse_change_list("write,truncate")


class TestSsyncConfig:
    """Tests for SsyncConfig."""

    def test_default_config(self) -> None:
        config = SsyncConfig()
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.transfer, TransferConfig)
        assert isinstance(config.watch, WatchConfig)
        assert config.ignore_file_name == ".ssyncignore"

    def test_save_and_load(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"

            original = SsyncConfig(
                transfer=TransferConfig(delete=True, rsync_path="/usr/local/bin/rsync"),
                watch=WatchConfig(changes=["write"]),
            )
            original.save(config_path)

            loaded = SsyncConfig.load(config_path)

            assert loaded.transfer.delete is True
            assert loaded.transfer.rsync_path == "/usr/local/bin/rsync"
            assert loaded.watch.changes == ["write"]

    def test_load_nonexistent(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "nonexistent.json"
            config = SsyncConfig.load(config_path)
            assert config.transfer.delete is False

    def test_load_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"
            config_path.write_text("{not json")
            with pytest.raises(ConfigurationError):
                SsyncConfig.load(config_path)

    def test_load_invalid_values(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"
            config_path.write_text(json.dumps({"watch": {"changes": ["explode"]}}))
            with pytest.raises(ConfigurationError):
                SsyncConfig.load(config_path)

    def test_ensure_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = SsyncConfig(
                logging=LoggingConfig(log_directory=Path(tmpdir) / "logs", file_enabled=True),
            )
            config.ensure_directories()
            assert config.logging.log_directory.exists()

    def test_load_config_reads_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"
            config_path.write_text(json.dumps({"transfer": {"compress": False}}))
            config = load_config(config_path)
            assert config.transfer.compress is False
