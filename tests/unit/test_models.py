"""
Tests for ssync.core.models module.
"""

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from ssync.core.models import ChangeKind, Endpoint, SyncInvocation, SyncOptions, SyncResult


class TestChangeKind:
    """Tests for ChangeKind enum."""

    def test_from_string_exact(self) -> None:
        assert ChangeKind.from_string("write") == ChangeKind.WRITE
        assert ChangeKind.from_string("rename") == ChangeKind.RENAME

    def test_from_string_case_insensitive(self) -> None:
        assert ChangeKind.from_string("CHMOD") == ChangeKind.CHMOD
        assert ChangeKind.from_string(" Remove ") == ChangeKind.REMOVE

    def test_from_string_unknown(self) -> None:
        with pytest.raises(ValueError):
            ChangeKind.from_string("truncate")


class TestEndpoint:
    """Tests for Endpoint."""

    def test_str_is_transfer_address(self) -> None:
        endpoint = Endpoint(display_name="host", transfer_address="host:~/app", is_local=False)
        assert str(endpoint) == "host:~/app"

    def test_immutable(self) -> None:
        endpoint = Endpoint(".", "/home/u/app", True, Path("/home/u/app"))
        with pytest.raises(AttributeError):
            endpoint.is_local = False  # type: ignore[misc]


class TestSyncInvocation:
    """Tests for SyncInvocation defaults."""

    def test_defaults(self) -> None:
        invocation = SyncInvocation(source="/a", destination="h:~/a")
        assert invocation.exclusions == ()
        assert invocation.options == SyncOptions()
        assert invocation.options.delete is False


class TestSyncResult:
    """Tests for SyncResult."""

    def test_duration(self) -> None:
        start = datetime(2024, 1, 1, 12, 0, 0)
        result = SyncResult(
            success=True,
            command=["rsync"],
            returncode=0,
            start_time=start,
            end_time=start + timedelta(seconds=3),
        )
        assert result.duration_seconds == 3.0

    def test_duration_unknown(self) -> None:
        assert SyncResult(success=False, command=["rsync"]).duration_seconds is None

    def test_repr(self) -> None:
        result = SyncResult(success=False, command=["rsync", "-avz"], returncode=23)
        assert "rc=23" in repr(result)
