"""
ssync data models.

Defines endpoints, change events and the per-run transfer description.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path


class ChangeKind(Enum):
    """Kind of filesystem change reported by the notifier."""

    WRITE = "write"
    REMOVE = "remove"
    CHMOD = "chmod"
    CREATE = "create"
    RENAME = "rename"

    @classmethod
    def from_string(cls, value: str) -> ChangeKind:
        """Create ChangeKind from a case-insensitive name."""
        value_lower = value.lower().strip()
        for kind in cls:
            if kind.value == value_lower:
                return kind
        raise ValueError(f"Unknown change kind: {value}")


class Direction(Enum):
    """Which side of the session is local."""

    PUSH = "push"
    PULL = "pull"


@dataclass(frozen=True)
class Endpoint:
    """One side of a synchronization session."""

    display_name: str
    transfer_address: str
    is_local: bool
    local_path: Path | None = None

    def __str__(self) -> str:
        return self.transfer_address


@dataclass(frozen=True)
class ChangeEvent:
    """A single raw notification from the filesystem watcher."""

    path: str
    kind: ChangeKind
    is_directory: bool = False
    received_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class SyncOptions:
    """Session-wide transfer switches."""

    compress: bool = True
    verbose: bool = True
    progress: bool = True
    delete: bool = False


@dataclass(frozen=True)
class SyncInvocation:
    """Everything needed for one rsync run."""

    source: str
    destination: str
    exclusions: tuple[str, ...] = ()
    options: SyncOptions = field(default_factory=SyncOptions)


@dataclass
class SyncResult:
    """Outcome of one rsync run."""

    success: bool
    command: list[str]
    returncode: int | None = None
    error: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None

    @property
    def duration_seconds(self) -> float | None:
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def __repr__(self) -> str:
        cmd = " ".join(self.command)
        return f"SyncResult(success={self.success}, rc={self.returncode}, cmd='{cmd[:50]}...')"
