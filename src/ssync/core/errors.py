"""
ssync exceptions.

Configuration and watcher errors are fatal and end the process;
pattern errors are contained by the exclusion matcher.
"""

from __future__ import annotations


class SsyncError(Exception):
    """Base class for ssync errors."""


class ConfigurationError(SsyncError):
    """Invalid endpoints, unreadable cwd/home or a malformed config file."""


class WatcherError(SsyncError):
    """The filesystem notifier could not be created or could not watch the root."""


class InvalidPatternError(SsyncError):
    """An exclusion pattern is not a valid glob."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason
