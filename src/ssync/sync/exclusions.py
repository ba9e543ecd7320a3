"""
ssync exclusion matching.

Patterns come from the ignore file at the synchronization root and are
passed verbatim to rsync. The same patterns decide which filesystem
events may trigger a re-sync:

* a pattern containing ``*``, ``?`` or ``[`` is a glob matched against
  the final path segment,
* a pattern starting with ``/`` matches the path relative to the root
  exactly,
* anything else must equal the final path segment (a trailing ``/``
  marks a directory name and is ignored).

The watcher additionally ignores changes below an excluded directory,
since rsync never descends into one.
"""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Iterable

from ssync.core.errors import InvalidPatternError
from ssync.core.logging import get_logger

logger = get_logger(__name__)

IGNORE_FILE_NAME = ".ssyncignore"
WILDCARD_CHARS = "*?["


def is_glob(pattern: str) -> bool:
    return any(char in pattern for char in WILDCARD_CHARS)


def validate_glob(pattern: str) -> None:
    """Raise InvalidPatternError for unterminated classes or a dangling escape."""
    i = 0
    n = len(pattern)
    while i < n:
        char = pattern[i]
        if char == "\\":
            if i + 1 >= n:
                raise InvalidPatternError(pattern, "trailing escape character")
            i += 2
            continue
        if char == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                raise InvalidPatternError(pattern, "unterminated character class")
            i = j + 1
            continue
        i += 1


def match_pattern(pattern: str, relative_path: str) -> bool:
    """Match one pattern against a root-relative POSIX path."""
    basename = relative_path.rsplit("/", 1)[-1]

    if is_glob(pattern):
        validate_glob(pattern)
        return fnmatch.fnmatchcase(basename, pattern)

    if pattern.startswith("/"):
        return relative_path == pattern.strip("/")

    return basename == pattern.rstrip("/")


class ExclusionMatcher:
    """Evaluates paths under a watch root against ignore patterns."""

    def __init__(self, root: Path | str, patterns: Iterable[str] = ()) -> None:
        self.root = Path(root)
        self.patterns = tuple(patterns)

    def relative_path(self, path: str | Path) -> str:
        """Return ``path`` relative to the root in POSIX form."""
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.root / candidate
        return Path(os.path.relpath(candidate, self.root)).as_posix()

    def is_excluded(self, path: str | Path) -> bool:
        """True if any pattern matches ``path`` under its own rule."""
        relative_path = self._relative_or_none(path)
        if relative_path is None:
            return False
        return self._matches(relative_path, relative_path)

    def is_under_excluded_dir(self, path: str | Path) -> bool:
        """True if a parent directory of ``path`` inside the root is excluded.

        rsync skips the contents of an excluded directory, so changes below
        one cannot affect the transfer.
        """
        relative_path = self._relative_or_none(path)
        if relative_path is None:
            return False
        return any(self._matches(parent, relative_path) for parent in self._parents(relative_path))

    def _relative_or_none(self, path: str | Path) -> str | None:
        if not self.patterns:
            return None
        try:
            return self.relative_path(path)
        except ValueError as exc:
            logger.error("Unable to make path relative", path=str(path), root=str(self.root), error=str(exc))
            return None

    def _matches(self, candidate: str, relative_path: str) -> bool:
        for pattern in self.patterns:
            try:
                if match_pattern(pattern, candidate):
                    logger.debug("Path excluded", path=relative_path, pattern=pattern)
                    return True
            except InvalidPatternError as exc:
                logger.warning("Skipping invalid pattern", pattern=pattern, reason=exc.reason)
        return False

    @staticmethod
    def _parents(relative_path: str) -> list[str]:
        if relative_path == ".." or relative_path.startswith("../"):
            return []
        parts = [part for part in relative_path.split("/") if part not in ("", ".")]
        return ["/".join(parts[:end]) for end in range(len(parts) - 1, 0, -1)]


def is_excluded(path: str | Path, exclusions: Iterable[str], root: Path | str | None = None) -> bool:
    """Check ``path`` against ``exclusions`` relative to ``root`` (cwd by default)."""
    if root is None:
        try:
            root = Path.cwd()
        except OSError as exc:
            logger.error("Unable to get current working directory", error=str(exc))
            return False
    return ExclusionMatcher(root, exclusions).is_excluded(path)


def parse_ignore_lines(lines: Iterable[str]) -> list[str]:
    """Drop blank lines and ``#`` comments; keep everything else verbatim."""
    exclusions: list[str] = []
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        exclusions.append(line)
    return exclusions


def load_ignore_file(directory: Path, file_name: str = IGNORE_FILE_NAME) -> list[str]:
    """Load exclusion patterns from the ignore file in ``directory``.

    A missing file means no exclusions. Any other read error is logged
    and also treated as no exclusions.
    """
    ignore_path = directory / file_name
    try:
        with open(ignore_path, encoding="utf-8") as handle:
            exclusions = parse_ignore_lines(handle)
    except FileNotFoundError:
        return []
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Unable to read ignore file", path=str(ignore_path), error=str(exc))
        return []

    logger.debug("Loaded ignore file", path=str(ignore_path), patterns=len(exclusions))
    return exclusions
