"""
ssync change watcher.

A watchdog observer feeds change events into a queue. A single intake
loop filters them by kind and exclusion patterns and re-arms a debounce
timer; the timer thread runs the actual sync once the tree has been
quiet for the debounce window.
"""

from __future__ import annotations

import os
import queue
import threading
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from ssync.core.config import DEFAULT_CHANGES, parse_change_list
from ssync.core.errors import WatcherError
from ssync.core.logging import get_logger
from ssync.core.models import ChangeEvent, ChangeKind
from ssync.sync.exclusions import ExclusionMatcher

logger = get_logger(__name__)

DEBOUNCE_SECONDS = 2.0
OBSERVER_CHECK_SECONDS = 1.0

WATCHDOG_KINDS = {
    EVENT_TYPE_CREATED: ChangeKind.CREATE,
    EVENT_TYPE_MODIFIED: ChangeKind.WRITE,
    EVENT_TYPE_DELETED: ChangeKind.REMOVE,
    EVENT_TYPE_MOVED: ChangeKind.RENAME,
}


class Debouncer:
    """Single-slot restartable timer.

    Every ``trigger()`` cancels the pending call (if any) and arms a new
    one, so a burst of triggers results in one call ``delay`` seconds
    after the last of them.
    """

    def __init__(self, callback: Callable[[], Any], delay: float = DEBOUNCE_SECONDS) -> None:
        self.callback = callback
        self.delay = delay
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()
        self._run_lock = threading.Lock()
        self._running = threading.Event()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    @property
    def running(self) -> bool:
        return self._running.is_set()

    def trigger(self) -> None:
        """Cancel any pending call and schedule a new one."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self.delay, self._fire)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        """Drop the pending call without running it."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _fire(self) -> None:
        with self._lock:
            # A timer replaced between expiry and this point is stale.
            if self._timer is not threading.current_thread():
                return
            self._timer = None

        with self._run_lock:
            self._running.set()
            try:
                self.callback()
            except Exception:
                logger.exception("Scheduled sync raised an exception")
            finally:
                self._running.clear()


def to_change_events(event: FileSystemEvent) -> list[ChangeEvent]:
    """Translate a watchdog event; kinds ssync ignores give an empty list.

    A move yields a rename for the old path and a create for the new one,
    so renaming an excluded temporary file onto a tracked name still
    counts as a change.
    """
    kind = WATCHDOG_KINDS.get(event.event_type)
    if kind is None:
        return []
    # Directory mtime updates duplicate the event of the child that changed.
    if event.is_directory and kind is ChangeKind.WRITE:
        return []

    changes = [ChangeEvent(path=os.fsdecode(event.src_path), kind=kind, is_directory=event.is_directory)]
    dest_path = getattr(event, "dest_path", "")
    if kind is ChangeKind.RENAME and dest_path:
        changes.append(
            ChangeEvent(path=os.fsdecode(dest_path), kind=ChangeKind.CREATE, is_directory=event.is_directory)
        )
    return changes


class QueueEventHandler(FileSystemEventHandler):
    """Pushes translated watchdog events onto a queue."""

    def __init__(self, events: queue.Queue[ChangeEvent | None]) -> None:
        super().__init__()
        self.events = events

    def on_any_event(self, event: FileSystemEvent) -> None:
        for change in to_change_events(event):
            self.events.put(change)


class ChangeWatcher:
    """Watches a local tree and calls ``on_sync`` after changes settle."""

    def __init__(
        self,
        root: Path,
        matcher: ExclusionMatcher,
        on_sync: Callable[[], Any],
        changes: Iterable[str] | str = DEFAULT_CHANGES,
        *,
        delay: float = DEBOUNCE_SECONDS,
        recursive: bool = True,
        on_change: Callable[[ChangeEvent, str], None] | None = None,
    ) -> None:
        self.root = root
        self.matcher = matcher
        self.changes = frozenset(ChangeKind.from_string(kind) for kind in parse_change_list(changes))
        self.recursive = recursive
        self.on_change = on_change
        self.debouncer = Debouncer(on_sync, delay)
        self.events: queue.Queue[ChangeEvent | None] = queue.Queue()
        self._observer: Any | None = None

    def is_watched_kind(self, event: ChangeEvent) -> bool:
        return event.kind in self.changes

    def relative_name(self, path: str) -> str | None:
        """Root-relative name of ``path``, or None if it lies outside the root."""
        try:
            name = self.matcher.relative_path(path)
        except ValueError:
            return None
        if name == ".." or name.startswith("../"):
            return None
        return name

    def handle_event(self, event: ChangeEvent) -> bool:
        """Filter one event; re-arm the debouncer if it qualifies."""
        if not self.is_watched_kind(event):
            return False
        name = self.relative_name(event.path)
        if name is None:
            return False
        if self.matcher.is_excluded(event.path) or self.matcher.is_under_excluded_dir(event.path):
            return False

        logger.debug("Change detected", kind=event.kind.value, path=name)
        if self.on_change is not None:
            self.on_change(event, name)

        self.debouncer.trigger()
        return True

    def start(self) -> None:
        """Create the observer and begin watching the root."""
        if self._observer is not None:
            return
        try:
            observer = Observer()
            observer.schedule(QueueEventHandler(self.events), str(self.root), recursive=self.recursive)
            observer.start()
        except (OSError, RuntimeError) as exc:
            raise WatcherError(f"Unable to watch {self.root}: {exc}") from exc
        self._observer = observer
        logger.debug("Watching directory", root=str(self.root), recursive=self.recursive)

    def run(self) -> None:
        """Process events until ``stop()`` is called; blocks the caller."""
        self.start()
        try:
            while True:
                try:
                    event = self.events.get(timeout=OBSERVER_CHECK_SECONDS)
                except queue.Empty:
                    self._check_observer()
                    continue
                if event is None:
                    break
                self.handle_event(event)
        finally:
            self._shutdown()

    def stop(self) -> None:
        """Ask ``run()`` to return."""
        self.events.put(None)

    def _check_observer(self) -> None:
        if self._observer is not None and not self._observer.is_alive():
            raise WatcherError(f"Filesystem observer for {self.root} stopped unexpectedly")

    def _shutdown(self) -> None:
        self.debouncer.cancel()
        observer, self._observer = self._observer, None
        if observer is None:
            return
        try:
            observer.stop()
            observer.join(timeout=5)
        except RuntimeError as exc:
            logger.warning("Failed to stop observer cleanly", error=str(exc))
