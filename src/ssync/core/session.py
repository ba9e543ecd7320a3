"""
ssync session control.

A session resolves its endpoints once, loads the ignore file once, runs
an initial sync and then, optionally, hands control to the change
watcher for the rest of the process lifetime.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

import humanize
from rich.console import Console
from rich.markup import escape

from ssync.core.config import SsyncConfig
from ssync.core.errors import ConfigurationError
from ssync.core.logging import get_logger
from ssync.core.models import (
    ChangeEvent,
    ChangeKind,
    Direction,
    Endpoint,
    SyncInvocation,
    SyncOptions,
    SyncResult,
)
from ssync.sync.endpoints import SessionEndpoints, resolve_session
from ssync.sync.exclusions import ExclusionMatcher, load_ignore_file
from ssync.sync.executor import SyncExecutor
from ssync.sync.watcher import DEBOUNCE_SECONDS, ChangeWatcher

logger = get_logger(__name__)


def current_directories() -> tuple[Path, Path]:
    """Return (cwd, home) or raise ConfigurationError."""
    try:
        cwd = Path.cwd()
    except OSError as exc:
        raise ConfigurationError(f"Unable to get current working directory: {exc}") from exc
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as exc:
        raise ConfigurationError(f"Unable to get user's home directory: {exc}") from exc
    return cwd, home


class SyncSession:
    """
    One source/destination pair plus the options every transfer uses.

    Endpoints, exclusions and options are fixed for the lifetime of the
    session.
    """

    def __init__(
        self,
        endpoints: SessionEndpoints,
        config: SsyncConfig | None = None,
        executor: SyncExecutor | None = None,
        console: Console | None = None,
    ) -> None:
        self.id = str(uuid.uuid4())
        self.config = config or SsyncConfig()
        self.endpoints = endpoints
        self.console = console or Console()
        self.started_at = datetime.now()

        transfer = self.config.transfer
        self.options = SyncOptions(
            compress=transfer.compress,
            verbose=transfer.verbose,
            progress=transfer.progress,
            delete=transfer.delete,
        )
        self.executor = executor or SyncExecutor(transfer.rsync_path, transfer.extra_args)

        self.exclusions = tuple(load_ignore_file(self.root, self.config.ignore_file_name))
        self.matcher = ExclusionMatcher(self.root, self.exclusions)
        self.last_result: SyncResult | None = None

        logger.info(
            "Session started",
            session_id=self.id,
            source=self.source.transfer_address,
            destination=self.destination.transfer_address,
            exclusions=len(self.exclusions),
        )

    @classmethod
    def from_arguments(
        cls,
        arguments: Sequence[str],
        config: SsyncConfig | None = None,
        cwd: Path | None = None,
        home: Path | None = None,
        **kwargs: Any,
    ) -> SyncSession:
        """Resolve command-line endpoints relative to cwd and home."""
        if cwd is None or home is None:
            default_cwd, default_home = current_directories()
            cwd = cwd or default_cwd
            home = home or default_home
        return cls(resolve_session(arguments, cwd, home), config=config, **kwargs)

    @property
    def source(self) -> Endpoint:
        return self.endpoints.source

    @property
    def destination(self) -> Endpoint:
        return self.endpoints.destination

    @property
    def root(self) -> Path:
        return self.endpoints.root

    @property
    def can_watch(self) -> bool:
        """Only a local source tree can be watched."""
        return self.endpoints.direction is Direction.PUSH

    def invocation(self) -> SyncInvocation:
        return SyncInvocation(
            source=self.source.transfer_address,
            destination=self.destination.transfer_address,
            exclusions=self.exclusions,
            options=self.options,
        )

    def sync(self) -> SyncResult:
        """Run one transfer and report it; never raises on transfer failure."""
        result = self.executor.run(self.invocation())
        self.last_result = result

        if result.success:
            duration = humanize.precisedelta(result.duration_seconds or 0, minimum_unit="milliseconds")
            self.console.print(f"[green]Sync completed successfully[/green] [dim]({duration})[/dim]")
        else:
            self.console.print(f"[red]Error: sync failed: {escape(result.error or 'unknown error')}[/red]")
            logger.error(
                "Sync failed",
                returncode=result.returncode,
                error=result.error,
                command=result.command,
            )
        return result

    def print_banner(self) -> None:
        self.console.print(
            f"[bold]ssync[/bold]\n\n{escape(self.source.transfer_address)}\n=>\n"
            f"{escape(self.destination.transfer_address)}\n"
        )
        if self.exclusions:
            self.console.print(f"[dim]Excluding: {escape(', '.join(self.exclusions))}[/dim]\n")

    def echo_change(self, event: ChangeEvent, name: str) -> None:
        self.console.print(f"[cyan]\\[{event.kind.value}][/cyan] {escape(name)}")

    def create_watcher(self, delay: float = DEBOUNCE_SECONDS) -> ChangeWatcher:
        watch = self.config.watch
        return ChangeWatcher(
            self.root,
            self.matcher,
            self.sync,
            watch.changes,
            delay=delay,
            recursive=watch.recursive,
            on_change=self.echo_change,
        )

    def run(self, watch: bool = True) -> SyncResult:
        """Initial sync, then watch until the process is terminated.

        Returns the initial sync result when watching is disabled or not
        possible. WatcherError propagates if the watcher cannot start.
        """
        self.print_banner()
        result = self.sync()

        if watch and not self.can_watch:
            self.console.print(
                "[yellow]Watch mode is only available when the source is local; "
                "exiting after the initial sync.[/yellow]"
            )
            logger.warning("Watch skipped for remote source", source=self.source.transfer_address)
            return result

        if not watch:
            self.console.print("Sync completed. Watch mode disabled.")
            return result

        if ChangeKind.CHMOD.value in self.config.watch.changes:
            # watchdog reports permission changes as plain modifications.
            self.console.print(
                "[yellow]Warning: permission changes cannot be told apart from writes; "
                "'chmod' only takes effect together with 'write'.[/yellow]"
            )
            logger.warning("chmod events are reported as write", changes=self.config.watch.changes)

        watcher = self.create_watcher()
        watcher.start()
        self.console.print(f"\nWatching {escape(str(self.root))} for changes...")
        watcher.run()
        return result
