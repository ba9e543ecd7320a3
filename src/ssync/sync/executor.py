"""
ssync transfer execution.

Builds the rsync command line for one synchronization and runs it with
the child's output streamed straight to the terminal.
"""

from __future__ import annotations

import subprocess
from datetime import datetime
from typing import Sequence

from ssync.core.logging import OperationLogger, get_logger
from ssync.core.models import SyncInvocation, SyncResult

logger = get_logger(__name__)


def contents_of(source: str) -> str:
    """Append a trailing slash so rsync copies the directory contents."""
    return source if source.endswith("/") else source + "/"


def build_rsync_args(invocation: SyncInvocation, extra_args: Sequence[str] = ()) -> list[str]:
    """Return rsync arguments (without the program name) for ``invocation``."""
    options = invocation.options

    flags = "-a"
    if options.verbose:
        flags += "v"
    if options.compress:
        flags += "z"

    args = [flags]
    if options.progress:
        args.append("--progress")
    if options.delete:
        args.append("--delete")
    args.extend(extra_args)

    for pattern in invocation.exclusions:
        args.extend(["--exclude", pattern])

    args.extend([contents_of(invocation.source), invocation.destination])
    return args


class SyncExecutor:
    """Runs rsync synchronously and reports the outcome without raising."""

    def __init__(self, rsync_path: str = "rsync", extra_args: Sequence[str] = ()) -> None:
        self.rsync_path = rsync_path
        self.extra_args = list(extra_args)

    def command(self, invocation: SyncInvocation) -> list[str]:
        return [self.rsync_path, *build_rsync_args(invocation, self.extra_args)]

    def run(self, invocation: SyncInvocation) -> SyncResult:
        """Run one transfer; a failed or unstartable rsync yields success=False."""
        command = self.command(invocation)
        result = SyncResult(success=False, command=command, start_time=datetime.now())

        with OperationLogger(
            "sync",
            logger,
            source=invocation.source,
            destination=invocation.destination,
        ) as op:
            try:
                completed = subprocess.run(command, check=False)
            except OSError as exc:
                result.error = f"Unable to start {self.rsync_path}: {exc}"
            else:
                result.returncode = completed.returncode
                result.success = completed.returncode == 0
                if not result.success:
                    result.error = f"{self.rsync_path} exited with status {completed.returncode}"
            finally:
                result.end_time = datetime.now()

            op.update(success=result.success, returncode=result.returncode)
            if result.error:
                op.update(error=result.error)

        return result
