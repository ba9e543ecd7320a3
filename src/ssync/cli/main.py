"""
ssync CLI Main Entry Point.

Parses the command line, applies overrides on top of the configuration
file and hands over to a SyncSession.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from ssync import __version__
from ssync.core.config import SsyncConfig, load_config, parse_change_list
from ssync.core.errors import ConfigurationError, SsyncError
from ssync.core.logging import setup_logging
from ssync.core.session import SyncSession

console = Console()

USAGE = """ssync - keep a directory in sync with a remote host

Usage: ssync [OPTIONS] <remote-host>
       ssync [OPTIONS] <source> <destination>

One endpoint must be local ('.', './path', '../path' or an absolute path)
and the other a remote host ('host' or 'user@host'). The remote side uses
the same path relative to your home directory.

To ignore large files i.e. binaries, create a {ignore_file} file

Run 'ssync --help' for the list of options.
"""


def apply_overrides(
    config: SsyncConfig,
    *,
    watch: bool | None = None,
    changes: str | None = None,
    compress: bool | None = None,
    verbose: bool | None = None,
    progress: bool | None = None,
    delete: bool | None = None,
    debug: bool = False,
) -> SsyncConfig:
    """Return a copy of ``config`` with command-line values applied."""
    transfer_updates = {
        key: value
        for key, value in {
            "compress": compress,
            "verbose": verbose,
            "progress": progress,
            "delete": delete,
        }.items()
        if value is not None
    }

    watch_updates: dict[str, object] = {}
    if watch is not None:
        watch_updates["enabled"] = watch
    if changes is not None:
        try:
            watch_updates["changes"] = parse_change_list(changes)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

    updates: dict[str, object] = {
        "transfer": config.transfer.model_copy(update=transfer_updates),
        "watch": config.watch.model_copy(update=watch_updates),
    }
    if debug:
        updates["logging"] = config.logging.model_copy(update={"level": "DEBUG"})
    return config.model_copy(update=updates)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="ssync")
@click.argument("endpoints", nargs=-1)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.option("--watch/--no-watch", default=None, help="Keep syncing on change (default: on)")
@click.option(
    "--changes",
    default=None,
    metavar="KINDS",
    help="Comma-separated change kinds that trigger a sync "
    "(write, remove, chmod, create, rename; default: write,remove,chmod,rename)",
)
@click.option("--compress/--no-compress", default=None, help="Compress during transfer (default: on)")
@click.option("--verbose/--no-verbose", default=None, help="Verbose rsync output (default: on)")
@click.option("--progress/--no-progress", default=None, help="Show transfer progress (default: on)")
@click.option(
    "--delete/--no-delete",
    "--mirror/--no-mirror",
    default=None,
    help="Delete destination files missing from the source (default: off)",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    endpoints: tuple[str, ...],
    config_path: Path | None,
    watch: bool | None,
    changes: str | None,
    compress: bool | None,
    verbose: bool | None,
    progress: bool | None,
    delete: bool | None,
    debug: bool,
) -> None:
    """
    Sync the current directory (or SOURCE) to DESTINATION with rsync,
    then watch for changes and re-sync.
    """
    try:
        config = SsyncConfig.load(config_path) if config_path else load_config()
    except SsyncError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        ctx.exit(1)

    if len(endpoints) not in (1, 2):
        click.echo(USAGE.format(ignore_file=config.ignore_file_name))
        ctx.exit(1)

    try:
        config = apply_overrides(
            config,
            watch=watch,
            changes=changes,
            compress=compress,
            verbose=verbose,
            progress=progress,
            delete=delete,
            debug=debug,
        )
        setup_logging(config.logging)

        session = SyncSession.from_arguments(endpoints, config=config, console=console)
        session.run(watch=config.watch.enabled)
    except SsyncError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        ctx.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped[/yellow]")
        ctx.exit(130)


def main() -> None:
    """Main entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
