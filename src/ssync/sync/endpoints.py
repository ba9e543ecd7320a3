"""
ssync endpoint resolution.

Classifies command-line arguments as local paths or remote host
specifiers. A remote end always uses the same path relative to the home
directory as the local end: syncing ``~/src/app`` to ``build-box`` targets
``build-box:~/src/app``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from ssync.core.errors import ConfigurationError
from ssync.core.logging import get_logger
from ssync.core.models import Direction, Endpoint

logger = get_logger(__name__)


def is_local_argument(argument: str) -> bool:
    """True for ``""``, ``.``, ``./…``, ``../…`` and absolute paths."""
    if argument in ("", "."):
        return True
    if argument.startswith(("./", "../")):
        return True
    return os.path.isabs(argument)


def home_relative_path(path: Path, home: Path) -> str:
    """Return ``path`` relative to ``home`` in POSIX form (``.`` for home itself)."""
    try:
        relative = os.path.relpath(path, home)
    except ValueError as exc:
        raise ConfigurationError(f"Unable to compute path of {path} relative to {home}: {exc}") from exc
    return Path(relative).as_posix()


def remote_address(host: str, relative_path: str) -> str:
    """Build ``host:~/<relative_path>``; the home directory itself is ``host:~/``."""
    relative_path = relative_path.strip("/")
    if relative_path in ("", "."):
        return f"{host}:~/"
    return f"{host}:~/{relative_path}"


def resolve(argument: str, cwd: Path, home_relative: str) -> Endpoint:
    """Resolve one argument into an Endpoint."""
    if is_local_argument(argument):
        if argument in ("", "."):
            path = Path(os.path.abspath(cwd))
        else:
            path = Path(os.path.normpath(os.path.join(os.path.abspath(cwd), argument)))
        return Endpoint(
            display_name=argument or ".",
            transfer_address=str(path),
            is_local=True,
            local_path=path,
        )

    return Endpoint(
        display_name=argument,
        transfer_address=remote_address(argument, home_relative),
        is_local=False,
    )


@dataclass(frozen=True)
class SessionEndpoints:
    """Validated source/destination pair with exactly one local side."""

    source: Endpoint
    destination: Endpoint

    @property
    def direction(self) -> Direction:
        return Direction.PUSH if self.source.is_local else Direction.PULL

    @property
    def local(self) -> Endpoint:
        return self.source if self.source.is_local else self.destination

    @property
    def root(self) -> Path:
        """The local synchronization root."""
        assert self.local.local_path is not None
        return self.local.local_path


def resolve_session(arguments: Sequence[str], cwd: Path, home: Path) -> SessionEndpoints:
    """Resolve one (destination) or two (source, destination) arguments.

    Exactly one endpoint must be local; anything else is a
    ConfigurationError.
    """
    if len(arguments) == 1:
        source_arg, destination_arg = ".", arguments[0]
    elif len(arguments) == 2:
        source_arg, destination_arg = arguments
    else:
        raise ConfigurationError(f"Expected one or two endpoints, got {len(arguments)}")

    source_local = is_local_argument(source_arg)
    destination_local = is_local_argument(destination_arg)

    if source_local and destination_local:
        raise ConfigurationError(
            f"Both {source_arg or '.'!r} and {destination_arg or '.'!r} are local; "
            "one endpoint must be a remote host"
        )
    if not source_local and not destination_local:
        raise ConfigurationError(
            f"Neither {source_arg!r} nor {destination_arg!r} is local; "
            "one endpoint must be '.', './path', '../path' or an absolute path"
        )

    local_arg = source_arg if source_local else destination_arg
    local = resolve(local_arg, cwd, "")
    assert local.local_path is not None
    relative = home_relative_path(local.local_path, home)

    if source_local:
        endpoints = SessionEndpoints(source=local, destination=resolve(destination_arg, cwd, relative))
    else:
        endpoints = SessionEndpoints(source=resolve(source_arg, cwd, relative), destination=local)

    logger.debug(
        "Resolved endpoints",
        source=endpoints.source.transfer_address,
        destination=endpoints.destination.transfer_address,
        direction=endpoints.direction.value,
    )
    return endpoints
