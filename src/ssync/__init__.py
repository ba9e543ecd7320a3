"""
ssync - Keep a local directory mirrored to a remote host.

Delegates transfers to rsync and re-synchronizes whenever the
watched tree changes.
"""

__version__ = "1.0.0"
__author__ = "ssync Team"

from ssync.core.config import SsyncConfig
from ssync.core.session import SyncSession

__all__ = ["SsyncConfig", "SyncSession", "__version__"]
