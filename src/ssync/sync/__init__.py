"""
ssync sync module.

Endpoint resolution, exclusion matching, rsync execution and the
debounced change watcher.
"""

from ssync.sync.endpoints import SessionEndpoints, resolve, resolve_session
from ssync.sync.exclusions import ExclusionMatcher, is_excluded, load_ignore_file
from ssync.sync.executor import SyncExecutor, build_rsync_args
from ssync.sync.watcher import ChangeWatcher, Debouncer

__all__ = [
    "SessionEndpoints",
    "resolve",
    "resolve_session",
    "ExclusionMatcher",
    "is_excluded",
    "load_ignore_file",
    "SyncExecutor",
    "build_rsync_args",
    "ChangeWatcher",
    "Debouncer",
]
