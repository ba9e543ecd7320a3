"""
ssync Core - configuration, logging, models and session control.
"""

from ssync.core.config import SsyncConfig
from ssync.core.errors import ConfigurationError, SsyncError, WatcherError
from ssync.core.logging import get_logger, setup_logging
from ssync.core.session import SyncSession

__all__ = [
    "SsyncConfig",
    "SsyncError",
    "ConfigurationError",
    "WatcherError",
    "SyncSession",
    "get_logger",
    "setup_logging",
]
