"""
ssync CLI Module.

Provides the command-line interface for ssync.
"""

from ssync.cli.main import main, cli

__all__ = ["main", "cli"]
