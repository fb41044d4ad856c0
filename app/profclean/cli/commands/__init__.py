"""CLI commands for profclean.

This package contains all subcommand implementations.
"""

from profclean.cli.commands import clean, config, profiles

__all__ = ["clean", "config", "profiles"]
