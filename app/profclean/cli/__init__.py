"""CLI package for profclean.

This package contains the Typer application and all subcommands.
"""

from profclean.cli.main import app

__all__ = ["app"]
