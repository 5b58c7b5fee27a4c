"""CLI package for rimraf.

This package contains the Typer application.
"""

from rimraf.cli.main import app

__all__ = ["app"]
