"""Command-line interface for pondus."""

from .typer_app import app

__all__ = ["app"]
