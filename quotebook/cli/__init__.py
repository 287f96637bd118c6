"""Command-line interface for quotebook."""

from .main import cli, main

__all__ = ["cli", "main"]
