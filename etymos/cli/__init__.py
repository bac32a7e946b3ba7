"""Command-line interface."""

from .lookup import cli

__all__ = ["cli"]
