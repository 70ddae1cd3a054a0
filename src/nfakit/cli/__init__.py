"""Command-line interface for nfakit."""

from .main import cli, main

__all__ = ["cli", "main"]
