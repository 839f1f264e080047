"""Command line interface for slugpush"""

from .main import cli, main

__all__ = ["cli", "main"]
