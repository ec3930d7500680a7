"""Command-line interface for the light XML parser."""

from .main import main

__all__ = ["main"]
