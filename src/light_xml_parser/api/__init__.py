"""Public parsing API."""

from .parser import XMLParser, parse, parse_file

__all__ = ["XMLParser", "parse", "parse_file"]
