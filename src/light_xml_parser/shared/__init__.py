"""Shared utilities for the light XML parser.

This module provides configuration objects, error types, metrics and the
logging helpers used across the tokenization and tree layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)
from .errors import (
    START_POSITION,
    SourcePosition,
    XMLParseError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import ParseMetrics

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "CorrelationLogger",
    "ParseMetrics",
    "ParserConfig",
    "START_POSITION",
    "SourcePosition",
    "XMLParseError",
    "get_logger",
]
