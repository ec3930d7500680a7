"""Configuration classes for the light XML parser.

Configuration objects are immutable dataclasses that validate themselves in
``__post_init__``. They only tune ambient behaviour (what counts as blank
text, depth guard, logging); the splitting rules themselves are fixed.
"""

import difflib
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, List, Optional

DEFAULT_BLANK_CHARACTERS = " \n"
VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for a parse run.

    Thread-safe due to frozen dataclass implementation.
    """

    # Characters a text run may consist of and still be dropped
    blank_characters: str = DEFAULT_BLANK_CHARACTERS
    # None means unbounded nesting
    max_depth: Optional[int] = None
    logging_level: str = "WARNING"
    collect_metrics: bool = True

    def __post_init__(self) -> None:
        """Validate parser configuration."""
        if not isinstance(self.blank_characters, str) or not self.blank_characters:
            raise ValueError("blank_characters must be a non-empty string")
        if "<" in self.blank_characters or ">" in self.blank_characters:
            raise ValueError("blank_characters must not contain markup delimiters")
        if self.max_depth is not None and self.max_depth <= 0:
            raise ValueError("max_depth must be > 0 or None")
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {VALID_LOGGING_LEVELS}")

    @classmethod
    def default(cls) -> "ParserConfig":
        """Create the default configuration (spaces and newlines are blank)."""
        return cls()

    @classmethod
    def lenient_whitespace(cls) -> "ParserConfig":
        """Create a configuration that also treats tabs and carriage returns as blank."""
        return cls(blank_characters=" \n\t\r")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from a plain dictionary.

        Raises:
            ConfigValidationError: If a key is unknown or a value is invalid
        """
        known = [f.name for f in fields(cls)]
        for key in data:
            if key not in known:
                raise ConfigValidationError(
                    f"Unknown configuration key: {key}",
                    field_name=key,
                    suggestions=difflib.get_close_matches(key, known),
                )
        try:
            return cls(**data)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a plain dictionary."""
        return asdict(self)

    def is_blank(self, text: str) -> bool:
        """Check whether ``text`` consists only of blank characters."""
        return all(char in self.blank_characters for char in text)
