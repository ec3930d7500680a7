"""Metrics collected while parsing a document."""

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass
class ParseMetrics:
    """Counters and timing for a single parse call."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    sections_processed: int = 0
    nodes_emitted: int = 0
    # Stack entries dropped at end of input or while closing a mismatched frame
    discarded_entries: int = 0
    unmatched_end_tags: int = 0
    orphaned_content: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def is_structurally_clean(self) -> bool:
        """True when nothing was discarded or left unmatched."""
        return (
            self.discarded_entries == 0
            and self.unmatched_end_tags == 0
            and self.orphaned_content == 0
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary representation."""
        result = asdict(self)
        result["characters_per_second"] = self.characters_per_second
        return result
