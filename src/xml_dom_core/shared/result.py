"""Run metrics collected by the document builder and the serializer."""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class BuildMetrics:
    """Counters for one document build."""

    processing_time_ms: float = 0.0
    bytes_consumed: int = 0
    events_processed: int = 0
    elements_created: int = 0
    attributes_created: int = 0
    text_nodes_created: int = 0
    comments_created: int = 0
    processing_instructions_created: int = 0
    whitespace_discarded: int = 0
    comments_discarded: int = 0
    max_depth: int = 0

    def __post_init__(self) -> None:
        """Validate metrics."""
        if self.processing_time_ms < 0:
            raise ValueError("processing_time_ms must be >= 0")
        if self.bytes_consumed < 0:
            raise ValueError("bytes_consumed must be >= 0")

    @property
    def nodes_created(self) -> int:
        """Total number of tree nodes (attributes excluded)."""
        return (
            self.elements_created
            + self.text_nodes_created
            + self.comments_created
            + self.processing_instructions_created
        )

    @property
    def events_per_second(self) -> float:
        """Tokenizer events handled per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.events_processed * 1000.0) / self.processing_time_ms

    @property
    def bytes_per_second(self) -> float:
        """Input bytes consumed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.bytes_consumed * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        """Flatten metrics, including derived values, for structured logging."""
        return {
            "processing_time_ms": self.processing_time_ms,
            "bytes_consumed": self.bytes_consumed,
            "events_processed": self.events_processed,
            "elements_created": self.elements_created,
            "attributes_created": self.attributes_created,
            "nodes_created": self.nodes_created,
            "whitespace_discarded": self.whitespace_discarded,
            "comments_discarded": self.comments_discarded,
            "max_depth": self.max_depth,
        }


@dataclass
class SerializationMetrics:
    """Counters for one serializer run."""

    processing_time_ms: float = 0.0
    bytes_written: int = 0
    elements_written: int = 0
    declarations_written: int = 0
    declarations_suppressed: int = 0
    synthetic_prefixes: int = 0
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def bytes_per_second(self) -> float:
        """Output bytes written per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.bytes_written * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        """Flatten metrics for structured logging."""
        data = {
            "processing_time_ms": self.processing_time_ms,
            "bytes_written": self.bytes_written,
            "elements_written": self.elements_written,
            "declarations_written": self.declarations_written,
            "declarations_suppressed": self.declarations_suppressed,
            "synthetic_prefixes": self.synthetic_prefixes,
        }
        data.update(self.extra)
        return data
