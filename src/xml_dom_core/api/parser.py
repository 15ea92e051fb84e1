"""Parse and serialize entry points.

Module-level functions cover the common cases; ``DOMParser`` keeps a
configuration and correlation id for repeated use and collects statistics
across runs.
"""

import io
import time
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, TextIO, Union

from ..shared.config import DOMConfiguration
from ..shared.constants import OUTPUT_ENCODING
from ..shared.logging import get_logger
from ..shared.result import BuildMetrics, SerializationMetrics
from ..tokenization import ExpatEventReader
from ..tree import Document, DocumentBuilder, DOMSerializer, Node

# Type definitions for input data
InputType = Union[str, bytes, bytearray, BinaryIO, TextIO, Path]

PREVIEW_LENGTH = 100  # Max length for content preview in logs


def parse(
    source: InputType,
    configuration: Optional[DOMConfiguration] = None,
    correlation_id: Optional[str] = None,
) -> Document:
    """Parse XML from a string, bytes, path or file-like object.

    Args:
        source: XML content, a ``Path`` or an open file (binary or text)
        configuration: Parsing options; defaults apply when omitted
        correlation_id: Optional correlation ID for request tracking

    Returns:
        The parsed Document

    Raises:
        MalformedInputError: If the input is not well-formed XML
        HierarchyRequestError: If character data appears outside the document element

    Examples:
        >>> document = parse('<root><item>value</item></root>')
        >>> document.document_element.tag_name
        'root'
    """
    return DOMParser(configuration, correlation_id).parse(source)


def parse_string(
    xml_string: str,
    configuration: Optional[DOMConfiguration] = None,
    correlation_id: Optional[str] = None,
) -> Document:
    """Parse XML held in a string.

    The string is parsed as already-decoded text: an ``encoding`` named in
    its XML declaration is recorded on the Document but not used to decode.
    """
    return DOMParser(configuration, correlation_id).parse_string(xml_string)


def parse_file(
    file_path: Union[str, Path],
    configuration: Optional[DOMConfiguration] = None,
    correlation_id: Optional[str] = None,
) -> Document:
    """Parse the XML file at ``file_path``; the file is read in chunks.

    Raises:
        FileNotFoundError: If the file does not exist
        MalformedInputError: If the input is not well-formed XML
    """
    return DOMParser(configuration, correlation_id).parse_file(file_path)


def serialize(node: Node, configuration: Optional[DOMConfiguration] = None) -> bytes:
    """Serialize ``node`` to UTF-8 encoded XML.

    Examples:
        >>> serialize(parse('<a/>'), DOMConfiguration.fragment_output())
        b'<a/>'
    """
    return DOMParser(configuration).serialize(node)


def serialize_to_string(node: Node, configuration: Optional[DOMConfiguration] = None) -> str:
    return serialize(node, configuration).decode(OUTPUT_ENCODING)


def write(node: Node, sink: BinaryIO, configuration: Optional[DOMConfiguration] = None) -> int:
    """Serialize ``node`` into the binary ``sink``; returns the number of bytes written."""
    return DOMParser(configuration).write(node, sink)


class DOMParser:
    """Reusable parser/serializer bound to one configuration.

    Attributes:
        configuration: Options for parsing and serialization
        correlation_id: Correlation ID stamped on every log record

    Examples:
        >>> parser = DOMParser(DOMConfiguration(comments=False))
        >>> document = parser.parse('<root><!-- dropped --></root>')
        >>> document.document_element.has_child_nodes()
        False
        >>> parser.statistics["parse_count"]
        1
    """

    def __init__(
        self,
        configuration: Optional[DOMConfiguration] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.configuration = configuration or DOMConfiguration()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "dom_parser")

        self.last_build_metrics: Optional[BuildMetrics] = None
        self.last_serialization_metrics: Optional[SerializationMetrics] = None

        self._parse_count = 0
        self._serialize_count = 0
        self._failed_parses = 0
        self._total_processing_time = 0.0

    def parse(self, source: InputType) -> Document:
        """Parse ``source``, dispatching on its type.

        Raises:
            TypeError: If ``source`` is not a supported input type
        """
        if isinstance(source, str):
            return self.parse_string(source)
        if isinstance(source, (bytes, bytearray)):
            return self._parse_bytes(source, None)
        if isinstance(source, Path):
            return self.parse_file(source)
        if hasattr(source, "read"):
            return self._parse_file_like(source)
        raise TypeError(f"cannot parse input of type {type(source).__name__}")

    def parse_string(self, xml_string: str) -> Document:
        self.logger.debug(
            "Parsing string input",
            extra={
                "content_length": len(xml_string),
                "preview": (
                    xml_string[:PREVIEW_LENGTH] + "..."
                    if len(xml_string) > PREVIEW_LENGTH else xml_string
                ),
            },
        )
        return self._parse_bytes(xml_string.encode(OUTPUT_ENCODING), OUTPUT_ENCODING)

    def parse_file(self, file_path: Union[str, Path]) -> Document:
        path = Path(file_path)
        with path.open("rb") as handle:
            document = self._run_parse(handle, None, {"file_path": str(path)})
        document.document_uri = path.resolve().as_uri()
        return document

    def _parse_file_like(self, source: Union[BinaryIO, TextIO]) -> Document:
        if isinstance(source, io.TextIOBase):
            return self.parse_string(source.read())
        return self._run_parse(source, None, {"input_type": type(source).__name__})  # type: ignore[arg-type]

    def _parse_bytes(self, data: Union[bytes, bytearray], encoding: Optional[str]) -> Document:
        return self._run_parse(data, encoding, {"content_length": len(data)})

    def _run_parse(
        self,
        source: Union[bytes, bytearray, BinaryIO],
        encoding: Optional[str],
        extra: Dict[str, Any],
    ) -> Document:
        start_time = time.time()
        self._parse_count += 1
        reader = ExpatEventReader(self.configuration, self.correlation_id)
        builder = DocumentBuilder(self.configuration, self.correlation_id)
        try:
            with self.logger.timed("parse", extra) as fields:
                document = builder.build(reader.read(source, encoding))
                builder.metrics.bytes_consumed = reader.bytes_consumed
                fields["bytes_consumed"] = reader.bytes_consumed
                fields["nodes_created"] = builder.metrics.nodes_created
        except Exception:
            self._failed_parses += 1
            raise
        finally:
            self._total_processing_time += (time.time() - start_time) * 1000
            self.last_build_metrics = builder.metrics
        return document

    def serialize(self, node: Node) -> bytes:
        buffer = io.BytesIO()
        self.write(node, buffer)
        return buffer.getvalue()

    def serialize_to_string(self, node: Node) -> str:
        return self.serialize(node).decode(OUTPUT_ENCODING)

    def write(self, node: Node, sink: BinaryIO) -> int:
        """Serialize ``node`` into ``sink``.

        Raises:
            NotSupportedError: If ``node`` is an Attr
            InvalidCharacterError: If comment or processing instruction data
                cannot be written
            NamespaceError: If attributes cannot be given distinct names
        """
        start_time = time.time()
        self._serialize_count += 1
        serializer = DOMSerializer(self.configuration, self.correlation_id)
        try:
            return serializer.write(node, sink)
        finally:
            self._total_processing_time += (time.time() - start_time) * 1000
            self.last_serialization_metrics = serializer.metrics

    def reconfigure(self, **kwargs: Any) -> None:
        """Replace configuration fields for subsequent runs.

        Raises:
            ConfigValidationError: If a field is unknown or a value is invalid
        """
        self.configuration = self.configuration.override(**kwargs)
        self.logger.info("Parser reconfigured", extra={"changes": sorted(kwargs)})

    @property
    def statistics(self) -> Dict[str, Any]:
        """Counters accumulated since creation or the last reset."""
        runs = self._parse_count + self._serialize_count
        return {
            "parse_count": self._parse_count,
            "serialize_count": self._serialize_count,
            "failed_parses": self._failed_parses,
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / runs if runs else 0.0
            ),
        }

    def reset_statistics(self) -> None:
        self._parse_count = 0
        self._serialize_count = 0
        self._failed_parses = 0
        self._total_processing_time = 0.0
