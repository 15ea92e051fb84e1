"""Expat-backed event reader.

Feeds a byte source to ``xml.parsers.expat`` in chunks and turns its
callbacks into the ``XMLEvent`` stream the document builder consumes:

* adjacent character data (expat splits text at entity references, line
  breaks and buffer boundaries) is coalesced into one CHARACTERS event;
* namespace declarations, which expat reports through separate callbacks,
  are turned back into ``xmlns`` / ``xmlns:p`` attributes on the start tag;
* stray character data before or after the document element, which expat
  rejects as a syntax error, is surfaced as a CHARACTERS event so that the
  builder can apply its prolog and epilog rules;
* a start tag after the document element, which expat also rejects, is
  surfaced as a START_ELEMENT event for the same reason;
* every other ``ExpatError`` becomes ``MalformedInputError``.
"""

import re
from typing import Any, BinaryIO, Iterator, List, Optional, Tuple, Union
from xml.parsers import expat

from ..shared.config import DOMConfiguration
from ..shared.constants import XMLNS_NAMESPACE, XMLNS_PREFIX
from ..shared.errors import MalformedInputError
from ..shared.logging import get_logger
from .events import (
    DocumentTypeInfo,
    EventPosition,
    EventType,
    ExpandedName,
    XMLDeclarationInfo,
    XMLEvent,
)

# Separator between URI, local name and prefix in expat's expanded names
NAMESPACE_SEPARATOR = " "

# Bytes of already-fed input kept around to recover stray prolog/epilog text
RECOVERY_WINDOW_BYTES = 4096

JUNK_AFTER_DOCUMENT_ELEMENT = expat.errors.codes[expat.errors.XML_ERROR_JUNK_AFTER_DOC_ELEMENT]

_START_TAG = re.compile(rb"<([^\s/>!?]+)")
_QUOTES = (ord("\""), ord("'"))

ByteSource = Union[bytes, bytearray, BinaryIO]


class ExpatEventReader:
    """Adapts expat callbacks to ``XMLEvent`` objects.

    One reader can be used for several documents; each ``read`` call creates
    a fresh expat parser.
    """

    def __init__(
        self,
        configuration: Optional[DOMConfiguration] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.configuration = configuration or DOMConfiguration()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "expat_event_reader")

        self.bytes_consumed = 0
        self._parser: Any = None
        self._events: List[XMLEvent] = []
        self._text_parts: List[str] = []
        self._text_position = EventPosition()
        self._pending_declarations: List[Tuple[ExpandedName, str]] = []
        self._depth = 0
        self._window = b""
        self._window_offset = 0
        self._failure: Optional[MalformedInputError] = None

    def read(self, source: ByteSource, encoding: Optional[str] = None) -> Iterator[XMLEvent]:
        """Tokenize ``source`` and yield events in document order.

        Args:
            source: Bytes or a binary file-like object
            encoding: Overrides the encoding declared by the document

        Raises:
            MalformedInputError: If the input is not well-formed XML
        """
        self._reset_state(encoding)
        self.logger.debug(
            "Starting expat tokenization",
            extra={"namespaces": self.configuration.namespaces, "encoding": encoding},
        )

        for chunk in self._iter_chunks(source):
            self._feed(chunk, final=False)
            yield from self._drain()
            if self._parser is None:
                return
        self._feed(b"", final=True)
        yield from self._drain()

        self.logger.debug(
            "Expat tokenization finished", extra={"bytes_consumed": self.bytes_consumed}
        )

    def _iter_chunks(self, source: ByteSource) -> Iterator[bytes]:
        if isinstance(source, (bytes, bytearray)):
            data = bytes(source)
            size = self.configuration.buffer_size
            for start in range(0, len(data), size):
                yield data[start:start + size]
            return
        while True:
            chunk = source.read(self.configuration.buffer_size)
            if not chunk:
                return
            if isinstance(chunk, str):
                raise TypeError("ExpatEventReader.read requires a binary source")
            yield chunk

    def _reset_state(self, encoding: Optional[str]) -> None:
        self.bytes_consumed = 0
        self._events = []
        self._text_parts = []
        self._pending_declarations = []
        self._depth = 0
        self._window = b""
        self._window_offset = 0
        self._failure = None
        self._parser = self._create_parser(encoding)

    def _create_parser(self, encoding: Optional[str]) -> Any:
        if self.configuration.namespaces:
            parser = expat.ParserCreate(encoding, namespace_separator=NAMESPACE_SEPARATOR)
            parser.namespace_prefixes = True
            parser.StartNamespaceDeclHandler = self._handle_namespace_declaration
        else:
            parser = expat.ParserCreate(encoding)
        parser.ordered_attributes = True
        parser.SetParamEntityParsing(expat.XML_PARAM_ENTITY_PARSING_NEVER)

        parser.XmlDeclHandler = self._handle_xml_declaration
        parser.StartDoctypeDeclHandler = self._handle_doctype
        parser.StartElementHandler = self._handle_start_element
        parser.EndElementHandler = self._handle_end_element
        parser.CharacterDataHandler = self._handle_characters
        parser.CommentHandler = self._handle_comment
        parser.ProcessingInstructionHandler = self._handle_processing_instruction
        return parser

    def _feed(self, chunk: bytes, final: bool) -> None:
        if self._parser is None:
            return
        self._remember(chunk)
        try:
            self._parser.Parse(chunk, final)
        except expat.ExpatError as e:
            self._flush_text()
            stray = self._stray_content(e)
            second_root = None if stray is not None else self._second_root(e)
            self._parser = None
            if second_root is not None:
                # Builder raises the one-element-child error for this event
                self._events.append(
                    XMLEvent(EventType.START_ELEMENT, name=second_root,
                             position=EventPosition(e.lineno, e.offset))
                )
                return
            if stray is None:
                self.logger.warning(
                    "Malformed XML input",
                    extra={"line": e.lineno, "column": e.offset, "expat_code": e.code},
                )
                failure = MalformedInputError(expat.ErrorString(e.code), e.lineno, e.offset)
                failure.__cause__ = e
                self._failure = failure
                return
            # Builder raises the prolog/epilog error for this event
            self._events.append(
                XMLEvent(EventType.CHARACTERS, data=stray,
                         position=EventPosition(e.lineno, e.offset))
            )
            return
        self.bytes_consumed += len(chunk)
        if final:
            self._flush_text()
            self._parser = None

    def _drain(self) -> Iterator[XMLEvent]:
        """Yield queued events, then raise a pending tokenizer failure."""
        events, self._events = self._events, []
        yield from events
        if self._failure is not None:
            failure, self._failure = self._failure, None
            raise failure

    def _remember(self, chunk: bytes) -> None:
        window = self._window + chunk
        overflow = len(window) - RECOVERY_WINDOW_BYTES - len(chunk)
        if overflow > 0:
            window = window[overflow:]
            self._window_offset += overflow
        self._window = window

    def _stray_content(self, error: expat.ExpatError) -> Optional[str]:
        """Text outside the document element that made expat fail, if any.

        Expat reports the error either at the first character of the text
        or at the ``<`` that follows it, so the text is taken to be the run
        between the last complete markup construct and the next ``<``.
        """
        if self._depth > 0:
            return None
        index = self._parser.ErrorByteIndex - self._window_offset
        if index < 0 or index > len(self._window):
            return None
        start = self._window.rfind(b">", 0, index) + 1
        if start > 0 and self._inside_start_tag(start - 1):
            return None
        end = self._window.find(b"<", start)
        if end < 0:
            end = len(self._window)
        if index > end:
            return None
        text = self._window[start:end].decode("utf-8", errors="replace")
        if not text.strip():
            return None
        return text

    def _inside_start_tag(self, gt: int) -> bool:
        """Whether the ``>`` at ``gt`` sits inside a quoted attribute value."""
        lt = self._window.rfind(b"<", 0, gt)
        if lt < 0 or self._window[lt + 1:lt + 2] in (b"!", b"?", b"/"):
            return False
        quote = None
        for byte in self._window[lt:gt]:
            if quote is None and byte in _QUOTES:
                quote = byte
            elif byte == quote:
                quote = None
        return quote is not None

    def _second_root(self, error: expat.ExpatError) -> Optional[ExpandedName]:
        """Name of a start tag found after the document element, if that is the error."""
        if self._depth > 0 or error.code != JUNK_AFTER_DOCUMENT_ELEMENT:
            return None
        index = self._parser.ErrorByteIndex - self._window_offset
        match = _START_TAG.match(self._window, max(index, 0))
        if match is None:
            return None
        return ExpandedName("", match.group(1).decode("utf-8", errors="replace"), "")

    def _position(self) -> EventPosition:
        return EventPosition(
            self._parser.CurrentLineNumber, self._parser.CurrentColumnNumber
        )

    def _flush_text(self) -> None:
        if self._text_parts:
            self._events.append(
                XMLEvent(
                    EventType.CHARACTERS,
                    data="".join(self._text_parts),
                    position=self._text_position,
                )
            )
            self._text_parts = []

    def _split_name(self, raw_name: str) -> ExpandedName:
        if not self.configuration.namespaces:
            return ExpandedName("", raw_name, "")
        parts = raw_name.split(NAMESPACE_SEPARATOR)
        if len(parts) == 1:
            return ExpandedName("", parts[0], "")
        if len(parts) == 2:
            return ExpandedName(parts[0], parts[1], "")
        return ExpandedName(parts[0], parts[1], parts[2])

    # Expat handlers

    def _handle_xml_declaration(
        self, version: Optional[str], encoding: Optional[str], standalone: int
    ) -> None:
        self._flush_text()
        info = XMLDeclarationInfo(
            version=version or "1.0",
            encoding=encoding,
            standalone=None if standalone == -1 else bool(standalone),
        )
        self._events.append(
            XMLEvent(EventType.XML_DECLARATION, declaration=info, position=self._position())
        )

    def _handle_doctype(
        self,
        name: str,
        system_id: Optional[str],
        public_id: Optional[str],
        has_internal_subset: int,
    ) -> None:
        self._flush_text()
        info = DocumentTypeInfo(name, public_id or "", system_id or "")
        self._events.append(
            XMLEvent(EventType.DOCTYPE, doctype=info, position=self._position())
        )

    def _handle_namespace_declaration(self, prefix: Optional[str], uri: Optional[str]) -> None:
        if prefix:
            name = ExpandedName(XMLNS_NAMESPACE, prefix, XMLNS_PREFIX)
        else:
            name = ExpandedName(XMLNS_NAMESPACE, XMLNS_PREFIX, "")
        self._pending_declarations.append((name, uri or ""))

    def _handle_start_element(self, raw_name: str, raw_attributes: List[str]) -> None:
        self._flush_text()
        attributes = self._pending_declarations
        self._pending_declarations = []
        for i in range(0, len(raw_attributes), 2):
            attributes.append((self._split_name(raw_attributes[i]), raw_attributes[i + 1]))
        self._events.append(
            XMLEvent(
                EventType.START_ELEMENT,
                name=self._split_name(raw_name),
                attributes=attributes,
                position=self._position(),
            )
        )
        self._depth += 1

    def _handle_end_element(self, raw_name: str) -> None:
        self._flush_text()
        self._events.append(
            XMLEvent(EventType.END_ELEMENT, name=self._split_name(raw_name),
                     position=self._position())
        )
        self._depth -= 1

    def _handle_characters(self, data: str) -> None:
        if not self._text_parts:
            self._text_position = self._position()
        self._text_parts.append(data)

    def _handle_comment(self, data: str) -> None:
        self._flush_text()
        self._events.append(
            XMLEvent(EventType.COMMENT, data=data, position=self._position())
        )

    def _handle_processing_instruction(self, target: str, data: str) -> None:
        self._flush_text()
        self._events.append(
            XMLEvent(
                EventType.PROCESSING_INSTRUCTION,
                target=target,
                data=data,
                position=self._position(),
            )
        )
