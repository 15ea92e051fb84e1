"""Document builder: turns a tokenizer event stream into a node tree.

The builder runs a three-state machine over the events:

* PROLOG, before the document element: comments, processing instructions
  and the document type attach to the Document, whitespace is discarded and
  any other character data is a ``HierarchyRequestError``;
* IN_ELEMENT, between the document element's start and end tags: nodes
  attach to the innermost open element;
* EPILOG, after the document element: comments and processing instructions
  attach to the Document, whitespace is discarded and any other character
  data is a ``HierarchyRequestError``.

The first error aborts the build; no partially built document is returned.
"""

import time
import unicodedata
from enum import Enum, auto
from typing import Iterable, List, Optional, cast

from ..shared.config import DOMConfiguration
from ..shared.errors import HierarchyRequestError, InvalidCharacterError, MalformedInputError
from ..shared.logging import get_logger
from ..shared.result import BuildMetrics
from ..character.names import is_xml_whitespace
from ..tokenization.events import (
    DocumentTypeInfo,
    EventType,
    ExpandedName,
    XMLDeclarationInfo,
    XMLEvent,
)
from .attr import Attr
from .document import Document, DocumentType
from .element import Element
from .node import Node

PROLOG_CONTENT_MESSAGE = "content is not allowed in prolog"
TRAILING_CONTENT_MESSAGE = "content is not allowed in trailing section"


class BuilderState(Enum):
    """Position of the builder relative to the document element."""

    PROLOG = auto()         # Before the document element's start tag
    IN_ELEMENT = auto()     # Inside the document element
    EPILOG = auto()         # After the document element's end tag


class DocumentBuilder:
    """Builds a ``Document`` from ``XMLEvent`` objects."""

    def __init__(
        self,
        configuration: Optional[DOMConfiguration] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize document builder.

        Args:
            configuration: Parsing options (comments, whitespace, namespaces, ...)
            correlation_id: Optional correlation ID for request tracking
        """
        self.configuration = configuration or DOMConfiguration()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "document_builder")
        self.metrics = BuildMetrics()

        self._state = BuilderState.PROLOG
        self._document = Document()
        self._element_stack: List[Element] = []

    @property
    def state(self) -> BuilderState:
        return self._state

    def build(self, events: Iterable[XMLEvent]) -> Document:
        """Consume ``events`` and return the finished Document.

        Raises:
            HierarchyRequestError: On character data outside the document element
            InvalidCharacterError: On duplicate attributes or invalid names
            NamespaceError: On inconsistent namespace names
            MalformedInputError: On unbalanced tags or a missing document element
        """
        start_time = time.time()
        self._reset_state()
        self.logger.info(
            "Starting document build",
            extra={
                "namespaces": self.configuration.namespaces,
                "comments": self.configuration.comments,
                "element_content_whitespace": self.configuration.element_content_whitespace,
            },
        )

        try:
            for event in events:
                self.metrics.events_processed += 1
                self._dispatch(event)
            if self._state != BuilderState.EPILOG:
                if self._element_stack:
                    raise MalformedInputError(
                        f"unclosed element <{self._element_stack[-1].tag_name}>"
                    )
                raise MalformedInputError("no document element found")
        except Exception as e:
            self.metrics.processing_time_ms = (time.time() - start_time) * 1000
            self.logger.error(
                "Document build failed",
                extra={
                    "state": self._state.name,
                    "events_processed": self.metrics.events_processed,
                    "exception_type": type(e).__name__,
                },
            )
            self._document = Document()
            self._element_stack.clear()
            raise

        document = self._document
        self._document = Document()
        self.metrics.processing_time_ms = (time.time() - start_time) * 1000
        self.logger.info("Document build completed", extra=self.metrics.to_dict())
        return document

    def _reset_state(self) -> None:
        self._state = BuilderState.PROLOG
        self._document = Document()
        self._document._dom_config = self.configuration.copy()
        self._element_stack = []
        self.metrics = BuildMetrics()

    def _transition(self, state: BuilderState) -> None:
        if self.logger.is_debug_enabled():
            self.logger.debug(
                "Builder state transition",
                extra={"from_state": self._state.name, "to_state": state.name},
            )
        self._state = state

    @property
    def _current(self) -> Node:
        if self._element_stack:
            return self._element_stack[-1]
        return self._document

    def _dispatch(self, event: XMLEvent) -> None:
        kind = event.type
        if kind == EventType.START_ELEMENT:
            self._start_element(event)
        elif kind == EventType.END_ELEMENT:
            self._end_element(event)
        elif kind == EventType.CHARACTERS:
            self._characters(event)
        elif kind == EventType.COMMENT:
            self._comment(event)
        elif kind == EventType.PROCESSING_INSTRUCTION:
            self._processing_instruction(event)
        elif kind == EventType.XML_DECLARATION:
            self._xml_declaration(event)
        elif kind == EventType.DOCTYPE:
            self._doctype(event)

    # Event handlers

    def _start_element(self, event: XMLEvent) -> None:
        if self._state == BuilderState.EPILOG:
            raise HierarchyRequestError("document can only have one element child")
        element = self._create_element(cast(ExpandedName, event.name))
        seen = set()
        for name, value in event.attributes:
            attr = self._create_attribute(name)
            if attr.name in seen:
                raise InvalidCharacterError(
                    f"duplicate attribute '{attr.name}' on <{element.tag_name}>"
                )
            seen.add(attr.name)
            attr.value = self._normalize(value)
            element.attributes.set_named_item(attr)
            self.metrics.attributes_created += 1

        self._current._append_unchecked(element)
        self._element_stack.append(element)
        self.metrics.elements_created += 1
        self.metrics.max_depth = max(self.metrics.max_depth, len(self._element_stack))
        if self._state == BuilderState.PROLOG:
            self._transition(BuilderState.IN_ELEMENT)

    def _end_element(self, event: XMLEvent) -> None:
        if not self._element_stack:
            raise MalformedInputError("end tag without a matching start tag")
        element = self._element_stack.pop()
        name = cast(ExpandedName, event.name)
        if self._qualified_name(name) != element.tag_name:
            raise MalformedInputError(
                f"end tag </{name.qualified_name}> does not match <{element.tag_name}>"
            )
        if not self._element_stack:
            self._transition(BuilderState.EPILOG)

    def _characters(self, event: XMLEvent) -> None:
        data = event.data
        if self._state != BuilderState.IN_ELEMENT:
            if is_xml_whitespace(data):
                self.metrics.whitespace_discarded += 1
                return
            if self._state == BuilderState.PROLOG:
                raise HierarchyRequestError(PROLOG_CONTENT_MESSAGE)
            raise HierarchyRequestError(TRAILING_CONTENT_MESSAGE)

        if not self.configuration.element_content_whitespace and is_xml_whitespace(data):
            self.metrics.whitespace_discarded += 1
            return
        self._current._append_unchecked(self._document.create_text_node(self._normalize(data)))
        self.metrics.text_nodes_created += 1

    def _comment(self, event: XMLEvent) -> None:
        if not self.configuration.comments:
            self.metrics.comments_discarded += 1
            return
        self._current._append_unchecked(self._document.create_comment(event.data))
        self.metrics.comments_created += 1

    def _processing_instruction(self, event: XMLEvent) -> None:
        # Tokenizers that report the XML declaration as a PI
        if event.target.lower() == "xml":
            return
        pi = self._document.create_processing_instruction(event.target, event.data)
        self._current._append_unchecked(pi)
        self.metrics.processing_instructions_created += 1

    def _xml_declaration(self, event: XMLEvent) -> None:
        declaration = cast(XMLDeclarationInfo, event.declaration)
        self._document.xml_version = declaration.version
        self._document.xml_encoding = declaration.encoding
        self._document.xml_standalone = bool(declaration.standalone)

    def _doctype(self, event: XMLEvent) -> None:
        if self._state != BuilderState.PROLOG:
            raise HierarchyRequestError("document type must precede the document element")
        info = cast(DocumentTypeInfo, event.doctype)
        doctype = DocumentType(self._document, info.name, info.public_id, info.system_id)
        self._document.append_child(doctype)

    # Node construction

    def _normalize(self, data: str) -> str:
        if self.configuration.normalize_characters:
            return unicodedata.normalize("NFC", data)
        return data

    def _qualified_name(self, name: ExpandedName) -> str:
        if self.configuration.namespaces:
            return name.qualified_name
        return name.local_name

    def _create_element(self, name: ExpandedName) -> Element:
        if self.configuration.namespaces:
            return self._document.create_element_ns(name.namespace_uri, name.qualified_name)
        return self._document.create_element(name.local_name)

    def _create_attribute(self, name: ExpandedName) -> Attr:
        if self.configuration.namespaces:
            return self._document.create_attribute_ns(name.namespace_uri, name.qualified_name)
        return self._document.create_attribute(name.local_name)
