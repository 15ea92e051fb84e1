"""XML serializer.

Writes a node (usually a Document) to a byte sink as UTF-8. Element and
attribute names and the placement of namespace declarations come from the
``NamespacePlan`` computed by ``NamespaceNormalizer``; the tree itself is
never modified.

Pretty printing rules:

* each element, comment, processing instruction and document type starts on
  its own line, indented by ``indent_character`` once per depth;
* an element whose children are all Text is written on one line with its
  text untouched, and so is an element with mixed content (non-whitespace
  text next to other nodes), so character data is never altered;
* whitespace-only Text between tags is dropped and replaced by the
  serializer's own line breaks;
* the output ends with a newline.
"""

import io
import time
from typing import BinaryIO, List, Optional, Tuple, Union

from ..character.escaping import escape_attribute, escape_text
from ..character.names import is_xml_whitespace
from ..shared.config import DOMConfiguration
from ..shared.constants import OUTPUT_ENCODING, XML_DECLARATION
from ..shared.errors import InvalidCharacterError, NotSupportedError
from ..shared.logging import get_logger
from ..shared.result import SerializationMetrics
from .namespaces import ElementPlan, NamespaceNormalizer, NamespacePlan
from .node import Node, NodeType

# Work items for the iterative walk: (node, depth, inline) or a literal string
_WorkItem = Union[Tuple[Node, int, bool], str]


class DOMSerializer:
    """Writes node trees as XML text."""

    def __init__(
        self,
        configuration: Optional[DOMConfiguration] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize serializer.

        Args:
            configuration: Output options (pretty printing, declarations, ...)
            correlation_id: Optional correlation ID for request tracking
        """
        self.configuration = configuration or DOMConfiguration()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "dom_serializer")
        self.metrics = SerializationMetrics()
        self._plan = NamespacePlan()

    def write(self, node: Node, sink: BinaryIO) -> int:
        """Serialize ``node`` to ``sink`` and return the number of bytes written.

        Raises:
            NotSupportedError: If ``node`` is an Attr
            InvalidCharacterError: If a comment contains ``--`` or a
                processing instruction's data contains ``?>``
            NamespaceError: If element attributes cannot be given distinct names
        """
        text = self._serialize(node)
        payload = text.encode(OUTPUT_ENCODING)
        sink.write(payload)
        self.metrics.bytes_written = len(payload)
        return len(payload)

    def write_to_bytes(self, node: Node) -> bytes:
        buffer = io.BytesIO()
        self.write(node, buffer)
        return buffer.getvalue()

    def write_to_string(self, node: Node) -> str:
        return self.write_to_bytes(node).decode(OUTPUT_ENCODING)

    def _serialize(self, node: Node) -> str:
        if node.node_type == NodeType.ATTRIBUTE_NODE:
            raise NotSupportedError("attribute nodes cannot be serialized on their own")

        start_time = time.time()
        self.metrics = SerializationMetrics()
        self.logger.info(
            "Starting serialization",
            extra={
                "node_type": node.node_type.name,
                "pretty_print": self.configuration.pretty_print,
            },
        )
        try:
            self._plan = NamespaceNormalizer(self.configuration, self.correlation_id).plan(node)
            parts: List[str] = []
            if not self.configuration.omit_xml_declaration:
                parts.append(XML_DECLARATION)
                if self.configuration.pretty_print:
                    parts.append("\n")
            self._walk(node, parts)
            text = "".join(parts)
        except Exception as e:
            self.logger.error(
                "Serialization failed",
                extra={"exception_type": type(e).__name__, "error": str(e)},
            )
            raise

        self.metrics.processing_time_ms = (time.time() - start_time) * 1000
        self.metrics.elements_written = len(self._plan)
        self.metrics.declarations_written = self._plan.declarations_written
        self.metrics.declarations_suppressed = self._plan.declarations_suppressed
        self.metrics.synthetic_prefixes = self._plan.synthetic_prefixes
        self.logger.info("Serialization completed", extra=self.metrics.to_dict())
        return text

    def _walk(self, root: Node, parts: List[str]) -> None:
        pretty = self.configuration.pretty_print
        indent_unit = self.configuration.indent_character
        work: List[_WorkItem] = [(root, 0, not pretty)]

        while work:
            item = work.pop()
            if isinstance(item, str):
                parts.append(item)
                continue
            node, depth, inline = item
            kind = node.node_type
            indent = "" if inline else indent_unit * depth
            newline = "" if inline else "\n"

            if kind == NodeType.DOCUMENT_NODE:
                work.extend(
                    (child, 0, inline) for child in reversed(node._children)
                    if inline or not self._is_ignorable_whitespace(child)
                )
            elif kind == NodeType.ELEMENT_NODE:
                self._write_element(node, depth, inline, indent, newline, parts, work)
            elif kind in (NodeType.TEXT_NODE, NodeType.CDATA_SECTION_NODE):
                data = node.node_value or ""
                parts.append(data if is_xml_whitespace(data) else escape_text(data))
            elif kind == NodeType.COMMENT_NODE:
                parts.append(f"{indent}{self._format_comment(node.node_value or '')}{newline}")
            elif kind == NodeType.PROCESSING_INSTRUCTION_NODE:
                parts.append(f"{indent}{self._format_pi(node)}{newline}")
            elif kind == NodeType.DOCUMENT_TYPE_NODE:
                parts.append(f"{indent}{self._format_doctype(node)}{newline}")
            else:
                raise NotSupportedError(f"cannot serialize {kind.name}")

    def _write_element(
        self,
        node: Node,
        depth: int,
        inline: bool,
        indent: str,
        newline: str,
        parts: List[str],
        work: List[_WorkItem],
    ) -> None:
        element_plan = self._plan.for_element(node)  # type: ignore[arg-type]
        start_tag = self._format_start_tag(element_plan)
        children = node._children

        if not children:
            parts.append(f"{indent}{start_tag}/>{newline}")
            return

        if inline or self._has_inline_content(node):
            parts.append(f"{indent}{start_tag}>")
            work.append(f"</{element_plan.qualified_name}>{newline}")
            work.extend((child, 0, True) for child in reversed(children))
            return

        parts.append(f"{indent}{start_tag}>\n")
        work.append(f"{indent}</{element_plan.qualified_name}>\n")
        work.extend(
            (child, depth + 1, False) for child in reversed(children)
            if not self._is_ignorable_whitespace(child)
        )

    @staticmethod
    def _is_ignorable_whitespace(node: Node) -> bool:
        return node.node_type == NodeType.TEXT_NODE and is_xml_whitespace(node.node_value or "")

    @staticmethod
    def _has_inline_content(node: Node) -> bool:
        """True when the children are all Text, or when non-whitespace text is mixed in."""
        texts = [c for c in node._children if c.node_type == NodeType.TEXT_NODE]
        if len(texts) == len(node._children):
            return True
        return any(not is_xml_whitespace(t.node_value or "") for t in texts)

    @staticmethod
    def _format_start_tag(element_plan: ElementPlan) -> str:
        pieces = [f"<{element_plan.qualified_name}"]
        for name, value in element_plan.declarations:
            pieces.append(f' {name}="{escape_attribute(value)}"')
        for name, value in element_plan.attributes:
            pieces.append(f' {name}="{escape_attribute(value)}"')
        return "".join(pieces)

    @staticmethod
    def _format_comment(data: str) -> str:
        if "--" in data:
            raise InvalidCharacterError("comment data cannot contain '--'")
        leading = "" if data[:1].isspace() else " "
        trailing = "" if data[-1:].isspace() else " "
        return f"<!--{leading}{data}{trailing}-->"

    @staticmethod
    def _format_pi(node: Node) -> str:
        data = node.node_value or ""
        if "?>" in data:
            raise InvalidCharacterError("processing instruction data cannot contain '?>'")
        if data:
            return f"<?{node.node_name} {data}?>"
        return f"<?{node.node_name}?>"

    @staticmethod
    def _format_doctype(node: Node) -> str:
        public_id = node.public_id  # type: ignore[attr-defined]
        system_id = node.system_id  # type: ignore[attr-defined]
        if public_id:
            return f'<!DOCTYPE {node.node_name} PUBLIC "{public_id}" "{system_id}">'
        if system_id:
            return f'<!DOCTYPE {node.node_name} SYSTEM "{system_id}">'
        return f"<!DOCTYPE {node.node_name}>"
