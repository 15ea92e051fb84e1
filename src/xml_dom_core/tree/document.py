"""Document and DocumentType nodes.

The Document is the factory for every other node kind and the owner of the
nodes it creates. Its own children are limited to at most one DocumentType,
at most one Element (the document element, which must follow the
DocumentType), and any number of Comments and ProcessingInstructions.
"""

from typing import TYPE_CHECKING, Optional, Tuple

from ..character.names import check_namespace_binding, check_xml_name, split_qualified_name
from ..shared.config import DOMConfiguration
from ..shared.errors import (
    HierarchyRequestError,
    InvalidCharacterError,
    NotSupportedError,
)
from .attr import Attr
from .element import Element
from .node import Node, NodeType
from .text import Comment, ProcessingInstruction, Text

if TYPE_CHECKING:
    from .implementation import DOMImplementation


class DocumentType(Node):
    """``<!DOCTYPE name PUBLIC "public_id" "system_id">``; carries no children."""

    node_type = NodeType.DOCUMENT_TYPE_NODE

    def __init__(
        self,
        owner_document: Optional["Document"],
        name: str,
        public_id: str = "",
        system_id: str = "",
    ) -> None:
        super().__init__(owner_document)
        self._name = name
        self._public_id = public_id
        self._system_id = system_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def node_name(self) -> str:
        return self._name

    @property
    def public_id(self) -> str:
        return self._public_id

    @property
    def system_id(self) -> str:
        return self._system_id

    @property
    def text_content(self) -> None:
        return None

    @text_content.setter
    def text_content(self, value: Optional[str]) -> None:
        """Document types have no text content."""

    def _namespace_context(self) -> Optional[Node]:
        return None

    def _shallow_copy(self, document: Optional["Document"]) -> "DocumentType":
        return DocumentType(document, self._name, self._public_id, self._system_id)

    def _equality_key(self) -> Tuple:
        return super()._equality_key() + (self._public_id, self._system_id)


class Document(Node):
    """Root of a node tree and factory for its nodes."""

    node_type = NodeType.DOCUMENT_NODE
    _child_types = frozenset({
        NodeType.ELEMENT_NODE,
        NodeType.COMMENT_NODE,
        NodeType.PROCESSING_INSTRUCTION_NODE,
        NodeType.DOCUMENT_TYPE_NODE,
    })

    def __init__(self, implementation: Optional["DOMImplementation"] = None) -> None:
        super().__init__(None)
        self._implementation = implementation
        self.xml_version = "1.0"
        self.xml_encoding: Optional[str] = None
        self.xml_standalone = False
        self.document_uri: Optional[str] = None
        self._dom_config = DOMConfiguration()

    @property
    def node_name(self) -> str:
        return "#document"

    @property
    def implementation(self) -> "DOMImplementation":
        if self._implementation is None:
            from .implementation import DOMImplementation
            self._implementation = DOMImplementation()
        return self._implementation

    @property
    def dom_config(self) -> DOMConfiguration:
        """Configuration used by ``normalize_document``."""
        return self._dom_config

    @property
    def document_element(self) -> Optional[Element]:
        for child in self._children:
            if child.node_type == NodeType.ELEMENT_NODE:
                return child  # type: ignore[return-value]
        return None

    @property
    def doctype(self) -> Optional[DocumentType]:
        for child in self._children:
            if child.node_type == NodeType.DOCUMENT_TYPE_NODE:
                return child  # type: ignore[return-value]
        return None

    def _document_for_children(self) -> "Document":
        return self

    def _check_child_constraints(
        self,
        new_child: Node,
        reference: Optional[Node],
        replaced: Optional[Node],
    ) -> None:
        kind = new_child.node_type
        if kind not in (NodeType.ELEMENT_NODE, NodeType.DOCUMENT_TYPE_NODE):
            return
        # Children as they would be once new_child leaves its current position
        remaining = [c for c in self._children if c is not new_child]
        for child in remaining:
            if child.node_type == kind and child is not replaced:
                if kind == NodeType.ELEMENT_NODE:
                    raise HierarchyRequestError("document can only have one element child")
                raise HierarchyRequestError("document can only have one document type")

        if replaced is not None:
            position = remaining.index(replaced)
            before, after = remaining[:position], remaining[position + 1:]
        elif reference is not None:
            position = remaining.index(reference)
            before, after = remaining[:position], remaining[position:]
        else:
            before, after = remaining, []

        if kind == NodeType.ELEMENT_NODE and any(
            c.node_type == NodeType.DOCUMENT_TYPE_NODE for c in after
        ):
            raise HierarchyRequestError("document element must follow the document type")
        if kind == NodeType.DOCUMENT_TYPE_NODE and any(
            c.node_type == NodeType.ELEMENT_NODE for c in before
        ):
            raise HierarchyRequestError("document type must precede the document element")

    @property
    def text_content(self) -> Optional[str]:
        return super().text_content

    @text_content.setter
    def text_content(self, value: Optional[str]) -> None:
        """Document text content is read-only; setting it has no effect."""

    def _namespace_context(self) -> Optional[Node]:
        return self.document_element

    # Factories

    def create_element(self, tag_name: str) -> Element:
        """Create an element without namespace processing.

        Raises:
            InvalidCharacterError: If ``tag_name`` is not a valid XML name
        """
        check_xml_name(tag_name)
        return Element(self, tag_name)

    def create_element_ns(self, namespace_uri: Optional[str], qualified_name: str) -> Element:
        """Create a namespace-aware element.

        Raises:
            InvalidCharacterError: If ``qualified_name`` is malformed
            NamespaceError: If the prefix and namespace are inconsistent
        """
        uri = namespace_uri or ""
        prefix, local_name = split_qualified_name(qualified_name)
        check_namespace_binding(uri, prefix, qualified_name)
        return Element(self, qualified_name, uri, prefix, local_name, namespace_aware=True)

    def create_attribute(self, name: str) -> Attr:
        """Create an attribute without namespace processing.

        Raises:
            InvalidCharacterError: If ``name`` is not a valid XML name
        """
        check_xml_name(name)
        return Attr(self, name)

    def create_attribute_ns(self, namespace_uri: Optional[str], qualified_name: str) -> Attr:
        """Create a namespace-aware attribute.

        ``xmlns`` and ``xmlns:p`` must use the xmlns namespace; their value
        is the declared URI.

        Raises:
            InvalidCharacterError: If ``qualified_name`` is malformed
            NamespaceError: If the prefix and namespace are inconsistent
        """
        uri = namespace_uri or ""
        prefix, local_name = split_qualified_name(qualified_name)
        check_namespace_binding(uri, prefix, qualified_name, is_attribute=True)
        return Attr(self, qualified_name, uri, prefix, local_name, namespace_aware=True)

    def create_text_node(self, data: str) -> Text:
        return Text(self, data)

    def create_comment(self, data: str) -> Comment:
        """Create a comment.

        Raises:
            InvalidCharacterError: If ``data`` contains ``--``
        """
        if "--" in data:
            raise InvalidCharacterError("comment data cannot contain '--'")
        return Comment(self, data)

    def create_processing_instruction(self, target: str, data: str = "") -> ProcessingInstruction:
        """Create a processing instruction.

        Raises:
            InvalidCharacterError: If ``target`` is not a name, is ``xml`` in any
                case, or ``data`` contains ``?>``
        """
        check_xml_name(target)
        if target.lower() == "xml":
            raise InvalidCharacterError("processing instruction target cannot be 'xml'")
        if "?>" in data:
            raise InvalidCharacterError("processing instruction data cannot contain '?>'")
        return ProcessingInstruction(self, target, data)

    # Copies

    def import_node(self, node: Node, deep: bool = False) -> Node:
        """Copy ``node`` from any document into this one; ``node`` is not modified.

        Attributes are always copied with their value, whatever ``deep`` is.

        Raises:
            NotSupportedError: If ``node`` is a Document or DocumentType
        """
        if node.node_type in (NodeType.DOCUMENT_NODE, NodeType.DOCUMENT_TYPE_NODE):
            raise NotSupportedError(f"cannot import a {node.node_type.name}")
        return node._copy_tree(self, deep)

    def adopt_node(self, node: Node) -> Node:
        """Move ``node`` and its subtree into this document, detaching it first.

        Raises:
            NotSupportedError: If ``node`` is a Document or DocumentType
        """
        if node.node_type in (NodeType.DOCUMENT_NODE, NodeType.DOCUMENT_TYPE_NODE):
            raise NotSupportedError(f"cannot adopt a {node.node_type.name}")
        if node.node_type == NodeType.ATTRIBUTE_NODE:
            owner = node.owner_element  # type: ignore[attr-defined]
            if owner is not None:
                owner.remove_attribute_node(node)
        else:
            node._detach()
        stack = [node]
        while stack:
            current = stack.pop()
            current._owner_document = self
            if current.attributes is not None:
                for attr in current.attributes:
                    attr._owner_document = self
            stack.extend(current._children)
        return node

    def _shallow_copy(self, document: Optional["Document"]) -> "Document":
        copy = Document(self._implementation)
        copy.xml_version = self.xml_version
        copy.xml_encoding = self.xml_encoding
        copy.xml_standalone = self.xml_standalone
        copy.document_uri = self.document_uri
        copy._dom_config = self._dom_config.copy()
        return copy

    def normalize_document(self) -> None:
        """Add the namespace declarations the tree needs to serialize faithfully.

        Runs the namespace normalizer in place using ``dom_config``: missing
        declarations are added, conflicting prefixes are rewritten, and
        adjacent Text nodes are merged.

        Raises:
            NamespaceError: If a conflict cannot be resolved
        """
        from .namespaces import NamespaceNormalizer

        self.normalize()
        if self._dom_config.namespaces:
            NamespaceNormalizer(self._dom_config).apply(self)
