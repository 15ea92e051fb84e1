"""Element nodes and their attribute API."""

from typing import TYPE_CHECKING, Iterator, Optional, Tuple

from ..character.names import (
    check_namespace_binding,
    check_xml_name,
    is_valid_ncname,
    split_qualified_name,
)
from ..shared.constants import XML_NAMESPACE, XML_PREFIX, XMLNS_NAMESPACE, XMLNS_PREFIX
from ..shared.errors import InvalidCharacterError, NamespaceError, NotFoundError
from .attr import Attr
from .namednodemap import NamedNodeMap
from .node import Node, NodeType

if TYPE_CHECKING:
    from .document import Document


class Element(Node):
    """Element with ordered children and a ``NamedNodeMap`` of attributes.

    Elements created through ``Document.create_element_ns`` (or parsed with
    namespace processing on) are namespace aware: their namespace URI,
    prefix and local name drive namespace lookup and serialization.
    Elements created through ``Document.create_element`` keep their tag name
    as an opaque string.
    """

    node_type = NodeType.ELEMENT_NODE
    _child_types = frozenset({
        NodeType.ELEMENT_NODE,
        NodeType.TEXT_NODE,
        NodeType.COMMENT_NODE,
        NodeType.PROCESSING_INSTRUCTION_NODE,
        NodeType.CDATA_SECTION_NODE,
        NodeType.ENTITY_REFERENCE_NODE,
    })

    def __init__(
        self,
        owner_document: Optional["Document"],
        tag_name: str,
        namespace_uri: str = "",
        prefix: str = "",
        local_name: str = "",
        namespace_aware: bool = False,
    ) -> None:
        super().__init__(owner_document)
        self._tag_name = tag_name
        self._namespace_uri = namespace_uri
        self._prefix = prefix
        self._local_name = local_name or tag_name.partition(":")[2] or tag_name
        self._namespace_aware = namespace_aware
        self._attributes = NamedNodeMap(self)

    @property
    def tag_name(self) -> str:
        return self._tag_name

    @property
    def node_name(self) -> str:
        return self._tag_name

    @property
    def is_namespace_aware(self) -> bool:
        return self._namespace_aware

    @Node.prefix.setter  # type: ignore[attr-defined]
    def prefix(self, value: Optional[str]) -> None:
        """Rename the element's prefix, keeping its namespace and local name.

        Raises:
            InvalidCharacterError: If ``value`` is not an NCName
            NamespaceError: If the element has no namespace or the prefix is
                reserved for another namespace
        """
        value = value or ""
        if value and not is_valid_ncname(value):
            raise InvalidCharacterError(f"'{value}' is not a valid prefix")
        if not self._namespace_aware:
            raise NamespaceError("cannot set the prefix of a node created without a namespace")
        new_name = f"{value}:{self._local_name}" if value else self._local_name
        check_namespace_binding(self._namespace_uri, value, new_name)
        self._prefix = value
        self._tag_name = new_name

    # Attributes

    @property
    def attributes(self) -> NamedNodeMap:
        return self._attributes

    def has_attributes(self) -> bool:
        return len(self._attributes) > 0

    def has_attribute(self, name: str) -> bool:
        return name in self._attributes

    def has_attribute_ns(self, namespace_uri: Optional[str], local_name: str) -> bool:
        return self._attributes.get_named_item_ns(namespace_uri, local_name) is not None

    def get_attribute(self, name: str) -> str:
        """Value of the attribute named ``name``; ``""`` when absent."""
        attr = self._attributes.get_named_item(name)
        return attr.value if attr is not None else ""

    def get_attribute_ns(self, namespace_uri: Optional[str], local_name: str) -> str:
        attr = self._attributes.get_named_item_ns(namespace_uri, local_name)
        return attr.value if attr is not None else ""

    def get_attribute_node(self, name: str) -> Optional[Attr]:
        return self._attributes.get_named_item(name)

    def get_attribute_node_ns(self, namespace_uri: Optional[str], local_name: str) -> Optional[Attr]:
        return self._attributes.get_named_item_ns(namespace_uri, local_name)

    def set_attribute(self, name: str, value: str) -> None:
        """Create or update the attribute named ``name``.

        Raises:
            InvalidCharacterError: If ``name`` is not a valid XML name
        """
        check_xml_name(name)
        attr = self._attributes.get_named_item(name)
        if attr is None:
            attr = Attr(self._owner_document, name)
            self._attributes.set_named_item(attr)
        attr.value = value

    def set_attribute_ns(self, namespace_uri: Optional[str], qualified_name: str, value: str) -> None:
        """Create or update the attribute ``{namespace_uri}local``.

        An existing attribute with the same expanded name takes the prefix of
        ``qualified_name``.

        Raises:
            InvalidCharacterError: If ``qualified_name`` is malformed
            NamespaceError: If the prefix and namespace are inconsistent
        """
        uri = namespace_uri or ""
        prefix, local_name = split_qualified_name(qualified_name)
        check_namespace_binding(uri, prefix, qualified_name, is_attribute=True)
        attr = self._attributes.get_named_item_ns(uri, local_name)
        if attr is None:
            attr = Attr(self._owner_document, qualified_name, uri, prefix, local_name, True)
            self._attributes.set_named_item_ns(attr)
        elif attr.prefix != prefix:
            attr.prefix = prefix
        attr.value = value

    def remove_attribute(self, name: str) -> None:
        """Remove the attribute named ``name`` if present."""
        if name in self._attributes:
            self._attributes.remove_named_item(name)

    def remove_attribute_ns(self, namespace_uri: Optional[str], local_name: str) -> None:
        if self.has_attribute_ns(namespace_uri, local_name):
            self._attributes.remove_named_item_ns(namespace_uri, local_name)

    def set_attribute_node(self, attr: Attr) -> Optional[Attr]:
        """Add ``attr``, returning the attribute with the same name it replaced.

        Raises:
            WrongDocumentError: If ``attr`` belongs to another document
            InUseAttributeError: If ``attr`` is owned by another element
        """
        return self._attributes.set_named_item(attr)

    def set_attribute_node_ns(self, attr: Attr) -> Optional[Attr]:
        return self._attributes.set_named_item_ns(attr)

    def remove_attribute_node(self, attr: Attr) -> Attr:
        """Remove ``attr`` from this element.

        Raises:
            NotFoundError: If ``attr`` is not one of this element's attributes
        """
        if attr.owner_element is not self:
            raise NotFoundError(f"attribute '{attr.name}' does not belong to this element")
        return self._attributes.remove_named_item(attr.name)

    def iter_namespace_declarations(self) -> Iterator[Tuple[str, str]]:
        """Yield ``(prefix, uri)`` for each declaration attribute; ``""`` is the default."""
        for attr in self._attributes:
            declared = attr.declared_prefix
            if declared is not None:
                yield declared, attr.value

    # Namespace lookup

    def lookup_namespace_uri(self, prefix: Optional[str]) -> Optional[str]:
        """Namespace URI bound to ``prefix`` at this element, or None when unbound.

        The element's own name counts as a binding, then its declaration
        attributes, then those of each ancestor element. ``xmlns=""`` and
        ``xmlns:p=""`` make the prefix unbound.
        """
        prefix = prefix or ""
        if prefix == XML_PREFIX:
            return XML_NAMESPACE
        if prefix == XMLNS_PREFIX:
            return XMLNS_NAMESPACE
        element: Optional[Node] = self
        while element is not None and element.node_type == NodeType.ELEMENT_NODE:
            if element._namespace_aware and element._namespace_uri and element._prefix == prefix:  # type: ignore[attr-defined]
                return element._namespace_uri
            for declared, uri in element.iter_namespace_declarations():  # type: ignore[attr-defined]
                if declared == prefix:
                    return uri or None
            element = element._parent
        return None

    def lookup_prefix(self, namespace_uri: Optional[str]) -> Optional[str]:
        """A prefix bound to ``namespace_uri`` here and not shadowed below its declaration."""
        if not namespace_uri:
            return None
        if namespace_uri == XML_NAMESPACE:
            return XML_PREFIX
        if namespace_uri == XMLNS_NAMESPACE:
            return XMLNS_PREFIX
        element: Optional[Node] = self
        while element is not None and element.node_type == NodeType.ELEMENT_NODE:
            candidate = element._prefix  # type: ignore[attr-defined]
            if (
                element._namespace_uri == namespace_uri
                and candidate
                and self.lookup_namespace_uri(candidate) == namespace_uri
            ):
                return candidate
            for declared, uri in element.iter_namespace_declarations():  # type: ignore[attr-defined]
                if (
                    declared
                    and uri == namespace_uri
                    and self.lookup_namespace_uri(declared) == namespace_uri
                ):
                    return declared
            element = element._parent
        return None

    # Copies

    def _shallow_copy(self, document: Optional["Document"]) -> "Element":
        copy = Element(
            document,
            self._tag_name,
            self._namespace_uri,
            self._prefix,
            self._local_name,
            self._namespace_aware,
        )
        for attr in self._attributes:
            copy._attributes.set_named_item(attr._shallow_copy(document))
        return copy

    def __repr__(self) -> str:
        if self._namespace_uri:
            return f"<Element {{{self._namespace_uri}}}{self._local_name!s} {self._tag_name!r}>"
        return f"<Element {self._tag_name!r}>"
