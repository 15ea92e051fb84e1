"""Attribute nodes."""

from typing import TYPE_CHECKING, Optional

from ..character.names import check_namespace_binding, is_valid_ncname
from ..shared.constants import XMLNS_PREFIX
from ..shared.errors import InvalidCharacterError, NamespaceError
from .node import Node, NodeType

if TYPE_CHECKING:
    from .document import Document
    from .element import Element


class Attr(Node):
    """Name/value pair owned by at most one element.

    An attribute is never part of the child tree: ``parent_node`` is always
    None and its only back-reference is ``owner_element``.
    """

    node_type = NodeType.ATTRIBUTE_NODE

    def __init__(
        self,
        owner_document: Optional["Document"],
        qualified_name: str,
        namespace_uri: str = "",
        prefix: str = "",
        local_name: str = "",
        namespace_aware: bool = False,
        value: str = "",
    ) -> None:
        super().__init__(owner_document)
        self._name = qualified_name
        self._namespace_uri = namespace_uri
        self._prefix = prefix
        self._local_name = local_name or qualified_name.partition(":")[2] or qualified_name
        self._namespace_aware = namespace_aware
        self._value = value
        self._owner_element: Optional["Element"] = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def node_name(self) -> str:
        return self._name

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, value: str) -> None:
        self._value = value

    @property
    def node_value(self) -> str:
        return self._value

    @node_value.setter
    def node_value(self, value: Optional[str]) -> None:
        self._value = value or ""

    @property
    def text_content(self) -> str:
        return self._value

    @text_content.setter
    def text_content(self, value: Optional[str]) -> None:
        self._value = value or ""

    @property
    def specified(self) -> bool:
        return True

    @property
    def owner_element(self) -> Optional["Element"]:
        return self._owner_element

    @property
    def parent_node(self) -> None:
        return None

    @property
    def previous_sibling(self) -> None:
        return None

    @property
    def next_sibling(self) -> None:
        return None

    @property
    def is_namespace_aware(self) -> bool:
        """False for attributes created without namespace processing."""
        return self._namespace_aware

    @property
    def is_namespace_declaration(self) -> bool:
        """True for ``xmlns`` and ``xmlns:*`` attributes."""
        return self._name == XMLNS_PREFIX or self._name.startswith(XMLNS_PREFIX + ":")

    @property
    def declared_prefix(self) -> Optional[str]:
        """Prefix bound by a declaration attribute; ``""`` for the default namespace."""
        if self._name == XMLNS_PREFIX:
            return ""
        if self._name.startswith(XMLNS_PREFIX + ":"):
            return self._name[len(XMLNS_PREFIX) + 1:]
        return None

    @Node.prefix.setter  # type: ignore[attr-defined]
    def prefix(self, value: Optional[str]) -> None:
        """Rename the attribute's prefix, keeping its namespace and local name.

        Raises:
            InvalidCharacterError: If ``value`` is not an NCName
            NamespaceError: If the attribute has no namespace or the prefix
                is reserved for another namespace
        """
        value = value or ""
        if value and not is_valid_ncname(value):
            raise InvalidCharacterError(f"'{value}' is not a valid prefix")
        if not self._namespace_aware:
            raise NamespaceError("cannot set the prefix of a node created without a namespace")
        if self._name == XMLNS_PREFIX:
            raise NamespaceError("cannot set a prefix on the 'xmlns' attribute")
        new_name = f"{value}:{self._local_name}" if value else self._local_name
        check_namespace_binding(self._namespace_uri, value, new_name, is_attribute=True)
        owner = self._owner_element
        if (
            owner is not None
            and new_name != self._name
            and owner.attributes.get_named_item(new_name) is not None
        ):
            raise NamespaceError(f"element already has an attribute named '{new_name}'")
        old_name = self._name
        self._prefix = value
        self._name = new_name
        if self._owner_element is not None:
            self._owner_element.attributes._rename(self, old_name)

    def _namespace_context(self) -> Optional[Node]:
        return self._owner_element

    def _shallow_copy(self, document: Optional["Document"]) -> "Attr":
        return Attr(
            document,
            self._name,
            self._namespace_uri,
            self._prefix,
            self._local_name,
            self._namespace_aware,
            self._value,
        )

    def __repr__(self) -> str:
        return f"<Attr {self._name}={self._value!r}>"
