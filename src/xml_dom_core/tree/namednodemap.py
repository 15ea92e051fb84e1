"""Attribute container keyed by qualified name."""

from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

from ..shared.errors import (
    HierarchyRequestError,
    InUseAttributeError,
    NotFoundError,
    WrongDocumentError,
)
from .attr import Attr

if TYPE_CHECKING:
    from .element import Element


class NamedNodeMap:
    """Ordered mapping from qualified name to ``Attr``.

    Backed by a dict, so iteration follows insertion order and replacing an
    attribute with the same qualified name keeps its position. Every
    attribute in the map has ``owner_element`` set to the map's element.
    """

    def __init__(self, owner_element: "Element") -> None:
        self._owner_element = owner_element
        self._items: Dict[str, Attr] = {}

    @property
    def owner_element(self) -> "Element":
        return self._owner_element

    @property
    def length(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Attr]:
        return iter(list(self._items.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def item(self, index: int) -> Optional[Attr]:
        """Attribute at ``index`` in iteration order, or None when out of range."""
        if 0 <= index < len(self._items):
            return list(self._items.values())[index]
        return None

    def names(self) -> List[str]:
        return list(self._items)

    def get_named_item(self, name: str) -> Optional[Attr]:
        return self._items.get(name)

    def get_named_item_ns(self, namespace_uri: Optional[str], local_name: str) -> Optional[Attr]:
        uri = namespace_uri or ""
        for attr in self._items.values():
            if attr.namespace_uri == uri and attr.local_name == local_name:
                return attr
        return None

    def _check_attr(self, attr: Attr) -> None:
        if not isinstance(attr, Attr):
            raise HierarchyRequestError("only Attr nodes can be stored in a NamedNodeMap")
        if attr.owner_document is not self._owner_element.owner_document:
            raise WrongDocumentError("attribute belongs to a different document")
        if attr.owner_element is not None and attr.owner_element is not self._owner_element:
            raise InUseAttributeError(
                f"attribute '{attr.name}' is already in use by another element"
            )

    def set_named_item(self, attr: Attr) -> Optional[Attr]:
        """Store ``attr`` under its qualified name and return the attribute it replaced.

        Raises:
            HierarchyRequestError: If ``attr`` is not an Attr
            WrongDocumentError: If ``attr`` belongs to another document
            InUseAttributeError: If ``attr`` is owned by another element
        """
        self._check_attr(attr)
        existing = self._items.get(attr.name)
        if existing is attr:
            return None
        self._items[attr.name] = attr
        attr._owner_element = self._owner_element
        if existing is not None:
            existing._owner_element = None
        return existing

    def set_named_item_ns(self, attr: Attr) -> Optional[Attr]:
        """Store ``attr``, replacing any attribute with the same expanded name.

        Raises:
            HierarchyRequestError: If ``attr`` is not an Attr
            WrongDocumentError: If ``attr`` belongs to another document
            InUseAttributeError: If ``attr`` is owned by another element
        """
        self._check_attr(attr)
        existing = self.get_named_item_ns(attr.namespace_uri, attr.local_name)
        if existing is attr:
            return None
        if existing is None or existing.name == attr.name:
            return self.set_named_item(attr)

        clashing = self._items.get(attr.name)
        if clashing is not None:
            clashing._owner_element = None
        # Take over the replaced attribute's position
        rebuilt: Dict[str, Attr] = {}
        for key, value in self._items.items():
            if value is existing:
                rebuilt[attr.name] = attr
            elif key != attr.name:
                rebuilt[key] = value
        self._items = rebuilt
        existing._owner_element = None
        attr._owner_element = self._owner_element
        return existing

    def remove_named_item(self, name: str) -> Attr:
        """Remove and return the attribute named ``name``.

        Raises:
            NotFoundError: If no attribute has that name
        """
        attr = self._items.pop(name, None)
        if attr is None:
            raise NotFoundError(f"no attribute named '{name}'")
        attr._owner_element = None
        return attr

    def remove_named_item_ns(self, namespace_uri: Optional[str], local_name: str) -> Attr:
        """Remove and return the attribute with the given expanded name.

        Raises:
            NotFoundError: If no attribute matches
        """
        attr = self.get_named_item_ns(namespace_uri, local_name)
        if attr is None:
            raise NotFoundError(f"no attribute {{{namespace_uri or ''}}}{local_name}")
        return self.remove_named_item(attr.name)

    def _rename(self, attr: Attr, old_name: str) -> None:
        """Re-key ``attr`` after its qualified name changed, keeping its position."""
        self._items = {
            (attr.name if key == old_name else key): value
            for key, value in self._items.items()
        }

    def __repr__(self) -> str:
        return f"<NamedNodeMap {list(self._items)}>"
