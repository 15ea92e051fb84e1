"""Node base class: tree structure, hierarchy checks and shared queries.

Every concrete node kind (Document, DocumentType, Element, Attr, Text,
Comment, ProcessingInstruction) derives from ``Node``. The base class owns
the ordered child list and the parent back-reference and implements the
mutation operations (append, insert, replace, remove) so that the
parent/child invariants are maintained in one place:

* ``child.parent_node is p`` if and only if ``child`` is in ``p``'s children;
* a node is never its own ancestor;
* every node in a subtree has the same owner document.

All hierarchy, ownership and position checks run before the tree is
touched, so a failing call leaves it unchanged. Traversals use explicit
stacks so that deeply nested documents do not hit the recursion limit.
"""

from enum import IntEnum
from typing import (
    TYPE_CHECKING,
    Callable,
    ClassVar,
    FrozenSet,
    Iterator,
    List,
    Optional,
    Tuple,
)

from ..shared.constants import XML_NAMESPACE, XML_PREFIX, XMLNS_NAMESPACE, XMLNS_PREFIX
from ..shared.errors import HierarchyRequestError, NotFoundError, WrongDocumentError

if TYPE_CHECKING:
    from .document import Document
    from .element import Element
    from .namednodemap import NamedNodeMap


class NodeType(IntEnum):
    """W3C node type codes."""

    ELEMENT_NODE = 1
    ATTRIBUTE_NODE = 2
    TEXT_NODE = 3
    CDATA_SECTION_NODE = 4          # Reserved; never produced by the builder
    ENTITY_REFERENCE_NODE = 5       # Reserved
    ENTITY_NODE = 6                 # Reserved
    PROCESSING_INSTRUCTION_NODE = 7
    COMMENT_NODE = 8
    DOCUMENT_NODE = 9
    DOCUMENT_TYPE_NODE = 10
    DOCUMENT_FRAGMENT_NODE = 11     # Reserved


class Node:
    """Shared state and behavior of all node kinds."""

    node_type: ClassVar[NodeType]

    # Node kinds accepted as children; empty for leaf kinds
    _child_types: ClassVar[FrozenSet[NodeType]] = frozenset()

    def __init__(self, owner_document: Optional["Document"]) -> None:
        self._owner_document = owner_document
        self._parent: Optional[Node] = None
        self._children: List[Node] = []
        self._namespace_uri = ""
        self._prefix = ""
        self._local_name = ""

    # Identity and names

    @property
    def owner_document(self) -> Optional["Document"]:
        return self._owner_document

    @property
    def node_name(self) -> str:
        raise NotImplementedError

    @property
    def node_value(self) -> Optional[str]:
        return None

    @node_value.setter
    def node_value(self, value: Optional[str]) -> None:
        """Setting the value of a node without one has no effect."""

    @property
    def namespace_uri(self) -> str:
        return self._namespace_uri

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def local_name(self) -> str:
        return self._local_name

    @property
    def attributes(self) -> Optional["NamedNodeMap"]:
        return None

    def has_attributes(self) -> bool:
        return False

    # Structure

    @property
    def parent_node(self) -> Optional["Node"]:
        return self._parent

    @property
    def child_nodes(self) -> List["Node"]:
        """Snapshot of the children; mutating the list does not affect the tree."""
        return list(self._children)

    @property
    def first_child(self) -> Optional["Node"]:
        return self._children[0] if self._children else None

    @property
    def last_child(self) -> Optional["Node"]:
        return self._children[-1] if self._children else None

    @property
    def previous_sibling(self) -> Optional["Node"]:
        if self._parent is None:
            return None
        siblings = self._parent._children
        index = siblings.index(self)
        return siblings[index - 1] if index > 0 else None

    @property
    def next_sibling(self) -> Optional["Node"]:
        if self._parent is None:
            return None
        siblings = self._parent._children
        index = siblings.index(self)
        return siblings[index + 1] if index + 1 < len(siblings) else None

    def has_child_nodes(self) -> bool:
        return bool(self._children)

    def _document_for_children(self) -> Optional["Document"]:
        return self._owner_document

    def is_ancestor_of(self, node: "Node") -> bool:
        """True if this node is a proper ancestor of ``node``."""
        current = node._parent
        while current is not None:
            if current is self:
                return True
            current = current._parent
        return False

    # Mutation

    def append_child(self, new_child: "Node") -> "Node":
        """Append ``new_child``, detaching it from its current parent first.

        Raises:
            HierarchyRequestError: If this node cannot hold ``new_child``
            WrongDocumentError: If ``new_child`` belongs to another document
        """
        self._check_insertion(new_child, reference=None, replaced=None)
        new_child._detach()
        self._children.append(new_child)
        new_child._parent = self
        return new_child

    def insert_before(self, new_child: "Node", ref_child: Optional["Node"]) -> "Node":
        """Insert ``new_child`` before ``ref_child`` (append when it is None).

        Raises:
            HierarchyRequestError: If this node cannot hold ``new_child``
            WrongDocumentError: If ``new_child`` belongs to another document
            NotFoundError: If ``ref_child`` is not a child of this node
        """
        if ref_child is None:
            return self.append_child(new_child)
        if ref_child._parent is not self:
            raise NotFoundError("reference node is not a child of this node")
        if ref_child is new_child:
            ref_child = new_child.next_sibling
            if ref_child is None:
                return self.append_child(new_child)
        self._check_insertion(new_child, reference=ref_child, replaced=None)
        new_child._detach()
        self._children.insert(self._children.index(ref_child), new_child)
        new_child._parent = self
        return new_child

    def replace_child(self, new_child: "Node", old_child: "Node") -> "Node":
        """Replace ``old_child`` with ``new_child`` and return ``old_child``.

        Raises:
            HierarchyRequestError: If this node cannot hold ``new_child``
            WrongDocumentError: If ``new_child`` belongs to another document
            NotFoundError: If ``old_child`` is not a child of this node
        """
        if old_child._parent is not self:
            raise NotFoundError("node to replace is not a child of this node")
        if new_child is old_child:
            return old_child
        self._check_insertion(new_child, reference=None, replaced=old_child)
        new_child._detach()
        index = self._children.index(old_child)
        self._children[index] = new_child
        new_child._parent = self
        old_child._parent = None
        return old_child

    def remove_child(self, old_child: "Node") -> "Node":
        """Detach ``old_child`` and return it.

        Raises:
            NotFoundError: If ``old_child`` is not a child of this node
        """
        if old_child._parent is not self:
            raise NotFoundError("node to remove is not a child of this node")
        self._children.remove(old_child)
        old_child._parent = None
        return old_child

    def _detach(self) -> None:
        if self._parent is not None:
            self._parent._children.remove(self)
            self._parent = None

    def _append_unchecked(self, child: "Node") -> None:
        """Append a freshly created, parentless node (builder and copy paths)."""
        self._children.append(child)
        child._parent = self

    def _check_insertion(
        self,
        new_child: "Node",
        reference: Optional["Node"],
        replaced: Optional["Node"],
    ) -> None:
        if not isinstance(new_child, Node):
            raise TypeError(f"expected a Node, got {type(new_child).__name__}")
        if new_child.node_type not in self._child_types:
            raise HierarchyRequestError(
                f"{new_child.node_type.name} cannot be a child of {self.node_type.name}"
            )
        if new_child is self or new_child.is_ancestor_of(self):
            raise HierarchyRequestError("a node cannot be inserted under itself or its descendants")
        if new_child._owner_document is not self._document_for_children():
            raise WrongDocumentError("node belongs to a different document; import it first")
        self._check_child_constraints(new_child, reference, replaced)

    def _check_child_constraints(
        self,
        new_child: "Node",
        reference: Optional["Node"],
        replaced: Optional["Node"],
    ) -> None:
        """Kind-specific placement rules; overridden by Document."""

    # Content

    @property
    def text_content(self) -> Optional[str]:
        """Concatenated Text data of all descendants in document order."""
        parts = [
            node.node_value or ""
            for node in self.iter_descendants()
            if node.node_type in (NodeType.TEXT_NODE, NodeType.CDATA_SECTION_NODE)
        ]
        return "".join(parts)

    @text_content.setter
    def text_content(self, value: Optional[str]) -> None:
        for child in self._children:
            child._parent = None
        self._children = []
        if value:
            document = self._document_for_children()
            if document is not None:
                self._append_unchecked(document.create_text_node(value))

    def normalize(self) -> None:
        """Merge adjacent Text nodes and drop empty ones throughout the subtree."""
        stack: List[Node] = [self]
        while stack:
            node = stack.pop()
            merged: List[Node] = []
            for child in node._children:
                if child.node_type == NodeType.TEXT_NODE:
                    if not child.node_value:
                        child._parent = None
                        continue
                    previous = merged[-1] if merged else None
                    if previous is not None and previous.node_type == NodeType.TEXT_NODE:
                        previous.node_value = (previous.node_value or "") + (child.node_value or "")
                        child._parent = None
                        continue
                merged.append(child)
                if child._children:
                    stack.append(child)
            node._children = merged

    # Traversal and search

    def iter_descendants(self) -> Iterator["Node"]:
        """Yield all descendants (not this node) in document order."""
        stack = list(reversed(self._children))
        while stack:
            node = stack.pop()
            yield node
            if node._children:
                stack.extend(reversed(node._children))

    def _collect_elements(self, predicate: Callable[["Element"], bool]) -> List["Element"]:
        return [
            node for node in self.iter_descendants()
            if node.node_type == NodeType.ELEMENT_NODE and predicate(node)  # type: ignore[arg-type]
        ]

    def get_elements_by_tag_name(self, name: str) -> List["Element"]:
        """Descendant elements whose tag name is ``name`` (``"*"`` matches all).

        Returns a snapshot, not a live list.
        """
        if name == "*":
            return self._collect_elements(lambda element: True)
        return self._collect_elements(lambda element: element.tag_name == name)

    def get_elements_by_tag_name_ns(
        self, namespace_uri: Optional[str], local_name: str
    ) -> List["Element"]:
        """Descendant elements matching ``{namespace_uri, local_name}``.

        ``"*"`` is a wildcard for either part; ``None`` and ``""`` both mean
        no namespace.
        """
        uri = namespace_uri or ""

        def matches(element: "Element") -> bool:
            return (uri == "*" or element.namespace_uri == uri) and (
                local_name == "*" or element.local_name == local_name
            )

        return self._collect_elements(matches)

    # Namespace lookup

    def _namespace_context(self) -> Optional["Node"]:
        """Node that answers namespace lookups on this node's behalf."""
        return self._parent

    def lookup_namespace_uri(self, prefix: Optional[str]) -> Optional[str]:
        """Namespace URI bound to ``prefix`` in scope, or None when unbound.

        ``None`` or ``""`` asks for the default namespace.
        """
        if prefix == XML_PREFIX:
            return XML_NAMESPACE
        if prefix == XMLNS_PREFIX:
            return XMLNS_NAMESPACE
        context = self._namespace_context()
        if context is None:
            return None
        return context.lookup_namespace_uri(prefix)

    def lookup_prefix(self, namespace_uri: Optional[str]) -> Optional[str]:
        """A prefix bound to ``namespace_uri`` in scope, or None."""
        if not namespace_uri:
            return None
        if namespace_uri == XML_NAMESPACE:
            return XML_PREFIX
        if namespace_uri == XMLNS_NAMESPACE:
            return XMLNS_PREFIX
        context = self._namespace_context()
        if context is None:
            return None
        return context.lookup_prefix(namespace_uri)

    def is_default_namespace(self, namespace_uri: Optional[str]) -> bool:
        return self.lookup_namespace_uri(None) == (namespace_uri or None)

    # Copies and comparison

    def _shallow_copy(self, document: Optional["Document"]) -> "Node":
        """New parentless node of the same kind and payload owned by ``document``."""
        raise NotImplementedError

    def _copy_tree(self, document: Optional["Document"], deep: bool) -> "Node":
        root_copy = self._shallow_copy(document)
        if not deep:
            return root_copy
        # A copied Document owns the copies of its children
        if root_copy.node_type == NodeType.DOCUMENT_NODE:
            document = root_copy  # type: ignore[assignment]
        stack: List[Tuple[Node, Node]] = [(self, root_copy)]
        while stack:
            original, copy = stack.pop()
            for child in original._children:
                child_copy = child._shallow_copy(document)
                copy._append_unchecked(child_copy)
                if child._children:
                    stack.append((child, child_copy))
        return root_copy

    def clone_node(self, deep: bool = False) -> "Node":
        """Parentless copy owned by the same document; children only when ``deep``."""
        return self._copy_tree(self._owner_document, deep)

    def is_same_node(self, other: Optional["Node"]) -> bool:
        return self is other

    def _equality_key(self) -> Tuple:
        return (
            self.node_type,
            self.node_name,
            self.local_name,
            self.namespace_uri,
            self.prefix,
            self.node_value,
        )

    def is_equal_node(self, other: Optional["Node"]) -> bool:
        """Structural equality: same kinds, names, values, attributes and children."""
        if other is None:
            return False
        stack: List[Tuple[Node, Node]] = [(self, other)]
        while stack:
            left, right = stack.pop()
            if left._equality_key() != right._equality_key():
                return False
            if not _attributes_equal(left, right):
                return False
            if len(left._children) != len(right._children):
                return False
            stack.extend(zip(left._children, right._children))
        return True

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.node_name!r}>"


def _attributes_equal(left: Node, right: Node) -> bool:
    left_attrs = left.attributes
    right_attrs = right.attributes
    if left_attrs is None or right_attrs is None:
        return left_attrs is None and right_attrs is None
    if len(left_attrs) != len(right_attrs):
        return False
    for attr in left_attrs:
        match = right_attrs.get_named_item(attr.name)
        if match is None or attr._equality_key() != match._equality_key():
            return False
    return True
