"""Namespace normalization.

Decides, for every element of a tree, which qualified names to write and
which ``xmlns`` / ``xmlns:p`` declarations to place on it so that the
written document binds every element and attribute to the namespace it
carries in the tree.

The walk is depth first and carries the in-scope bindings inherited from
ancestors (``""`` is the default namespace). At each element:

1. the element's own declaration attributes update the scope; those that
   only repeat an inherited binding are redundant and not written, and
   ``xmlns:p=""`` undeclares ``p`` without being written;
2. the element's expanded name is checked against the scope. A missing
   binding is declared. A prefix whose binding on this very element points
   elsewhere cannot be reused, so another prefix already bound to the URI
   is used, or a synthetic ``NS1``, ``NS2``, ... prefix is invented. An
   unprefixed name whose default namespace is bound to another URI is
   handled the same way. An element in no namespace undeclares a non-empty
   default with ``xmlns=""``;
3. namespaced attributes get the same treatment, except that the default
   namespace never applies to them, so unprefixed ones always get a prefix.

The result is a ``NamespacePlan`` side table consulted by the serializer.
``NamespaceNormalizer.apply`` realizes the same decisions in the tree
itself. Nodes created without namespace processing keep their names as-is.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple

from ..shared.config import DOMConfiguration
from ..shared.constants import (
    SYNTHETIC_PREFIX_BASE,
    XML_NAMESPACE,
    XML_PREFIX,
    XMLNS_NAMESPACE,
    XMLNS_PREFIX,
)
from ..shared.errors import NamespaceError
from ..shared.logging import get_logger
from .attr import Attr
from .element import Element
from .node import Node, NodeType

Scope = Dict[str, str]


@dataclass
class ElementPlan:
    """Serialization decisions for one element."""

    qualified_name: str
    prefix: str = ""
    declarations: List[Tuple[str, str]] = field(default_factory=list)
    attributes: List[Tuple[str, str]] = field(default_factory=list)
    added_declarations: List[Tuple[str, str]] = field(default_factory=list)
    attribute_renames: List[Tuple[Attr, str]] = field(default_factory=list)
    declarations_suppressed: int = 0


class NamespacePlan:
    """Per-element decisions for a whole subtree."""

    def __init__(self) -> None:
        self._plans: Dict[Element, ElementPlan] = {}
        self.synthetic_prefixes = 0

    def __len__(self) -> int:
        return len(self._plans)

    def __contains__(self, element: object) -> bool:
        return element in self._plans

    def for_element(self, element: Element) -> ElementPlan:
        return self._plans[element]

    def items(self) -> Iterator[Tuple[Element, ElementPlan]]:
        return iter(list(self._plans.items()))

    @property
    def declarations_written(self) -> int:
        return sum(len(p.declarations) for p in self._plans.values())

    @property
    def declarations_suppressed(self) -> int:
        return sum(p.declarations_suppressed for p in self._plans.values())


def _declaration_name(prefix: str) -> str:
    return f"{XMLNS_PREFIX}:{prefix}" if prefix else XMLNS_PREFIX


def _top_elements(root: Node) -> List[Element]:
    if root.node_type == NodeType.ELEMENT_NODE:
        return [root]  # type: ignore[list-item]
    return [
        child for child in root.child_nodes  # type: ignore[misc]
        if child.node_type == NodeType.ELEMENT_NODE
    ]


class NamespaceNormalizer:
    """Computes and applies namespace declarations for a subtree."""

    def __init__(
        self,
        configuration: Optional[DOMConfiguration] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.configuration = configuration or DOMConfiguration()
        self.logger = get_logger(__name__, correlation_id, "namespace_normalizer")
        self._counter = 0

    def plan(self, root: Node) -> NamespacePlan:
        """Compute the decisions for every element under (and including) ``root``.

        Declarations inherited from outside ``root`` are ignored: the output
        of a subtree is self-contained.

        Raises:
            NamespaceError: If two attributes of one element end up with the
                same qualified or expanded name
        """
        self._counter = 0
        result = NamespacePlan()
        stack: List[Tuple[Element, Scope]] = [
            (element, {}) for element in reversed(_top_elements(root))
        ]
        while stack:
            element, parent_scope = stack.pop()
            if self.configuration.namespaces:
                element_plan, scope = self._plan_element(element, parent_scope, result)
            else:
                element_plan, scope = self._plan_opaque(element), parent_scope
            if not self.configuration.namespace_declarations:
                element_plan.declarations_suppressed += len(element_plan.declarations)
                element_plan.declarations = []
            result._plans[element] = element_plan
            for child in reversed(element._children):
                if child.node_type == NodeType.ELEMENT_NODE:
                    stack.append((child, scope))  # type: ignore[arg-type]

        self.logger.debug(
            "Namespace plan computed",
            extra={
                "elements": len(result),
                "synthetic_prefixes": result.synthetic_prefixes,
                "declarations_suppressed": result.declarations_suppressed,
            },
        )
        return result

    def apply(self, root: Node) -> NamespacePlan:
        """Rewrite the tree in place so that it matches its namespace plan.

        Prefixes are renamed and missing declaration attributes are added;
        redundant declarations already present are left alone.
        """
        result = self.plan(root)
        for element, element_plan in result.items():
            for attr, new_prefix in element_plan.attribute_renames:
                attr.prefix = new_prefix
            if element.is_namespace_aware and element.prefix != element_plan.prefix:
                element.prefix = element_plan.prefix
            for prefix, uri in element_plan.added_declarations:
                name = _declaration_name(prefix)
                existing = element.get_attribute_node(name)
                if existing is not None:
                    existing.value = uri
                else:
                    element.set_attribute_ns(XMLNS_NAMESPACE, name, uri)
        self.logger.info(
            "Namespace normalization applied",
            extra={"elements": len(result), "synthetic_prefixes": result.synthetic_prefixes},
        )
        return result

    def _plan_opaque(self, element: Element) -> ElementPlan:
        element_plan = ElementPlan(element.tag_name, element.prefix)
        for attr in element.attributes:
            target = (
                element_plan.declarations if attr.is_namespace_declaration
                else element_plan.attributes
            )
            target.append((attr.name, attr.value))
        return element_plan

    def _synthesize(self, scope: Scope, locked: Set[str], result: NamespacePlan) -> str:
        while True:
            self._counter += 1
            candidate = f"{SYNTHETIC_PREFIX_BASE}{self._counter}"
            if candidate not in scope and candidate not in locked:
                result.synthetic_prefixes += 1
                self.logger.debug("Synthesized namespace prefix", extra={"prefix": candidate})
                return candidate

    @staticmethod
    def _bound_prefix(scope: Scope, namespace_uri: str) -> Optional[str]:
        """A non-default prefix currently bound to ``namespace_uri``."""
        for prefix, uri in scope.items():
            if prefix and uri == namespace_uri:
                return prefix
        return None

    def _plan_element(
        self, element: Element, parent_scope: Scope, result: NamespacePlan
    ) -> Tuple[ElementPlan, Scope]:
        scope: Scope = dict(parent_scope)
        element_plan = ElementPlan(element.tag_name, element.prefix)

        # Prefixes that cannot be rebound on this element
        locked: Set[str] = set()
        # Declarations to write: prefix -> URI, in insertion order
        emitted: Dict[str, str] = {}
        regular: List[Attr] = []

        for attr in element.attributes:
            declared = attr.declared_prefix
            if declared is None:
                regular.append(attr)
                continue
            locked.add(declared)
            if attr.value:
                scope[declared] = attr.value
            else:
                scope.pop(declared, None)
            if parent_scope.get(declared, "") == attr.value or (declared and not attr.value):
                element_plan.declarations_suppressed += 1
            else:
                emitted[declared] = attr.value

        def declare(prefix: str, uri: str) -> None:
            emitted[prefix] = uri
            locked.add(prefix)
            element_plan.added_declarations.append((prefix, uri))
            if uri:
                scope[prefix] = uri
            else:
                scope.pop(prefix, None)

        if element.is_namespace_aware:
            uri, prefix = element.namespace_uri, element.prefix
            if not uri:
                if scope.get("", ""):
                    declare("", "")
            elif prefix == XML_PREFIX:
                pass
            elif not prefix:
                if scope.get("", "") == uri:
                    pass
                elif not scope.get("", ""):
                    declare("", uri)
                else:
                    new_prefix = self._bound_prefix(scope, uri)
                    if new_prefix is None:
                        new_prefix = self._synthesize(scope, locked, result)
                        declare(new_prefix, uri)
                    element_plan.prefix = new_prefix
            elif scope.get(prefix) != uri:
                if prefix in locked:
                    new_prefix = self._bound_prefix(scope, uri)
                    if new_prefix is None:
                        new_prefix = self._synthesize(scope, locked, result)
                        declare(new_prefix, uri)
                    element_plan.prefix = new_prefix
                else:
                    declare(prefix, uri)
            if element_plan.prefix:
                locked.add(element_plan.prefix)
                element_plan.qualified_name = f"{element_plan.prefix}:{element.local_name}"
            else:
                element_plan.qualified_name = element.local_name

        expanded_names: Set[Tuple[str, str]] = set()
        for attr in regular:
            name = attr.name
            uri = attr.namespace_uri
            if attr.is_namespace_aware and uri:
                if (uri, attr.local_name) in expanded_names:
                    raise NamespaceError(
                        f"duplicate attribute {{{uri}}}{attr.local_name} on <{element.tag_name}>"
                    )
                expanded_names.add((uri, attr.local_name))
                prefix = attr.prefix
                if uri == XML_NAMESPACE:
                    pass
                elif prefix and scope.get(prefix) == uri:
                    locked.add(prefix)
                elif prefix and prefix not in locked:
                    declare(prefix, uri)
                else:
                    new_prefix = self._bound_prefix(scope, uri)
                    if new_prefix is None:
                        new_prefix = self._synthesize(scope, locked, result)
                        declare(new_prefix, uri)
                    locked.add(new_prefix)
                    element_plan.attribute_renames.append((attr, new_prefix))
                    name = f"{new_prefix}:{attr.local_name}"
            element_plan.attributes.append((name, attr.value))

        if "" in emitted:
            element_plan.declarations.append((XMLNS_PREFIX, emitted.pop("")))
        element_plan.declarations.extend(
            (_declaration_name(prefix), uri) for prefix, uri in emitted.items()
        )

        written = [name for name, _ in element_plan.declarations]
        written.extend(name for name, _ in element_plan.attributes)
        if len(set(written)) != len(written):
            raise NamespaceError(
                f"attributes of <{element_plan.qualified_name}> collide after namespace fixup"
            )
        return element_plan, scope
