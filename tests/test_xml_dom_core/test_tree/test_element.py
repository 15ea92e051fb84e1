"""Tests for elements, attributes and namespace lookup."""

import pytest

from xml_dom_core.shared.constants import XML_NAMESPACE, XMLNS_NAMESPACE
from xml_dom_core.shared.errors import (
    InUseAttributeError,
    InvalidCharacterError,
    NamespaceError,
    NotFoundError,
)
from xml_dom_core.tree import Attr, Document, Element


@pytest.fixture
def document() -> Document:
    return Document()


class TestElementNames:
    """Test element naming."""

    def test_level_one_element(self, document: Document) -> None:
        """Test elements created without namespaces keep their name opaque."""
        element = document.create_element("p:item")

        assert element.tag_name == "p:item"
        assert element.node_name == "p:item"
        assert element.namespace_uri == ""
        assert element.prefix == ""
        assert element.local_name == "item"
        assert element.is_namespace_aware is False

    def test_namespace_aware_element(self, document: Document) -> None:
        """Test qualified names are split into prefix and local name."""
        element = document.create_element_ns("urn:x", "x:item")

        assert element.tag_name == "x:item"
        assert element.namespace_uri == "urn:x"
        assert element.prefix == "x"
        assert element.local_name == "item"
        assert element.is_namespace_aware is True

    def test_set_prefix(self, document: Document) -> None:
        """Test renaming the prefix keeps namespace and local name."""
        element = document.create_element_ns("urn:x", "x:item")
        element.prefix = "y"

        assert element.tag_name == "y:item"
        assert element.namespace_uri == "urn:x"

        element.prefix = None
        assert element.tag_name == "item"

    def test_set_prefix_errors(self, document: Document) -> None:
        """Test invalid prefix assignments."""
        aware = document.create_element_ns("urn:x", "x:item")
        plain = document.create_element("item")
        unbound = document.create_element_ns(None, "item")

        with pytest.raises(InvalidCharacterError):
            aware.prefix = "1bad"
        with pytest.raises(NamespaceError):
            plain.prefix = "p"
        with pytest.raises(NamespaceError):
            unbound.prefix = "p"
        with pytest.raises(NamespaceError):
            aware.prefix = "xml"
        assert aware.tag_name == "x:item"


class TestAttributes:
    """Test the element attribute API."""

    def test_set_and_get_attribute(self, document: Document) -> None:
        """Test basic attribute access."""
        element = document.create_element("e")
        element.set_attribute("id", "1")

        assert element.get_attribute("id") == "1"
        assert element.has_attribute("id")
        assert element.has_attributes()
        assert element.get_attribute("missing") == ""
        assert element.get_attribute_node("missing") is None

    def test_set_attribute_updates_in_place(self, document: Document) -> None:
        """Test re-setting an attribute keeps the node and its position."""
        element = document.create_element("e")
        element.set_attribute("a", "1")
        element.set_attribute("b", "2")
        node = element.get_attribute_node("a")
        element.set_attribute("a", "3")

        assert element.get_attribute_node("a") is node
        assert element.attributes.names() == ["a", "b"]
        assert element.get_attribute("a") == "3"

    def test_set_attribute_invalid_name(self, document: Document) -> None:
        """Test attribute names are validated."""
        with pytest.raises(InvalidCharacterError):
            document.create_element("e").set_attribute("1x", "v")

    def test_remove_attribute(self, document: Document) -> None:
        """Test removal, including a missing name."""
        element = document.create_element("e")
        element.set_attribute("a", "1")
        attr = element.get_attribute_node("a")
        element.remove_attribute("a")
        element.remove_attribute("a")

        assert not element.has_attribute("a")
        assert attr.owner_element is None

    def test_namespaced_attributes(self, document: Document) -> None:
        """Test the NS variants of the attribute API."""
        element = document.create_element_ns("urn:e", "e")
        element.set_attribute_ns("urn:a", "a:x", "1")

        assert element.get_attribute_ns("urn:a", "x") == "1"
        assert element.has_attribute_ns("urn:a", "x")
        assert element.get_attribute("a:x") == "1"

        element.set_attribute_ns("urn:a", "b:x", "2")
        node = element.get_attribute_node_ns("urn:a", "x")
        assert node.name == "b:x"
        assert node.value == "2"
        assert len(element.attributes) == 1

        element.remove_attribute_ns("urn:a", "x")
        assert not element.has_attribute_ns("urn:a", "x")

    def test_set_attribute_ns_errors(self, document: Document) -> None:
        """Test namespace checks on attributes."""
        element = document.create_element("e")

        with pytest.raises(NamespaceError):
            element.set_attribute_ns(None, "p:x", "v")
        with pytest.raises(NamespaceError):
            element.set_attribute_ns("urn:x", "xmlns", "v")
        with pytest.raises(InvalidCharacterError):
            element.set_attribute_ns("urn:x", "p:", "v")

    def test_attribute_node_ownership(self, document: Document) -> None:
        """Test set_attribute_node and the in-use check."""
        first = document.create_element("first")
        second = document.create_element("second")
        attr = document.create_attribute("a")
        attr.value = "v"

        assert first.set_attribute_node(attr) is None
        assert attr.owner_element is first
        with pytest.raises(InUseAttributeError):
            second.set_attribute_node(attr)

        replacement = document.create_attribute("a")
        assert first.set_attribute_node(replacement) is attr
        assert attr.owner_element is None
        second.set_attribute_node(attr)
        assert attr.owner_element is second

    def test_remove_attribute_node(self, document: Document) -> None:
        """Test removing an attribute node this element does not own."""
        element = document.create_element("e")
        element.set_attribute("a", "1")
        foreign = document.create_attribute("a")

        with pytest.raises(NotFoundError):
            element.remove_attribute_node(foreign)
        removed = element.remove_attribute_node(element.get_attribute_node("a"))
        assert removed.name == "a"

    def test_attr_is_outside_the_tree(self, document: Document) -> None:
        """Test attributes have no parent or siblings."""
        element = document.create_element("e")
        element.set_attribute("a", "1")
        element.set_attribute("b", "2")
        attr = element.get_attribute_node("a")

        assert attr.parent_node is None
        assert attr.next_sibling is None
        assert attr.specified is True
        assert attr.node_value == "1"
        assert attr.text_content == "1"


class TestAttr:
    """Test Attr specifics."""

    def test_declaration_attributes(self, document: Document) -> None:
        """Test xmlns attributes report the prefix they declare."""
        default = document.create_attribute_ns(XMLNS_NAMESPACE, "xmlns")
        prefixed = document.create_attribute_ns(XMLNS_NAMESPACE, "xmlns:p")
        plain = document.create_attribute("id")

        assert default.is_namespace_declaration
        assert default.declared_prefix == ""
        assert prefixed.declared_prefix == "p"
        assert prefixed.local_name == "p"
        assert plain.declared_prefix is None

    def test_set_attr_prefix_renames_in_owner(self, document: Document) -> None:
        """Test a prefix change re-keys the owner's map without moving it."""
        element = document.create_element("e")
        element.set_attribute("first", "1")
        element.set_attribute_ns("urn:a", "a:x", "2")
        element.set_attribute("last", "3")
        attr = element.get_attribute_node("a:x")
        attr.prefix = "b"

        assert element.attributes.names() == ["first", "b:x", "last"]
        assert element.get_attribute("b:x") == "2"

    def test_set_attr_prefix_errors(self, document: Document) -> None:
        """Test prefix rules on attributes."""
        element = document.create_element("e")
        element.set_attribute_ns("urn:a", "a:x", "1")
        element.set_attribute("b:x", "2")
        attr = element.get_attribute_node("a:x")

        with pytest.raises(NamespaceError, match="already has an attribute"):
            attr.prefix = "b"
        with pytest.raises(NamespaceError):
            document.create_attribute("plain").prefix = "p"
        with pytest.raises(NamespaceError):
            document.create_attribute_ns(XMLNS_NAMESPACE, "xmlns").prefix = "p"
        assert attr.name == "a:x"

    def test_attr_lookup_uses_owner_element(self, document: Document) -> None:
        """Test attribute namespace lookups go through the owner element."""
        element = document.create_element_ns("urn:p", "p:e")
        element.set_attribute("id", "1")
        attr = element.get_attribute_node("id")

        assert attr.lookup_namespace_uri("p") == "urn:p"
        assert document.create_attribute("x").lookup_namespace_uri("p") is None


class TestElementLookup:
    """Test namespace lookup on elements."""

    def build(self, document: Document) -> Element:
        root = document.create_element("r")
        root.set_attribute_ns(XMLNS_NAMESPACE, "xmlns:p", "urn:a")
        root.set_attribute_ns(XMLNS_NAMESPACE, "xmlns", "urn:default")
        middle = document.create_element("m")
        leaf = document.create_element("leaf")
        root.append_child(middle)
        middle.append_child(leaf)
        return root

    def test_inherited_declaration(self, document: Document) -> None:
        """Test an ancestor declaration is visible when not shadowed."""
        root = self.build(document)
        leaf = root.first_child.first_child

        assert leaf.lookup_namespace_uri("p") == "urn:a"
        assert leaf.lookup_namespace_uri(None) == "urn:default"
        assert leaf.lookup_prefix("urn:a") == "p"
        assert leaf.is_default_namespace("urn:default")

    def test_shadowing(self, document: Document) -> None:
        """Test the innermost declaration wins."""
        root = self.build(document)
        middle = root.first_child
        middle.set_attribute_ns(XMLNS_NAMESPACE, "xmlns:p", "urn:b")
        leaf = middle.first_child

        assert leaf.lookup_namespace_uri("p") == "urn:b"
        assert root.lookup_namespace_uri("p") == "urn:a"
        assert leaf.lookup_prefix("urn:a") is None

    def test_undeclaration(self, document: Document) -> None:
        """Test xmlns="" removes the default namespace."""
        root = self.build(document)
        middle = root.first_child
        middle.set_attribute_ns(XMLNS_NAMESPACE, "xmlns", "")

        assert middle.first_child.lookup_namespace_uri(None) is None

    def test_element_name_is_a_binding(self, document: Document) -> None:
        """Test an element's own prefix counts as in scope."""
        element = document.create_element_ns("urn:q", "q:e")

        assert element.lookup_namespace_uri("q") == "urn:q"
        assert element.lookup_prefix("urn:q") == "q"
        assert element.lookup_namespace_uri("other") is None
        assert element.lookup_namespace_uri("xml") == XML_NAMESPACE

    def test_iter_namespace_declarations(self, document: Document) -> None:
        """Test declarations are listed in attribute order."""
        root = self.build(document)

        assert list(root.iter_namespace_declarations()) == [
            ("p", "urn:a"),
            ("", "urn:default"),
        ]


class TestNamedNodeMap:
    """Test the attribute container."""

    def test_item_and_iteration(self, document: Document) -> None:
        """Test indexed access follows insertion order."""
        element = document.create_element("e")
        for name in ("z", "a", "m"):
            element.set_attribute(name, name.upper())
        attributes = element.attributes

        assert attributes.length == 3
        assert attributes.item(0).name == "z"
        assert attributes.item(2).name == "m"
        assert attributes.item(3) is None
        assert attributes.item(-1) is None
        assert [attr.value for attr in attributes] == ["Z", "A", "M"]
        assert "a" in attributes
        assert attributes.owner_element is element

    def test_set_named_item_ns_takes_position(self, document: Document) -> None:
        """Test replacing by expanded name keeps the old position."""
        element = document.create_element("e")
        element.set_attribute("first", "1")
        element.set_attribute_ns("urn:a", "a:x", "2")
        element.set_attribute("last", "3")
        old = element.get_attribute_node("a:x")
        new = document.create_attribute_ns("urn:a", "b:x")

        assert element.attributes.set_named_item_ns(new) is old
        assert element.attributes.names() == ["first", "b:x", "last"]
        assert old.owner_element is None
        assert new.owner_element is element

    def test_set_same_item_twice(self, document: Document) -> None:
        """Test re-setting an attribute already in the map returns None."""
        element = document.create_element("e")
        attr = document.create_attribute("a")
        element.attributes.set_named_item(attr)

        assert element.attributes.set_named_item(attr) is None
        assert element.attributes.set_named_item_ns(attr) is None
        assert len(element.attributes) == 1

    def test_remove_missing(self, document: Document) -> None:
        """Test NotFoundError on removal of absent items."""
        attributes = document.create_element("e").attributes

        with pytest.raises(NotFoundError):
            attributes.remove_named_item("a")
        with pytest.raises(NotFoundError):
            attributes.remove_named_item_ns("urn:a", "a")

    def test_only_attributes_accepted(self, document: Document) -> None:
        """Test non-Attr nodes are rejected."""
        from xml_dom_core.shared.errors import HierarchyRequestError

        with pytest.raises(HierarchyRequestError):
            document.create_element("e").attributes.set_named_item(
                document.create_element("x")  # type: ignore[arg-type]
            )

    def test_wrong_document(self, document: Document) -> None:
        """Test attributes from another document are rejected."""
        from xml_dom_core.shared.errors import WrongDocumentError

        foreign: Attr = Document().create_attribute("a")

        with pytest.raises(WrongDocumentError):
            document.create_element("e").set_attribute_node(foreign)
