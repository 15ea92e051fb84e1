"""Tests for Document factories, constraints, copies and comparison."""

from typing import List

import pytest

from xml_dom_core.shared.constants import XML_NAMESPACE, XMLNS_NAMESPACE
from xml_dom_core.shared.errors import (
    HierarchyRequestError,
    InvalidCharacterError,
    NamespaceError,
    NotSupportedError,
)
from xml_dom_core.tree import Document, DocumentType, Node, NodeType


def all_nodes(root: Node) -> List[Node]:
    nodes = [root]
    nodes.extend(root.iter_descendants())
    return nodes


@pytest.fixture
def document() -> Document:
    return Document()


class TestFactories:
    """Test node factories."""

    def test_created_nodes_are_owned_and_detached(self, document: Document) -> None:
        """Test factories set the owner document and no parent."""
        nodes = [
            document.create_element("e"),
            document.create_element_ns("urn:x", "x:e"),
            document.create_attribute("a"),
            document.create_attribute_ns("urn:x", "x:a"),
            document.create_text_node("t"),
            document.create_comment("c"),
            document.create_processing_instruction("pi", "data"),
        ]

        for node in nodes:
            assert node.owner_document is document
            assert node.parent_node is None
        assert document.owner_document is None

    @pytest.mark.parametrize("name", ["", "1e", "a b", "<e>"])
    def test_invalid_element_names(self, document: Document, name: str) -> None:
        """Test invalid names raise InvalidCharacterError."""
        with pytest.raises(InvalidCharacterError):
            document.create_element(name)

    def test_invalid_qualified_names(self, document: Document) -> None:
        """Test malformed qualified names."""
        with pytest.raises(InvalidCharacterError):
            document.create_element_ns("urn:x", "a:b:c")
        with pytest.raises(NamespaceError):
            document.create_element_ns(None, "p:e")
        with pytest.raises(NamespaceError):
            document.create_element_ns(XMLNS_NAMESPACE, "xmlns:e")

    def test_xml_prefix(self, document: Document) -> None:
        """Test the xml prefix requires the XML namespace."""
        attr = document.create_attribute_ns(XML_NAMESPACE, "xml:lang")

        assert attr.prefix == "xml"
        with pytest.raises(NamespaceError):
            document.create_attribute_ns("urn:x", "xml:lang")

    def test_comment_rejects_double_hyphen(self, document: Document) -> None:
        """Test comment data cannot contain --."""
        with pytest.raises(InvalidCharacterError, match="--"):
            document.create_comment("a -- b")

    def test_processing_instruction_rules(self, document: Document) -> None:
        """Test PI target and data validation."""
        with pytest.raises(InvalidCharacterError):
            document.create_processing_instruction("XmL", "x")
        with pytest.raises(InvalidCharacterError):
            document.create_processing_instruction("1pi", "x")
        with pytest.raises(InvalidCharacterError, match=r"\?>"):
            document.create_processing_instruction("pi", "a ?> b")

        pi = document.create_processing_instruction("xml-stylesheet", "href='a'")
        assert pi.target == "xml-stylesheet"
        assert pi.data == "href='a'"


class TestDocumentChildren:
    """Test document-level placement rules."""

    def test_single_document_element(self, document: Document) -> None:
        """Test a second element child is rejected."""
        root = document.create_element("root")
        document.append_child(root)

        with pytest.raises(HierarchyRequestError, match="one element child"):
            document.append_child(document.create_element("second"))
        assert document.document_element is root
        assert len(document.child_nodes) == 1

    def test_text_is_rejected(self, document: Document) -> None:
        """Test Text cannot be a document child."""
        with pytest.raises(HierarchyRequestError):
            document.append_child(document.create_text_node("x"))

    def test_comments_and_pis_allowed(self, document: Document) -> None:
        """Test prolog and epilog misc nodes."""
        document.append_child(document.create_comment("c"))
        document.append_child(document.create_element("root"))
        document.append_child(document.create_processing_instruction("pi", ""))

        assert [n.node_type for n in document.child_nodes] == [
            NodeType.COMMENT_NODE,
            NodeType.ELEMENT_NODE,
            NodeType.PROCESSING_INSTRUCTION_NODE,
        ]

    def test_replace_document_element(self, document: Document) -> None:
        """Test replacing the element child is allowed."""
        old = document.append_child(document.create_element("old"))
        new = document.create_element("new")
        document.replace_child(new, old)

        assert document.document_element is new

    def test_doctype_must_precede_element(self, document: Document) -> None:
        """Test document type ordering."""
        root = document.append_child(document.create_element("root"))
        doctype = DocumentType(document, "root")

        with pytest.raises(HierarchyRequestError, match="precede"):
            document.append_child(doctype)
        document.insert_before(doctype, root)

        assert document.doctype is doctype
        assert document.first_child is doctype
        with pytest.raises(HierarchyRequestError, match="one document type"):
            document.insert_before(DocumentType(document, "other"), root)

    def test_element_cannot_precede_doctype(self, document: Document) -> None:
        """Test an element cannot be inserted before the document type."""
        doctype = document.append_child(DocumentType(document, "root"))

        with pytest.raises(HierarchyRequestError, match="follow"):
            document.insert_before(document.create_element("root"), doctype)

    def test_text_content(self, document: Document) -> None:
        """Test the document's text content is read-only."""
        root = document.append_child(document.create_element("root"))
        root.text_content = "hi"
        document.text_content = "ignored"

        assert document.text_content == "hi"
        assert document.document_element is root


class TestImportAndAdopt:
    """Test moving and copying nodes between documents."""

    def test_import_node_copies(self, document: Document) -> None:
        """Test import leaves the source untouched."""
        source = Document()
        element = source.create_element("e")
        element.set_attribute("a", "1")
        element.append_child(source.create_text_node("t"))

        shallow = document.import_node(element)
        deep = document.import_node(element, deep=True)

        assert shallow.owner_document is document
        assert shallow.get_attribute("a") == "1"
        assert not shallow.has_child_nodes()
        assert deep.first_child.node_value == "t"
        assert all(node.owner_document is document for node in all_nodes(deep))
        assert deep.get_attribute_node("a").owner_document is document
        assert element.owner_document is source

    def test_import_unsupported_kinds(self, document: Document) -> None:
        """Test documents and doctypes cannot be imported."""
        with pytest.raises(NotSupportedError):
            document.import_node(Document())
        with pytest.raises(NotSupportedError):
            document.import_node(DocumentType(None, "x"))

    def test_adopt_node_moves(self, document: Document) -> None:
        """Test adoption detaches and re-owns the subtree."""
        source = Document()
        root = source.append_child(source.create_element("root"))
        child = root.append_child(source.create_element("child"))
        child.set_attribute("a", "1")
        child.append_child(source.create_text_node("t"))

        adopted = document.adopt_node(child)

        assert adopted is child
        assert child.parent_node is None
        assert not root.has_child_nodes()
        assert all(node.owner_document is document for node in all_nodes(child))
        assert child.get_attribute_node("a").owner_document is document
        document.append_child(child)

    def test_adopt_attribute(self, document: Document) -> None:
        """Test adopting an attribute removes it from its element."""
        source = Document()
        element = source.create_element("e")
        element.set_attribute("a", "1")
        attr = element.get_attribute_node("a")

        document.adopt_node(attr)

        assert not element.has_attribute("a")
        assert attr.owner_document is document


class TestCloneAndEquality:
    """Test cloning and structural comparison."""

    def build(self, document: Document) -> Node:
        root = document.append_child(document.create_element_ns("urn:r", "r:root"))
        root.set_attribute("id", "1")
        child = root.append_child(document.create_element("child"))
        child.append_child(document.create_text_node("text"))
        root.append_child(document.create_comment("c"))
        return root

    def test_deep_clone_is_equal_but_distinct(self, document: Document) -> None:
        """Test a deep clone is structurally equal and shares no nodes."""
        root = self.build(document)
        clone = root.clone_node(deep=True)

        assert clone.is_equal_node(root)
        assert clone.parent_node is None
        assert clone.owner_document is document
        originals = {id(node) for node in all_nodes(root)}
        assert not any(id(node) in originals for node in all_nodes(clone))
        assert clone.get_attribute_node("id") is not root.get_attribute_node("id")

    def test_shallow_clone(self, document: Document) -> None:
        """Test a shallow clone copies attributes but not children."""
        root = self.build(document)
        clone = root.clone_node()

        assert clone.get_attribute("id") == "1"
        assert not clone.has_child_nodes()
        assert not clone.is_equal_node(root)

    def test_clone_document(self, document: Document) -> None:
        """Test cloning a document re-owns the copies."""
        self.build(document)
        document.xml_standalone = True
        clone = document.clone_node(deep=True)

        assert clone.is_equal_node(document)
        assert clone.document_element.owner_document is clone
        assert clone.xml_standalone is True

    def test_is_equal_node_differences(self, document: Document) -> None:
        """Test differences in names, values and attributes are detected."""
        root = self.build(document)
        clone = root.clone_node(deep=True)

        clone.set_attribute("id", "2")
        assert not clone.is_equal_node(root)
        clone.set_attribute("id", "1")
        assert clone.is_equal_node(root)
        clone.first_child.first_child.node_value = "other"
        assert not clone.is_equal_node(root)
        assert not root.is_equal_node(None)

    def test_attribute_order_does_not_matter(self, document: Document) -> None:
        """Test attributes are compared by name."""
        first = document.create_element("e")
        first.set_attribute("a", "1")
        first.set_attribute("b", "2")
        second = document.create_element("e")
        second.set_attribute("b", "2")
        second.set_attribute("a", "1")

        assert first.is_equal_node(second)

    def test_is_same_node(self, document: Document) -> None:
        """Test identity comparison."""
        element = document.create_element("e")

        assert element.is_same_node(element)
        assert not element.is_same_node(element.clone_node())


class TestNormalizeDocument:
    """Test in-place namespace normalization."""

    def test_adds_missing_declarations(self, document: Document) -> None:
        """Test declarations are materialized as attributes."""
        root = document.append_child(document.create_element_ns("urn:a", "a:root"))
        child = root.append_child(document.create_element_ns("urn:b", "child"))
        child.append_child(document.create_text_node("x"))
        child.append_child(document.create_text_node("y"))

        document.normalize_document()

        assert root.get_attribute_ns(XMLNS_NAMESPACE, "a") == "urn:a"
        assert child.get_attribute_ns(XMLNS_NAMESPACE, "xmlns") == "urn:b"
        assert [n.node_value for n in child.child_nodes] == ["xy"]
        assert child.lookup_namespace_uri(None) == "urn:b"

    def test_namespaces_disabled_only_merges_text(self, document: Document) -> None:
        """Test the namespaces parameter switches the fixup off."""
        root = document.append_child(document.create_element_ns("urn:a", "a:root"))
        document.dom_config.set_parameter("namespaces", False)

        document.normalize_document()

        assert not root.has_attributes()
