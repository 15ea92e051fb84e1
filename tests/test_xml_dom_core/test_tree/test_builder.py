"""Tests for the event-driven document builder."""

import logging
from typing import List

import pytest

from xml_dom_core.shared.config import DOMConfiguration
from xml_dom_core.shared.constants import XMLNS_NAMESPACE
from xml_dom_core.shared.errors import (
    HierarchyRequestError,
    InvalidCharacterError,
    MalformedInputError,
)
from xml_dom_core.tokenization import ExpatEventReader, ExpandedName, XMLEvent
from xml_dom_core.tokenization.events import (
    characters,
    comment,
    doctype,
    end_element,
    processing_instruction,
    start_element,
    xml_declaration,
)
from xml_dom_core.tree import BuilderState, Document, DocumentBuilder, NodeType

ROOT = ExpandedName("", "root")
CHILD = ExpandedName("", "child")


def build_bytes(data: bytes, **config) -> Document:
    configuration = DOMConfiguration(**config)
    reader = ExpatEventReader(configuration)
    return DocumentBuilder(configuration).build(reader.read(data))


class TestBuilderStates:
    """Test the prolog / element / epilog state machine."""

    def test_minimal_document(self) -> None:
        """Test a single element builds a document."""
        builder = DocumentBuilder()
        document = builder.build([start_element(ROOT), end_element(ROOT)])

        assert document.document_element.tag_name == "root"
        assert builder.state == BuilderState.EPILOG
        assert builder.metrics.elements_created == 1
        assert builder.metrics.events_processed == 2

    def test_prolog_and_epilog_nodes_attach_to_document(self) -> None:
        """Test misc nodes outside the root become document children."""
        events: List[XMLEvent] = [
            xml_declaration("1.0", "UTF-8", True),
            comment(" before "),
            characters("\n"),
            start_element(ROOT),
            end_element(ROOT),
            characters("\n  "),
            processing_instruction("after", "data"),
        ]
        document = DocumentBuilder().build(events)

        assert [n.node_type for n in document.child_nodes] == [
            NodeType.COMMENT_NODE,
            NodeType.ELEMENT_NODE,
            NodeType.PROCESSING_INSTRUCTION_NODE,
        ]
        assert document.xml_version == "1.0"
        assert document.xml_encoding == "UTF-8"
        assert document.xml_standalone is True

    def test_text_in_prolog_rejected(self) -> None:
        """Test non-whitespace text before the root."""
        with pytest.raises(HierarchyRequestError, match="content is not allowed in prolog"):
            DocumentBuilder().build([characters("oops"), start_element(ROOT), end_element(ROOT)])

    def test_text_in_epilog_rejected(self) -> None:
        """Test non-whitespace text after the root."""
        with pytest.raises(
            HierarchyRequestError, match="content is not allowed in trailing section"
        ):
            DocumentBuilder().build([start_element(ROOT), end_element(ROOT), characters("x")])

    def test_second_root_rejected(self) -> None:
        """Test a second top-level element."""
        with pytest.raises(HierarchyRequestError, match="one element child"):
            DocumentBuilder().build([
                start_element(ROOT), end_element(ROOT),
                start_element(CHILD), end_element(CHILD),
            ])

    def test_missing_root(self) -> None:
        """Test an event stream without elements."""
        with pytest.raises(MalformedInputError, match="no document element"):
            DocumentBuilder().build([comment("only")])

    def test_unclosed_element(self) -> None:
        """Test the stream ends inside an element."""
        with pytest.raises(MalformedInputError, match="unclosed element <root>"):
            DocumentBuilder().build([start_element(ROOT)])

    def test_mismatched_end(self) -> None:
        """Test an end event for the wrong element."""
        with pytest.raises(MalformedInputError, match="does not match"):
            DocumentBuilder().build([start_element(ROOT), end_element(CHILD)])

    def test_doctype_after_root_rejected(self) -> None:
        """Test a document type must be in the prolog."""
        with pytest.raises(HierarchyRequestError):
            DocumentBuilder().build([start_element(ROOT), doctype("root"), end_element(ROOT)])

    def test_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test build failures are logged before propagating."""
        with caplog.at_level(logging.ERROR, logger="xml_dom_core.tree.builder"):
            with pytest.raises(HierarchyRequestError):
                DocumentBuilder(correlation_id="c-1").build([characters("x")])

        failures = [r for r in caplog.records if r.getMessage() == "Document build failed"]
        assert len(failures) == 1
        assert failures[0].correlation_id == "c-1"
        assert failures[0].state == "PROLOG"


class TestBuilderContent:
    """Test node creation inside the document element."""

    def test_nested_content(self) -> None:
        """Test elements, text, comments and PIs nest correctly."""
        document = DocumentBuilder().build([
            start_element(ROOT, [(ExpandedName("", "id"), "1")]),
            characters("a"),
            start_element(CHILD),
            comment("c"),
            processing_instruction("pi", "d"),
            end_element(CHILD),
            end_element(ROOT),
        ])
        root = document.document_element
        child = root.last_child

        assert root.get_attribute("id") == "1"
        assert root.first_child.node_value == "a"
        assert [n.node_type for n in child.child_nodes] == [
            NodeType.COMMENT_NODE,
            NodeType.PROCESSING_INSTRUCTION_NODE,
        ]
        assert child.owner_document is document

    def test_xml_target_pi_is_skipped(self) -> None:
        """Test a declaration reported as a PI does not become a node."""
        document = DocumentBuilder().build([
            processing_instruction("xml", 'version="1.0"'),
            start_element(ROOT),
            end_element(ROOT),
        ])

        assert len(document.child_nodes) == 1

    def test_duplicate_attribute(self) -> None:
        """Test duplicate attribute names are rejected."""
        name = ExpandedName("", "a")

        with pytest.raises(InvalidCharacterError, match="duplicate attribute 'a'"):
            DocumentBuilder().build([
                start_element(ROOT, [(name, "1"), (name, "2")]),
                end_element(ROOT),
            ])

    def test_doctype(self) -> None:
        """Test the document type is attached in the prolog."""
        document = DocumentBuilder().build([
            doctype("root", "-//X//EN", "root.dtd"),
            start_element(ROOT),
            end_element(ROOT),
        ])

        assert document.doctype is not None
        assert document.doctype.public_id == "-//X//EN"
        assert document.first_child is document.doctype

    def test_configuration_is_copied_to_document(self) -> None:
        """Test the document remembers the parse configuration."""
        configuration = DOMConfiguration(namespaces=False)
        document = DocumentBuilder(configuration).build([start_element(ROOT), end_element(ROOT)])

        assert document.dom_config.namespaces is False
        assert document.dom_config is not configuration

    def test_builder_is_reusable(self) -> None:
        """Test each build starts from a clean state."""
        builder = DocumentBuilder()
        first = builder.build([start_element(ROOT), end_element(ROOT)])
        second = builder.build([start_element(CHILD), end_element(CHILD)])

        assert first is not second
        assert second.document_element.tag_name == "child"
        assert builder.metrics.events_processed == 2

    def test_build_after_failure_starts_fresh(self) -> None:
        """Test nodes from a failed build do not leak into the next one."""
        builder = DocumentBuilder()
        with pytest.raises(HierarchyRequestError):
            builder.build([comment("stale"), start_element(ROOT), end_element(ROOT),
                           start_element(CHILD)])

        document = builder.build([start_element(CHILD), end_element(CHILD)])

        assert len(document.child_nodes) == 1
        assert document.document_element.tag_name == "child"
        assert builder.state == BuilderState.EPILOG


class TestBuilderOptions:
    """Test configuration toggles."""

    def test_comments_discarded(self) -> None:
        """Test comments=False drops comments everywhere."""
        builder = DocumentBuilder(DOMConfiguration(comments=False))
        document = builder.build([
            comment("a"), start_element(ROOT), comment("b"), end_element(ROOT),
        ])

        assert len(document.child_nodes) == 1
        assert not document.document_element.has_child_nodes()
        assert builder.metrics.comments_discarded == 2

    def test_element_content_whitespace_discarded(self) -> None:
        """Test whitespace-only text is dropped when configured."""
        document = build_bytes(
            b"<root>\n  <child> x </child>\n</root>", element_content_whitespace=False
        )
        root = document.document_element

        assert [n.node_name for n in root.child_nodes] == ["child"]
        assert root.first_child.text_content == " x "

    def test_element_content_whitespace_kept_by_default(self) -> None:
        """Test whitespace-only text is kept by default."""
        document = build_bytes(b"<root>\n  <child/>\n</root>")

        assert len(document.document_element.child_nodes) == 3
        assert document.document_element.first_child.is_element_content_whitespace

    def test_normalize_characters(self) -> None:
        """Test NFC normalization of text and attribute values."""
        document = build_bytes(
            "<root a=\"e\u0301\">e\u0301</root>".encode("utf-8"), normalize_characters=True
        )
        root = document.document_element

        assert root.text_content == "\u00e9"
        assert root.get_attribute("a") == "\u00e9"

    def test_namespace_aware_build(self) -> None:
        """Test expanded names produce namespace-aware nodes."""
        document = build_bytes(b'<p:root xmlns:p="urn:p" xmlns="urn:d" p:a="1"><c/></p:root>')
        root = document.document_element
        child = root.first_child

        assert root.namespace_uri == "urn:p"
        assert root.prefix == "p"
        assert root.local_name == "root"
        assert sorted(root.attributes.names()) == ["p:a", "xmlns", "xmlns:p"]
        assert root.get_attribute_node("xmlns:p").namespace_uri == XMLNS_NAMESPACE
        assert root.get_attribute_ns("urn:p", "a") == "1"
        assert child.namespace_uri == "urn:d"
        assert child.lookup_namespace_uri("p") == "urn:p"

    def test_namespaces_off_builds_level_one_nodes(self) -> None:
        """Test names are kept verbatim without namespace processing."""
        document = build_bytes(b'<p:root xmlns:p="urn:p"><p:c/></p:root>', namespaces=False)
        root = document.document_element

        assert root.tag_name == "p:root"
        assert root.namespace_uri == ""
        assert root.is_namespace_aware is False
        assert root.get_attribute("xmlns:p") == "urn:p"
        assert root.first_child.tag_name == "p:c"

    def test_nested_prefix_shadowing(self) -> None:
        """Test the innermost declaration of a prefix wins."""
        document = build_bytes(
            b'<r xmlns:p="urn:a"><p:x xmlns:p="urn:b"><p:y xmlns:p="urn:c"/></p:x><p:x/></r>'
        )
        root = document.document_element
        first_x, second_x = root.child_nodes
        y = first_x.first_child

        assert root.namespace_uri == ""
        assert first_x.namespace_uri == "urn:b"
        assert y.namespace_uri == "urn:c"
        assert second_x.namespace_uri == "urn:a"
        assert root.get_elements_by_tag_name_ns("*", "x") == [first_x, second_x]

    def test_inherited_lookup(self) -> None:
        """Test declarations on an ancestor are visible below it."""
        document = build_bytes(b'<a xmlns:p="urn:p"><b><c/></b></a>')
        c = document.document_element.first_child.first_child

        assert c.lookup_namespace_uri("p") == "urn:p"
        assert c.lookup_prefix("urn:p") == "p"
