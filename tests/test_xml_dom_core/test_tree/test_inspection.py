"""Tests for tree dumps."""

import io

from xml_dom_core.api.parser import parse_string
from xml_dom_core.tree import format_tree, print_tree


class TestFormatTree:
    """Test the text rendering of node trees."""

    def test_all_node_kinds(self) -> None:
        """Test every kind of node gets a line."""
        document = parse_string('<r a="1">t<!--c--><?p d?></r>')

        assert format_tree(document) == "\n".join([
            "#document",
            "  Element <r>",
            "    @a='1'",
            "    Text 't'",
            "    Comment 'c'",
            "    ProcessingInstruction p 'd'",
        ])

    def test_namespaced_element(self) -> None:
        """Test expanded names are shown for namespaced elements."""
        document = parse_string('<p:r xmlns:p="urn:p"/>')

        lines = format_tree(document.document_element, indent="-").splitlines()

        assert lines == ["Element <p:r> {urn:p}r", "-@xmlns:p='urn:p'"]

    def test_attributes_hidden(self) -> None:
        """Test attribute lines can be left out."""
        document = parse_string('<r a="1"><c/></r>')

        assert format_tree(document.document_element, show_attributes=False) == (
            "Element <r>\n  Element <c>"
        )


class TestPrintTree:
    """Test writing dumps to a stream."""

    def test_print_to_stream(self) -> None:
        """Test the dump and a trailing newline go to the stream."""
        document = parse_string("<r/>")
        stream = io.StringIO()

        print_tree(document, stream)

        assert stream.getvalue() == "#document\n  Element <r>\n"
