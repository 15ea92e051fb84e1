#!/usr/bin/env python3
"""
Quick Start Guide for xml-dom-core.

Walks through parsing, inspecting, editing and serializing a document,
then building one from scratch with namespaces.
"""

from xml_dom_core import (
    DOMConfiguration,
    DOMImplementation,
    DOMParser,
    HierarchyRequestError,
    parse_string,
    print_tree,
    serialize_to_string,
)

BOOK_XML = """<?xml version="1.0" encoding="UTF-8"?>
<catalog xmlns="urn:example:catalog" xmlns:x="urn:example:extra">
  <!-- first entry -->
  <book id="123" x:genre="fiction">
    <title>My Book</title>
    <author>John Doe</author>
  </book>
</catalog>
"""


def parsing_example():
    """Parse a document and look around in it."""

    print("🚀 Step 1: Parsing")
    print("-" * 30)

    document = parse_string(BOOK_XML)
    catalog = document.document_element
    book = catalog.get_elements_by_tag_name_ns("urn:example:catalog", "book")[0]

    print(f"✅ Root element: {catalog.tag_name} in {catalog.namespace_uri}")
    print(f"📖 Title: {book.get_elements_by_tag_name('title')[0].text_content}")
    print(f"🏷️  Genre: {book.get_attribute_ns('urn:example:extra', 'genre')}")
    print(f"🔎 Prefix bound to urn:example:extra: {book.lookup_prefix('urn:example:extra')}")
    print()
    print_tree(catalog)
    return document


def editing_example(document):
    """Add nodes and write the result back out."""

    print("\n✏️  Step 2: Editing and serializing")
    print("-" * 30)

    book = document.document_element.get_elements_by_tag_name("book")[0]
    price = document.create_element_ns("urn:example:catalog", "price")
    price.set_attribute("currency", "USD")
    price.append_child(document.create_text_node("19.99"))
    book.append_child(price)

    print(serialize_to_string(document, DOMConfiguration.pretty_printing("  ")))


def building_example():
    """Build a document without parsing and let the serializer add declarations."""

    print("🏗️  Step 3: Building from scratch")
    print("-" * 30)

    document = DOMImplementation().create_document("urn:y", "root")
    root = document.document_element
    # Unprefixed element in another namespace: the serializer invents NS1
    root.append_child(document.create_element_ns("urn:x", "e"))

    print(serialize_to_string(document, DOMConfiguration.fragment_output()))


def configured_parser_example():
    """Reuse one parser with custom options and read its statistics."""

    print("\n⚙️  Step 4: Configured parser")
    print("-" * 30)

    parser = DOMParser(DOMConfiguration(comments=False, element_content_whitespace=False))
    document = parser.parse(BOOK_XML)
    print(f"✅ Children of <catalog>: {[n.node_name for n in document.document_element.child_nodes]}")

    try:
        parser.parse("<root/>trailing")
    except HierarchyRequestError as e:
        print(f"❌ Rejected: {e}")

    for key, value in parser.statistics.items():
        print(f"  {key}: {value}")


def main():
    """Run all quick start examples."""
    document = parsing_example()
    editing_example(document)
    building_example()
    configured_parser_example()
    print("\n🎉 Done!")


if __name__ == "__main__":
    main()
