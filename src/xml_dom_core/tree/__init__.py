"""Document object model for XML.

This package provides the node tree, the builder that constructs it from
tokenizer events, the namespace normalizer and the serializer.

Key Components:
    Node: Base class with child management, lookup and comparison
    Document, Element, Attr, Text, Comment, ProcessingInstruction, DocumentType:
        Concrete node kinds
    NamedNodeMap: Ordered attribute collection of an element
    DOMImplementation: Factory for documents created without parsing
    DocumentBuilder: Builds a Document from an event stream
    NamespaceNormalizer: Computes and applies namespace declarations
    DOMSerializer: Writes a node tree as UTF-8 XML
"""

from .attr import Attr
from .builder import BuilderState, DocumentBuilder
from .document import Document, DocumentType
from .element import Element
from .implementation import DOMImplementation
from .inspection import format_tree, print_tree
from .namednodemap import NamedNodeMap
from .namespaces import ElementPlan, NamespaceNormalizer, NamespacePlan
from .node import Node, NodeType
from .serializer import DOMSerializer
from .text import CharacterData, Comment, ProcessingInstruction, Text

__all__ = [
    "Attr",
    "BuilderState",
    "DocumentBuilder",
    "Document",
    "DocumentType",
    "Element",
    "DOMImplementation",
    "format_tree",
    "print_tree",
    "NamedNodeMap",
    "ElementPlan",
    "NamespaceNormalizer",
    "NamespacePlan",
    "Node",
    "NodeType",
    "DOMSerializer",
    "CharacterData",
    "Comment",
    "ProcessingInstruction",
    "Text",
]
