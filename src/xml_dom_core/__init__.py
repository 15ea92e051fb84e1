"""XML DOM Core.

An in-memory XML document object model: parse a document into a mutable
node tree, edit it with the DOM Level 3 Core operations, and serialize it
back with its namespace declarations fixed up.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file(), serialize()
- Level 2: Configured parser - DOMParser class with a DOMConfiguration
- Level 3: Pipeline components - ExpatEventReader, DocumentBuilder,
  NamespaceNormalizer, DOMSerializer
"""

__version__ = "0.1.0"
__author__ = "XML DOM Core Team"

# Level 1: Simple functions
# Level 2: Configured parser
from .api import (
    DOMParser,
    parse,
    parse_file,
    parse_string,
    serialize,
    serialize_to_string,
    write,
)

# Configuration and errors
from .shared.config import ConfigError, ConfigValidationError, DOMConfiguration
from .shared.constants import XML_NAMESPACE, XMLNS_NAMESPACE
from .shared.errors import (
    DOMException,
    ErrorCode,
    HierarchyRequestError,
    InUseAttributeError,
    InvalidCharacterError,
    MalformedInputError,
    NamespaceError,
    NotFoundError,
    NotSupportedError,
    WrongDocumentError,
)

# Level 3: Pipeline components
from .tokenization import ExpatEventReader
from .tree import (
    Attr,
    CharacterData,
    Comment,
    Document,
    DocumentBuilder,
    DocumentType,
    DOMImplementation,
    DOMSerializer,
    Element,
    NamedNodeMap,
    NamespaceNormalizer,
    Node,
    NodeType,
    ProcessingInstruction,
    Text,
    format_tree,
    print_tree,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "parse",
    "parse_string",
    "parse_file",
    "serialize",
    "serialize_to_string",
    "write",

    # Level 2: Configured parser
    "DOMParser",
    "DOMConfiguration",
    "ConfigError",
    "ConfigValidationError",

    # Errors
    "DOMException",
    "ErrorCode",
    "HierarchyRequestError",
    "InUseAttributeError",
    "InvalidCharacterError",
    "MalformedInputError",
    "NamespaceError",
    "NotFoundError",
    "NotSupportedError",
    "WrongDocumentError",

    # Node model
    "Node",
    "NodeType",
    "Document",
    "DocumentType",
    "Element",
    "Attr",
    "CharacterData",
    "Text",
    "Comment",
    "ProcessingInstruction",
    "NamedNodeMap",
    "DOMImplementation",
    "XML_NAMESPACE",
    "XMLNS_NAMESPACE",

    # Level 3: Pipeline components
    "ExpatEventReader",
    "DocumentBuilder",
    "NamespaceNormalizer",
    "DOMSerializer",
    "format_tree",
    "print_tree",
]
