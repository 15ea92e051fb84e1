"""Namespace URIs and serialization constants shared across layers."""

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"
XMLNS_NAMESPACE = "http://www.w3.org/2000/xmlns/"

XML_PREFIX = "xml"
XMLNS_PREFIX = "xmlns"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
OUTPUT_ENCODING = "utf-8"

DEFAULT_INDENT = "    "
DEFAULT_BUFFER_SIZE = 65536

SYNTHETIC_PREFIX_BASE = "NS"

# Characters the XML S production treats as whitespace
XML_WHITESPACE = " \t\r\n"
