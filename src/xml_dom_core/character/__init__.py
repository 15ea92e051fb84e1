"""Character layer: XML name validation and output escaping."""

from .escaping import escape_attribute, escape_text
from .names import (
    NAME_CHAR_RANGES,
    NAME_START_RANGES,
    XMLNameValidator,
    check_namespace_binding,
    check_xml_name,
    is_name_char,
    is_name_start_char,
    is_valid_ncname,
    is_valid_xml_name,
    is_xml_whitespace,
    split_qualified_name,
)

__all__ = [
    "escape_attribute",
    "escape_text",
    "NAME_CHAR_RANGES",
    "NAME_START_RANGES",
    "XMLNameValidator",
    "check_namespace_binding",
    "check_xml_name",
    "is_name_char",
    "is_name_start_char",
    "is_valid_ncname",
    "is_valid_xml_name",
    "is_xml_whitespace",
    "split_qualified_name",
]
