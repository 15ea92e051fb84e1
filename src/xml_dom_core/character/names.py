"""XML 1.0 (Fifth Edition) name validation.

Implements the ``Name``, ``NCName`` and ``QName`` productions with sorted
code-point range tables searched by bisection, plus the namespace
well-formedness checks applied by the namespace-aware node factories.
"""

from bisect import bisect_right
from typing import ClassVar, Dict, List, Optional, Tuple, Union

from ..shared.constants import (
    XML_NAMESPACE,
    XML_PREFIX,
    XML_WHITESPACE,
    XMLNS_NAMESPACE,
    XMLNS_PREFIX,
)
from ..shared.errors import InvalidCharacterError, NamespaceError

# NameStartChar ranges, sorted and non-overlapping
NAME_START_RANGES: Tuple[Tuple[int, int], ...] = (
    (0x003A, 0x003A),    # ':'
    (0x0041, 0x005A),    # A-Z
    (0x005F, 0x005F),    # '_'
    (0x0061, 0x007A),    # a-z
    (0x00C0, 0x00D6),
    (0x00D8, 0x00F6),
    (0x00F8, 0x02FF),
    (0x0370, 0x037D),
    (0x037F, 0x1FFF),
    (0x200C, 0x200D),
    (0x2070, 0x218F),
    (0x2C00, 0x2FEF),
    (0x3001, 0xD7FF),
    (0xF900, 0xFDCF),
    (0xFDF0, 0xFFFD),
    (0x10000, 0xEFFFF),  # Supplementary planes
)

# NameChar = NameStartChar plus these ranges
_NAME_CHAR_EXTRA: Tuple[Tuple[int, int], ...] = (
    (0x002D, 0x002E),    # '-' '.'
    (0x0030, 0x0039),    # 0-9
    (0x00B7, 0x00B7),
    (0x0300, 0x036F),
    (0x203F, 0x2040),
)


def _merge_ranges(*tables: Tuple[Tuple[int, int], ...]) -> Tuple[Tuple[int, int], ...]:
    merged: List[Tuple[int, int]] = []
    for start, end in sorted(r for table in tables for r in table):
        if merged and start <= merged[-1][1] + 1:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return tuple(merged)


NAME_CHAR_RANGES = _merge_ranges(NAME_START_RANGES, _NAME_CHAR_EXTRA)

_NAME_START_STARTS = [start for start, _ in NAME_START_RANGES]
_NAME_CHAR_STARTS = [start for start, _ in NAME_CHAR_RANGES]

CACHE_SIZE_LIMIT = 4096
ASCII_MAX = 0x7F


def _in_ranges(code_point: int, starts: List[int], ranges: Tuple[Tuple[int, int], ...]) -> bool:
    index = bisect_right(starts, code_point) - 1
    return index >= 0 and code_point <= ranges[index][1]


def is_name_start_char(code_point: int) -> bool:
    """Check whether a code point may start an XML Name."""
    return _in_ranges(code_point, _NAME_START_STARTS, NAME_START_RANGES)


def is_name_char(code_point: int) -> bool:
    """Check whether a code point may appear after the first position of an XML Name."""
    return _in_ranges(code_point, _NAME_CHAR_STARTS, NAME_CHAR_RANGES)


class XMLNameValidator:
    """XML Name production checker with a bounded result cache."""

    _validation_cache: ClassVar[Dict[str, bool]] = {}

    @classmethod
    def is_valid_name(cls, name: Union[str, bytes]) -> bool:
        """Check if ``name`` matches the XML ``Name`` production.

        Args:
            name: Candidate name; bytes are decoded as strict UTF-8

        Returns:
            True if the name is valid; False for empty input, invalid UTF-8
            or any code point outside the NameStartChar / NameChar classes
        """
        if isinstance(name, (bytes, bytearray)):
            try:
                name = bytes(name).decode("utf-8")
            except UnicodeDecodeError:
                return False
        if not name:
            return False

        cached = cls._validation_cache.get(name)
        if cached is not None:
            return cached

        is_valid = cls._validate_name(name)
        if len(cls._validation_cache) < CACHE_SIZE_LIMIT:
            cls._validation_cache[name] = is_valid
        return is_valid

    @classmethod
    def _validate_name(cls, name: str) -> bool:
        first = ord(name[0])
        if not is_name_start_char(first):
            return False
        for ch in name[1:]:
            code_point = ord(ch)
            # Fast path for the common ASCII identifier characters
            if code_point <= ASCII_MAX and (ch.isalnum() or ch in "_-.:"):
                continue
            if not is_name_char(code_point):
                return False
        return True

    @classmethod
    def is_valid_ncname(cls, name: Union[str, bytes]) -> bool:
        """Check the Namespaces ``NCName`` production (a Name without colons)."""
        if isinstance(name, (bytes, bytearray)):
            try:
                name = bytes(name).decode("utf-8")
            except UnicodeDecodeError:
                return False
        return ":" not in name and cls.is_valid_name(name)

    @classmethod
    def clear_cache(cls) -> None:
        """Clear validation cache."""
        cls._validation_cache.clear()


def is_valid_xml_name(name: Union[str, bytes]) -> bool:
    """Module-level shortcut for ``XMLNameValidator.is_valid_name``."""
    return XMLNameValidator.is_valid_name(name)


def is_valid_ncname(name: Union[str, bytes]) -> bool:
    return XMLNameValidator.is_valid_ncname(name)


def is_xml_whitespace(text: str) -> bool:
    """True when every character is XML whitespace (space, tab, CR, LF)."""
    return all(ch in XML_WHITESPACE for ch in text)


def check_xml_name(name: str) -> None:
    """Raise ``InvalidCharacterError`` unless ``name`` is a valid XML Name."""
    if not isinstance(name, str) or not is_valid_xml_name(name):
        raise InvalidCharacterError(f"'{name}' is not a valid XML name")


def split_qualified_name(qualified_name: str) -> Tuple[str, str]:
    """Split a qualified name into ``(prefix, local_name)``.

    The prefix is ``""`` when the name has no colon.

    Raises:
        InvalidCharacterError: If the name is not a Name, or has more than one
            colon, a leading or trailing colon, or an empty part
    """
    check_xml_name(qualified_name)
    prefix, sep, local_name = qualified_name.partition(":")
    if not sep:
        return "", qualified_name
    if not prefix or not local_name or ":" in local_name:
        raise InvalidCharacterError(f"'{qualified_name}' is not a valid qualified name")
    if not is_name_start_char(ord(local_name[0])):
        raise InvalidCharacterError(f"'{qualified_name}' is not a valid qualified name")
    return prefix, local_name


def check_namespace_binding(
    namespace_uri: Optional[str],
    prefix: str,
    qualified_name: str,
    is_attribute: bool = False,
) -> None:
    """Apply the namespace well-formedness rules for a new element or attribute.

    Raises:
        NamespaceError: If a prefix has no namespace, ``xml`` is bound to a
            foreign namespace, or the ``xmlns`` name and namespace do not match
    """
    namespace_uri = namespace_uri or ""
    if prefix and not namespace_uri:
        raise NamespaceError(f"prefix '{prefix}' has no namespace URI")
    if prefix == XML_PREFIX and namespace_uri != XML_NAMESPACE:
        raise NamespaceError(f"prefix 'xml' must be bound to {XML_NAMESPACE}")
    if namespace_uri == XML_NAMESPACE and prefix != XML_PREFIX:
        raise NamespaceError(f"{XML_NAMESPACE} may only be bound to the 'xml' prefix")

    names_xmlns = qualified_name == XMLNS_PREFIX or prefix == XMLNS_PREFIX
    if names_xmlns and (not is_attribute or namespace_uri != XMLNS_NAMESPACE):
        raise NamespaceError(f"'{qualified_name}' requires the namespace {XMLNS_NAMESPACE}")
    if namespace_uri == XMLNS_NAMESPACE and not names_xmlns:
        raise NamespaceError(f"{XMLNS_NAMESPACE} may only be used with the 'xmlns' prefix")
