"""Character escaping for serialized text and attribute values."""

from typing import Dict

_TEXT_ESCAPES: Dict[str, str] = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
    "\r": "&#xD;",
}

# Attribute values are double-quoted and whitespace inside them is normalized
# by parsers, so literal tab/newline/CR must become character references
_ATTRIBUTE_ESCAPES: Dict[str, str] = dict(
    _TEXT_ESCAPES, **{"\t": "&#x9;", "\n": "&#xA;"}
)

ALLOWED_CONTROL_CHARS = frozenset("\t\n\r")


def _is_control(ch: str) -> bool:
    code_point = ord(ch)
    return (code_point < 0x20 and ch not in ALLOWED_CONTROL_CHARS) or 0x7F <= code_point <= 0x9F


def _escape(text: str, table: Dict[str, str]) -> str:
    if not any(ch in table or _is_control(ch) for ch in text):
        return text
    parts = []
    for ch in text:
        replacement = table.get(ch)
        if replacement is not None:
            parts.append(replacement)
        elif _is_control(ch):
            parts.append(f"&#x{ord(ch):X};")
        else:
            parts.append(ch)
    return "".join(parts)


def escape_text(text: str) -> str:
    """Escape character data for use between tags.

    Markup characters and both quote characters become entity references;
    carriage returns and non-printable control characters become numeric
    character references.
    """
    return _escape(text, _TEXT_ESCAPES)


def escape_attribute(value: str) -> str:
    """Escape an attribute value for a double-quoted attribute."""
    return _escape(value, _ATTRIBUTE_ESCAPES)
