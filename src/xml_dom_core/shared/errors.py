"""DOM exception taxonomy.

Every failure raised by the tree model, the document builder, the namespace
normalizer and the serializer is one of the ``DOMException`` subclasses
defined here. Each subclass carries the matching W3C ``ExceptionCode`` so that
callers can dispatch on either the Python type or the numeric code.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """W3C DOM exception codes used by this package."""

    HIERARCHY_REQUEST_ERR = 3       # Node inserted somewhere it doesn't belong
    WRONG_DOCUMENT_ERR = 4          # Node used in a document that did not create it
    INVALID_CHARACTER_ERR = 5       # Name or character data fails the XML grammar
    NOT_FOUND_ERR = 8               # Node is not where the operation expects it
    NOT_SUPPORTED_ERR = 9           # Requested operation or kind is not supported
    INUSE_ATTRIBUTE_ERR = 10        # Attribute already owned by another element
    NAMESPACE_ERR = 14              # Namespace constraints violated
    MALFORMED_INPUT_ERR = 81        # Byte source is not well-formed XML


class DOMException(Exception):
    """Base class for all DOM failures."""

    code: ErrorCode = ErrorCode.NOT_SUPPORTED_ERR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return f"{self.code.name}: {self.message}"


class HierarchyRequestError(DOMException):
    """Structural constraint violated (wrong parent kind, second root, cycle, prolog content)."""

    code = ErrorCode.HIERARCHY_REQUEST_ERR


class WrongDocumentError(DOMException):
    """Node belongs to a different document and must be imported first."""

    code = ErrorCode.WRONG_DOCUMENT_ERR


class NotFoundError(DOMException):
    """Operand is not a child or attribute of the target."""

    code = ErrorCode.NOT_FOUND_ERR


class InvalidCharacterError(DOMException):
    """Name fails the XML Name production, or comment/PI data is not representable."""

    code = ErrorCode.INVALID_CHARACTER_ERR


class NotSupportedError(DOMException):
    """Operation is not supported for this node kind."""

    code = ErrorCode.NOT_SUPPORTED_ERR


class InUseAttributeError(DOMException):
    """Attribute is already bound to another element."""

    code = ErrorCode.INUSE_ATTRIBUTE_ERR


class NamespaceError(DOMException):
    """Namespace constraints cannot be satisfied."""

    code = ErrorCode.NAMESPACE_ERR


class MalformedInputError(DOMException):
    """Tokenizer-level failure surfaced from the byte source."""

    code = ErrorCode.MALFORMED_INPUT_ERR

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.line is None:
            return super().__str__()
        return f"{self.code.name}: {self.message} (line {self.line}, column {self.column})"
