"""Shared utilities for the DOM pipeline.

This package provides the error taxonomy, the configuration record, run
metrics, namespace constants and the correlation-aware logger used by every
processing layer.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    DOMConfiguration,
)
from .constants import (
    XML_NAMESPACE,
    XMLNS_NAMESPACE,
)
from .errors import (
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
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    BuildMetrics,
    SerializationMetrics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "DOMConfiguration",
    "XML_NAMESPACE",
    "XMLNS_NAMESPACE",
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
    "CorrelationLogger",
    "get_logger",
    "BuildMetrics",
    "SerializationMetrics",
]
