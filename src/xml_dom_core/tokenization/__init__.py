"""Tokenization layer: the event model and the expat-backed event reader."""

from .events import (
    DocumentTypeInfo,
    EventPosition,
    EventType,
    ExpandedName,
    XMLDeclarationInfo,
    XMLEvent,
)
from .tokenizer import ExpatEventReader

__all__ = [
    "DocumentTypeInfo",
    "EventPosition",
    "EventType",
    "ExpandedName",
    "XMLDeclarationInfo",
    "XMLEvent",
    "ExpatEventReader",
]
