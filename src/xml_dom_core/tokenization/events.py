"""Tokenizer event model.

The document builder consumes a flat stream of ``XMLEvent`` objects. Any
tokenizer can drive it; ``ExpatEventReader`` adapts the standard library's
expat parser, and tests build event lists by hand with the helper
constructors at the bottom of this module.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple


class EventType(Enum):
    """Kinds of events emitted by a tokenizer."""

    START_ELEMENT = auto()          # Start tag with its attributes
    END_ELEMENT = auto()            # End tag (also emitted for empty-element tags)
    CHARACTERS = auto()             # Coalesced character data
    COMMENT = auto()                # <!-- ... -->
    PROCESSING_INSTRUCTION = auto() # <?target data?>
    XML_DECLARATION = auto()        # <?xml version=... ?>
    DOCTYPE = auto()                # <!DOCTYPE ...>


@dataclass(frozen=True)
class ExpandedName:
    """Namespace URI, local name and prefix of an element or attribute name.

    Tokenizers running without namespace processing report the raw
    qualified name as ``local_name`` with empty URI and prefix.
    """

    namespace_uri: str
    local_name: str
    prefix: str = ""

    def __post_init__(self) -> None:
        """Validate name."""
        if not self.local_name:
            raise ValueError("local_name cannot be empty")

    @property
    def qualified_name(self) -> str:
        if self.prefix:
            return f"{self.prefix}:{self.local_name}"
        return self.local_name


@dataclass(frozen=True)
class EventPosition:
    """1-based line and 0-based column where an event started."""

    line: int = 1
    column: int = 0

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("line must be >= 1")
        if self.column < 0:
            raise ValueError("column must be >= 0")


@dataclass(frozen=True)
class XMLDeclarationInfo:
    version: str = "1.0"
    encoding: Optional[str] = None
    standalone: Optional[bool] = None


@dataclass(frozen=True)
class DocumentTypeInfo:
    name: str
    public_id: str = ""
    system_id: str = ""


@dataclass
class XMLEvent:
    """Single tokenizer event."""

    type: EventType
    name: Optional[ExpandedName] = None
    attributes: List[Tuple[ExpandedName, str]] = field(default_factory=list)
    data: str = ""
    target: str = ""
    declaration: Optional[XMLDeclarationInfo] = None
    doctype: Optional[DocumentTypeInfo] = None
    position: EventPosition = field(default_factory=EventPosition)

    def __post_init__(self) -> None:
        """Validate that each event kind carries its payload."""
        if self.type in (EventType.START_ELEMENT, EventType.END_ELEMENT) and self.name is None:
            raise ValueError(f"{self.type.name} event requires a name")
        if self.type == EventType.PROCESSING_INSTRUCTION and not self.target:
            raise ValueError("PROCESSING_INSTRUCTION event requires a target")
        if self.type == EventType.XML_DECLARATION and self.declaration is None:
            raise ValueError("XML_DECLARATION event requires declaration info")
        if self.type == EventType.DOCTYPE and self.doctype is None:
            raise ValueError("DOCTYPE event requires doctype info")


def start_element(
    name: ExpandedName,
    attributes: Optional[List[Tuple[ExpandedName, str]]] = None,
    position: Optional[EventPosition] = None,
) -> XMLEvent:
    return XMLEvent(
        EventType.START_ELEMENT,
        name=name,
        attributes=list(attributes or []),
        position=position or EventPosition(),
    )


def end_element(name: ExpandedName, position: Optional[EventPosition] = None) -> XMLEvent:
    return XMLEvent(EventType.END_ELEMENT, name=name, position=position or EventPosition())


def characters(data: str, position: Optional[EventPosition] = None) -> XMLEvent:
    return XMLEvent(EventType.CHARACTERS, data=data, position=position or EventPosition())


def comment(data: str, position: Optional[EventPosition] = None) -> XMLEvent:
    return XMLEvent(EventType.COMMENT, data=data, position=position or EventPosition())


def processing_instruction(
    target: str, data: str = "", position: Optional[EventPosition] = None
) -> XMLEvent:
    return XMLEvent(
        EventType.PROCESSING_INSTRUCTION,
        target=target,
        data=data,
        position=position or EventPosition(),
    )


def xml_declaration(
    version: str = "1.0",
    encoding: Optional[str] = None,
    standalone: Optional[bool] = None,
) -> XMLEvent:
    return XMLEvent(
        EventType.XML_DECLARATION,
        declaration=XMLDeclarationInfo(version, encoding, standalone),
    )


def doctype(name: str, public_id: str = "", system_id: str = "") -> XMLEvent:
    return XMLEvent(EventType.DOCTYPE, doctype=DocumentTypeInfo(name, public_id, system_id))
