"""Leaf nodes carrying character data: Text, Comment and ProcessingInstruction."""

from typing import TYPE_CHECKING, Optional

from ..character.names import is_xml_whitespace
from .node import Node, NodeType

if TYPE_CHECKING:
    from .document import Document


class CharacterData(Node):
    """Leaf node with a string payload; never has children."""

    def __init__(self, owner_document: Optional["Document"], data: str) -> None:
        super().__init__(owner_document)
        self._data = data

    @property
    def data(self) -> str:
        return self._data

    @data.setter
    def data(self, value: str) -> None:
        self._data = value

    @property
    def length(self) -> int:
        return len(self._data)

    @property
    def node_value(self) -> str:
        return self._data

    @node_value.setter
    def node_value(self, value: Optional[str]) -> None:
        self._data = value or ""

    @property
    def text_content(self) -> str:
        return self._data

    @text_content.setter
    def text_content(self, value: Optional[str]) -> None:
        self._data = value or ""

    def append_data(self, data: str) -> None:
        self._data += data

    def substring_data(self, offset: int, count: int) -> str:
        if offset < 0 or offset > len(self._data) or count < 0:
            raise IndexError("offset or count out of range")
        return self._data[offset:offset + count]

    def __repr__(self) -> str:
        preview = self._data if len(self._data) <= 20 else self._data[:17] + "..."
        return f"<{type(self).__name__} {preview!r}>"


class Text(CharacterData):
    node_type = NodeType.TEXT_NODE

    @property
    def node_name(self) -> str:
        return "#text"

    @property
    def is_element_content_whitespace(self) -> bool:
        """True when the data is whitespace only and sits between element tags."""
        if not is_xml_whitespace(self._data):
            return False
        parent = self._parent
        if parent is None:
            return False
        return any(
            sibling.node_type == NodeType.ELEMENT_NODE for sibling in parent._children
        )

    @property
    def whole_text(self) -> str:
        """Data of this node and its logically adjacent Text siblings."""
        if self._parent is None:
            return self._data
        siblings = self._parent._children
        index = siblings.index(self)
        start = index
        while start > 0 and siblings[start - 1].node_type == NodeType.TEXT_NODE:
            start -= 1
        end = index
        while end + 1 < len(siblings) and siblings[end + 1].node_type == NodeType.TEXT_NODE:
            end += 1
        return "".join(node.node_value or "" for node in siblings[start:end + 1])

    def _shallow_copy(self, document: Optional["Document"]) -> "Text":
        return Text(document, self._data)


class Comment(CharacterData):
    node_type = NodeType.COMMENT_NODE

    @property
    def node_name(self) -> str:
        return "#comment"

    def _shallow_copy(self, document: Optional["Document"]) -> "Comment":
        return Comment(document, self._data)


class ProcessingInstruction(CharacterData):
    node_type = NodeType.PROCESSING_INSTRUCTION_NODE

    def __init__(self, owner_document: Optional["Document"], target: str, data: str) -> None:
        super().__init__(owner_document, data)
        self._target = target

    @property
    def target(self) -> str:
        return self._target

    @property
    def node_name(self) -> str:
        return self._target

    def _shallow_copy(self, document: Optional["Document"]) -> "ProcessingInstruction":
        return ProcessingInstruction(document, self._target, self._data)

    def __repr__(self) -> str:
        return f"<ProcessingInstruction {self._target!r} {self._data!r}>"
