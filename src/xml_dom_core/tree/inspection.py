"""Human-readable dumps of a node tree for debugging."""

import sys
from typing import List, Optional, TextIO, Tuple

from .node import Node, NodeType


def _describe(node: Node) -> str:
    kind = node.node_type
    if kind == NodeType.ELEMENT_NODE:
        label = f"Element <{node.node_name}>"
        if node.namespace_uri:
            label += f" {{{node.namespace_uri}}}{node.local_name}"
        return label
    if kind == NodeType.ATTRIBUTE_NODE:
        return f"Attr {node.node_name}={node.node_value!r}"
    if kind == NodeType.TEXT_NODE:
        return f"Text {node.node_value!r}"
    if kind == NodeType.COMMENT_NODE:
        return f"Comment {node.node_value!r}"
    if kind == NodeType.PROCESSING_INSTRUCTION_NODE:
        return f"ProcessingInstruction {node.node_name} {node.node_value!r}"
    if kind == NodeType.DOCUMENT_TYPE_NODE:
        return f"DocumentType {node.node_name}"
    return node.node_name


def format_tree(node: Node, indent: str = "  ", show_attributes: bool = True) -> str:
    """Render ``node`` and its descendants, one node per line."""
    lines: List[str] = []
    stack: List[Tuple[Node, int]] = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        lines.append(f"{indent * depth}{_describe(current)}")
        if show_attributes and current.attributes is not None:
            for attr in current.attributes:
                lines.append(f"{indent * (depth + 1)}@{attr.name}={attr.value!r}")
        stack.extend((child, depth + 1) for child in reversed(current.child_nodes))
    return "\n".join(lines)


def print_tree(node: Node, stream: Optional[TextIO] = None, indent: str = "  ") -> None:
    """Write ``format_tree(node)`` to ``stream`` (stdout by default)."""
    output = stream if stream is not None else sys.stdout
    output.write(format_tree(node, indent) + "\n")
