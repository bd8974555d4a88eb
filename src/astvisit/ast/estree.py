#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/ast/estree.py
"""Conversion between ESTree/Babel JSON objects and AST nodes.

Parsing source text is the job of an external parser (acorn, espree,
@babel/parser, ...). Those parsers emit plain JSON objects with a ``type``
key; this module turns such objects into :class:`~astvisit.ast.nodes.Node`
trees and back, so the trees can be handed to an external code generator
after a code-mod has run.

Mapping rules:

- An object with a string ``type`` becomes a node; its other keys become
  fields in the order they appear.
- ``loc`` becomes the node's :class:`SourceLocation`; numeric ``start`` /
  ``end`` offsets and ``range`` are kept in the location metadata.
- Comment lists and Babel's ``extra`` go to ``node.metadata``.
- Objects without ``type`` (``regex``, ``value`` of template elements, ...)
  stay plain dicts and count as descriptive properties.

Examples
--------
    >>> from astvisit.ast.estree import json_to_ast
    >>> program = json_to_ast('{"type": "Program", "body": []}')
    >>> program.type
    'Program'

"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from astvisit.ast.nodes import Node, SourceLocation
from astvisit.exceptions import MalformedTreeError

logger = logging.getLogger(__name__)

# Keys moved to node.metadata rather than kept as fields
_METADATA_KEYS = ("extra", "comments", "leadingComments", "trailingComments", "innerComments", "tokens")

# Offset keys moved to the source location metadata
_OFFSET_KEYS = ("start", "end", "range")


def _deserialize_location(data: dict[str, Any]) -> Optional[SourceLocation]:
    loc = data.get("loc")
    offsets = {key: data[key] for key in _OFFSET_KEYS if isinstance(data.get(key), (int, list))}

    if not isinstance(loc, dict):
        return SourceLocation(metadata=offsets) if offsets else None

    start = loc.get("start") or {}
    end = loc.get("end") or {}
    return SourceLocation(
        line=start.get("line"),
        column=start.get("column"),
        end_line=end.get("line"),
        end_column=end.get("column"),
        source=loc.get("source"),
        metadata=offsets,
    )


def _deserialize_value(value: Any, path: str) -> Any:
    if isinstance(value, dict):
        if "type" in value:
            return _deserialize_node(value, path)
        return {key: _deserialize_value(item, f"{path}.{key}") for key, item in value.items()}
    if isinstance(value, list):
        return [_deserialize_value(item, f"{path}[{index}]") for index, item in enumerate(value)]
    return value


def _deserialize_node(data: dict[str, Any], path: str) -> Node:
    node_type = data.get("type")
    if not isinstance(node_type, str) or not node_type:
        raise MalformedTreeError(f"Object at {path} has no valid 'type' field: {node_type!r}")

    metadata = {key: data[key] for key in _METADATA_KEYS if key in data}
    fields = {}
    for key, value in data.items():
        if key == "type" or key == "loc" or key in _METADATA_KEYS:
            continue
        if key in _OFFSET_KEYS and isinstance(value, (int, list)):
            continue
        fields[key] = _deserialize_value(value, f"{path}.{key}")

    return Node(node_type, source_location=_deserialize_location(data), metadata=metadata, **fields)


def from_estree(data: dict[str, Any]) -> Node:
    """Build a node tree from an ESTree/Babel JSON object.

    Parameters
    ----------
    data : dict
        Parsed JSON object produced by an external parser

    Returns
    -------
    Node
        Root of the converted tree

    Raises
    ------
    MalformedTreeError
        If ``data`` (or a nested object that must be a node) has no ``type``

    """
    if not isinstance(data, dict):
        raise MalformedTreeError(f"ESTree root must be an object, got {type(data).__name__}")
    # Babel wraps the Program in a File node
    if data.get("type") == "File" and isinstance(data.get("program"), dict):
        logger.debug("Unwrapping Babel File node")
        data = data["program"]
    return _deserialize_node(data, "$")


def _serialize_value(value: Any) -> Any:
    if isinstance(value, Node):
        return to_estree(value)
    if isinstance(value, list):
        return [_serialize_value(item) for item in value]
    if isinstance(value, dict):
        return {key: _serialize_value(item) for key, item in value.items()}
    return value


def to_estree(node: Node) -> dict[str, Any]:
    """Convert a node tree back into an ESTree JSON object.

    Location and metadata are written back under the keys they were read
    from, so a tree read with :func:`from_estree` survives the round trip.
    """
    result: dict[str, Any] = {"type": node.type}
    location = node.source_location
    if location is not None:
        result.update(location.metadata)
        if location.line is not None or location.end_line is not None:
            loc: dict[str, Any] = {
                "start": {"line": location.line, "column": location.column},
                "end": {"line": location.end_line, "column": location.end_column},
            }
            if location.source is not None:
                loc["source"] = location.source
            result["loc"] = loc

    for name, value in node.items():
        result[name] = _serialize_value(value)
    result.update(node.metadata)
    return result


def json_to_ast(json_str: str) -> Node:
    """Parse a JSON string emitted by an ESTree parser into a node tree.

    Raises
    ------
    MalformedTreeError
        If the JSON is invalid or does not describe a node
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise MalformedTreeError(f"Invalid ESTree JSON: {e}", original_error=e) from e
    return from_estree(data)


def ast_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize a node tree to an ESTree JSON string."""
    return json.dumps(to_estree(node), indent=indent, ensure_ascii=False)


__all__ = [
    "ast_to_json",
    "from_estree",
    "json_to_ast",
    "to_estree",
]
