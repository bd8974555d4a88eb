#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/ast/nodes.py
"""AST node classes for syntax tree representation.

This module defines the generic node used to represent trees produced by an
external JavaScript parser (ESTree/Babel shapes). A node carries a ``type``
tag and an ordered set of named fields. A field is either a child slot (a
single node, an optional node, or an ordered list of nodes) or a descriptive
property holding a primitive value (``kind``, ``name``, ``operator``,
``value``, ``shorthand``, ...).

Which fields are child slots is declared per node type in
:mod:`astvisit.ast.schema`; the node itself stays schema-agnostic.

Examples
--------
Build ``var answer = 6 * 7;`` by hand:

    >>> from astvisit.ast import Node
    >>> program = Node("Program", body=[
    ...     Node("VariableDeclaration", kind="var", declarations=[
    ...         Node("VariableDeclarator",
    ...              id=Node("Identifier", name="answer"),
    ...              init=Node("BinaryExpression", operator="*",
    ...                        left=Node("Literal", value=6),
    ...                        right=Node("Literal", value=7))),
    ...     ]),
    ... ])
    >>> program.body[0].kind
    'var'

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

# Attributes stored on the instance itself; everything else is a node field
_RESERVED_ATTRIBUTES = frozenset({"type", "source_location", "metadata", "_fields"})


@dataclass
class SourceLocation:
    """Source location information for AST nodes.

    Parameters
    ----------
    line : int or None, default = None
        1-based line of the first character of the node
    column : int or None, default = None
        0-based column of the first character of the node
    end_line : int or None, default = None
        Line of the character after the node
    end_column : int or None, default = None
        Column of the character after the node
    source : str or None, default = None
        Name of the source file, when known
    metadata : dict, default = empty dict
        Additional parser-specific location information

    """

    line: Optional[int] = None
    column: Optional[int] = None
    end_line: Optional[int] = None
    end_column: Optional[int] = None
    source: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)


class Node:
    """A single syntactic construct.

    Fields are passed as keyword arguments and read back as attributes.
    Assigning to an attribute that is not reserved (``type``,
    ``source_location``, ``metadata``) creates or updates a field.

    Parameters
    ----------
    type : str
        Type tag of the node (e.g. ``"ConditionalExpression"``)
    source_location : SourceLocation or None, default = None
        Where this node came from in the source text
    metadata : dict or None, default = None
        Arbitrary data attached to this node; ignored by equality
    **fields
        Child slots and descriptive properties, in declaration order

    Notes
    -----
    Equality is structural: two nodes are equal when their types and all
    fields are equal. Location and metadata do not take part. Nodes are
    therefore unhashable; use ``id(node)`` to key nodes by identity.

    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(
        self,
        type: str,
        *,
        source_location: Optional[SourceLocation] = None,
        metadata: Optional[dict[str, Any]] = None,
        **fields: Any,
    ) -> None:
        """Initialize the node with its type tag and fields."""
        if not isinstance(type, str) or not type:
            raise ValueError(f"Node type must be a non-empty string, got {type!r}")
        object.__setattr__(self, "type", type)
        object.__setattr__(self, "source_location", source_location)
        object.__setattr__(self, "metadata", dict(metadata) if metadata else {})
        object.__setattr__(self, "_fields", dict(fields))

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails; __dict__ may be empty while copying
        fields = self.__dict__.get("_fields")
        if fields is not None and name in fields:
            return fields[name]
        raise AttributeError(f"{self.__dict__.get('type', 'Node')!r} node has no field {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _RESERVED_ATTRIBUTES:
            object.__setattr__(self, name, value)
        else:
            self._fields[name] = value

    def __delattr__(self, name: str) -> None:
        if name in _RESERVED_ATTRIBUTES:
            raise AttributeError(f"Cannot delete reserved attribute {name!r}")
        try:
            del self._fields[name]
        except KeyError:
            raise AttributeError(f"{self.type!r} node has no field {name!r}") from None

    @property
    def fields(self) -> tuple[str, ...]:
        """Names of all fields, in declaration order."""
        return tuple(self._fields)

    def has(self, name: str) -> bool:
        """Return True if the node carries a field called ``name``."""
        return name in self._fields

    def get(self, name: str, default: Any = None) -> Any:
        """Return the value of a field, or ``default`` if it is absent."""
        return self._fields.get(name, default)

    def set(self, name: str, value: Any) -> None:
        """Set a field, appending it to the field order if it is new."""
        if name in _RESERVED_ATTRIBUTES:
            raise ValueError(f"{name!r} is reserved and cannot be used as a field name")
        self._fields[name] = value

    def items(self) -> Iterator[tuple[str, Any]]:
        """Iterate over ``(name, value)`` pairs in declaration order."""
        return iter(list(self._fields.items()))

    def __copy__(self) -> Node:
        return Node(self.type, source_location=self.source_location, metadata=self.metadata, **self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented

        # Compared on an explicit stack so arbitrarily deep trees are fine
        pending: list[tuple[Any, Any]] = [(self, other)]
        while pending:
            left, right = pending.pop()
            if isinstance(left, Node) or isinstance(right, Node):
                if not (isinstance(left, Node) and isinstance(right, Node)):
                    return False
                if left is right:
                    continue
                if left.type != right.type or left._fields.keys() != right._fields.keys():
                    return False
                pending.extend((value, right._fields[name]) for name, value in left._fields.items())
            elif isinstance(left, list) and isinstance(right, list):
                if len(left) != len(right):
                    return False
                pending.extend(zip(left, right))
            elif left != right:
                return False
        return True

    def __repr__(self) -> str:
        parts = [repr(self.type)]
        parts.extend(f"{name}={_shallow_repr(value)}" for name, value in self._fields.items())
        return f"Node({', '.join(parts)})"


def _shallow_repr(value: Any) -> str:
    """Represent child nodes by their type only."""
    if isinstance(value, Node):
        return f"<{value.type}>"
    if isinstance(value, list) and any(isinstance(item, Node) for item in value):
        return f"[{', '.join(_shallow_repr(item) for item in value)}]"
    return repr(value)


def is_node(value: Any) -> bool:
    """Return True if ``value`` is an AST node."""
    return isinstance(value, Node)


__all__ = [
    "Node",
    "SourceLocation",
    "is_node",
]
