#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/ast/schema.py
"""Per-type child slot declarations and structural validation.

A schema tells the traversal engine which fields of a node type are child
slots, in which order they are walked, whether each holds a single node or a
sequence of nodes, and whether the slot is mandatory. Fields not declared by a
schema are descriptive properties, except that any undeclared field holding a
node (or a list of nodes) is still walked, after the declared slots, so that
no node of the tree is ever skipped.

Node types without a schema are handled permissively: their child slots are
inferred from field values in declaration order, and None entries in an
inferred list of nodes are treated as holes.

Examples
--------
Declare a schema for a custom node type:

    >>> from astvisit.ast.schema import NodeSchema, SlotSpec, schema_registry
    >>> schema_registry.register(NodeSchema("PipelineExpression", (
    ...     SlotSpec("head", required=True),
    ...     SlotSpec("stages", kind="sequence", required=True),
    ... )))

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

from astvisit.ast.nodes import Node
from astvisit.constants import SlotKind
from astvisit.exceptions import MalformedTreeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotSpec:
    """Declaration of one child slot.

    Parameters
    ----------
    name : str
        Field name of the slot
    kind : {"single", "sequence"}, default = "single"
        Whether the slot holds one node or an ordered list of nodes
    required : bool, default = False
        For single slots, the child must be present and not None. For
        sequence slots, the list must be present (it may be empty).
    allow_holes : bool, default = False
        Sequence slots only: allow None entries (ESTree array holes)

    """

    name: str
    kind: SlotKind = "single"
    required: bool = False
    allow_holes: bool = False

    def __post_init__(self) -> None:
        if self.kind not in ("single", "sequence"):
            raise ValueError(f"Slot kind must be 'single' or 'sequence', got {self.kind!r}")


@dataclass(frozen=True)
class NodeSchema:
    """Child slot layout of a node type.

    Parameters
    ----------
    type : str
        Node type tag this schema applies to
    slots : tuple of SlotSpec
        Child slots in traversal order

    """

    type: str
    slots: tuple[SlotSpec, ...] = ()

    def slot(self, name: str) -> Optional[SlotSpec]:
        """Return the slot declared under ``name``, if any."""
        for spec in self.slots:
            if spec.name == name:
                return spec
        return None

    @property
    def slot_names(self) -> tuple[str, ...]:
        """Names of the declared slots, in traversal order."""
        return tuple(spec.name for spec in self.slots)


@dataclass(frozen=True)
class ChildEntry:
    """A child node together with its position in the parent."""

    node: Node
    slot: str
    index: Optional[int] = None


def _one(name: str, required: bool = True) -> SlotSpec:
    return SlotSpec(name, "single", required)


def _many(name: str, allow_holes: bool = False) -> SlotSpec:
    return SlotSpec(name, "sequence", True, allow_holes)


# ESTree / Babel node types understood out of the box
ESTREE_SCHEMAS: tuple[NodeSchema, ...] = (
    NodeSchema("Program", (_many("body"),)),
    NodeSchema("ExpressionStatement", (_one("expression"),)),
    NodeSchema("BlockStatement", (_many("body"),)),
    NodeSchema("ReturnStatement", (_one("argument", required=False),)),
    NodeSchema("IfStatement", (_one("test"), _one("consequent"), _one("alternate", required=False))),
    NodeSchema("VariableDeclaration", (_many("declarations"),)),
    NodeSchema("VariableDeclarator", (_one("id"), _one("init", required=False))),
    NodeSchema(
        "FunctionDeclaration",
        (_one("id", required=False), _many("params"), _one("body")),
    ),
    NodeSchema("ArrowFunctionExpression", (_many("params"), _one("body"))),
    NodeSchema("Identifier"),
    NodeSchema("Literal"),
    NodeSchema("StringLiteral"),
    NodeSchema("NumericLiteral"),
    NodeSchema("BooleanLiteral"),
    NodeSchema("NullLiteral"),
    NodeSchema("ThisExpression"),
    NodeSchema("BinaryExpression", (_one("left"), _one("right"))),
    NodeSchema("LogicalExpression", (_one("left"), _one("right"))),
    NodeSchema("AssignmentExpression", (_one("left"), _one("right"))),
    NodeSchema("UnaryExpression", (_one("argument"),)),
    NodeSchema("ConditionalExpression", (_one("test"), _one("consequent"), _one("alternate"))),
    NodeSchema("CallExpression", (_one("callee"), _many("arguments"))),
    NodeSchema("MemberExpression", (_one("object"), _one("property"))),
    NodeSchema("ArrayExpression", (_many("elements", allow_holes=True),)),
    NodeSchema("ArrayPattern", (_many("elements", allow_holes=True),)),
    NodeSchema("ObjectExpression", (_many("properties"),)),
    # Shorthand properties may arrive without an explicit value child
    NodeSchema("ObjectProperty", (_one("key"), _one("value", required=False))),
    NodeSchema("Property", (_one("key"), _one("value", required=False))),
)


class SchemaRegistry:
    """Registry of node schemas keyed by node type.

    Parameters
    ----------
    schemas : iterable of NodeSchema, optional
        Schemas to register initially

    """

    def __init__(self, schemas: Iterable[NodeSchema] = ()) -> None:
        """Initialize the registry with optional initial schemas."""
        self._schemas: dict[str, NodeSchema] = {}
        for schema in schemas:
            self.register(schema)

    def register(self, schema: NodeSchema) -> None:
        """Register a schema, replacing any previous schema for the same type."""
        if schema.type in self._schemas:
            logger.warning(f"Schema for '{schema.type}' already registered, overwriting")
        self._schemas[schema.type] = schema
        logger.debug(f"Registered schema for '{schema.type}'")

    def unregister(self, node_type: str) -> bool:
        """Remove the schema for ``node_type``; return True if one was removed."""
        return self._schemas.pop(node_type, None) is not None

    def get(self, node_type: str) -> Optional[NodeSchema]:
        """Return the schema for ``node_type``, or None when undeclared."""
        return self._schemas.get(node_type)

    def __contains__(self, node_type: object) -> bool:
        return node_type in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    def node_types(self) -> list[str]:
        """List declared node types, sorted alphabetically."""
        return sorted(self._schemas)

    def copy(self) -> SchemaRegistry:
        """Return an independent copy of this registry."""
        return SchemaRegistry(self._schemas.values())

    def validate_node(self, node: Node, fail_on_unknown: bool = False) -> None:
        """Check one node's child slots against its schema.

        Parameters
        ----------
        node : Node
            Node to check (children are not checked recursively)
        fail_on_unknown : bool, default = False
            Treat node types without a schema as malformed

        Raises
        ------
        MalformedTreeError
            If a required slot is missing, or a slot holds something other
            than what its kind allows

        """
        for _ in self.iter_children(node, fail_on_unknown=fail_on_unknown):
            pass

    def iter_children(self, node: Node, fail_on_unknown: bool = False) -> Iterator[ChildEntry]:
        """Iterate over the children of ``node`` in traversal order.

        Declared slots come first, in declaration order; within a sequence
        slot, children come in list order. Undeclared fields holding nodes
        follow in field order.

        The node is validated before anything is yielded, so a malformed
        node never yields a partial child list.

        Raises
        ------
        MalformedTreeError
            If the node violates its schema

        """
        if not isinstance(node, Node):
            raise MalformedTreeError(f"Expected a Node, got {type(node).__name__}")

        schema = self._schemas.get(node.type)
        if schema is None and fail_on_unknown:
            raise MalformedTreeError(f"No schema declared for node type '{node.type}'", node=node)

        entries: list[ChildEntry] = []
        declared: set[str] = set()
        if schema is not None:
            for spec in schema.slots:
                declared.add(spec.name)
                entries.extend(_declared_slot_children(node, spec))

        for name, value in node.items():
            if name not in declared:
                entries.extend(_inferred_slot_children(node, name, value))

        yield from entries


def _declared_slot_children(node: Node, spec: SlotSpec) -> list[ChildEntry]:
    value = node.get(spec.name)

    if spec.kind == "single":
        if value is None:
            if spec.required:
                raise MalformedTreeError(
                    f"{node.type} node is missing mandatory child '{spec.name}'", node=node, slot=spec.name
                )
            return []
        if not isinstance(value, Node):
            raise MalformedTreeError(
                f"{node.type}.{spec.name} must hold a node, got {type(value).__name__}", node=node, slot=spec.name
            )
        return [ChildEntry(value, spec.name)]

    if value is None:
        if spec.required:
            raise MalformedTreeError(
                f"{node.type} node is missing mandatory sequence '{spec.name}'", node=node, slot=spec.name
            )
        return []
    if not isinstance(value, list):
        raise MalformedTreeError(
            f"{node.type}.{spec.name} must hold a list of nodes, got {type(value).__name__}",
            node=node,
            slot=spec.name,
        )

    entries = []
    for index, item in enumerate(value):
        if item is None and spec.allow_holes:
            continue
        if not isinstance(item, Node):
            raise MalformedTreeError(
                f"{node.type}.{spec.name}[{index}] must be a node, got {type(item).__name__}",
                node=node,
                slot=spec.name,
            )
        entries.append(ChildEntry(item, spec.name, index))
    return entries


def _inferred_slot_children(node: Node, name: str, value: Any) -> list[ChildEntry]:
    if isinstance(value, Node):
        return [ChildEntry(value, name)]
    if not isinstance(value, list) or not any(isinstance(item, Node) for item in value):
        return []

    # None entries are holes (``[, b]``); anything else mixed in is malformed
    entries = []
    for index, item in enumerate(value):
        if item is None:
            continue
        if not isinstance(item, Node):
            raise MalformedTreeError(
                f"{node.type}.{name}[{index}] mixes a {type(item).__name__} into a list of nodes",
                node=node,
                slot=name,
            )
        entries.append(ChildEntry(item, name, index))
    return entries


# Global registry instance pre-populated with the ESTree/Babel types
schema_registry = SchemaRegistry(ESTREE_SCHEMAS)


def get_node_children(node: Node, schemas: Optional[SchemaRegistry] = None) -> list[Node]:
    """Get all child nodes of a node in traversal order.

    Parameters
    ----------
    node : Node
        The node to get children from
    schemas : SchemaRegistry, optional
        Schemas to consult; defaults to the global ``schema_registry``

    Returns
    -------
    list of Node
        Child nodes (empty list for leaves)

    """
    registry = schemas if schemas is not None else schema_registry
    return [entry.node for entry in registry.iter_children(node)]


def validate_tree(
    root: Node,
    schemas: Optional[SchemaRegistry] = None,
    fail_on_unknown: bool = False,
    root_type: Optional[str] = None,
) -> int:
    """Validate a whole tree without invoking any callbacks.

    Parameters
    ----------
    root : Node
        Root of the tree
    schemas : SchemaRegistry, optional
        Schemas to consult; defaults to the global ``schema_registry``
    fail_on_unknown : bool, default = False
        Treat node types without a schema as malformed
    root_type : str, optional
        Required type tag of the root node (e.g. ``"Program"``)

    Returns
    -------
    int
        Number of nodes in the tree

    Raises
    ------
    MalformedTreeError
        If any node violates its schema, if the root has the wrong type,
        or if a node is reachable more than once (shared or cyclic)

    """
    registry = schemas if schemas is not None else schema_registry
    if not isinstance(root, Node):
        raise MalformedTreeError(f"Tree root must be a Node, got {type(root).__name__}")
    if root_type is not None and root.type != root_type:
        raise MalformedTreeError(f"Tree root must be a {root_type} node, got {root.type}", node=root)

    seen: set[int] = {id(root)}
    stack = [root]
    while stack:
        node = stack.pop()
        for entry in registry.iter_children(node, fail_on_unknown=fail_on_unknown):
            if id(entry.node) in seen:
                raise MalformedTreeError(
                    f"{entry.node.type} node under {node.type}.{entry.slot} is reachable more than once "
                    f"(shared between parents or part of a cycle)",
                    node=node,
                    slot=entry.slot,
                )
            seen.add(id(entry.node))
            stack.append(entry.node)

    return len(seen)


__all__ = [
    "ChildEntry",
    "ESTREE_SCHEMAS",
    "NodeSchema",
    "SchemaRegistry",
    "SlotSpec",
    "get_node_children",
    "schema_registry",
    "validate_tree",
]
