#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/ast/utils.py
"""Utility functions for working with AST nodes.

Functions
---------
iter_preorder : Yield nodes in traversal order without invoking callbacks
clone_node : Deep copy a node and its subtree
find_nodes : Collect nodes of a given type
count_nodes : Count the nodes of a tree

Examples
--------
    >>> from astvisit.ast.utils import find_nodes
    >>> ternaries = find_nodes(program, "ConditionalExpression")

"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Iterator, Optional

from astvisit.ast.schema import schema_registry

if TYPE_CHECKING:
    from astvisit.ast.nodes import Node
    from astvisit.ast.schema import SchemaRegistry


def iter_preorder(root: Node, schemas: Optional[SchemaRegistry] = None) -> Iterator[Node]:
    """Yield the nodes of a tree in traversal order without invoking callbacks.

    The tree must not be mutated while the generator is consumed.
    """
    registry = schemas if schemas is not None else schema_registry
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed([entry.node for entry in registry.iter_children(node)]))


def clone_node(node: Node) -> Node:
    """Create a deep copy of an AST node.

    The copy shares nothing with the original, so it can be attached
    elsewhere in the same tree without breaking single ownership.

    Examples
    --------
    >>> cloned = clone_node(key)
    >>> cloned is key
    False
    >>> cloned == key
    True

    """
    return copy.deepcopy(node)


def find_nodes(root: Node, node_type: Optional[str] = None, schemas: Optional[SchemaRegistry] = None) -> list[Node]:
    """Collect nodes of a type in traversal order.

    Parameters
    ----------
    root : Node
        Root of the tree to search
    node_type : str or None, default = None
        Type tag to match (None matches every node)
    schemas : SchemaRegistry, optional
        Node schemas; defaults to the global ``schema_registry``

    """
    return [node for node in iter_preorder(root, schemas) if node_type is None or node.type == node_type]


def count_nodes(root: Node, schemas: Optional[SchemaRegistry] = None) -> int:
    """Count the nodes of a tree, the root included."""
    return sum(1 for _ in iter_preorder(root, schemas))


__all__ = [
    "clone_node",
    "count_nodes",
    "find_nodes",
    "iter_preorder",
]
