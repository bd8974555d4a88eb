#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/ast/__init__.py
"""Abstract Syntax Tree (AST) module for JavaScript syntax trees.

The module consists of several components:

- nodes: the generic node class and source locations
- schema: per-type child slot declarations and structural validation
- visitors: class-based visitors built from ``visit_<NodeType>`` methods
- estree: conversion from and to ESTree/Babel JSON produced by external tools
- utils: cloning, searching, and read-only walking helpers

Examples
--------
    >>> from astvisit.ast import Node
    >>> ternary = Node(
    ...     "ConditionalExpression",
    ...     test=Node("Identifier", name="condition"),
    ...     consequent=Node("Identifier", name="a"),
    ...     alternate=Node("Identifier", name="b"),
    ... )

"""

from __future__ import annotations

from astvisit.ast.nodes import Node, SourceLocation, is_node
from astvisit.ast.schema import (
    ESTREE_SCHEMAS,
    ChildEntry,
    NodeSchema,
    SchemaRegistry,
    SlotSpec,
    get_node_children,
    schema_registry,
    validate_tree,
)
from astvisit.ast.visitors import NodeVisitor
from astvisit.ast.utils import clone_node, count_nodes, find_nodes, iter_preorder
from astvisit.ast.estree import ast_to_json, from_estree, json_to_ast, to_estree

__all__ = [
    # Nodes
    "Node",
    "SourceLocation",
    "is_node",
    # Schemas
    "ChildEntry",
    "ESTREE_SCHEMAS",
    "NodeSchema",
    "SchemaRegistry",
    "SlotSpec",
    "get_node_children",
    "schema_registry",
    "validate_tree",
    # Visitors
    "NodeVisitor",
    # Utilities
    "clone_node",
    "count_nodes",
    "find_nodes",
    "iter_preorder",
    # ESTree
    "ast_to_json",
    "from_estree",
    "json_to_ast",
    "to_estree",
]
