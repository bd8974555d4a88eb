#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/rules/nested_ternary.py
"""Detector for nested conditional (ternary) expressions.

Flags code such as::

    var value = condition ? truthyCondition ? a : b : falsyCondition;

Each conditional whose ``consequent`` or ``alternate`` is itself a
conditional is reported once. Because every node is visited, a chain nested
two levels deep produces two findings, one per level; findings are not
merged.
"""

from __future__ import annotations

from typing import Any

from astvisit.ast.nodes import Node
from astvisit.constants import CONDITIONAL_EXPRESSION_TYPE, NESTED_TERNARY_MESSAGE, NO_NESTED_TERNARY_RULE
from astvisit.rules.base import Rule
from astvisit.traversal import NodePath, TraversalContext


def _is_conditional(value: Any) -> bool:
    return isinstance(value, Node) and value.type == CONDITIONAL_EXPRESSION_TYPE


class NoNestedTernaryRule(Rule):
    """Report conditional expressions nested in another conditional's branches."""

    name = NO_NESTED_TERNARY_RULE
    description = "Disallow nested ternary expressions"

    def visit_ConditionalExpression(self, path: NodePath, context: TraversalContext) -> None:
        node = path.node
        if _is_conditional(node.get("consequent")) or _is_conditional(node.get("alternate")):
            self.report(context, node, NESTED_TERNARY_MESSAGE)


__all__ = [
    "NoNestedTernaryRule",
]
