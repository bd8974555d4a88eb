#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/api.py
"""High-level entry points for linting and rewriting trees.

Examples
--------
Lint with the default rule set:

    >>> from astvisit import lint
    >>> for finding in lint(program):
    ...     print(finding)

Run a code-mod and hand the tree to an external generator:

    >>> from astvisit import apply_transforms
    >>> program = apply_transforms(program, ["expand-shorthand-properties"])

"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from astvisit.ast.nodes import Node
from astvisit.constants import NO_NESTED_TERNARY_RULE
from astvisit.findings import Finding, FindingSink
from astvisit.options import TraversalOptions
from astvisit.rules.registry import RuleSpec, build_registry
from astvisit.traversal import CancelCheck, traverse_with_result

logger = logging.getLogger(__name__)

DEFAULT_LINT_RULES: tuple[str, ...] = (NO_NESTED_TERNARY_RULE,)


def lint(
    root: Node,
    rules: Optional[Iterable[RuleSpec]] = None,
    options: Optional[TraversalOptions] = None,
    sink: Optional[FindingSink] = None,
    cancel: Optional[CancelCheck] = None,
) -> list[Finding]:
    """Run analysis rules over a tree in a single pass.

    Parameters
    ----------
    root : Node
        Root of the tree
    rules : iterable of str, Rule, or VisitorRegistry, optional
        Rules to run (defaults to ``no-nested-ternary``)
    options : TraversalOptions, optional
        Traversal options
    sink : FindingSink, optional
        Additionally receives the findings
    cancel : callable, optional
        Cooperative cancellation check

    Returns
    -------
    list of Finding
        Findings in reporting order

    """
    registry = build_registry(DEFAULT_LINT_RULES if rules is None else rules)
    result = traverse_with_result(root, registry, sink=sink, options=options, cancel=cancel)
    logger.debug(f"Lint produced {len(result.findings)} finding(s)")
    return result.findings


def apply_transforms(
    root: Node,
    rules: Iterable[RuleSpec],
    options: Optional[TraversalOptions] = None,
    shared: Optional[dict[str, Any]] = None,
) -> Node:
    """Run code-mod rules over a tree and return the rewritten root.

    The tree is rewritten in place; the returned root differs from ``root``
    only when a rule replaced the root node itself.
    """
    registry = build_registry(rules)
    result = traverse_with_result(root, registry, options=options, shared=shared)
    return result.root


__all__ = [
    "DEFAULT_LINT_RULES",
    "apply_transforms",
    "lint",
]
