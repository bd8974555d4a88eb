#  Copyright (c) 2025 Tom Villani, Ph.D.
"""astvisit - syntax tree traversal, lint rules, and code-mods for JavaScript ASTs.

astvisit walks trees produced by an external JavaScript parser (ESTree or
Babel shapes), dispatches each node to the callbacks registered for its type,
and collects the diagnostics those callbacks report. The same machinery runs
code-mods that rewrite the tree before an external generator prints it.

Key Features
------------
- Deterministic pre-order traversal with per-type callback dispatch
- Composable visitor registries (several rules in one pass)
- Mutable node paths for replacement, removal, and opt-in re-visits
- Schema-based structural validation that fails fast on malformed trees
- Built-in rules: ``no-nested-ternary`` and ``expand-shorthand-properties``
- Plugin system for custom rules via entry points

Examples
--------
    >>> from astvisit import from_estree, lint
    >>> program = from_estree(estree_json)
    >>> for finding in lint(program):
    ...     print(finding)

See Also
--------
astvisit.ast : Node model, schemas, and ESTree conversion
astvisit.rules : Built-in rules and the rule registry

"""

from __future__ import annotations

from astvisit.exceptions import (
    AstVisitError,
    CallbackFailure,
    MalformedTreeError,
    RevisitLimitError,
    RuleError,
    TraversalError,
    ValidationError,
)
from astvisit.ast import (
    Node,
    NodeSchema,
    NodeVisitor,
    SlotSpec,
    SourceLocation,
    ast_to_json,
    clone_node,
    from_estree,
    iter_preorder,
    json_to_ast,
    schema_registry,
    to_estree,
)
from astvisit.findings import Finding, FindingCollector, FindingSink
from astvisit.options import TraversalOptions
from astvisit.registry import VisitorCallback, VisitorRegistry, merge
from astvisit.traversal import (
    CancellationToken,
    NodePath,
    TraversalContext,
    TraversalResult,
    Traverser,
    traverse,
    traverse_with_result,
)
from astvisit.rules import (
    ExpandShorthandPropertiesRule,
    NoNestedTernaryRule,
    PropertyMutationRule,
    Rule,
    build_registry,
    rule_registry,
)
from astvisit.api import apply_transforms, lint

__version__ = "0.1.0"

__all__ = [
    # Exceptions
    "AstVisitError",
    "CallbackFailure",
    "MalformedTreeError",
    "RevisitLimitError",
    "RuleError",
    "TraversalError",
    "ValidationError",
    # AST
    "Node",
    "NodeSchema",
    "NodeVisitor",
    "SlotSpec",
    "SourceLocation",
    "ast_to_json",
    "clone_node",
    "from_estree",
    "iter_preorder",
    "json_to_ast",
    "schema_registry",
    "to_estree",
    # Findings
    "Finding",
    "FindingCollector",
    "FindingSink",
    # Traversal
    "CancellationToken",
    "NodePath",
    "TraversalContext",
    "TraversalOptions",
    "TraversalResult",
    "Traverser",
    "VisitorCallback",
    "VisitorRegistry",
    "merge",
    "traverse",
    "traverse_with_result",
    # Rules
    "ExpandShorthandPropertiesRule",
    "NoNestedTernaryRule",
    "PropertyMutationRule",
    "Rule",
    "build_registry",
    "rule_registry",
    # API
    "apply_transforms",
    "lint",
]
