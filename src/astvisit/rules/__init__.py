#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/rules/__init__.py
"""Lint and code-mod rules.

This package provides:

- ``Rule``, the base class for named visitors
- the built-in rules ``no-nested-ternary`` and ``expand-shorthand-properties``
- a rule registry with entry point plugin discovery

Examples
--------
Lint a tree for nested ternaries:

    >>> from astvisit import traverse
    >>> from astvisit.rules import NoNestedTernaryRule
    >>> findings = traverse(program, NoNestedTernaryRule().build())

Register a custom rule:

    >>> from astvisit.rules import Rule, RuleMetadata, rule_registry
    >>>
    >>> class NoVarRule(Rule):
    ...     name = "no-var"
    ...
    ...     def visit_VariableDeclaration(self, path, context):
    ...         if path.node.kind == "var":
    ...             self.report(context, path.node, "Unexpected var.")
    >>>
    >>> rule_registry.register(RuleMetadata(name="no-var", description="Disallow var", rule_class=NoVarRule))

"""

from __future__ import annotations

from .base import Rule
from .nested_ternary import NoNestedTernaryRule
from .property_mutation import (
    ExpandShorthandPropertiesRule,
    PropertyMutationRule,
    expand_shorthand_properties,
    synthesize_value_from_key,
)
from .registry import RuleMetadata, RuleRegistry, RuleSpec, build_registry, rule_registry
from ._builtin_metadata import BUILTIN_RULES, EXPAND_SHORTHAND_METADATA, NO_NESTED_TERNARY_METADATA

__all__ = [
    # Base
    "Rule",
    # Registry
    "RuleMetadata",
    "RuleRegistry",
    "RuleSpec",
    "build_registry",
    "rule_registry",
    # Built-in rules
    "NoNestedTernaryRule",
    "PropertyMutationRule",
    "ExpandShorthandPropertiesRule",
    "expand_shorthand_properties",
    "synthesize_value_from_key",
    # Built-in metadata
    "BUILTIN_RULES",
    "NO_NESTED_TERNARY_METADATA",
    "EXPAND_SHORTHAND_METADATA",
]
