#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/rules/_builtin_metadata.py
"""Metadata definitions for built-in rules.

These metadata objects are also exported via entry points in pyproject.toml.

"""

from __future__ import annotations

from astvisit.constants import EXPAND_SHORTHAND_RULE, NO_NESTED_TERNARY_RULE
from astvisit.rules.nested_ternary import NoNestedTernaryRule
from astvisit.rules.property_mutation import ExpandShorthandPropertiesRule
from astvisit.rules.registry import RuleMetadata

NO_NESTED_TERNARY_METADATA = RuleMetadata(
    name=NO_NESTED_TERNARY_RULE,
    description="Report conditional expressions nested in another conditional's branches",
    rule_class=NoNestedTernaryRule,
    tags=["analysis", "style"],
    author="astvisit",
)

EXPAND_SHORTHAND_METADATA = RuleMetadata(
    name=EXPAND_SHORTHAND_RULE,
    description="Rewrite shorthand object properties into key: value form",
    rule_class=ExpandShorthandPropertiesRule,
    tags=["codemod"],
    author="astvisit",
)

BUILTIN_RULES = (
    NO_NESTED_TERNARY_METADATA,
    EXPAND_SHORTHAND_METADATA,
)
