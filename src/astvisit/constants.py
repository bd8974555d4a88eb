#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the astvisit library.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Traversal Behavior - Defaults for the traversal engine
3. Rules - Rule identifiers and diagnostic messages
4. Node Types - ESTree/Babel type tags used by the built-in rules
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

SlotKind = Literal["single", "sequence"]
Severity = Literal["error", "warning"]

# =============================================================================
# Traversal Behavior
# =============================================================================

# Maximum number of times replacements at a single tree position may be re-visited
DEFAULT_MAX_REVISITS = 100

DEFAULT_VALIDATE_TREE = True
DEFAULT_FAIL_ON_UNKNOWN_TYPES = False
DEFAULT_REQUIRE_PROGRAM_ROOT = True

# Entry point group scanned for third-party rules
RULE_ENTRY_POINT_GROUP = "astvisit.rules"

# =============================================================================
# Rules
# =============================================================================

DEFAULT_SEVERITY: Severity = "error"

NO_NESTED_TERNARY_RULE = "no-nested-ternary"
NESTED_TERNARY_MESSAGE = "Do not use nested ternaries."

EXPAND_SHORTHAND_RULE = "expand-shorthand-properties"

# =============================================================================
# Node Types
# =============================================================================

PROGRAM_TYPE = "Program"
CONDITIONAL_EXPRESSION_TYPE = "ConditionalExpression"
OBJECT_PROPERTY_TYPE = "ObjectProperty"
ESTREE_PROPERTY_TYPE = "Property"
