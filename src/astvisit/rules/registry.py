#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/rules/registry.py
"""Rule registry for rule discovery and lookup by name.

This module implements a registry pattern for rules, enabling:
- Lookup and instantiation of rules by name
- Plugin discovery via entry points
- Combining several rules into one visitor registry

Built-in rules are registered on first access; third-party packages add
rules by exposing :class:`RuleMetadata` objects under the ``astvisit.rules``
entry point group.

Examples
--------
Get a rule:

    >>> from astvisit.rules import rule_registry
    >>> rule = rule_registry.get_rule("no-nested-ternary")

Run several rules in one pass:

    >>> from astvisit.rules import build_registry
    >>> registry = build_registry(["no-nested-ternary", "expand-shorthand-properties"])

"""

from __future__ import annotations

import importlib.metadata
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Type, Union

from astvisit.constants import RULE_ENTRY_POINT_GROUP
from astvisit.exceptions import RuleError
from astvisit.registry import VisitorRegistry, merge
from astvisit.rules.base import Rule

logger = logging.getLogger(__name__)


@dataclass
class RuleMetadata:
    """Description of a registered rule.

    Parameters
    ----------
    name : str
        Unique rule identifier (e.g. ``"no-nested-ternary"``)
    description : str
        One-line description of what the rule does
    rule_class : type
        Rule subclass to instantiate
    tags : list[str], default = empty list
        Free-form labels used for filtering (e.g. ``"analysis"``, ``"codemod"``)
    version : str, default = "1.0.0"
        Version of the rule
    author : str, optional
        Author of the rule

    """

    name: str
    description: str
    rule_class: Type[Rule]
    tags: list[str] = field(default_factory=list)
    version: str = "1.0.0"
    author: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Rule name cannot be empty")
        if not (isinstance(self.rule_class, type) and issubclass(self.rule_class, Rule)):
            raise ValueError(f"rule_class must be a Rule subclass, got {self.rule_class!r}")

    def create_instance(self, **kwargs: Any) -> Rule:
        """Instantiate the rule.

        Raises
        ------
        RuleError
            If the rule rejects the given parameters

        """
        try:
            return self.rule_class(**kwargs)
        except TypeError as e:
            raise RuleError(f"Failed to create rule '{self.name}': {e}", rule_name=self.name, original_error=e) from e


class RuleRegistry:
    """Singleton registry of rules.

    The registry registers the built-in rules and scans the ``astvisit.rules``
    entry point group on first access.

    """

    _instance: Optional[RuleRegistry] = None
    _rules: dict[str, RuleMetadata]
    _initialized: bool

    def __new__(cls) -> RuleRegistry:
        """Create or return singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._rules = {}
            cls._instance._initialized = False
        return cls._instance

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self._initialized = True
            self._register_builtins()
            self.discover_plugins()

    def _register_builtins(self) -> None:
        from astvisit.rules._builtin_metadata import BUILTIN_RULES

        for metadata in BUILTIN_RULES:
            if metadata.name not in self._rules:
                self.register(metadata)

    def register(self, metadata: RuleMetadata) -> None:
        """Register a rule, overwriting any rule with the same name."""
        existing = self._rules.get(metadata.name)
        if existing is not None and existing is not metadata:
            logger.warning(f"Rule '{metadata.name}' already registered, overwriting")

        self._rules[metadata.name] = metadata
        logger.debug(f"Registered rule: {metadata.name}")

    def unregister(self, name: str) -> bool:
        """Unregister a rule; return True if it was registered."""
        if name in self._rules:
            del self._rules[name]
            logger.debug(f"Unregistered rule: {name}")
            return True
        return False

    def get_metadata(self, name: str) -> RuleMetadata:
        """Get metadata for a rule.

        Raises
        ------
        RuleError
            If the rule is not registered

        """
        self._ensure_initialized()

        if name not in self._rules:
            raise RuleError(f"Rule '{name}' not registered", rule_name=name)

        return self._rules[name]

    def get_rule(self, name: str, **kwargs: Any) -> Rule:
        """Get a rule instance by name, passing ``kwargs`` to its constructor."""
        return self.get_metadata(name).create_instance(**kwargs)

    def has_rule(self, name: str) -> bool:
        self._ensure_initialized()
        return name in self._rules

    def list_rules(self, tags: Optional[list[str]] = None) -> list[str]:
        """List registered rule names, sorted alphabetically.

        Parameters
        ----------
        tags : list[str], optional
            Only return rules carrying at least one of these tags

        """
        self._ensure_initialized()

        if tags is None:
            return sorted(self._rules)

        return sorted(name for name, metadata in self._rules.items() if any(tag in metadata.tags for tag in tags))

    def discover_plugins(self) -> int:
        """Discover and register rules from entry points.

        Returns
        -------
        int
            Number of rules discovered and registered

        """
        discovered_count = 0

        try:
            rule_eps = importlib.metadata.entry_points().select(group=RULE_ENTRY_POINT_GROUP)
        except Exception as e:
            logger.warning(f"Failed to discover rule plugins: {e}")
            return 0

        for ep in rule_eps:
            try:
                metadata = ep.load()
            except Exception as e:
                logger.warning(f"Failed to load rule entry point '{ep.name}': {e}")
                continue

            if not isinstance(metadata, RuleMetadata):
                logger.warning(f"Entry point '{ep.name}' did not return RuleMetadata, skipping")
                continue

            self.register(metadata)
            discovered_count += 1
            logger.debug(f"Discovered rule from entry point: {ep.name}")

        logger.debug(f"Discovered {discovered_count} rule(s) from entry points")
        return discovered_count

    def clear(self) -> None:
        """Clear all registered rules; built-ins come back on next access.

        This is primarily useful for testing.

        """
        self._rules.clear()
        self._initialized = False
        logger.debug("Cleared rule registry")


# Global registry instance (preferred access pattern)
rule_registry = RuleRegistry()

RuleSpec = Union[str, Rule, VisitorRegistry]


def build_registry(rules: Iterable[RuleSpec]) -> VisitorRegistry:
    """Combine rules into a single visitor registry.

    Parameters
    ----------
    rules : iterable of str, Rule, or VisitorRegistry
        Rule names (looked up in ``rule_registry``), rule instances, or
        ready-made registries, in the order their callbacks should fire

    Returns
    -------
    VisitorRegistry
        Merged registry

    Raises
    ------
    RuleError
        If a rule name is unknown

    """
    registries = []
    for rule in rules:
        if isinstance(rule, str):
            registries.append(rule_registry.get_rule(rule).build())
        elif isinstance(rule, Rule):
            registries.append(rule.build())
        elif isinstance(rule, VisitorRegistry):
            registries.append(rule)
        else:
            raise RuleError(f"Cannot build a registry from {type(rule).__name__}")
    return merge(*registries)


__all__ = [
    "RuleMetadata",
    "RuleRegistry",
    "RuleSpec",
    "build_registry",
    "rule_registry",
]
