#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/rules/property_mutation.py
"""Code-mod rules that rewrite a descriptive property in place.

:class:`PropertyMutationRule` applies a pure ``old value -> new value``
function to one descriptive property of matching nodes and can then
synthesize children the node needs to stay consistent with its new property
value. The node is mutated where it stands and is not visited again.

:class:`ExpandShorthandPropertiesRule` is the stock instance: it rewrites

    var coords = { x };

into

    var coords = { x: x };

by clearing ``shorthand`` and giving the property an explicit ``value``
child copied from its ``key``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, Union

from astvisit.ast.nodes import Node
from astvisit.ast.utils import clone_node
from astvisit.constants import EXPAND_SHORTHAND_RULE, ESTREE_PROPERTY_TYPE, OBJECT_PROPERTY_TYPE, Severity
from astvisit.exceptions import ValidationError
from astvisit.registry import VisitorRegistry
from astvisit.rules.base import Rule
from astvisit.traversal import NodePath, TraversalContext

logger = logging.getLogger(__name__)

Mutation = Callable[[Any], Any]
Synthesizer = Callable[[Node], None]


class PropertyMutationRule(Rule):
    """Rewrite one descriptive property of every matching node.

    Parameters
    ----------
    node_types : str or iterable of str
        Node types the rule applies to
    prop : str
        Name of the descriptive property to rewrite
    mutate : callable
        Pure function mapping the old property value to the new one
    when : callable, optional
        Predicate on the old value; the node is left alone when it returns
        False. By default every node carrying the property is rewritten.
    synthesize : callable, optional
        Called with the node after the property changed, to add children the
        node now needs

    Attributes
    ----------
    applied : int
        Number of nodes rewritten so far

    """

    name = "property-mutation"
    description = "Rewrite a descriptive property of matching nodes"

    def __init__(
        self,
        node_types: Union[str, Iterable[str]],
        prop: str,
        mutate: Mutation,
        when: Optional[Callable[[Any], bool]] = None,
        synthesize: Optional[Synthesizer] = None,
        severity: Optional[Severity] = None,
    ) -> None:
        super().__init__(severity=severity)
        self.node_types = (node_types,) if isinstance(node_types, str) else tuple(node_types)
        if not self.node_types:
            raise ValidationError("At least one node type is required", parameter_name="node_types")
        if not prop:
            raise ValidationError("Property name cannot be empty", parameter_name="prop", parameter_value=prop)
        self.prop = prop
        self.mutate = mutate
        self.when = when
        self.synthesize = synthesize
        self.applied = 0

    def visited_node_types(self) -> list[str]:
        return list(self.node_types)

    def build(self) -> VisitorRegistry:
        registry = VisitorRegistry()
        for node_type in self.node_types:
            registry.register(node_type, self.visit_node)
        return registry

    def visit_node(self, path: NodePath, context: TraversalContext) -> None:
        node = path.node
        if not node.has(self.prop):
            return

        old_value = node.get(self.prop)
        if self.when is not None and not self.when(old_value):
            return

        node.set(self.prop, self.mutate(old_value))
        if self.synthesize is not None:
            self.synthesize(node)

        self.applied += 1
        logger.debug(f"{self.name}: rewrote {node.type}.{self.prop} from {old_value!r}")


def synthesize_value_from_key(node: Node) -> None:
    """Give an object property an explicit ``value`` child copied from its ``key``.

    A value that is the key object itself is replaced by a copy as well, so
    the two slots never share a node.
    """
    key = node.get("key")
    value = node.get("value")
    if not isinstance(key, Node):
        return
    if value is None or value is key:
        node.set("value", clone_node(key))


class ExpandShorthandPropertiesRule(PropertyMutationRule):
    """Rewrite shorthand object properties (``{ x }``) to explicit ones (``{ x: x }``)."""

    name = EXPAND_SHORTHAND_RULE
    description = "Expand shorthand object properties into key: value form"

    def __init__(self, severity: Optional[Severity] = None) -> None:
        super().__init__(
            (OBJECT_PROPERTY_TYPE, ESTREE_PROPERTY_TYPE),
            "shorthand",
            mutate=lambda _: False,
            when=lambda value: value is True,
            synthesize=synthesize_value_from_key,
            severity=severity,
        )


def expand_shorthand_properties() -> VisitorRegistry:
    """Return a registry that expands shorthand object properties."""
    return ExpandShorthandPropertiesRule().build()


__all__ = [
    "ExpandShorthandPropertiesRule",
    "PropertyMutationRule",
    "expand_shorthand_properties",
    "synthesize_value_from_key",
]
