#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/ast/visitors.py
"""Class-based visitors.

A :class:`NodeVisitor` subclass groups the callbacks of one concern (a lint
rule, a code-mod) as ``visit_<NodeType>`` methods, named after the exact type
tag they handle. :meth:`NodeVisitor.build` turns the methods into a
:class:`~astvisit.registry.VisitorRegistry` that can be merged with others.

Examples
--------
    >>> class IdentifierCounter(NodeVisitor):
    ...     def __init__(self):
    ...         self.count = 0
    ...
    ...     def visit_Identifier(self, path, context):
    ...         self.count += 1
    >>>
    >>> counter = IdentifierCounter()
    >>> traverse(program, counter.build())
    >>> print(counter.count)

"""

from __future__ import annotations

from astvisit.registry import VisitorRegistry

_VISIT_PREFIX = "visit_"


class NodeVisitor:
    """Base class for visitors written as ``visit_<NodeType>`` methods."""

    def visited_node_types(self) -> list[str]:
        """Node types this visitor handles, in method definition order.

        Methods inherited from base classes come before those added by
        subclasses; an override keeps its base class position.
        """
        names: list[str] = []
        for klass in reversed(type(self).__mro__):
            for attr in vars(klass):
                if attr.startswith(_VISIT_PREFIX) and len(attr) > len(_VISIT_PREFIX) and attr not in names:
                    names.append(attr)
        return [name[len(_VISIT_PREFIX):] for name in names if callable(getattr(self, name, None))]

    def build(self) -> VisitorRegistry:
        """Return a registry holding this visitor's bound methods."""
        registry = VisitorRegistry()
        for node_type in self.visited_node_types():
            registry.register(node_type, getattr(self, f"{_VISIT_PREFIX}{node_type}"))
        return registry


__all__ = [
    "NodeVisitor",
]
