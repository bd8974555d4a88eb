#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/registry.py
"""Visitor registry mapping node types to callbacks.

Several independent rule sets can care about the same node type, so
registering never replaces an existing callback: callbacks accumulate per
node type and fire in registration order. Registries built separately (one
per lint rule or per code-mod plugin) are combined with :func:`merge` to run
them all in a single pass.

Node types are not validated. A callback registered for a type that never
occurs in a tree simply never fires.

Examples
--------
Register a callback:

    >>> from astvisit import VisitorRegistry
    >>> registry = VisitorRegistry()
    >>>
    >>> def log_identifier(path, context):
    ...     print(f"Found identifier: {path.node.name}")
    >>>
    >>> registry.register("Identifier", log_identifier)

Use the decorator form:

    >>> @registry.on("Literal")
    ... def log_literal(path, context):
    ...     print(path.node.value)

Combine registries:

    >>> combined = merge(lint_rules, codemod_rules)

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable

if TYPE_CHECKING:
    from astvisit.traversal import NodePath, TraversalContext

logger = logging.getLogger(__name__)

# Callbacks receive the mutable path to the visited node and the traversal context
VisitorCallback = Callable[["NodePath", "TraversalContext"], Any]


class VisitorRegistry:
    """Ordered mapping from node type tags to visitor callbacks.

    Thread Safety
    -------------
    **WARNING**: VisitorRegistry instances are NOT thread-safe. Build a
    registry before starting traversals, or guard registration with an
    external lock. Concurrent traversals may share a registry as long as
    nobody registers while they run.

    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._callbacks: dict[str, list[VisitorCallback]] = {}

    def register(self, node_type: str, callback: VisitorCallback) -> None:
        """Append a callback for a node type.

        Parameters
        ----------
        node_type : str
            Type tag the callback applies to
        callback : callable
            Visitor with signature ``(path, context) -> Any``

        """
        if not callable(callback):
            raise TypeError(f"Callback for '{node_type}' must be callable, got {type(callback).__name__}")

        self._callbacks.setdefault(node_type, []).append(callback)
        logger.debug(f"Registered callback for '{node_type}'")

    def on(self, node_type: str) -> Callable[[VisitorCallback], VisitorCallback]:
        """Decorator form of :meth:`register`."""

        def decorator(callback: VisitorCallback) -> VisitorCallback:
            self.register(node_type, callback)
            return callback

        return decorator

    def unregister(self, node_type: str, callback: VisitorCallback) -> bool:
        """Remove every registration of ``callback`` for ``node_type``.

        Returns
        -------
        bool
            True if the callback was found and removed

        """
        if node_type not in self._callbacks:
            return False

        initial_len = len(self._callbacks[node_type])
        remaining = [cb for cb in self._callbacks[node_type] if cb != callback]
        removed = len(remaining) < initial_len

        if remaining:
            self._callbacks[node_type] = remaining
        else:
            del self._callbacks[node_type]

        if removed:
            logger.debug(f"Unregistered callback from '{node_type}'")
        return removed

    def callbacks_for(self, node_type: str) -> tuple[VisitorCallback, ...]:
        """Return the callbacks for a node type, in registration order."""
        return tuple(self._callbacks.get(node_type, ()))

    def has_callbacks(self, node_type: str) -> bool:
        return bool(self._callbacks.get(node_type))

    def node_types(self) -> list[str]:
        """List node types with at least one callback, in first-registration order."""
        return list(self._callbacks)

    def copy(self) -> VisitorRegistry:
        """Return an independent copy of this registry."""
        return merge(self)

    def clear(self) -> None:
        """Clear all registered callbacks."""
        self._callbacks.clear()
        logger.debug("Cleared all visitor callbacks")

    @classmethod
    def merged(cls, *registries: VisitorRegistry) -> VisitorRegistry:
        """Alternate constructor for :func:`merge`."""
        return merge(*registries)

    def __contains__(self, node_type: object) -> bool:
        return isinstance(node_type, str) and self.has_callbacks(node_type)

    def __len__(self) -> int:
        """Total number of registered callbacks across all node types."""
        return sum(len(callbacks) for callbacks in self._callbacks.values())

    def __repr__(self) -> str:
        counts = ", ".join(f"{t}: {len(cbs)}" for t, cbs in self._callbacks.items())
        return f"VisitorRegistry({{{counts}}})"


def merge(*registries: VisitorRegistry) -> VisitorRegistry:
    """Combine registries into a new one.

    Per node type, the callback lists of the inputs are concatenated in
    argument order, each keeping its own registration order. Inputs are not
    modified.

    Parameters
    ----------
    *registries : VisitorRegistry
        Registries to combine

    Returns
    -------
    VisitorRegistry
        New registry holding every callback of every input

    """
    combined = VisitorRegistry()
    for registry in registries:
        for node_type, callbacks in registry._callbacks.items():
            combined._callbacks.setdefault(node_type, []).extend(callbacks)
    logger.debug(f"Merged {len(registries)} registries into {len(combined)} callbacks")
    return combined


def registry_from_mapping(mapping: dict[str, Iterable[VisitorCallback]]) -> VisitorRegistry:
    """Build a registry from ``{node_type: [callback, ...]}``.

    Mirrors the Babel/ESLint habit of describing visitors as a plain mapping.
    """
    registry = VisitorRegistry()
    for node_type, callbacks in mapping.items():
        if callable(callbacks):
            registry.register(node_type, callbacks)  # type: ignore[arg-type]
            continue
        for callback in callbacks:
            registry.register(node_type, callback)
    return registry


__all__ = [
    "VisitorCallback",
    "VisitorRegistry",
    "merge",
    "registry_from_mapping",
]
