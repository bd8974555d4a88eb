#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/traversal.py
"""Traversal engine for walking syntax trees and invoking visitors.

The engine visits every node of a tree exactly once, in pre-order
depth-first order: a node before its children, children in the order their
slots are declared, and children of a sequence slot in list order. For each
visited node, every callback registered for the node's type is invoked
synchronously with a :class:`NodePath` and the shared
:class:`TraversalContext`. Node types without callbacks are still walked.

Callbacks may mutate the tree through the path:

- ``path.replace_with(new)`` swaps the node in its parent. The replacement
  is not visited unless ``revisit=True`` is passed (or ``path.requeue()`` is
  called), which avoids endless rewrite loops by default.
- ``path.remove()`` detaches the node from its parent.
- ``path.skip()`` keeps the engine from descending into the node's children.
- ``path.stop()`` ends the traversal early, keeping the findings so far.

Children are read after a node's callbacks have run, so children a callback
attaches to the node it is visiting are walked as well.

Errors
------
A tree that violates its node schemas raises :class:`MalformedTreeError`.
The whole tree is checked before the first callback fires, and each node is
checked again as it is visited; either way no findings are returned. An
exception raised by a callback is logged and re-raised as
:class:`CallbackFailure`, identifying the node and the callback.

Examples
--------
    >>> from astvisit import VisitorRegistry, traverse
    >>> registry = VisitorRegistry()
    >>>
    >>> @registry.on("Identifier")
    ... def no_single_letter_names(path, context):
    ...     if len(path.node.name) == 1:
    ...         context.report(path.node, "Identifier is too short.")
    >>>
    >>> findings = traverse(program, registry)

"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from astvisit.ast.nodes import Node
from astvisit.ast.schema import SchemaRegistry, schema_registry, validate_tree
from astvisit.constants import DEFAULT_SEVERITY, PROGRAM_TYPE, Severity
from astvisit.exceptions import (
    AstVisitError,
    CallbackFailure,
    MalformedTreeError,
    RevisitLimitError,
    TraversalError,
)
from astvisit.findings import Finding, FindingCollector, FindingSink
from astvisit.options import TraversalOptions
from astvisit.registry import VisitorCallback, VisitorRegistry

logger = logging.getLogger(__name__)

CancelCheck = Callable[[], bool]


class CancellationToken:
    """Cooperative cancellation flag consulted before each node is visited.

    The flag is backed by :class:`threading.Event`, so another thread may
    cancel a running traversal. A cancelled traversal returns the findings
    accumulated so far.

    Examples
    --------
    >>> token = CancellationToken()
    >>> token.cancel()
    >>> traverse(program, registry, cancel=token)  # returns immediately

    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __call__(self) -> bool:
        return self._event.is_set()


@dataclass
class TraversalContext:
    """Context passed to every visitor callback.

    Parameters
    ----------
    root : Node
        Root of the tree being traversed
    shared : dict, default = empty dict
        Mutable dictionary for passing data between callbacks

    """

    root: Node
    shared: dict[str, Any] = field(default_factory=dict)
    _collector: FindingCollector = field(default_factory=FindingCollector, repr=False)

    def report(
        self,
        node: Node,
        message: str,
        rule: Optional[str] = None,
        severity: Severity = DEFAULT_SEVERITY,
    ) -> Finding:
        """Record a finding about ``node``.

        Parameters
        ----------
        node : Node
            The offending node
        message : str
            Diagnostic message
        rule : str, optional
            Identifier of the reporting rule
        severity : {"error", "warning"}, default = "error"
            Severity of the finding

        Returns
        -------
        Finding
            The recorded finding

        """
        finding = Finding.for_node(node, message, rule=rule, severity=severity)
        self._collector.add(finding)
        return finding

    def add_finding(self, finding: Finding) -> None:
        self._collector.add(finding)

    @property
    def findings(self) -> list[Finding]:
        """Findings recorded so far in this traversal."""
        return self._collector.findings

    def get_shared(self, key: str, default: Any = None) -> Any:
        return self.shared.get(key, default)

    def set_shared(self, key: str, value: Any) -> None:
        self.shared[key] = value


@dataclass
class _TraversalState:
    context: TraversalContext
    root: Node
    schemas: SchemaRegistry
    visited: int = 0
    stopped: bool = False
    cancelled: bool = False


class NodePath:
    """Mutable handle on a visited node and its position in the tree.

    Parameters
    ----------
    node : Node
        The node at this position
    state : _TraversalState
        Traversal this path belongs to
    parent_path : NodePath, optional
        Path of the parent node (None for the root)
    slot : str, optional
        Field of the parent holding this node
    index : int, optional
        Position within the parent's sequence slot (None for single slots)

    """

    def __init__(
        self,
        node: Node,
        state: _TraversalState,
        parent_path: Optional[NodePath] = None,
        slot: Optional[str] = None,
        index: Optional[int] = None,
    ) -> None:
        self.node = node
        self.parent_path = parent_path
        self.slot = slot
        self._state = state
        self._index_hint = index
        self._replaced = False
        self._removed = False
        self._skipped = False
        self._revisit_requested = False
        self.revisits = 0

    @property
    def parent(self) -> Optional[Node]:
        return self.parent_path.node if self.parent_path is not None else None

    @property
    def is_root(self) -> bool:
        return self.parent_path is None

    @property
    def index(self) -> Optional[int]:
        """Current position within the parent's sequence slot.

        Earlier siblings may have been removed since this path was created,
        so the position is looked up by identity.
        """
        if self._index_hint is None:
            return None
        container = self._container()
        if container is None:
            return None
        if self._index_hint < len(container) and container[self._index_hint] is self.node:
            return self._index_hint
        for position, item in enumerate(container):
            if item is self.node:
                self._index_hint = position
                return position
        return None

    @property
    def ancestors(self) -> list[Node]:
        """Nodes from the root down to this node's parent."""
        chain: list[Node] = []
        current = self.parent_path
        while current is not None:
            chain.append(current.node)
            current = current.parent_path
        chain.reverse()
        return chain

    @property
    def depth(self) -> int:
        depth = 0
        current = self.parent_path
        while current is not None:
            depth += 1
            current = current.parent_path
        return depth

    @property
    def replaced(self) -> bool:
        return self._replaced

    @property
    def removed(self) -> bool:
        return self._removed

    @property
    def skipped(self) -> bool:
        return self._skipped

    def _container(self) -> Optional[list[Any]]:
        if self.parent is None or self.slot is None:
            return None
        value = self.parent.get(self.slot)
        return value if isinstance(value, list) else None

    def is_attached(self) -> bool:
        """Return True if the parent still holds this node in its slot."""
        if self.parent is None:
            return self._state.root is self.node
        if self._index_hint is None:
            return self.parent.get(self.slot) is self.node
        return self.index is not None

    def replace_with(self, replacement: Node, revisit: bool = False) -> None:
        """Replace the node at this position.

        Parameters
        ----------
        replacement : Node
            Freshly built or detached node to put in place of the current one
        revisit : bool, default = False
            Visit the replacement (and its subtree) as if it had been there
            from the start

        Raises
        ------
        MalformedTreeError
            If the replacement is not a node or is one of this node's ancestors

        """
        if self._removed:
            raise TraversalError("Cannot replace a node that has been removed")
        if not isinstance(replacement, Node):
            raise MalformedTreeError(f"Replacement must be a Node, got {type(replacement).__name__}")
        if any(ancestor is replacement for ancestor in self.ancestors):
            raise MalformedTreeError(
                f"Replacing {self.node.type} with its own ancestor {replacement.type} would create a cycle",
                node=replacement,
            )

        if self.parent is None:
            self._state.root = replacement
        else:
            position = self.index
            if self._index_hint is None:
                self.parent.set(self.slot, replacement)  # type: ignore[arg-type]
            elif position is not None:
                self._container()[position] = replacement  # type: ignore[index]
            else:
                raise TraversalError(f"{self.node.type} node is no longer attached to its parent")

        logger.debug(f"Replaced {self.node.type} node with {replacement.type}")
        self.node = replacement
        self._replaced = True
        if revisit:
            self._revisit_requested = True

    def remove(self) -> None:
        """Detach the node from its parent.

        Raises
        ------
        TraversalError
            If this is the root node
        MalformedTreeError
            If the node fills a mandatory single slot of its parent

        """
        if self.parent is None:
            raise TraversalError("Cannot remove the root node")

        if self._index_hint is not None:
            position = self.index
            if position is not None:
                self._container().pop(position)  # type: ignore[union-attr]
        else:
            schema = self._state.schemas.get(self.parent.type)
            spec = schema.slot(self.slot) if schema is not None and self.slot is not None else None
            if spec is not None and spec.required:
                raise MalformedTreeError(
                    f"Cannot remove mandatory child '{self.slot}' of {self.parent.type}",
                    node=self.parent,
                    slot=self.slot,
                )
            self.parent.set(self.slot, None)  # type: ignore[arg-type]

        logger.debug(f"Removed {self.node.type} node from {self.parent.type}.{self.slot}")
        self._removed = True

    def skip(self) -> None:
        """Do not descend into this node's children."""
        self._skipped = True

    def stop(self) -> None:
        """End the traversal after the current callback returns."""
        self._state.stopped = True

    def requeue(self) -> None:
        """Visit the node at this position again once its callbacks finish."""
        self._revisit_requested = True

    def _begin_visit(self) -> None:
        self._replaced = False
        self._skipped = False
        self._revisit_requested = False

    def __repr__(self) -> str:
        location = f"{self.parent.type}.{self.slot}" if self.parent is not None else "<root>"
        if self._index_hint is not None:
            location += f"[{self.index}]"
        return f"NodePath({self.node.type} at {location})"


@dataclass
class TraversalResult:
    """Outcome of a traversal.

    Parameters
    ----------
    findings : list of Finding
        Findings reported by callbacks, in the order they were reported
    root : Node
        Root of the tree after traversal (differs from the input root only
        when a callback replaced the root)
    visited : int
        Number of node visits, re-visits included
    cancelled : bool
        True when the cancellation check stopped the traversal
    stopped : bool
        True when a callback called ``path.stop()``

    """

    findings: list[Finding]
    root: Node
    visited: int = 0
    cancelled: bool = False
    stopped: bool = False

    @property
    def completed(self) -> bool:
        return not (self.cancelled or self.stopped)


class Traverser:
    """Pre-order traversal engine bound to a registry, schemas, and options.

    Parameters
    ----------
    registry : VisitorRegistry
        Callbacks to invoke
    options : TraversalOptions, optional
        Traversal options (defaults apply when omitted)
    schemas : SchemaRegistry, optional
        Node schemas; defaults to the global ``schema_registry``

    """

    def __init__(
        self,
        registry: VisitorRegistry,
        options: Optional[TraversalOptions] = None,
        schemas: Optional[SchemaRegistry] = None,
    ) -> None:
        self.registry = registry
        self.options = options or TraversalOptions()
        self.schemas = schemas if schemas is not None else schema_registry

    def run(
        self,
        root: Node,
        sink: Optional[FindingSink] = None,
        cancel: Optional[CancelCheck] = None,
        shared: Optional[dict[str, Any]] = None,
    ) -> TraversalResult:
        """Traverse a tree.

        Parameters
        ----------
        root : Node
            Root of the tree
        sink : FindingSink, optional
            Receives the findings once the traversal ends without error.
            Findings are held back until then so a failed traversal never
            leaks partial results.
        cancel : callable, optional
            Zero-argument check consulted before each node; traversal stops
            when it returns True
        shared : dict, optional
            Initial shared state exposed as ``context.shared``

        Returns
        -------
        TraversalResult
            Findings and traversal statistics

        Raises
        ------
        MalformedTreeError
            If the tree violates its node schemas
        CallbackFailure
            If a callback raises
        RevisitLimitError
            If replacements at one position request too many re-visits

        """
        fail_on_unknown = self.options.fail_on_unknown_types
        if self.options.validate_tree:
            root_type = PROGRAM_TYPE if self.options.require_program_root else None
            count = validate_tree(root, self.schemas, fail_on_unknown=fail_on_unknown, root_type=root_type)
            logger.debug(f"Validated tree of {count} nodes")
        elif not isinstance(root, Node):
            raise MalformedTreeError(f"Tree root must be a Node, got {type(root).__name__}")

        context = TraversalContext(root=root, shared=shared if shared is not None else {})
        state = _TraversalState(context=context, root=root, schemas=self.schemas)
        stack = [NodePath(root, state)]

        while stack:
            if cancel is not None and cancel():
                state.cancelled = True
                logger.info(f"Traversal cancelled after {state.visited} node(s)")
                break

            path = stack.pop()
            if not path.is_attached():
                logger.debug(f"Skipping {path.node.type} node detached before it was visited")
                continue

            children = self._visit(path, state)
            if state.stopped:
                logger.info(f"Traversal stopped by a callback after {state.visited} node(s)")
                break
            stack.extend(reversed(children))

        findings = context.findings
        if sink is not None:
            for finding in findings:
                sink.add(finding)

        logger.debug(f"Traversal visited {state.visited} node(s) and produced {len(findings)} finding(s)")
        return TraversalResult(
            findings=findings,
            root=state.root,
            visited=state.visited,
            cancelled=state.cancelled,
            stopped=state.stopped,
        )

    def _visit(self, path: NodePath, state: _TraversalState) -> list[NodePath]:
        fail_on_unknown = self.options.fail_on_unknown_types

        while True:
            node = path.node
            # Mutations by earlier callbacks may have broken this node
            self.schemas.validate_node(node, fail_on_unknown=fail_on_unknown)
            state.visited += 1
            path._begin_visit()
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(f"Visiting {path!r}")

            for callback in self.registry.callbacks_for(node.type):
                self._invoke(callback, path, state.context)
                if path.removed or path.replaced or state.stopped:
                    break

            if state.stopped or path.removed:
                return []

            if path._revisit_requested:
                path.revisits += 1
                if path.revisits > self.options.max_revisits:
                    raise RevisitLimitError(
                        f"{path.node.type} node requested more than {self.options.max_revisits} re-visits",
                        node=path.node,
                        limit=self.options.max_revisits,
                    )
                logger.debug(f"Re-visiting {path.node.type} node (re-visit {path.revisits})")
                continue

            if path.replaced or path.skipped:
                return []

            return [
                NodePath(entry.node, state, parent_path=path, slot=entry.slot, index=entry.index)
                for entry in self.schemas.iter_children(node, fail_on_unknown=fail_on_unknown)
            ]

    @staticmethod
    def _invoke(callback: VisitorCallback, path: NodePath, context: TraversalContext) -> None:
        try:
            callback(path, context)
        except AstVisitError:
            raise
        except Exception as e:
            logger.error(f"Callback failed on '{path.node.type}' node: {e}", exc_info=True)
            raise CallbackFailure(path.node, callback, e) from e


def traverse_with_result(
    root: Node,
    registry: VisitorRegistry,
    sink: Optional[FindingSink] = None,
    options: Optional[TraversalOptions] = None,
    cancel: Optional[CancelCheck] = None,
    shared: Optional[dict[str, Any]] = None,
    schemas: Optional[SchemaRegistry] = None,
) -> TraversalResult:
    """Traverse a tree and return findings together with traversal statistics."""
    return Traverser(registry, options=options, schemas=schemas).run(root, sink=sink, cancel=cancel, shared=shared)


def traverse(
    root: Node,
    registry: VisitorRegistry,
    sink: Optional[FindingSink] = None,
    options: Optional[TraversalOptions] = None,
    cancel: Optional[CancelCheck] = None,
    shared: Optional[dict[str, Any]] = None,
    schemas: Optional[SchemaRegistry] = None,
) -> list[Finding]:
    """Visit every node of a tree in pre-order and return the findings.

    Parameters
    ----------
    root : Node
        Root of the tree (a ``Program`` node unless the options say otherwise)
    registry : VisitorRegistry
        Callbacks to invoke per node type
    sink : FindingSink, optional
        Additionally receives every finding once traversal ends without error
    options : TraversalOptions, optional
        Traversal options
    cancel : callable, optional
        Cooperative cancellation check, e.g. a :class:`CancellationToken`
    shared : dict, optional
        Initial shared state for callbacks
    schemas : SchemaRegistry, optional
        Node schemas; defaults to the global ``schema_registry``

    Returns
    -------
    list of Finding
        Findings in the order callbacks reported them

    """
    return traverse_with_result(
        root, registry, sink=sink, options=options, cancel=cancel, shared=shared, schemas=schemas
    ).findings


__all__ = [
    "CancelCheck",
    "CancellationToken",
    "NodePath",
    "TraversalContext",
    "TraversalResult",
    "Traverser",
    "traverse",
    "traverse_with_result",
]
