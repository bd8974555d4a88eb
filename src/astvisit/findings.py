#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/findings.py
"""Diagnostic findings produced by analysis rules.

A :class:`Finding` references the offending node and carries a message. It
is created while a tree is traversed and handed to a sink. Findings are
immutable once created.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Protocol, runtime_checkable

from astvisit.ast.nodes import Node
from astvisit.constants import DEFAULT_SEVERITY, Severity


@dataclass(frozen=True, eq=False)
class Finding:
    """One diagnostic result.

    Parameters
    ----------
    node : Node
        The offending node
    message : str
        Human-readable description of the problem
    rule : str or None, default = None
        Identifier of the rule that produced the finding
    severity : {"error", "warning"}, default = "error"
        How serious the finding is
    line : int or None, default = None
        Source line of the node, when the parser recorded it
    column : int or None, default = None
        Source column of the node, when the parser recorded it

    Notes
    -----
    Findings compare by identity of the referenced node plus their other
    fields, so two findings about structurally equal but distinct nodes are
    not equal.

    """

    node: Node
    message: str
    rule: Optional[str] = None
    severity: Severity = DEFAULT_SEVERITY
    line: Optional[int] = None
    column: Optional[int] = None

    @classmethod
    def for_node(
        cls,
        node: Node,
        message: str,
        rule: Optional[str] = None,
        severity: Severity = DEFAULT_SEVERITY,
    ) -> Finding:
        """Create a finding, taking line and column from the node's location."""
        location = node.source_location
        return cls(
            node=node,
            message=message,
            rule=rule,
            severity=severity,
            line=location.line if location is not None else None,
            column=location.column if location is not None else None,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Finding):
            return NotImplemented
        return self.node is other.node and self._key() == other._key()

    def __hash__(self) -> int:
        return hash((id(self.node), *self._key()))

    def _key(self) -> tuple[object, ...]:
        return (self.message, self.rule, self.severity, self.line, self.column)

    def __str__(self) -> str:
        where = f"{self.line}:{self.column} " if self.line is not None else ""
        rule = f" ({self.rule})" if self.rule else ""
        return f"{where}{self.severity}: {self.message}{rule}"


@runtime_checkable
class FindingSink(Protocol):
    """Anything findings can be added to."""

    def add(self, finding: Finding) -> None:
        """Accept one finding."""
        ...


class FindingCollector:
    """List-backed finding sink, the default used by the traversal engine."""

    def __init__(self) -> None:
        self._findings: list[Finding] = []

    def add(self, finding: Finding) -> None:
        self._findings.append(finding)

    @property
    def findings(self) -> list[Finding]:
        """Findings collected so far, in the order they were added."""
        return list(self._findings)

    def clear(self) -> None:
        self._findings.clear()

    def __len__(self) -> int:
        return len(self._findings)

    def __iter__(self) -> Iterator[Finding]:
        return iter(list(self._findings))


__all__ = [
    "Finding",
    "FindingCollector",
    "FindingSink",
]
