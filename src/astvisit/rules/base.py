#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/rules/base.py
"""Base class for lint and code-mod rules."""

from __future__ import annotations

from typing import ClassVar, Optional, get_args

from astvisit.ast.nodes import Node
from astvisit.ast.visitors import NodeVisitor
from astvisit.constants import DEFAULT_SEVERITY, Severity
from astvisit.exceptions import ValidationError
from astvisit.findings import Finding
from astvisit.traversal import TraversalContext


class Rule(NodeVisitor):
    """A named visitor.

    Analysis rules report findings through :meth:`report` and leave the tree
    alone; code-mod rules rewrite the tree and usually report nothing.

    Parameters
    ----------
    severity : {"error", "warning"}, optional
        Severity of reported findings (defaults to ``default_severity``)

    """

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    default_severity: ClassVar[Severity] = DEFAULT_SEVERITY

    def __init__(self, severity: Optional[Severity] = None) -> None:
        if severity is not None and severity not in get_args(Severity):
            raise ValidationError(
                f"Severity must be one of {get_args(Severity)}, got {severity!r}",
                parameter_name="severity",
                parameter_value=severity,
            )
        self.severity: Severity = severity or self.default_severity

    def report(self, context: TraversalContext, node: Node, message: str) -> Finding:
        """Report a finding attributed to this rule."""
        return context.report(node, message, rule=self.name or None, severity=self.severity)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, severity={self.severity!r})"


__all__ = [
    "Rule",
]
