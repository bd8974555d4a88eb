#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the astvisit library.

This module defines specialized exception classes for the error conditions
that can occur while validating, traversing, and rewriting syntax trees.

Exception Hierarchy
-------------------
- AstVisitError (base exception)

  - ValidationError (parameter/option validation)

  - TraversalError (failures while walking a tree)
    - MalformedTreeError (structural precondition violated)
    - CallbackFailure (a registered callback raised)
    - RevisitLimitError (a replacement kept requesting re-visits)

  - RuleError (unknown or badly defined rules)

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from astvisit.ast.nodes import Node


class AstVisitError(Exception):
    """Base exception class for all astvisit-specific errors.

    Catching this will catch all library-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(AstVisitError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class TraversalError(AstVisitError):
    """Base exception for failures raised while walking a tree."""


class MalformedTreeError(TraversalError):
    """Exception raised when a tree violates its structural preconditions.

    Raised when a mandatory child slot is empty, a slot holds something that
    is not a node, or a node is reachable twice (shared or cyclic). A
    traversal that raises this error returns no findings.

    Parameters
    ----------
    message : str
        Description of the structural problem
    node : Node, optional
        The node whose slot is malformed
    slot : str, optional
        Name of the offending slot

    """

    def __init__(
        self,
        message: str,
        node: Node | None = None,
        slot: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the malformed tree error."""
        super().__init__(message, original_error=original_error)
        self.node = node
        self.slot = slot


class CallbackFailure(TraversalError):
    """Exception raised when a registered callback fails.

    The original exception is chained and kept on ``original_error``.

    Parameters
    ----------
    node : Node
        The node being visited when the callback raised
    callback : callable
        The callback that raised
    original_error : Exception
        The exception raised by the callback

    Attributes
    ----------
    node_type : str
        Type tag of the node being visited

    """

    def __init__(
        self,
        node: Node,
        callback: Callable[..., Any],
        original_error: Exception,
        message: str | None = None,
    ):
        """Initialize the callback failure."""
        callback_name = getattr(callback, "__qualname__", None) or repr(callback)
        if message is None:
            message = f"Callback {callback_name} failed on {node.type} node: {original_error}"
        super().__init__(message, original_error=original_error)
        self.node = node
        self.node_type = node.type
        self.callback = callback
        self.callback_name = callback_name


class RevisitLimitError(TraversalError):
    """Exception raised when replacements at one position are re-visited too often.

    Parameters
    ----------
    message : str
        Description of the failure
    node : Node, optional
        The last replacement node that requested a re-visit
    limit : int, optional
        The configured re-visit limit

    """

    def __init__(self, message: str, node: Node | None = None, limit: int | None = None):
        """Initialize the revisit limit error."""
        super().__init__(message)
        self.node = node
        self.limit = limit


class RuleError(AstVisitError):
    """Exception raised for unknown or invalid rules.

    Parameters
    ----------
    message : str
        Description of the rule problem
    rule_name : str, optional
        Name of the rule involved

    """

    def __init__(self, message: str, rule_name: str | None = None, original_error: Exception | None = None):
        """Initialize the rule error."""
        super().__init__(message, original_error=original_error)
        self.rule_name = rule_name


__all__ = [
    "AstVisitError",
    "ValidationError",
    "TraversalError",
    "MalformedTreeError",
    "CallbackFailure",
    "RevisitLimitError",
    "RuleError",
]
