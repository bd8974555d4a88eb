#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/astvisit/options.py
"""Configuration options for the traversal engine.

Options are immutable dataclasses. Use ``create_updated`` to derive a modified
copy instead of mutating an instance.

Examples
--------
    >>> from astvisit.options import TraversalOptions
    >>> options = TraversalOptions(max_revisits=10)
    >>> relaxed = options.create_updated(validate_tree=False)

"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from astvisit.constants import (
    DEFAULT_FAIL_ON_UNKNOWN_TYPES,
    DEFAULT_MAX_REVISITS,
    DEFAULT_REQUIRE_PROGRAM_ROOT,
    DEFAULT_VALIDATE_TREE,
)
from astvisit.exceptions import ValidationError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class TraversalOptions(CloneFrozenMixin):
    """Options controlling a single traversal.

    Parameters
    ----------
    validate_tree : bool, default True
        Check the whole tree against its node schemas (and for shared or
        cyclic nodes) before any callback fires.
    max_revisits : int
        Maximum number of re-visits requested for replacements at one tree
        position before ``RevisitLimitError`` is raised.
    fail_on_unknown_types : bool, default False
        Raise ``MalformedTreeError`` for node types without a declared schema
        instead of inferring their child slots from field values.
    require_program_root : bool, default True
        When validating, require the root to be a ``Program`` node.

    """

    validate_tree: bool = field(
        default=DEFAULT_VALIDATE_TREE,
        metadata={
            "help": "Validate the whole tree before any callback runs",
            "importance": "core",
        },
    )
    max_revisits: int = field(
        default=DEFAULT_MAX_REVISITS,
        metadata={
            "help": "Maximum re-visits of replacements at one position",
            "type": int,
            "importance": "advanced",
        },
    )
    fail_on_unknown_types: bool = field(
        default=DEFAULT_FAIL_ON_UNKNOWN_TYPES,
        metadata={
            "help": "Treat node types without a declared schema as malformed",
            "importance": "advanced",
        },
    )
    require_program_root: bool = field(
        default=DEFAULT_REQUIRE_PROGRAM_ROOT,
        metadata={
            "help": "Require the tree root to be a Program node",
            "importance": "advanced",
        },
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges.

        Raises
        ------
        ValidationError
            If any field value is outside its valid range.

        """
        if self.max_revisits < 0:
            raise ValidationError(
                f"max_revisits must be non-negative, got {self.max_revisits}",
                parameter_name="max_revisits",
                parameter_value=self.max_revisits,
            )


__all__ = [
    "CloneFrozenMixin",
    "TraversalOptions",
]
