# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""NaryTree exceptions and failure results.

Two families live here:

- Exceptions (``NaryTreeError`` and subclasses) are raised for programmer
  errors and corrupted trees. They are not meant to be handled routinely.
- Failure results (``TreeFailure`` and subclasses) are *returned* by
  operations whose target may legitimately be missing or protected, e.g.
  ``tree.delete(tree.root)``. They are falsy, so callers can branch with
  ``if not result:``.
"""

from __future__ import annotations

from typing import Any


class NaryTreeError(Exception):
    """Base exception for NaryTree errors."""

    pass


class InvalidOperationError(NaryTreeError, ValueError):
    """Raised when an operation is called with arguments it cannot honour."""

    pass


class StructuralCorruptionError(NaryTreeError):
    """Raised when a child reference points to a node missing from the tree."""

    pass


class TreeFailure:
    """Base class for failure values returned instead of a tree.

    Attributes:
        node_id: The id the failed operation was targeting.
    """

    __slots__ = ('node_id',)

    def __init__(self, node_id: Any) -> None:
        self.node_id = node_id

    def __bool__(self) -> bool:
        return False

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.node_id == other.node_id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.node_id))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.node_id!r})"


class NotFound(TreeFailure):
    """Returned when the target id is not in the tree."""

    __slots__ = ()


class RootDeletionRejected(TreeFailure):
    """Returned when deleting the root node is attempted."""

    __slots__ = ()
