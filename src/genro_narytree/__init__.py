# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Genro-NaryTree - Persistent n-ary trees keyed by node id.

A lightweight, zero-dependency library providing an immutable rose tree
for the Genro ecosystem (Genro Kyō): nodes with ids, names and content,
ordered children, and structural edits that return new trees.
"""

__version__ = "0.1.0"

from .exceptions import (
    InvalidOperationError,
    NaryTreeError,
    NotFound,
    RootDeletionRejected,
    StructuralCorruptionError,
    TreeFailure,
)
from .node import EMPTY, NaryTreeNode
from .tree import DEFAULT_PROJECTION, Halt, NaryTree, default_projection, nodes_from_list

__all__ = [
    # Core classes
    "NaryTree",
    "NaryTreeNode",
    "EMPTY",
    # Traversal and conversion
    "Halt",
    "DEFAULT_PROJECTION",
    "default_projection",
    "nodes_from_list",
    # Exceptions
    "NaryTreeError",
    "InvalidOperationError",
    "StructuralCorruptionError",
    # Failure results
    "TreeFailure",
    "NotFound",
    "RootDeletionRejected",
]
