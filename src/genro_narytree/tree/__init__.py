# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""NaryTree package - Persistent n-ary tree.

This package provides the NaryTree class, a rooted tree with any number of
ordered children per node, stored as a flat id-keyed node map.

The package is organized into:
- core: Main NaryTree class with construction, access and mutations
- traversal: Preorder iteration, fold, familial queries and printing
- loading: Functions for converting trees to and from nested dicts

Example:
    >>> from genro_narytree import NaryTree, NaryTreeNode
    >>> tree = NaryTree(NaryTreeNode(6, 'Root node'))
    >>> tree = tree.add_child(NaryTreeNode(7, 'Leaf node 1'))
    >>> len(tree)
    2
"""

from .core import NaryTree
from .loading import DEFAULT_PROJECTION, default_projection, nodes_from_list
from .traversal import Halt

__all__ = [
    "NaryTree",
    "Halt",
    "DEFAULT_PROJECTION",
    "default_projection",
    "nodes_from_list",
]
