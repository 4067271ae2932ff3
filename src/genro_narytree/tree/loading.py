# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Loading and dumping NaryTree data as hierarchical maps.

A hierarchical map is a nested dict::

    {'id': 1, 'name': 'Root', 'children': [
        {'id': 2, 'name': 'Leaf 1'},
        {'id': 3, 'name': 'Leaf 2', 'content': {'w': 4}},
    ]}

Leaves are dumped without a ``children`` key; loading accepts both forms.
``level`` and ``parent`` keys are ignored on load, they are recomputed
from the nesting.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Hashable, Iterable, TYPE_CHECKING

from ..exceptions import InvalidOperationError
from ..node import EMPTY, NaryTreeNode

if TYPE_CHECKING:
    from .core import NaryTree

logger = logging.getLogger(__name__)

Projection = Callable[[NaryTreeNode], dict[str, Any]]


def default_projection(node: NaryTreeNode) -> dict[str, Any]:
    """Project a node to ``{id, name, content, level, parent}``."""
    return {
        'id': node.id,
        'name': node.name,
        'content': node.content,
        'level': node.level,
        'parent': node.parent,
    }


DEFAULT_PROJECTION: Projection = default_projection


def dump_to_map(tree: NaryTree, projection: Projection | None = None) -> dict[str, Any]:
    """Convert a tree to a nested dict, children in sibling order.

    Args:
        tree: Source tree. Must not be empty.
        projection: Function returning the dict of fields for a node.

    Raises:
        InvalidOperationError: If the tree is empty.
        StructuralCorruptionError: If a child id is dangling.
    """
    if tree.root is EMPTY:
        raise InvalidOperationError("Cannot convert an empty tree to a map")
    projection = projection or DEFAULT_PROJECTION

    root = tree.root_node()
    result = dict(projection(root))
    stack = [(root, result)]
    while stack:
        node, entry = stack.pop()
        if not node.children:
            continue
        entry['children'] = []
        for child in tree.children(node.id):
            child_entry = dict(projection(child))
            entry['children'].append(child_entry)
            stack.append((child, child_entry))
    return result


def _node_from_map(data: dict[str, Any]) -> NaryTreeNode:
    if 'id' not in data:
        raise InvalidOperationError(f"Map entry without 'id': {data!r}")
    return NaryTreeNode(
        data['id'],
        data.get('name', EMPTY),
        data.get('content', EMPTY),
    )


def load_from_map(data: dict[str, Any]) -> NaryTree:
    """Build a tree from a nested dict, top-down.

    Entries are attached in preorder with add_child semantics: an id
    repeated under the same parent moves to the last position, and an id
    repeated under another parent is refused.

    Args:
        data: Map with ``id``, optional ``name``/``content`` and optional
            ``children`` list of maps of the same shape.

    Returns:
        A new NaryTree rooted at ``data['id']``.

    Raises:
        InvalidOperationError: If an entry has no ``id``, or an id
            appears under two different parents.
    """
    from .core import NaryTree

    root = _node_from_map(data)

    def _entries():
        pending = [(root.id, child) for child in reversed(data.get('children') or ())]
        while pending:
            parent_id, child_data = pending.pop()
            node = _node_from_map(child_data)
            yield parent_id, node
            grandchildren = child_data.get('children') or ()
            pending.extend((node.id, gc) for gc in reversed(grandchildren))

    tree = NaryTree._from_entries(root, _entries())
    logger.debug("Loaded tree %r with %d nodes from map", tree.root, len(tree))
    return tree


def nodes_from_list(nodes: Iterable[NaryTreeNode]) -> dict[Hashable, NaryTreeNode]:
    """Rebuild an id -> node mapping from nodes; the first id occurrence wins.

    Example:
        >>> nodes_from_list(tree.to_list()) == tree.nodes
        True
    """
    result: dict[Hashable, NaryTreeNode] = {}
    for node in nodes:
        result.setdefault(node.id, node)
    return result
