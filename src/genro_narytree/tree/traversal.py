# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Traversal mixin for NaryTree.

Provides the read-only side of a tree: depth-first preorder iteration,
folding with early exit, familial queries (root, parent, children,
siblings) and the diagnostic tree printer.

All walks start at ``tree.root`` and follow each node's ``children`` tuple
in order. A child id missing from the node map means an earlier mutation
broke the tree, so it raises StructuralCorruptionError instead of being
skipped.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable, Hashable, Iterator, TextIO

from ..exceptions import StructuralCorruptionError
from ..node import EMPTY, NaryTreeNode

logger = logging.getLogger(__name__)

INDENT_WIDTH = 2
BRANCH_MARKER = '* '
LEAF_MARKER = '- '


class Halt:
    """Wrap a fold accumulator to stop folding early.

    Example:
        >>> tree.fold(lambda acc, n: Halt(n) if n.name == 'x' else acc, None)
    """

    __slots__ = ('value',)

    def __init__(self, value: Any) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Halt({self.value!r})"


def _default_label(node: NaryTreeNode) -> str:
    return f"{node.name}"


class TraversalMixin:
    """Read-only traversal over ``self._root`` and ``self._nodes``."""

    __slots__ = ()

    _root: Any
    _nodes: dict[Hashable, NaryTreeNode]

    # ==================== Special Methods ====================

    def __len__(self) -> int:
        """Return the number of nodes in the tree."""
        return len(self._nodes)

    def __contains__(self, node_id: Hashable) -> bool:
        """Check if a node with this id is in the tree."""
        return node_id in self._nodes

    def __iter__(self) -> Iterator[NaryTreeNode]:
        """Iterate over all nodes in depth-first preorder."""
        return self.iter_nodes()

    # ==================== Preorder Walk ====================

    def _child_node(self, child_id: Hashable, parent_id: Any) -> NaryTreeNode:
        try:
            return self._nodes[child_id]
        except KeyError:
            logger.error("Dangling child id %r under node %r", child_id, parent_id)
            raise StructuralCorruptionError(
                f"Child {child_id!r} of node {parent_id!r} is not in the tree"
            ) from None

    def iter_nodes(self) -> Iterator[NaryTreeNode]:
        """Yield every node once, in depth-first preorder.

        A node is yielded before its children, and children follow the
        order of the parent's ``children`` tuple. An empty tree yields
        nothing.

        Raises:
            StructuralCorruptionError: If a child id (or the root id) is
                missing from the tree.
        """
        if self._root is EMPTY:
            return
        stack = [self._child_node(self._root, EMPTY)]
        while stack:
            node = stack.pop()
            yield node
            for child_id in reversed(node.children):
                stack.append(self._child_node(child_id, node.id))

    def to_list(self) -> list[NaryTreeNode]:
        """Return all nodes as a list, in depth-first preorder."""
        return list(self.iter_nodes())

    def count(self) -> int:
        """Return the number of nodes in the tree (same as len(tree))."""
        return len(self._nodes)

    def fold(
        self,
        func: Callable[[Any, NaryTreeNode], Any],
        initial: Any = None,
    ) -> Any:
        """Fold nodes in preorder into a single value.

        Args:
            func: Called as ``func(acc, node)``; returns the new
                accumulator, or ``Halt(value)`` to stop and return value.
            initial: Starting accumulator.

        Returns:
            The final accumulator.

        Example:
            >>> tree.fold(lambda acc, n: acc + [n.id], [])
            [6, 7, 8]

        For a resumable walk, iterate the tree directly: ``iter(tree)``
        is a generator that can be advanced, paused and resumed.
        """
        acc = initial
        for node in self.iter_nodes():
            acc = func(acc, node)
            if isinstance(acc, Halt):
                return acc.value
        return acc

    # ==================== Familial Relationships ====================

    def root_node(self) -> NaryTreeNode | None:
        """Return the root node, or None for an empty tree."""
        return self._nodes.get(self._root)

    def children(self, node_id: Hashable) -> list[NaryTreeNode]:
        """Return the child nodes of ``node_id`` in sibling order.

        Raises:
            KeyError: If node_id is not in the tree.
            StructuralCorruptionError: If a child id is dangling.
        """
        node = self._nodes[node_id]
        return [self._child_node(cid, node.id) for cid in node.children]

    def parent(self, node_id: Hashable) -> NaryTreeNode | None:
        """Return the parent node of ``node_id``, None for the root.

        Raises:
            KeyError: If node_id is not in the tree.
        """
        return self._nodes.get(self._nodes[node_id].parent)

    def siblings(self, node_id: Hashable) -> list[NaryTreeNode]:
        """Return the other children of ``node_id``'s parent."""
        parent = self.parent(node_id)
        if parent is None:
            return []
        return [n for n in self.children(parent.id) if n.id != node_id]

    # ==================== Diagnostic Printing ====================

    def format_tree(
        self,
        label: Callable[[NaryTreeNode], str] | None = None,
        indent: int = INDENT_WIDTH,
    ) -> str:
        """Render the tree as text, one line per node in preorder.

        Each line is indented by ``level * indent`` spaces and starts with
        ``'* '`` for branches or ``'- '`` for leaves. The format is meant
        for humans and may change.

        Args:
            label: Function returning the text for a node (default: name).
            indent: Spaces per level.
        """
        label = label or _default_label
        lines = []
        for node in self.iter_nodes():
            marker = LEAF_MARKER if node.is_leaf else BRANCH_MARKER
            lines.append(' ' * (node.level * indent) + marker + label(node))
        return '\n'.join(lines)

    def print_tree(
        self,
        label: Callable[[NaryTreeNode], str] | None = None,
        file: TextIO | None = None,
    ) -> None:
        """Print format_tree() output to ``file`` (default: stdout).

        Example:
            >>> tree.print_tree(lambda n: f"{n.name}: {n.id}")
        """
        text = self.format_tree(label)
        if text:
            print(text, file=file or sys.stdout)
