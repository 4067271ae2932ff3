# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""NaryTree - A persistent n-ary tree keyed by node id.

This module provides the NaryTree class, the core container of the
genro-narytree library. A tree is a root id plus a flat ``id -> node``
map; nodes refer to each other only by id (``parent``, ``children``), so
there are no reference cycles between node objects.

Key Features:
    - **Persistent updates**: Every mutation returns a new NaryTree and
      leaves the original (and its nodes) untouched
    - **O(1) lookup**: Nodes are stored in a dict keyed by id
    - **Ordered children**: Sibling order is the insertion order, and it is
      the order used by preorder traversal
    - **Structural edits**: delete with promotion of children, batch move,
      detach of a subtree, merge of another tree as a subtree

Example:
    Basic usage::

        tree = NaryTree(NaryTreeNode(5, 'Root'))
        tree = tree.add_child(NaryTreeNode(1, 'Branch 1'))
        tree = tree.add_child(NaryTreeNode(3, 'Leaf 1'), 1)

        [n.id for n in tree]  # [5, 1, 3]

        tree = tree.delete(1)
        tree.nodes[5].children  # (3,)

    Failures that callers are expected to handle are returned, not raised::

        result = tree.delete(tree.root)
        if not result:
            print(result)  # RootDeletionRejected(5)

Thread safety:
    A NaryTree is never modified after construction, so any number of
    threads may read the same tree. Writers that share a "current tree"
    must serialize the swap of that reference themselves.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, Hashable, Iterable, Mapping

from ..exceptions import (
    InvalidOperationError,
    NotFound,
    RootDeletionRejected,
    TreeFailure,
)
from ..node import EMPTY, NaryTreeNode
from .loading import Projection, dump_to_map, load_from_map
from .traversal import TraversalMixin

logger = logging.getLogger(__name__)

NodeRef = Any  # node id or NaryTreeNode


def _as_id(ref: Any) -> Any:
    return ref.id if isinstance(ref, NaryTreeNode) else ref


def _attach_parent(
    nodes: Mapping[Hashable, NaryTreeNode], child: NaryTreeNode, parent_id: Any
) -> NaryTreeNode:
    """Return the parent node ``child`` may be attached to, or raise.

    A child id already in ``nodes`` may only be re-added under its current
    parent, which keeps the parent relation acyclic.
    """
    if parent_id == child.id:
        raise InvalidOperationError(f"Cannot add node {child.id!r} as its own child")
    parent = nodes.get(parent_id)
    if parent is None:
        raise InvalidOperationError(f"Parent node {parent_id!r} is not in the tree")
    stored = nodes.get(child.id)
    if stored is not None and stored.parent != parent.id:
        raise InvalidOperationError(
            f"Node {child.id!r} is already in the tree under {stored.parent!r}"
        )
    return parent


class NaryTree(TraversalMixin):
    """An immutable rooted tree with any number of ordered children per node.

    NaryTree provides:
    - get(id) / fetch(id) / put(id, node): Node access
    - add_child(node, parent_id): Attach a node
    - move_nodes(ids, new_parent_id): Reparent siblings in one step
    - delete(id): Remove a node, promoting its children
    - detach(id) / merge(branch, id): Split off or graft subtrees
    - iteration, len() and ``in``: Preorder walk over all nodes

    Attributes:
        root: Id of the root node, or EMPTY for an empty tree.
        nodes: Read-only ``id -> NaryTreeNode`` mapping.

    Example:
        >>> tree = NaryTree(NaryTreeNode(1, 'Root')).add_child(NaryTreeNode(2, 'Child'))
        >>> [n.name for n in tree]
        ['Root', 'Child']
    """

    __slots__ = ('_root', '_nodes')

    def __init__(self, root: NaryTreeNode | None = None) -> None:
        """Initialize a NaryTree.

        Args:
            root: Optional root node. Its parent is cleared, its level set
                to 0 and its children emptied, whatever their prior state.
                Without it the tree is empty.

        Example:
            >>> NaryTree()  # empty tree
            >>> NaryTree(NaryTreeNode(1, 'Root node'))
        """
        if root is None:
            self._root: Any = EMPTY
            self._nodes: dict[Hashable, NaryTreeNode] = {}
        else:
            root = root._replace(parent=EMPTY, level=0, children=())
            self._root = root.id
            self._nodes = {root.id: root}

    @classmethod
    def _make(cls, root: Any, nodes: dict[Hashable, NaryTreeNode]) -> NaryTree:
        """Build a tree around an already-consistent node dict (not copied)."""
        tree = cls.__new__(cls)
        tree._root = root
        tree._nodes = nodes
        return tree

    @classmethod
    def _from_entries(
        cls,
        root: NaryTreeNode,
        entries: Iterable[tuple[Any, NaryTreeNode]],
    ) -> NaryTree:
        """Build a tree from ``(parent_id, child)`` pairs in one pass.

        Each pair is handled like ``add_child(child, parent_id)`` on the
        tree built so far, but children are collected in per-node ordered
        dicts and frozen into tuples at the end.
        """
        root = root._replace(parent=EMPTY, level=0, children=())
        nodes: dict[Hashable, NaryTreeNode] = {root.id: root}
        children: dict[Hashable, dict[Hashable, None]] = {root.id: {}}
        for parent_id, child in entries:
            parent = _attach_parent(nodes, child, parent_id)
            if child.id not in nodes:
                nodes[child.id] = child._replace(
                    parent=parent.id, level=parent.level + 1, children=()
                )
                children[child.id] = {}
            siblings = children[parent.id]
            siblings.pop(child.id, None)
            siblings[child.id] = None
        for nid, kids in children.items():
            if kids:
                nodes[nid] = nodes[nid]._replace(children=tuple(kids))
        return cls._make(root.id, nodes)

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        """Return string representation showing root id and size."""
        return f"NaryTree(root={self._root!r}, nodes={len(self._nodes)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NaryTree):
            return NotImplemented
        return self._root == other._root and self._nodes == other._nodes

    __hash__ = None  # type: ignore[assignment]

    @property
    def root(self) -> Any:
        """Id of the root node (EMPTY for an empty tree)."""
        return self._root

    @property
    def nodes(self) -> Mapping[Hashable, NaryTreeNode]:
        """Read-only view of the ``id -> node`` map."""
        return MappingProxyType(self._nodes)

    @property
    def is_empty(self) -> bool:
        """True if the tree has no root."""
        return self._root is EMPTY

    # ==================== Access ====================

    def get(self, node_id: Hashable, default: Any = None) -> NaryTreeNode | None:
        """Get node by id, with default.

        Args:
            node_id: Id of the node.
            default: Value to return if not found.

        Returns:
            NaryTreeNode if found, default otherwise.
        """
        return self._nodes.get(node_id, default)

    def fetch(self, node_id: Hashable) -> tuple[bool, NaryTreeNode | None]:
        """Look up a node, returning ``(True, node)`` or ``(False, None)``."""
        if node_id in self._nodes:
            return True, self._nodes[node_id]
        return False, None

    def put(self, node_id: Hashable, replacement: NaryTreeNode) -> NaryTree | NotFound:
        """Replace name and content of the node at ``node_id``.

        Parent, level and children of the stored node are kept, so the
        hierarchy never changes. The id of ``replacement`` is ignored.

        Returns:
            The updated tree, or NotFound if node_id is not in the tree.

        Example:
            >>> tree = tree.put(tree.root, NaryTreeNode(name='Renamed'))
        """
        current = self._nodes.get(node_id)
        if current is None:
            logger.debug("put: node %r not found", node_id)
            return NotFound(node_id)
        nodes = dict(self._nodes)
        nodes[node_id] = current._replace(
            name=replacement.name, content=replacement.content
        )
        return self._make(self._root, nodes)

    # ==================== Mutation ====================

    def add_child(
        self, child: NaryTreeNode, parent_id: NodeRef | None = None
    ) -> NaryTree:
        """Add ``child`` as the last child of ``parent_id`` (default: root).

        The child gets ``parent`` and ``level`` from its new parent and
        enters the tree with no children of its own. If a node with the
        same id is already stored, the stored node is kept as it is (name
        and content are not overwritten) and only the parent's children
        are updated: the id is moved to the last sibling position. Re-adding
        an id under a different parent is refused; use move_nodes().

        Args:
            child: Node to attach.
            parent_id: Id (or node) of the parent. Defaults to the root.

        Returns:
            The updated tree.

        Raises:
            InvalidOperationError: If parent_id is the child's own id, the
                parent is not in the tree, or the child id is already
                stored under another parent.
        """
        parent_id = self._root if parent_id is None else _as_id(parent_id)
        parent = _attach_parent(self._nodes, child, parent_id)

        nodes = dict(self._nodes)
        if child.id not in nodes:
            nodes[child.id] = child._replace(
                parent=parent.id, level=parent.level + 1, children=()
            )
        siblings = tuple(cid for cid in parent.children if cid != child.id)
        nodes[parent.id] = parent._replace(children=siblings + (child.id,))
        logger.debug("add_child: %r under %r", child.id, parent.id)
        return self._make(self._root, nodes)

    def move_nodes(
        self, child_ids: Iterable[NodeRef], new_parent_id: NodeRef
    ) -> NaryTree:
        """Move sibling nodes under a new parent in one step.

        The old parent is read from the first id; every id must currently
        be a child of that same node. The moved ids are removed from the
        old parent and appended, in the given order, to the new parent.

        Only the moved nodes get a new ``level``: levels of their own
        descendants are left as they were.

        Args:
            child_ids: Ids (or nodes) to move.
            new_parent_id: Id (or node) of the new parent.

        Returns:
            The updated tree (the same tree if child_ids is empty).

        Raises:
            InvalidOperationError: If an id or the new parent is not in the
                tree, or the new parent is one of the moved nodes or one of
                their descendants.
        """
        ids = [_as_id(ref) for ref in child_ids]
        if not ids:
            return self
        new_parent_id = _as_id(new_parent_id)
        new_parent = self._nodes.get(new_parent_id)
        if new_parent is None:
            raise InvalidOperationError(f"New parent {new_parent_id!r} is not in the tree")
        missing = [cid for cid in ids if cid not in self._nodes]
        if missing:
            raise InvalidOperationError(f"Nodes not in the tree: {missing!r}")
        moved = set(ids)
        ancestor = new_parent_id
        while ancestor in self._nodes:
            if ancestor in moved:
                raise InvalidOperationError(
                    f"Cannot move node {ancestor!r} under itself or its descendant "
                    f"{new_parent_id!r}"
                )
            ancestor = self._nodes[ancestor].parent

        nodes = dict(self._nodes)
        for cid in ids:
            nodes[cid] = nodes[cid]._replace(
                parent=new_parent_id, level=new_parent.level + 1
            )
        old_parent_id = self._nodes[ids[0]].parent
        if old_parent_id in nodes:
            old_parent = nodes[old_parent_id]
            nodes[old_parent_id] = old_parent._replace(
                children=tuple(cid for cid in old_parent.children if cid not in moved)
            )
        new_parent = nodes[new_parent_id]
        nodes[new_parent_id] = new_parent._replace(
            children=tuple(cid for cid in new_parent.children if cid not in moved) + tuple(ids)
        )
        logger.debug("move_nodes: %r from %r to %r", ids, old_parent_id, new_parent_id)
        return self._make(self._root, nodes)

    def delete(self, node_id: NodeRef) -> NaryTree | TreeFailure:
        """Delete a node; its children move up to the node's parent.

        The promoted children are appended after the parent's existing
        children, keeping their relative order.

        Args:
            node_id: Id (or node) to delete.

        Returns:
            The updated tree, RootDeletionRejected for the root id, or
            NotFound if the id is not in the tree.
        """
        node_id = _as_id(node_id)
        if node_id == self._root:
            logger.debug("delete: refusing to delete root %r", node_id)
            return RootDeletionRejected(node_id)
        node = self._nodes.get(node_id)
        if node is None:
            logger.debug("delete: node %r not found", node_id)
            return NotFound(node_id)

        tree = self._unlink_from_parent(node)
        tree = tree.move_nodes(node.children, node.parent)
        nodes = tree._nodes
        del nodes[node_id]
        logger.debug("delete: %r removed, promoted %r", node_id, node.children)
        return tree

    def _unlink_from_parent(self, node: NaryTreeNode) -> NaryTree:
        """Return a tree (with its own node dict) without ``node`` among its parent's children."""
        nodes = dict(self._nodes)
        if not node.is_root:
            parent = nodes[node.parent]
            nodes[parent.id] = parent._replace(
                children=tuple(cid for cid in parent.children if cid != node.id)
            )
        return self._make(self._root, nodes)

    def pop(self, node_id: NodeRef) -> tuple[NaryTreeNode | None, NaryTree]:
        """Delete a node and return ``(node, new_tree)``.

        When the node cannot be deleted (unknown id or root) returns
        ``(None, self)``.
        """
        node_id = _as_id(node_id)
        result = self.delete(node_id)
        if isinstance(result, TreeFailure):
            return None, self
        return self._nodes[node_id], result

    def detach(self, node_id: NodeRef) -> NaryTree | NotFound:
        """Extract a node and all its descendants as a new tree.

        The new tree is rooted at ``node_id`` (parent cleared) and keeps
        the original child order at every level. Each descendant is
        re-attached the way add_child does it, so levels are counted from
        the new root. This tree is not modified.

        Returns:
            The detached tree, or NotFound if the id is not in the tree.
        """
        node_id = _as_id(node_id)
        root = self._nodes.get(node_id)
        if root is None:
            logger.debug("detach: node %r not found", node_id)
            return NotFound(node_id)

        def _descendants():
            pending = [(root.id, cid) for cid in reversed(root.children)]
            while pending:
                parent_id, child_id = pending.pop()
                child = self._child_node(child_id, parent_id)
                yield parent_id, child
                pending.extend((child.id, cid) for cid in reversed(child.children))

        branch = self._from_entries(root, _descendants())
        logger.debug("detach: %r with %d nodes", node_id, len(branch))
        return branch

    def merge(self, branch: NaryTree, node_id: NodeRef) -> NaryTree | NotFound:
        """Graft ``branch`` as the last child subtree of ``node_id``.

        Branch levels are shifted by ``level(node_id) + 1``. The branch
        root id is appended to the node's children without checking for
        duplicates, and on id collisions the branch nodes replace this
        tree's nodes: ids must be unique across both trees.

        Args:
            branch: Tree to graft. An empty branch leaves the tree as is.
            node_id: Id (or node) to graft onto.

        Returns:
            The combined tree, or NotFound if node_id is not in this tree.
        """
        node_id = _as_id(node_id)
        node = self._nodes.get(node_id)
        if node is None:
            logger.debug("merge: node %r not found", node_id)
            return NotFound(node_id)
        if branch.is_empty:
            return self

        offset = node.level + 1
        nodes = dict(self._nodes)
        nodes[node_id] = node._replace(children=node.children + (branch.root,))
        for bid, bnode in branch._nodes.items():
            nodes[bid] = bnode._replace(level=bnode.level + offset)
        nodes[branch.root] = branch._nodes[branch.root]._replace(
            parent=node_id, level=offset
        )
        logger.debug("merge: %r (%d nodes) under %r", branch.root, len(branch), node_id)
        return self._make(self._root, nodes)

    # ==================== Content ====================

    def update_content(self, func: Callable[[Any], Any]) -> NaryTree:
        """Return a tree where every node's content is ``func(content)``."""
        nodes = {
            nid: node._replace(content=func(node.content))
            for nid, node in self._nodes.items()
        }
        return self._make(self._root, nodes)

    def each_leaf(self, func: Callable[[Any], Any]) -> NaryTree:
        """Like update_content(), but only leaf nodes are updated."""
        nodes = {
            nid: node._replace(content=func(node.content)) if node.is_leaf else node
            for nid, node in self._nodes.items()
        }
        return self._make(self._root, nodes)

    # ==================== Conversion ====================

    def to_map(self, projection: Projection | None = None) -> dict[str, Any]:
        """Convert to a nested dict (see loading.dump_to_map)."""
        return dump_to_map(self, projection)

    @classmethod
    def from_map(cls, data: dict[str, Any]) -> NaryTree:
        """Build a tree from a nested dict (see loading.load_from_map).

        Example:
            >>> tree = NaryTree.from_map({'id': 1, 'name': 'Root', 'children': [
            ...     {'id': 2, 'name': 'Left'}, {'id': 3, 'name': 'Right'}]})
            >>> len(tree)
            3
        """
        return load_from_map(data)
