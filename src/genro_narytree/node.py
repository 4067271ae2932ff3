# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""NaryTree node class and the EMPTY sentinel."""

from __future__ import annotations

import uuid
from typing import Any, Hashable


class _EmptyType:
    """Type of the EMPTY sentinel (unset name, content or parent)."""

    __slots__ = ()
    _instance: _EmptyType | None = None

    def __new__(cls) -> _EmptyType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'EMPTY'

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return 'EMPTY'

    def __copy__(self) -> _EmptyType:
        return self

    def __deepcopy__(self, memo: dict) -> _EmptyType:
        return self


EMPTY = _EmptyType()


def new_node_id() -> str:
    """Return a random id for nodes created without one."""
    return uuid.uuid4().hex


class NaryTreeNode:
    """A node in a NaryTree.

    Each node has:
    - id: Unique, immutable key of the node within its tree
    - name: Display label (EMPTY when unset)
    - content: Arbitrary payload (EMPTY when unset, distinct from None)
    - parent: Id of the parent node, EMPTY for a root
    - level: Distance from the root (root=0)
    - children: Tuple of child ids in sibling order

    Nodes never hold references to other nodes, only ids. The hierarchy
    fields (parent, level, children) are managed by NaryTree operations,
    which always work on copies: a node stored in a tree is never changed
    in place.

    Example:
        >>> node = NaryTreeNode(1, 'Root', content={'w': 100})
        >>> node.name
        'Root'
        >>> node.level, node.children
        (0, ())
    """

    __slots__ = ('id', 'name', 'content', 'parent', 'level', 'children')

    def __init__(
        self,
        node_id: Hashable | None = None,
        name: Any = EMPTY,
        content: Any = EMPTY,
    ) -> None:
        """Initialize a NaryTreeNode.

        Args:
            node_id: Unique id. If None, a random hex id is generated.
            name: Optional display label.
            content: Optional payload. None is a real payload; use EMPTY
                (the default) for "no content".
        """
        self.id = node_id if node_id is not None else new_node_id()
        self.name = name
        self.content = content
        self.parent: Any = EMPTY
        self.level = 0
        self.children: tuple = ()

    def _replace(self, **changes: Any) -> NaryTreeNode:
        """Return a copy of this node with the given fields changed."""
        node = NaryTreeNode.__new__(NaryTreeNode)
        for slot in self.__slots__:
            setattr(node, slot, changes.pop(slot, getattr(self, slot)))
        if changes:
            raise TypeError(f"Unknown node fields: {', '.join(changes)}")
        node.children = tuple(node.children)
        return node

    def __repr__(self) -> str:
        return (
            f"NaryTreeNode({self.id!r}, name={self.name!r}, "
            f"level={self.level}, children={len(self.children)})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NaryTreeNode):
            return NotImplemented
        return all(
            getattr(self, slot) == getattr(other, slot) for slot in self.__slots__
        )

    __hash__ = None  # type: ignore[assignment]

    @property
    def is_root(self) -> bool:
        """True if this node has no parent."""
        return self.parent is EMPTY or self.parent is None

    @property
    def is_leaf(self) -> bool:
        """True if this node has no children."""
        return not self.children

    @property
    def has_content(self) -> bool:
        """True if content is set to something other than EMPTY or None."""
        return not (self.content is EMPTY or self.content is None)
