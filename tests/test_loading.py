# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for converting NaryTree to and from nested dicts."""

import pytest

from genro_narytree import (
    EMPTY,
    InvalidOperationError,
    NaryTree,
    NaryTreeNode,
    StructuralCorruptionError,
    default_projection,
    nodes_from_list,
)


def _tree():
    return (
        NaryTree(NaryTreeNode(1, 'Root'))
        .add_child(NaryTreeNode(2, 'Leaf 1'))
        .add_child(NaryTreeNode(3, 'Leaf 2', {'w': 4}))
    )


class TestToMap:
    """Tests for NaryTree.to_map."""

    def test_default_projection(self):
        """Test the default projection and nesting."""
        assert _tree().to_map() == {
            'id': 1, 'name': 'Root', 'content': EMPTY, 'level': 0, 'parent': EMPTY,
            'children': [
                {'id': 2, 'name': 'Leaf 1', 'content': EMPTY, 'level': 1, 'parent': 1},
                {'id': 3, 'name': 'Leaf 2', 'content': {'w': 4}, 'level': 1, 'parent': 1},
            ],
        }

    def test_custom_projection(self):
        """Test a caller-supplied projection."""
        result = _tree().to_map(lambda n: {'key': n.name})
        assert result == {'children': [{'key': 'Leaf 1'}, {'key': 'Leaf 2'}], 'key': 'Root'}

    def test_nested_children_order(self):
        """Test deeper levels follow sibling order."""
        tree = _tree().add_child(NaryTreeNode(5, 'B'), 2).add_child(NaryTreeNode(4, 'A'), 2)
        result = tree.to_map(lambda n: {'id': n.id})
        assert result['children'][0] == {'id': 2, 'children': [{'id': 5}, {'id': 4}]}

    def test_projection_result_not_shared(self):
        """Test adding children does not modify the projection's dict."""
        fields = {'fixed': True}
        result = _tree().to_map(lambda n: fields)
        assert 'children' in result
        assert fields == {'fixed': True}

    def test_empty_tree_raises(self):
        """Test an empty tree cannot be converted."""
        with pytest.raises(InvalidOperationError, match="empty tree"):
            NaryTree().to_map()

    def test_dangling_child_raises(self):
        """Test conversion fails on a dangling child id."""
        root = NaryTreeNode(1, 'Root')._replace(children=(2,))
        with pytest.raises(StructuralCorruptionError):
            NaryTree._make(1, {1: root}).to_map()

    def test_default_projection_function(self):
        """Test default_projection on a single node."""
        assert default_projection(NaryTreeNode(7, 'Seven')) == {
            'id': 7, 'name': 'Seven', 'content': EMPTY, 'level': 0, 'parent': EMPTY,
        }


class TestFromMap:
    """Tests for NaryTree.from_map."""

    def test_from_map(self):
        """Test building a tree from a nested dict."""
        tree = NaryTree.from_map({
            'id': 1, 'name': 'Root',
            'children': [{'id': 2, 'name': 'Left'}, {'id': 3, 'name': 'Right'}],
        })
        assert len(tree) == 3
        assert tree.root == 1
        assert tree.root_node().children == (2, 3)
        assert tree.nodes[3].name == 'Right'
        assert tree.nodes[3].level == 1

    def test_from_map_content(self):
        """Test content is loaded when present, EMPTY otherwise."""
        tree = NaryTree.from_map({
            'id': 1, 'name': 'Root', 'content': None,
            'children': [{'id': 2, 'name': 'Leaf', 'content': {'x': 1}}],
        })
        assert tree.root_node().content is None
        assert tree.nodes[2].content == {'x': 1}

    def test_from_map_missing_content_and_name(self):
        """Test missing name and content default to EMPTY."""
        tree = NaryTree.from_map({'id': 1, 'children': [{'id': 2}]})
        assert tree.nodes[2].name is EMPTY
        assert tree.nodes[2].content is EMPTY

    def test_from_map_ignores_level_and_parent(self):
        """Test level and parent keys are recomputed."""
        tree = NaryTree.from_map({
            'id': 1, 'name': 'Root', 'level': 7, 'parent': 42,
            'children': [{'id': 2, 'name': 'Leaf', 'level': 99, 'parent': 0, 'children': []}],
        })
        assert tree.root_node().level == 0
        assert tree.root_node().parent is EMPTY
        assert tree.nodes[2].level == 1
        assert tree.nodes[2].parent == 1

    def test_from_map_deep_order(self):
        """Test nested children are added in listed order."""
        tree = NaryTree.from_map({
            'id': 'a', 'children': [
                {'id': 'b', 'children': [{'id': 'd'}, {'id': 'e'}]},
                {'id': 'c'},
            ],
        })
        assert [n.id for n in tree] == ['a', 'b', 'd', 'e', 'c']
        assert tree.nodes['e'].level == 2

    def test_from_map_missing_id_raises(self):
        """Test entries without id are rejected."""
        with pytest.raises(InvalidOperationError, match="without 'id'"):
            NaryTree.from_map({'id': 1, 'children': [{'name': 'Anonymous'}]})

    def test_from_map_repeated_id_same_parent(self):
        """Test an id repeated under the same parent moves to the end."""
        tree = NaryTree.from_map({
            'id': 1, 'children': [
                {'id': 2, 'name': 'first'}, {'id': 3}, {'id': 2, 'name': 'second'},
            ],
        })
        assert tree.root_node().children == (3, 2)
        assert tree.nodes[2].name == 'first'
        assert len(tree) == 3

    def test_from_map_repeated_id_other_parent_raises(self):
        """Test an id cannot appear under two different parents."""
        with pytest.raises(InvalidOperationError, match="already in the tree"):
            NaryTree.from_map({
                'id': 1, 'children': [{'id': 2, 'children': [{'id': 1}]}],
            })

    def test_from_map_wide(self):
        """Test loading a node with many children."""
        tree = NaryTree.from_map({'id': 'r', 'children': [{'id': i} for i in range(20000)]})
        assert len(tree) == 20001
        assert tree.root_node().children == tuple(range(20000))
        assert tree.nodes[19999].level == 1

    def test_deep_chain_round_trip(self):
        """Test a chain deeper than the recursion limit converts both ways."""
        data = {'id': 2999}
        for i in range(2998, -1, -1):
            data = {'id': i, 'children': [data]}
        tree = NaryTree.from_map(data)
        assert len(tree.to_list()) == 3000
        assert tree.nodes[2999].level == 2999
        assert NaryTree.from_map(tree.to_map()) == tree

    def test_round_trip(self):
        """Test from_map(to_map(tree)) rebuilds the same tree."""
        tree = (
            _tree()
            .add_child(NaryTreeNode(4, 'Deep', [1, 2]), 2)
            .add_child(NaryTreeNode(5, 'Deeper', None), 4)
        )
        assert NaryTree.from_map(tree.to_map()) == tree


class TestNodesFromList:
    """Tests for nodes_from_list."""

    def test_nodes_from_list(self):
        """Test rebuilding the node map from a preorder list."""
        tree = _tree()
        assert nodes_from_list(tree.to_list()) == dict(tree.nodes)

    def test_first_occurrence_wins(self):
        """Test duplicate ids keep the first node."""
        nodes = nodes_from_list([NaryTreeNode(1, 'first'), NaryTreeNode(1, 'second')])
        assert nodes[1].name == 'first'
