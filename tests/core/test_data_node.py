"""
Tests for DataNode laziness and listing helpers.
"""

from unittest.mock import Mock

import pytest

from hashpath.core.data_node import (
    DataNode,
    DataTreeItem,
    NodeKind,
    SourceInfo,
    visible_nodes,
)


def make_node(name="node", **kwargs) -> DataNode:
    kwargs.setdefault("xpath", f"/data/{name}")
    kwargs.setdefault("parent_path", "/data")
    kwargs.setdefault("kind", NodeKind.LEAF)
    return DataNode(name=name, node_id=name, **kwargs)


class TestLazyChildren:
    """Test the memoized children thunk."""

    def test_thunk_not_called_until_requested(self):
        expand = Mock(return_value=[make_node("child")])
        node = make_node(kind=NodeKind.CONTAINER, expand=expand)

        assert not node.expanded
        expand.assert_not_called()

    def test_thunk_called_once(self):
        child = make_node("child")
        expand = Mock(return_value=[child])
        node = make_node(kind=NodeKind.CONTAINER, expand=expand)

        first = node.get_children()
        second = node.get_children()

        assert first == [child]
        assert second is first
        expand.assert_called_once_with()
        assert node.expanded

    def test_thunk_released_after_use(self):
        node = make_node(kind=NodeKind.CONTAINER, expand=lambda: [])
        node.get_children()
        assert node.expand is None

    def test_leaf_has_no_children(self):
        node = make_node()
        assert node.get_children() == []
        assert node.expanded

    def test_describe_children_expands(self):
        child = make_node("child")
        node = make_node(kind=NodeKind.CONTAINER, expand=lambda: [child])
        assert node.describe_children() == [child]


class TestIdentify:
    def test_hashtag_preferred(self):
        node = make_node("name", hashtag="#case/name")
        assert node.identify() == "#case/name"

    def test_falls_back_to_path(self):
        assert make_node("q1").identify() == "/data/q1"

    def test_nodes_implement_tree_item(self):
        assert isinstance(make_node(), DataTreeItem)

    def test_tree_item_is_abstract(self):
        with pytest.raises(TypeError):
            DataTreeItem()


class TestVisibleNodes:
    """Test which nodes a source listing shows."""

    def test_no_tree(self):
        assert visible_nodes(None) == []

    def test_hidden_root_replaced_by_children(self):
        children = [make_node("a"), make_node("b")]
        root = make_node(
            "session", kind=NodeKind.ROOT, hidden=True, expand=lambda: children
        )
        assert visible_nodes(root) == children

    def test_visible_root_listed_itself(self):
        root = make_node("cases", kind=NodeKind.ROOT, expand=lambda: [make_node("a")])
        assert visible_nodes(root) == [root]
        assert not root.expanded


class TestSourceInfo:
    def test_parent_chain(self):
        session = SourceInfo(id="commcaresession")
        cases = SourceInfo(id="casedb", subset="mother", parent=session)
        assert cases.parent.id == "commcaresession"

    def test_frozen(self):
        info = SourceInfo(id="casedb")
        with pytest.raises(AttributeError):
            info.id = "other"
