"""
Node types for resolved data-source trees.

A data-source tree is expanded lazily: every ``DataNode`` carries a thunk that
produces its children on first request and remembers them afterwards. Source
graphs may be cyclic, so nothing here ever walks a tree eagerly.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class NodeKind(Enum):
    """Kind of node in a data-source tree."""

    ROOT = "root"
    CONTAINER = "container"
    REFERENCE = "reference"
    RELATION = "relation"
    LEAF = "leaf"


class DataTreeItem(ABC):
    """Interface every node handed to hosts (e.g. tree widgets) implements."""

    @abstractmethod
    def identify(self) -> str:
        """Return a stable identifier for this node."""
        pass

    @abstractmethod
    def describe_children(self) -> list["DataTreeItem"]:
        """Return this node's children, expanding them if needed."""
        pass


@dataclass(frozen=True)
class SourceInfo:
    """
    Which data source a node's values come from.

    Params:
        id: Source id, used in ``instance('{id}')``
        uri: Source uri, used in the instance declaration
        path: Nodeset path inside the instance
        name: Human readable name
        subset: Subset id when the node reads a filtered view
        parent: Source the reference leading here was followed from
    """

    id: str
    uri: str = ""
    path: str = ""
    name: str = ""
    subset: str | None = None
    parent: Optional["SourceInfo"] = field(default=None, repr=False)


@dataclass(eq=False)
class DataNode(DataTreeItem):
    """
    Resolved node of a data-source tree.

    Params:
        name: Display name
        node_id: Element id within its parent structure
        xpath: Path expression selecting this node
        parent_path: Path of the structure this node was expanded from
        kind: Node kind
        source_info: Source this node reads from
        hashtag: Hashtag naming this node, if any
        hashtag_prefix: Hashtag prefix shared with siblings, if any
        index: True for relation nodes reached through a case index
        recursive: True when this node re-enters a source already on its
            ancestor chain; walkers must not descend into it
        hidden: True for the session root, whose children are listed in
            its place
    """

    name: str
    node_id: str
    xpath: str
    parent_path: str | None
    kind: NodeKind
    source_info: SourceInfo | None = None
    hashtag: str | None = None
    hashtag_prefix: str | None = None
    index: bool = False
    recursive: bool = False
    hidden: bool = False
    expand: Callable[[], list["DataNode"]] | None = field(default=None, repr=False)
    _children: list["DataNode"] | None = field(default=None, init=False, repr=False)

    @property
    def expanded(self) -> bool:
        """Check whether the children thunk has already run."""
        return self._children is not None

    def get_children(self) -> list["DataNode"]:
        """Return child nodes, computing them on first access."""
        if self._children is None:
            self._children = self.expand() if self.expand is not None else []
            self.expand = None
        return self._children

    def identify(self) -> str:
        return self.hashtag or self.xpath

    def describe_children(self) -> list["DataNode"]:
        return self.get_children()


def visible_nodes(root: DataNode | None) -> list[DataNode]:
    """
    Nodes a listing should show for a tree.

    A hidden root is replaced by its children; any other root is listed
    as itself.
    """
    if root is None:
        return []
    if root.hidden:
        return root.get_children()
    return [root]
