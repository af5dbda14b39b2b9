"""
Core hashpath components.

This package provides the node types of resolved data-source trees and the
immutable hashtag bundle shared by all parse operations.
"""

from hashpath.core.data_node import (
    DataNode,
    DataTreeItem,
    NodeKind,
    SourceInfo,
    visible_nodes,
)
from hashpath.core.hashtag_info import HashtagInfo, PathTransform

__all__ = [
    "DataNode",
    "DataTreeItem",
    "NodeKind",
    "SourceInfo",
    "visible_nodes",
    "HashtagInfo",
    "PathTransform",
]
