"""
Hashtag map compilation.

Walks a data-source tree once and flattens it into a ``HashtagInfo``: the
hashtag -> path map, its inverse, and one prefix transform per group of
sibling hashtags so that properties not listed in the descriptors (e.g. a
case property added later) still resolve.
"""

import logging
from collections.abc import Iterable

from hashpath.core.data_node import DataNode
from hashpath.core.hashtag_info import HashtagInfo, PathTransform
from hashpath.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def iter_compilable_nodes(root: DataNode | None) -> Iterable[DataNode]:
    """
    Depth-first walk in sibling order that stops below recursive nodes.

    Recursive nodes themselves are yielded; their children are never
    requested, which is what makes the walk terminate on cyclic sources.
    """
    if root is None:
        return
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        if not node.recursive:
            stack.extend(reversed(node.get_children()))


def compile_hashtags(root: DataNode | None) -> HashtagInfo:
    """
    Compile a data-source tree into a hashtag bundle.

    Index (relation) nodes are skipped since their parent path points into
    the case index rather than at their siblings. When two nodes claim the
    same hashtag or path the first one in walk order is kept, so the
    resulting maps are always exact inverses.

    Params:
        root: Root of a tree built by ``DataTreeBuilder``

    Returns:
        A new HashtagInfo
    """
    hashtag_map: dict[str, str] = {}
    inverted: dict[str, str] = {}
    transforms: dict[str, PathTransform] = {}

    for node in iter_compilable_nodes(root):
        if node.hashtag is None or node.index:
            continue

        if node.hashtag in hashtag_map:
            logger.debug(
                "Skipping duplicate hashtag %s at %s", node.hashtag, node.xpath
            )
        elif node.xpath in inverted:
            logger.debug(
                "Skipping %s: path %s already named %s",
                node.hashtag,
                node.xpath,
                inverted[node.xpath],
            )
        else:
            hashtag_map[node.hashtag] = node.xpath
            inverted[node.xpath] = node.hashtag

        if node.hashtag_prefix and node.hashtag_prefix not in transforms:
            transforms[node.hashtag_prefix] = PathTransform(node.parent_path)

    logger.debug(
        "Compiled %d hashtags and %d prefix transforms",
        len(hashtag_map),
        len(transforms),
    )
    return HashtagInfo(
        hashtag_map=hashtag_map,
        inverted_hashtag_map=inverted,
        transforms=transforms,
    )


def form_hashtag_map(
    question_paths: Iterable[str], settings: Settings | None = None
) -> HashtagInfo:
    """
    Build hashtags for form questions.

    Params:
        question_paths: Absolute question paths, e.g. ``/data/group/q1``
        settings: Configuration override

    Returns:
        HashtagInfo mapping ``#form/group/q1`` -> ``/data/group/q1``

    Examples:
        ["/data/text1"] -> {"#form/text1": "/data/text1"}
    """
    settings = settings or default_settings
    root = settings.form_data_root.rstrip("/")
    hashtag_map = {}
    for path in question_paths:
        if not path.startswith(root + "/"):
            logger.debug("Question path %s is outside %s; no hashtag", path, root)
            continue
        hashtag_map[f"{settings.form_hashtag_prefix}{path[len(root):]}"] = path
    return HashtagInfo.from_hashtag_map(hashtag_map)
