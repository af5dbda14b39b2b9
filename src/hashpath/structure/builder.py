"""
Data-source tree building.

``DataTreeBuilder`` turns a list of data-source descriptors into a navigable
tree of ``DataNode`` objects. Expansion is lazy: each node's children are a
thunk evaluated on first access. References between sources can form cycles
(a case's parent is a case), so every node remembers which sources are on its
ancestor chain and a reference back into one of them yields a node flagged
``recursive``.
"""

import logging
from collections.abc import Iterable, Sequence
from functools import partial

from hashpath.core.data_node import DataNode, NodeKind, SourceInfo
from hashpath.settings import Settings, settings as default_settings
from hashpath.structure.sources import (
    DataSource,
    ElementSpec,
    Reference,
    merge_structure,
)

logger = logging.getLogger(__name__)

# (source id, subset id) pairs on the current ancestor chain
SeenKeys = frozenset[tuple[str, str | None]]


def source_info_for(
    source: DataSource, subset_id: str | None = None, parent: SourceInfo | None = None
) -> SourceInfo:
    return SourceInfo(
        id=source.id,
        uri=source.uri,
        path=source.path,
        name=source.name,
        subset=subset_id,
        parent=parent,
    )


def instance_path(source: DataSource) -> str:
    """Return the nodeset path selecting a source's items."""
    return f"instance('{source.id}'){source.path}"


class DataTreeBuilder:
    """
    Builds lazy node trees from data-source descriptors.

    The builder is cheap to construct and holds no per-tree state; every
    tree it builds captures what it needs in its node thunks.
    """

    def __init__(
        self,
        sources: Sequence[DataSource],
        invalid_properties: Iterable[str] = (),
        hashtag_namespaces: dict[str, str] | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize the builder.

        Params:
            sources: Data-source descriptors
            invalid_properties: Element ids to leave out of every structure
            hashtag_namespaces: Source id -> hashtag for the first reference
                into that source; defaults to the configured namespaces
            settings: Configuration override
        """
        self.settings = settings or default_settings
        self.sources = {source.id: source for source in sources}
        self.invalid_properties = frozenset(invalid_properties)
        if hashtag_namespaces is None:
            hashtag_namespaces = self.settings.hashtag_namespaces
        self.hashtag_namespaces = dict(hashtag_namespaces)

    def build(self, root_source_id: str | None = None) -> DataNode | None:
        """
        Build the tree rooted at a source.

        Params:
            root_source_id: Source to root the tree at; defaults to the
                session source

        Returns:
            The root node, or None when the source is not among the descriptors
        """
        if root_source_id is None:
            root_source_id = self.settings.session_source_id
        source = self.sources.get(root_source_id)
        if source is None:
            logger.debug("No data source %r to build a tree from", root_source_id)
            return None

        info = source_info_for(source)
        xpath = instance_path(source)
        hashtag = self.hashtag_namespaces.get(source.id)
        seen: SeenKeys = frozenset({(source.id, None)})
        return DataNode(
            name=source.name or source.id,
            node_id=source.id,
            xpath=xpath,
            parent_path=None,
            kind=NodeKind.ROOT,
            source_info=info,
            hashtag=hashtag,
            hidden=source.id == self.settings.session_source_id,
            expand=partial(
                self._expand, source.structure, None, xpath, hashtag, info, seen
            ),
        )

    def _expand(
        self,
        structure: dict[str, ElementSpec],
        related: dict[str, str] | None,
        path: str,
        hashtag: str | None,
        info: SourceInfo,
        seen: SeenKeys,
    ) -> list[DataNode]:
        relations = []
        for relation, subset_id in (related or {}).items():
            spec = ElementSpec(
                reference=Reference(
                    source=info.id, subset=subset_id, key=self.settings.relation_key
                )
            )
            relations.append(
                self._make_node(
                    relation, spec, f"{path}/index", hashtag, info, seen, index=True
                )
            )

        children = [
            self._make_node(element_id, spec, path, hashtag, info, seen)
            for element_id, spec in structure.items()
            if element_id not in self.invalid_properties
        ]

        relations.sort(key=lambda node: node.name)
        children.sort(key=lambda node: node.name)
        return relations + children

    def _make_node(
        self,
        element_id: str,
        spec: ElementSpec,
        parent_path: str,
        parent_hashtag: str | None,
        info: SourceInfo,
        seen: SeenKeys,
        index: bool = False,
    ) -> DataNode:
        xpath = f"{parent_path}/{element_id}"
        if parent_hashtag:
            hashtag = f"{parent_hashtag}/{element_id}"
            hashtag_prefix = f"{parent_hashtag}/"
        else:
            hashtag = hashtag_prefix = None

        node = DataNode(
            name=spec.name or element_id,
            node_id=element_id,
            xpath=xpath,
            parent_path=parent_path,
            kind=NodeKind.LEAF,
            source_info=info,
            hashtag=hashtag,
            hashtag_prefix=hashtag_prefix,
            index=index,
        )

        if spec.structure is not None:
            node.kind = NodeKind.CONTAINER
            node.expand = partial(
                self._expand, spec.structure, None, xpath, hashtag, info, seen
            )
        elif spec.reference is not None:
            self._follow_reference(node, spec.reference, info, seen)
        return node

    def _follow_reference(
        self,
        node: DataNode,
        reference: Reference,
        info: SourceInfo,
        seen: SeenKeys,
    ) -> None:
        source_id = reference.source or info.id
        source = self.sources.get(source_id)
        if source is None:
            logger.warning(
                "Reference at %s points to unknown data source %r; "
                "leaving it unexpanded",
                node.xpath,
                source_id,
            )
            return

        subset = None
        if reference.subset:
            subset = source.get_subset(reference.subset, self.settings.case_type_key)
            if subset is None:
                logger.debug(
                    "Data source %r has no subset %r; using unfiltered structure",
                    source.id,
                    reference.subset,
                )

        structure = source.structure
        related = None
        if subset is not None:
            structure = merge_structure(source.structure, subset.structure)
            related = subset.related

        key = (source.id, subset.id if subset else None)
        if node.hashtag is None and key[0] in self.hashtag_namespaces:
            node.hashtag = self.hashtag_namespaces[key[0]]

        node.kind = NodeKind.RELATION if node.index else NodeKind.REFERENCE
        node.xpath = f"{instance_path(source)}[{reference.key} = {node.xpath}]"
        node.source_info = source_info_for(source, key[1], parent=info)
        node.recursive = key in seen
        node.expand = partial(
            self._expand,
            structure,
            related,
            node.xpath,
            node.hashtag,
            node.source_info,
            seen | {key},
        )


def build_tree(
    sources: Sequence[DataSource],
    root_source_id: str | None = None,
    invalid_properties: Iterable[str] = (),
    hashtag_namespaces: dict[str, str] | None = None,
    settings: Settings | None = None,
) -> DataNode | None:
    """
    Build a lazy data-source tree.

    Params:
        sources: Data-source descriptors
        root_source_id: Source to root the tree at; defaults to the session source
        invalid_properties: Element ids to leave out of every structure
        hashtag_namespaces: Source id -> hashtag override
        settings: Configuration override

    Returns:
        The root node, or None when the root source is absent
    """
    builder = DataTreeBuilder(
        sources,
        invalid_properties=invalid_properties,
        hashtag_namespaces=hashtag_namespaces,
        settings=settings,
    )
    return builder.build(root_source_id)
