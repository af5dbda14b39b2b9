"""
hashpath structure components.

This package provides the data-source descriptor models, the lazy tree
builder, and the hashtag map compiler.
"""

from hashpath.structure.builder import DataTreeBuilder, build_tree
from hashpath.structure.compiler import (
    compile_hashtags,
    form_hashtag_map,
    iter_compilable_nodes,
)
from hashpath.structure.sources import (
    DataSource,
    ElementSpec,
    Reference,
    Subset,
    merge_structure,
    not_found_source,
    parse_data_sources,
)

__all__ = [
    "DataTreeBuilder",
    "build_tree",
    "compile_hashtags",
    "form_hashtag_map",
    "iter_compilable_nodes",
    "DataSource",
    "ElementSpec",
    "Reference",
    "Subset",
    "merge_structure",
    "not_found_source",
    "parse_data_sources",
]
