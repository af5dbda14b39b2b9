"""
hashpath - escaped-hashtag resolution for form path expressions

hashpath converts between human-friendly hashtags (``#form/text1``,
``#case/parent/name``) and the path expressions a form engine evaluates, and
compiles the hashtag/path mapping from declarative data-source descriptors.
"""

from importlib.metadata import version

from hashpath.core import DataNode, HashtagInfo, NodeKind
from hashpath.parsing import HashtagParser, ParsedExpression, tokenize, transform
from hashpath.session import DataSourceLoader, HashtagSession
from hashpath.structure import (
    DataSource,
    build_tree,
    compile_hashtags,
    form_hashtag_map,
    parse_data_sources,
)

__version__ = version("hashpath")

__all__ = [
    "__version__",
    "DataNode",
    "DataSource",
    "DataSourceLoader",
    "HashtagInfo",
    "HashtagParser",
    "HashtagSession",
    "NodeKind",
    "ParsedExpression",
    "build_tree",
    "compile_hashtags",
    "form_hashtag_map",
    "parse_data_sources",
    "tokenize",
    "transform",
]
