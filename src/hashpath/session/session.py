"""
Per-form hashtag session.

A ``HashtagSession`` owns the current compiled hashtag bundle for one form
and everything derived from it. Each recompile builds a complete new state
off to the side and swaps it in with a single assignment, so readers see
either the previous bundle or the new one, never a map under construction.
A failed compile leaves the previous state in place.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from hashpath.core.data_node import DataNode, visible_nodes
from hashpath.core.hashtag_info import HashtagInfo
from hashpath.exceptions import HashpathError, HashtagCompileError
from hashpath.parsing.resolver import HashtagParser, ParsedExpression
from hashpath.session.loader import DataSourceLoader, LoadState, Subscription
from hashpath.settings import Settings, settings as default_settings
from hashpath.structure.builder import DataTreeBuilder
from hashpath.structure.compiler import compile_hashtags
from hashpath.structure.sources import DataSource

logger = logging.getLogger(__name__)


class DerivedValue(Enum):
    """Values computed from the current data sources."""

    TREE = "tree"  # root DataNode, or None
    HASHTAG_INFO = "hashtag_info"  # compiled bundle merged with form hashtags
    PARSER = "parser"  # HashtagParser over HASHTAG_INFO
    VISIBLE_NODES = "visible_nodes"  # nodes a source listing shows


@dataclass
class SessionState:
    """Immutable-by-convention snapshot of one compile."""

    sources: tuple[DataSource, ...]
    tree: DataNode | None
    hashtag_info: HashtagInfo
    cache: dict[DerivedValue, Any] = field(default_factory=dict)


class HashtagSession:
    """
    Current hashtag bundle and derived values for one form.

    Params:
        form_hashtags: Bundle of form question hashtags merged into every
            compile (see ``form_hashtag_map``)
        invalid_properties: Element ids left out of data-source structures
        root_source_id: Source the tree is rooted at; defaults to the session source
        settings: Configuration override
    """

    def __init__(
        self,
        form_hashtags: HashtagInfo | None = None,
        invalid_properties: Iterable[str] = (),
        root_source_id: str | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or default_settings
        self.form_hashtags = form_hashtags or HashtagInfo()
        self.invalid_properties = frozenset(invalid_properties)
        self.root_source_id = root_source_id
        self._state = SessionState(
            sources=(), tree=None, hashtag_info=self.form_hashtags
        )
        self._subscription: Subscription | None = None
        self._loader: DataSourceLoader | None = None

    @property
    def hashtag_info(self) -> HashtagInfo:
        return self._state.hashtag_info

    def get(self, value: DerivedValue) -> Any:
        """
        Return a derived value for the current state, computing it once.

        Params:
            value: Which derived value to return

        Returns:
            The value; its type depends on ``value`` (see DerivedValue)
        """
        state = self._state
        if value in state.cache:
            return state.cache[value]

        if value is DerivedValue.TREE:
            result = state.tree
        elif value is DerivedValue.HASHTAG_INFO:
            result = state.hashtag_info
        elif value is DerivedValue.PARSER:
            result = HashtagParser(state.hashtag_info)
        elif value is DerivedValue.VISIBLE_NODES:
            result = visible_nodes(state.tree)
        else:
            raise ValueError(f"Unknown derived value: {value!r}")

        state.cache[value] = result
        return result

    def parse(self, text: str) -> ParsedExpression:
        """Parse a raw string against the current bundle."""
        return self.get(DerivedValue.PARSER).parse(text)

    def update_sources(self, sources: Sequence[DataSource]) -> HashtagInfo:
        """
        Recompile from a new descriptor list and swap in the result.

        Params:
            sources: Data-source descriptors

        Returns:
            The newly active hashtag bundle

        Raises:
            HashtagCompileError: If compiling fails; the previous bundle stays active
        """
        try:
            builder = DataTreeBuilder(
                sources,
                invalid_properties=self.invalid_properties,
                settings=self.settings,
            )
            tree = builder.build(self.root_source_id)
            info = compile_hashtags(tree).merged(self.form_hashtags)
        except HashpathError as e:
            raise HashtagCompileError(str(e)) from e

        self._state = SessionState(sources=tuple(sources), tree=tree, hashtag_info=info)
        logger.info(
            "Hashtags compiled from %d data sources (%d hashtags)",
            len(sources),
            len(info.hashtag_map),
        )
        return info

    def attach(self, loader: DataSourceLoader) -> Subscription:
        """
        Recompile whenever ``loader`` delivers descriptors.

        Any previous attachment is cancelled first.

        Returns:
            The loader subscription
        """
        self.detach()
        self._loader = loader
        self._subscription = loader.subscribe(self._on_sources, self._on_error)
        return self._subscription

    def detach(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        self._loader = None

    def _on_sources(self, sources: list[DataSource]) -> None:
        if self._loader is not None and self._loader.state is LoadState.FAILED:
            # Placeholder list from a failed load; keep what we have
            return
        try:
            self.update_sources(sources)
        except HashtagCompileError as e:
            logger.warning("Keeping previous hashtags: %s", e)

    def _on_error(self, error: Exception) -> None:
        logger.warning("Data sources unavailable, keeping previous hashtags: %s", error)
