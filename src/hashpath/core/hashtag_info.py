"""
Immutable hashtag/path bundle shared by every parse of one form session.

A ``HashtagInfo`` is built once per compile and replaced wholesale when the
data sources change. Its two maps are exact inverses of each other.
"""

from collections.abc import Mapping
from types import MappingProxyType

from attrs import field, frozen

from hashpath.exceptions import HashtagMapError


def _read_only(value: Mapping) -> Mapping:
    return MappingProxyType(dict(value))


@frozen
class PathTransform:
    """Map a property name onto a path below ``parent_path``."""

    parent_path: str

    def __call__(self, prop: str) -> str:
        return f"{self.parent_path}/{prop}"


@frozen(eq=False)
class HashtagInfo:
    """
    Bidirectional hashtag/path mapping plus prefix transforms.

    Bundles compare and hash by identity; compare their maps for content.

    Params:
        hashtag_map: Hashtag -> path expression
        inverted_hashtag_map: Path expression -> hashtag
        transforms: Hashtag prefix (ending in ``/``) -> path builder for
            properties under that prefix that are not listed explicitly
    """

    hashtag_map: Mapping[str, str] = field(factory=dict, converter=_read_only)
    inverted_hashtag_map: Mapping[str, str] = field(
        factory=dict, converter=_read_only
    )
    transforms: Mapping[str, PathTransform] = field(
        factory=dict, converter=_read_only
    )

    def __attrs_post_init__(self):
        if len(self.hashtag_map) != len(self.inverted_hashtag_map):
            raise HashtagMapError(
                "*", "*", "hashtag map and inverted map differ in size"
            )
        for hashtag, path in self.hashtag_map.items():
            if self.inverted_hashtag_map.get(path) != hashtag:
                raise HashtagMapError(
                    hashtag, path, "inverted map does not point back to hashtag"
                )

    @classmethod
    def from_hashtag_map(
        cls,
        hashtag_map: Mapping[str, str],
        transforms: Mapping[str, PathTransform] | None = None,
    ) -> "HashtagInfo":
        """
        Build a bundle from a hashtag map, deriving the inverted map.

        Params:
            hashtag_map: Hashtag -> path expression
            transforms: Optional prefix transforms

        Returns:
            A new HashtagInfo

        Raises:
            HashtagMapError: If two hashtags map to the same path
        """
        inverted: dict[str, str] = {}
        for hashtag, path in hashtag_map.items():
            if path in inverted:
                raise HashtagMapError(
                    hashtag, path, f"path already mapped by '{inverted[path]}'"
                )
            inverted[path] = hashtag
        return cls(
            hashtag_map=hashtag_map,
            inverted_hashtag_map=inverted,
            transforms=transforms or {},
        )

    def merged(self, *others: "HashtagInfo") -> "HashtagInfo":
        """
        Combine this bundle with others into a new bundle.

        Identical entries are accepted; a hashtag or path that maps
        differently in two bundles is an error. The first transform
        registered for a prefix wins.

        Raises:
            HashtagMapError: If the combined maps would not be one-to-one
        """
        hashtag_map = dict(self.hashtag_map)
        transforms = dict(self.transforms)
        for other in others:
            for hashtag, path in other.hashtag_map.items():
                existing = hashtag_map.get(hashtag)
                if existing is not None and existing != path:
                    raise HashtagMapError(
                        hashtag, path, f"hashtag already maps to '{existing}'"
                    )
                hashtag_map[hashtag] = path
            for prefix, path_transform in other.transforms.items():
                transforms.setdefault(prefix, path_transform)
        return HashtagInfo.from_hashtag_map(hashtag_map, transforms)

    def resolve(self, hashtag: str) -> str | None:
        """
        Resolve a hashtag to its path.

        Exact entries win; otherwise the transform registered for the
        hashtag's prefix is applied to its last segment.

        Returns:
            The path, or None if the hashtag is unknown
        """
        path = self.hashtag_map.get(hashtag)
        if path is not None:
            return path
        prefix, sep, prop = hashtag.rpartition("/")
        if not sep or not prefix or not prop:
            return None
        path_transform = self.transforms.get(prefix + sep)
        if path_transform is None:
            return None
        return path_transform(prop)
