"""
Exception classes for hashpath.

Parsing never raises on malformed input; these exceptions cover the places
where a caller hands over data that cannot be used at all: descriptor lists
that fail validation, loads that fail, and hashtag maps that are not
one-to-one.
"""


class HashpathError(Exception):
    """Base exception for all hashpath errors."""

    pass


class DataSourceValidationError(HashpathError):
    """Raised when a data-source descriptor list does not match the wire contract."""

    def __init__(self, reason: str, source_id: str | None = None):
        """
        Initialize the exception.

        Params:
            reason: Why the descriptor list was rejected
            source_id: Id of the offending descriptor, when it could be read
        """
        self.reason = reason
        self.source_id = source_id
        if source_id is not None:
            super().__init__(f"Invalid data source '{source_id}': {reason}")
        else:
            super().__init__(f"Invalid data sources: {reason}")


class DataSourceLoadError(HashpathError):
    """Raised or reported when the data-source endpoint fails to deliver."""

    def __init__(self, reason: str):
        """
        Initialize the exception.

        Params:
            reason: Description of the load failure
        """
        self.reason = reason
        super().__init__(f"Failed to load data sources: {reason}")


class HashtagMapError(HashpathError):
    """Raised when hashtags and paths would stop mapping one-to-one."""

    def __init__(self, hashtag: str, path: str, reason: str):
        """
        Initialize the exception.

        Params:
            hashtag: The hashtag involved in the conflict
            path: The path involved in the conflict
            reason: Which side of the mapping collided
        """
        self.hashtag = hashtag
        self.path = path
        self.reason = reason
        super().__init__(f"Hashtag '{hashtag}' -> '{path}': {reason}")


class HashtagCompileError(HashpathError):
    """Raised when a hashtag bundle could not be compiled from data sources."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Could not compile hashtags: {reason}")
