"""
hashpath session components.

This package provides the data-source loader with its readiness channel and
the per-form session that keeps the current hashtag bundle.
"""

from hashpath.session.loader import DataSourceLoader, LoadState, Subscription
from hashpath.session.session import DerivedValue, HashtagSession, SessionState

__all__ = [
    "DataSourceLoader",
    "LoadState",
    "Subscription",
    "DerivedValue",
    "HashtagSession",
    "SessionState",
]
