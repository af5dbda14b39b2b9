"""
hashpath exception classes.

This package provides all exception types used throughout hashpath for
consistent error handling and reporting.
"""

from hashpath.exceptions.core import (
    DataSourceLoadError,
    DataSourceValidationError,
    HashpathError,
    HashtagCompileError,
    HashtagMapError,
)

__all__ = [
    "HashpathError",
    "DataSourceLoadError",
    "DataSourceValidationError",
    "HashtagCompileError",
    "HashtagMapError",
]
