"""
Shared utilities for the data-access layer.
"""

from lightbnb.utils.exceptions import (
    APIException,
    ValidationError,
    ConflictError,
    DuplicateResourceError,
    QueryFailedError,
)

__all__ = [
    "APIException",
    "ValidationError",
    "ConflictError",
    "DuplicateResourceError",
    "QueryFailedError",
]
