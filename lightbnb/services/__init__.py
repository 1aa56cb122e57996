"""
Service layer exposing the data-access operations to route handlers.
"""

from lightbnb.services.query import QueryService, get_query_service

__all__ = [
    "QueryService",
    "get_query_service",
]
