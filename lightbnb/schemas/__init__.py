"""
Pydantic schemas for validating operation input and shaping query results.
"""

from lightbnb.schemas.user import UserCreate, UserResponse
from lightbnb.schemas.property import (
    PropertyCreate,
    PropertyResponse,
    PropertyWithRating,
    PropertySearchOptions,
)
from lightbnb.schemas.reservation import ReservationWithProperty

__all__ = [
    "UserCreate",
    "UserResponse",
    "PropertyCreate",
    "PropertyResponse",
    "PropertyWithRating",
    "PropertySearchOptions",
    "ReservationWithProperty",
]
