"""
Query service exposing the data-access operations used by the web server's route handlers.
Each operation checks out its own session from the shared pool, runs one statement
and shapes the rows into response schemas.
"""

from typing import Optional, List, Dict, Any, Union
from functools import lru_cache
from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker
from lightbnb.config import settings
from lightbnb.database import AsyncSessionLocal
from lightbnb.repositories.user import UserRepository
from lightbnb.repositories.property import PropertyRepository
from lightbnb.repositories.reservation import ReservationRepository
from lightbnb.schemas.user import UserCreate, UserResponse
from lightbnb.schemas.property import (
    PropertyCreate,
    PropertyResponse,
    PropertyWithRating,
    PropertySearchOptions,
)
from lightbnb.schemas.reservation import ReservationWithProperty
from lightbnb.utils.exceptions import (
    ValidationError,
    DuplicateResourceError,
    QueryFailedError,
)
import logging

logger = logging.getLogger(__name__)

InputType = Union[BaseModel, Dict[str, Any]]

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def _validate(schema: type, data: Optional[InputType]) -> Any:
    """Validate caller input against a schema, raising ValidationError on failure."""
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return schema.model_validate(data or {})
    except PydanticValidationError as e:
        field_errors = [
            {"field": ".".join(str(loc) for loc in error["loc"]), "message": error["msg"]}
            for error in e.errors()
        ]
        logger.warning(f"Rejected {schema.__name__} input: {field_errors}")
        raise ValidationError(f"Invalid {schema.__name__}", field_errors=field_errors)


def _coerce_id(value: Union[int, str], name: str) -> int:
    """Accept integer ids or their string form, as they arrive from sessions and URLs."""
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer, got {value!r}")


def _reason(error: SQLAlchemyError) -> str:
    """Driver message for DBAPI errors, the SQLAlchemy message otherwise."""
    return str(getattr(error, "orig", None) or error)


def _query_failed(operation: str, error: SQLAlchemyError) -> QueryFailedError:
    """Log the driver message and build the client-facing error without it."""
    logger.error(f"Query failed: {operation}: {_reason(error)}")
    return QueryFailedError(operation)


def _is_unique_violation(error: IntegrityError) -> bool:
    """True when an insert broke a unique constraint; on users that is the email."""
    orig = getattr(error, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == UNIQUE_VIOLATION
    # SQLite only reports the constraint kind in the message
    return "unique constraint failed" in str(orig).lower()


def _check_limit(limit: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise ValidationError(f"limit must be a non-negative integer, got {limit!r}")
    return limit


class QueryService:
    """
    Data-access operations for users, properties and reservations.

    The session factory is the process-wide pool handle; it is injected so
    tests can point the service at a different engine.

    Outcomes:
        - lookups return None when no row matches
        - searches return an empty list when nothing matches
        - a duplicate email raises DuplicateResourceError
        - any other database failure raises QueryFailedError
        - malformed input raises ValidationError before any SQL is issued
    """

    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        self.session_factory = session_factory or AsyncSessionLocal

    # Users

    async def get_user_with_email(self, email: str) -> Optional[UserResponse]:
        """
        Get a single user given their email.

        Args:
            email: Email address, matched exactly

        Returns:
            The user, or None if no user has that email

        Raises:
            QueryFailedError: If the database query fails
        """
        try:
            async with self.session_factory() as session:
                user = await UserRepository(session).get_by_email(email)
                return UserResponse.model_validate(user) if user else None
        except SQLAlchemyError as e:
            raise _query_failed("get user with email", e)

    async def get_user_with_id(self, user_id: Union[int, str]) -> Optional[UserResponse]:
        """
        Get a single user given their id.

        Raises:
            ValidationError: If the id is not an integer
            QueryFailedError: If the database query fails
        """
        user_id = _coerce_id(user_id, "user_id")
        try:
            async with self.session_factory() as session:
                user = await UserRepository(session).get_by_id(user_id)
                return UserResponse.model_validate(user) if user else None
        except SQLAlchemyError as e:
            raise _query_failed("get user with id", e)

    async def add_user(self, user: InputType) -> UserResponse:
        """
        Add a new user to the database.

        Args:
            user: Name, password and email of the new user

        Returns:
            The stored user including its generated id

        Raises:
            ValidationError: If required fields are missing
            DuplicateResourceError: If the email is already registered
            QueryFailedError: If the insert fails for any other reason
        """
        user_in = _validate(UserCreate, user)
        try:
            async with self.session_factory() as session:
                created = await UserRepository(session).create_user(user_in.model_dump())
                return UserResponse.model_validate(created)
        except IntegrityError as e:
            if _is_unique_violation(e):
                raise DuplicateResourceError("User", user_in.email)
            raise _query_failed("add user", e)
        except SQLAlchemyError as e:
            raise _query_failed("add user", e)

    # Reservations

    async def get_all_reservations(
        self,
        guest_id: Union[int, str],
        limit: int = settings.default_query_limit
    ) -> List[ReservationWithProperty]:
        """
        Get all reservations for a single guest, earliest start date first.

        Args:
            guest_id: ID of the guest
            limit: Maximum number of reservations to return

        Returns:
            Reservations joined with their property and its average rating

        Raises:
            ValidationError: If guest_id or limit is invalid
            QueryFailedError: If the database query fails
        """
        guest_id = _coerce_id(guest_id, "guest_id")
        limit = _check_limit(limit)
        try:
            async with self.session_factory() as session:
                rows = await ReservationRepository(session).get_guest_reservations(guest_id, limit)
                return [
                    ReservationWithProperty(
                        **PropertyResponse.model_validate(property_obj).model_dump(),
                        average_rating=average_rating,
                        reservation_id=reservation_id,
                        start_date=start_date,
                        end_date=end_date,
                    )
                    for reservation_id, property_obj, start_date, end_date, average_rating in rows
                ]
        except SQLAlchemyError as e:
            raise _query_failed("get all reservations", e)

    # Properties

    async def get_all_properties(
        self,
        options: Optional[InputType] = None,
        limit: int = settings.default_query_limit
    ) -> List[PropertyWithRating]:
        """
        Get properties matching the search options, cheapest first.

        Args:
            options: owner_id, city, minimum_price_per_night, maximum_price_per_night
                and minimum_rating; every key is optional
            limit: Maximum number of properties to return

        Returns:
            Properties with their average rating

        Raises:
            ValidationError: If an option or the limit is invalid
            QueryFailedError: If the database query fails
        """
        search_options = _validate(PropertySearchOptions, options)
        limit = _check_limit(limit)
        try:
            async with self.session_factory() as session:
                rows = await PropertyRepository(session).search_properties(search_options, limit)
                return [
                    PropertyWithRating(
                        **PropertyResponse.model_validate(property_obj).model_dump(),
                        average_rating=average_rating,
                    )
                    for property_obj, average_rating in rows
                ]
        except SQLAlchemyError as e:
            raise _query_failed("get all properties", e)

    async def add_property(self, property: InputType) -> PropertyResponse:
        """
        Add a property to the database.

        Args:
            property: The 14 property columns; absent ones are written as NULL

        Returns:
            The stored property including its generated id

        Raises:
            ValidationError: If a supplied field has the wrong type
            QueryFailedError: If the database rejects the row
        """
        property_in = _validate(PropertyCreate, property)
        try:
            async with self.session_factory() as session:
                created = await PropertyRepository(session).create_property(property_in.model_dump())
                return PropertyResponse.model_validate(created)
        except SQLAlchemyError as e:
            raise _query_failed("add property", e)


@lru_cache()
def get_query_service() -> QueryService:
    """
    Get the process-wide query service bound to the shared connection pool.
    Route handlers can use this as a dependency.
    """
    return QueryService()
