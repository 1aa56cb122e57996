"""
Test configuration and fixtures for the LightBnB data-access layer.
Provides an in-memory database per test, test data factories, and common test utilities.
"""

import pytest
import uuid
from datetime import date
from typing import AsyncGenerator, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from lightbnb.database import create_tables, drop_tables
from lightbnb.models import User, Property, Reservation, PropertyReview
from lightbnb.repositories.user import UserRepository
from lightbnb.repositories.property import PropertyRepository
from lightbnb.repositories.reservation import ReservationRepository
from lightbnb.services.query import QueryService


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with the full schema."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    await create_tables(engine)
    yield engine
    await drop_tables(engine)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker:
    """Session factory standing in for the shared connection pool."""
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


@pytest.fixture
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    return PropertyRepository(db_session)


@pytest.fixture
def reservation_repository(db_session: AsyncSession) -> ReservationRepository:
    return ReservationRepository(db_session)


# Service fixtures
@pytest.fixture
def query_service(session_factory: async_sessionmaker) -> QueryService:
    """Create a query service bound to the test database."""
    return QueryService(session_factory)


async def _persist(session_factory: async_sessionmaker, obj):
    async with session_factory() as session:
        session.add(obj)
        await session.commit()
        return obj


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        name: str = "Test User",
        email: str = None,
        password: str = "$2a$10$FB/BOAVhpuLvpOREQVmvmezD4ED/.JBIDRh70tGevYzYzQgFId2u."
    ) -> Dict[str, Any]:
        """Create user data dictionary."""
        return {
            "name": name,
            "email": email or f"test{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
        }

    @staticmethod
    async def create_user(session_factory: async_sessionmaker, **kwargs) -> User:
        """Create a test user in the database."""
        return await _persist(session_factory, User(**UserFactory.create_user_data(**kwargs)))


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        owner_id: int,
        title: str = "Test Property",
        cost_per_night: int = 10000,
        city: str = "Vancouver",
        description: str = "description",
        number_of_bedrooms: int = 2
    ) -> Dict[str, Any]:
        """Create a dictionary holding all 14 insertable property columns."""
        return {
            "owner_id": owner_id,
            "title": title,
            "description": description,
            "thumbnail_photo_url": "https://images.example.com/thumb.jpg",
            "cover_photo_url": "https://images.example.com/cover.jpg",
            "cost_per_night": cost_per_night,
            "street": "536 Namsub Highway",
            "city": city,
            "province": "British Columbia",
            "post_code": "28142",
            "country": "Canada",
            "parking_spaces": 1,
            "number_of_bathrooms": 1,
            "number_of_bedrooms": number_of_bedrooms,
        }

    @staticmethod
    async def create_property(session_factory: async_sessionmaker, owner_id: int, **kwargs) -> Property:
        """Create a test property in the database."""
        data = PropertyFactory.create_property_data(owner_id=owner_id, **kwargs)
        return await _persist(session_factory, Property(**data))


class ReservationFactory:
    """Factory for creating test reservations."""

    @staticmethod
    async def create_reservation(
        session_factory: async_sessionmaker,
        guest_id: int,
        property_id: int,
        start_date: date,
        end_date: date
    ) -> Reservation:
        return await _persist(session_factory, Reservation(
            guest_id=guest_id,
            property_id=property_id,
            start_date=start_date,
            end_date=end_date,
        ))


class ReviewFactory:
    """Factory for creating test property reviews."""

    @staticmethod
    async def create_reviews(session_factory: async_sessionmaker, property_id: int, *ratings: int):
        async with session_factory() as session:
            session.add_all([PropertyReview(property_id=property_id, rating=r) for r in ratings])
            await session.commit()


# Common test fixtures
@pytest.fixture
async def test_owner(session_factory: async_sessionmaker) -> User:
    """Create a user who owns listings."""
    return await UserFactory.create_user(session_factory, name="Devin Sanders", email="owner@test.com")


@pytest.fixture
async def test_guest(session_factory: async_sessionmaker) -> User:
    """Create a user who makes reservations."""
    return await UserFactory.create_user(session_factory, name="Eva Stanley", email="guest@test.com")


@pytest.fixture
async def test_listings(session_factory: async_sessionmaker, test_owner: User, test_guest: User) -> Dict[str, Property]:
    """
    Create listings with reviews.

    Nightly prices (whole units) and average ratings:
        cabin 90 / 4.5, loft 150 / 3.5, beach 250 / 5.0,
        lake 100 / 4.0, mountain 200 / 2.5, flat 50 / no reviews.
    The flat belongs to the guest; everything else belongs to the owner.
    """
    listings = {
        "cabin": await PropertyFactory.create_property(
            session_factory, test_owner.id, title="Cozy Cabin", cost_per_night=9000, city="Vancouver"),
        "loft": await PropertyFactory.create_property(
            session_factory, test_owner.id, title="Downtown Loft", cost_per_night=15000, city="Vancouver"),
        "beach": await PropertyFactory.create_property(
            session_factory, test_owner.id, title="Beach House", cost_per_night=25000, city="Victoria"),
        "lake": await PropertyFactory.create_property(
            session_factory, test_owner.id, title="Lake Suite", cost_per_night=10000, city="North Vancouver"),
        "mountain": await PropertyFactory.create_property(
            session_factory, test_owner.id, title="Mountain View", cost_per_night=20000, city="Calgary"),
        "flat": await PropertyFactory.create_property(
            session_factory, test_guest.id, title="Unreviewed Flat", cost_per_night=5000, city="Toronto"),
    }

    await ReviewFactory.create_reviews(session_factory, listings["cabin"].id, 5, 4)
    await ReviewFactory.create_reviews(session_factory, listings["loft"].id, 3, 4)
    await ReviewFactory.create_reviews(session_factory, listings["beach"].id, 5)
    await ReviewFactory.create_reviews(session_factory, listings["lake"].id, 4)
    await ReviewFactory.create_reviews(session_factory, listings["mountain"].id, 2, 3)

    return listings


@pytest.fixture
async def test_reservations(
    session_factory: async_sessionmaker,
    test_guest: User,
    test_listings: Dict[str, Property]
) -> Dict[str, Reservation]:
    """Create the guest's reservations, inserted out of date order."""
    bookings = {
        "beach": (date(2026, 7, 1), date(2026, 7, 5)),
        "cabin": (date(2026, 3, 1), date(2026, 3, 4)),
        "flat": (date(2026, 5, 10), date(2026, 5, 12)),
        "loft": (date(2026, 1, 15), date(2026, 1, 20)),
    }
    return {
        key: await ReservationFactory.create_reservation(
            session_factory, test_guest.id, test_listings[key].id, start, end)
        for key, (start, end) in bookings.items()
    }


# Utility functions for tests
def assert_property_matches(actual, expected: Dict[str, Any]):
    """Assert that a property result reproduces the given column values."""
    for field, value in expected.items():
        assert getattr(actual, field) == value, field
