"""
User repository for account lookups and registration.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from lightbnb.repositories.base import BaseRepository
from lightbnb.models.user import User
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user rows.
    Lookups select id, name, email and password with exactly one bound parameter.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address. The match is exact.

        Args:
            email: Email address to search for

        Returns:
            User instance if found, None otherwise
        """
        return await self.get_by_field("email", email)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Insert a user and return the stored row.

        Args:
            user_data: Dictionary with name, password and email

        Returns:
            Created user instance

        Raises:
            IntegrityError: If the email is already registered
        """
        created_user = await self.create({
            "name": user_data["name"],
            "password": user_data["password"],
            "email": user_data["email"],
        })
        logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
        return created_user
