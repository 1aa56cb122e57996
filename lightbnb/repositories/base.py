"""
Base repository class with the insert and lookup operations shared by every table.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, insert, Select
from lightbnb.database import Base
from typing import TypeVar, Generic, Optional, Dict, Any, Type
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository class providing parameterised inserts and single-row lookups.
    Database errors are logged and re-raised for the service layer to classify.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Initialize repository with model class and database session.

        Args:
            model: SQLAlchemy model class
            db: Async database session
        """
        self.model = model
        self.db = db

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """
        Insert one row and return it as written by the database (INSERT ... RETURNING).

        Args:
            obj_in: Column values for the new row

        Returns:
            Created model instance

        Raises:
            SQLAlchemyError: If the insert is rejected
        """
        try:
            stmt = insert(self.model).values(**obj_in).returning(self.model)
            result = await self.db.execute(stmt)
            db_obj = result.scalar_one()
            await self.db.commit()
            logger.debug(f"Created {self.model.__name__} with id: {db_obj.id}")
            return db_obj
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create {self.model.__name__}: {e}")
            raise

    def build_lookup_query(self, field: str, value: Any) -> Select:
        """Build ``SELECT <columns> FROM <table> WHERE <field> = $1``."""
        if not hasattr(self.model, field):
            raise ValueError(f"Field '{field}' does not exist on {self.model.__name__}")
        return select(self.model).where(getattr(self.model, field) == value)

    async def get_by_field(self, field: str, value: Any) -> Optional[ModelType]:
        """
        Get a record by a specific field value.

        Args:
            field: Column name to match exactly
            value: Value bound to the comparison

        Returns:
            Model instance if found, None otherwise
        """
        query = self.build_lookup_query(field, value)
        try:
            result = await self.db.execute(query)
            obj = result.scalars().first()

            if obj:
                logger.debug(f"Retrieved {self.model.__name__} by {field}: {value}")
            else:
                logger.debug(f"{self.model.__name__} with {field}={value} not found")

            return obj
        except Exception as e:
            logger.error(f"Failed to get {self.model.__name__} by {field}={value}: {e}")
            raise

    async def get_by_id(self, id: int) -> Optional[ModelType]:
        """Get a record by its primary key."""
        return await self.get_by_field("id", id)
