"""
Property repository for the filtered listing search and new listings.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, func, asc, literal_column, Integer, Select
from lightbnb.repositories.base import BaseRepository
from lightbnb.models.property import Property, PROPERTY_FIELDS, CENTS_PER_UNIT
from lightbnb.models.review import PropertyReview
from lightbnb.schemas.property import PropertySearchOptions
from typing import List, Dict, Any, Tuple, Optional
import logging

logger = logging.getLogger(__name__)


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property listings.
    Search results carry the average rating of each property's reviews.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    @staticmethod
    def _build_filter_conditions(options: PropertySearchOptions) -> Tuple[List, List]:
        """
        Build WHERE and HAVING conditions from search options.

        Conditions are appended in a fixed order (owner, city, minimum price,
        maximum price, minimum rating) so bound parameters are numbered in
        that order when the statement is compiled.

        Args:
            options: PropertySearchOptions instance

        Returns:
            Tuple of (where conditions, having conditions)
        """
        conditions = []
        having = []

        # Owner filter for a user's own listings
        if options.owner_id is not None:
            conditions.append(Property.owner_id == options.owner_id)

        # City filter (case-insensitive partial match)
        if options.city:
            conditions.append(Property.city.ilike(f"%{options.city}%"))

        # Price filters compare whole currency units; cost_per_night is stored in cents
        nightly_price = Property.cost_per_night // literal_column(str(CENTS_PER_UNIT), Integer)
        if options.minimum_price_per_night is not None:
            conditions.append(nightly_price > options.minimum_price_per_night)
        if options.maximum_price_per_night is not None:
            conditions.append(nightly_price < options.maximum_price_per_night)

        if options.minimum_rating is not None:
            having.append(func.avg(PropertyReview.rating) >= options.minimum_rating)

        return conditions, having

    @classmethod
    def build_search_query(cls, options: PropertySearchOptions, limit: int) -> Select:
        """
        Build the property search statement.

        Args:
            options: Filters to apply
            limit: Maximum number of rows

        Returns:
            Select yielding (Property, average_rating) rows
        """
        query = (
            select(Property, func.avg(PropertyReview.rating).label("average_rating"))
            .join(PropertyReview, Property.id == PropertyReview.property_id)
        )

        conditions, having = cls._build_filter_conditions(options)
        if conditions:
            query = query.where(and_(*conditions))

        query = query.group_by(Property.id)

        if having:
            query = query.having(and_(*having))

        return query.order_by(asc(Property.cost_per_night)).limit(limit)

    async def search_properties(
        self,
        options: Optional[PropertySearchOptions] = None,
        limit: int = 10
    ) -> List[Tuple[Property, Any]]:
        """
        Search properties with filtering, ordered by nightly cost.

        Args:
            options: Search filters; None applies no filter
            limit: Maximum number of rows to return

        Returns:
            List of (property, average_rating) tuples
        """
        options = options or PropertySearchOptions()
        try:
            result = await self.db.execute(self.build_search_query(options, limit))
            rows = [(row[0], row[1]) for row in result.all()]

            logger.debug(f"Property search returned {len(rows)} results")
            return rows
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise

    async def create_property(self, property_data: Dict[str, Any]) -> Property:
        """
        Insert a property using the fixed column list.

        Args:
            property_data: Mapping of column name to value; missing columns bind NULL

        Returns:
            Created property instance

        Raises:
            IntegrityError: If a NOT NULL or foreign key constraint is violated
        """
        values = {field: property_data.get(field) for field in PROPERTY_FIELDS}
        created_property = await self.create(values)
        logger.info(f"Created property: {created_property.title} (ID: {created_property.id})")
        return created_property
