"""
Reservation repository for a guest's bookings.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, asc, Select
from lightbnb.repositories.base import BaseRepository
from lightbnb.models.reservation import Reservation
from lightbnb.models.property import Property
from lightbnb.models.review import PropertyReview
from typing import List, Any, Tuple
from datetime import date
import logging

logger = logging.getLogger(__name__)


class ReservationRepository(BaseRepository[Reservation]):
    """Repository for reservations joined with their properties."""

    def __init__(self, db: AsyncSession):
        super().__init__(Reservation, db)

    @staticmethod
    def build_guest_reservations_query(guest_id: int, limit: int) -> Select:
        """
        Build the statement listing a guest's reservations by start date.

        Reviews are outer-joined so properties without reviews still appear
        with a NULL average rating.
        """
        return (
            select(
                Reservation.id.label("reservation_id"),
                Property,
                Reservation.start_date,
                Reservation.end_date,
                func.avg(PropertyReview.rating).label("average_rating"),
            )
            .select_from(Reservation)
            .join(Property, Reservation.property_id == Property.id)
            .outerjoin(PropertyReview, Property.id == PropertyReview.property_id)
            .where(Reservation.guest_id == guest_id)
            .group_by(Property.id, Reservation.id)
            .order_by(asc(Reservation.start_date))
            .limit(limit)
        )

    async def get_guest_reservations(
        self,
        guest_id: int,
        limit: int = 10
    ) -> List[Tuple[int, Property, date, date, Any]]:
        """
        Get reservations made by a guest.

        Args:
            guest_id: ID of the guest
            limit: Maximum number of reservations to return

        Returns:
            List of (reservation_id, property, start_date, end_date, average_rating) tuples
        """
        try:
            result = await self.db.execute(self.build_guest_reservations_query(guest_id, limit))
            rows = [tuple(row) for row in result.all()]

            logger.debug(f"Retrieved {len(rows)} reservations for guest {guest_id}")
            return rows
        except Exception as e:
            logger.error(f"Failed to get reservations for guest {guest_id}: {e}")
            raise
