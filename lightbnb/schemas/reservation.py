"""
Pydantic schemas for reservation listings.
"""

from datetime import date
from lightbnb.schemas.property import PropertyWithRating


class ReservationWithProperty(PropertyWithRating):
    """
    A guest's reservation joined with the reserved property.
    The inherited id is the property's id; reservation_id identifies the booking.
    """

    reservation_id: int
    start_date: date
    end_date: date
