"""
Property review model. Only ratings are read, for average-rating aggregates.
"""

from sqlalchemy import Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from lightbnb.database import Base


class PropertyReview(Base):
    __tablename__ = "property_reviews"

    property_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    rating: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Rating from 1 to 5"
    )
