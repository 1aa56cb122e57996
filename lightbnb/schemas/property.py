"""
Pydantic schemas for property inserts, search options and search results.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional


class PropertyCreate(BaseModel):
    """
    Schema for inserting a property.
    Every field is optional: a missing value is written as NULL and the
    database's NOT NULL constraints decide whether the insert succeeds.
    """

    owner_id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    thumbnail_photo_url: Optional[str] = None
    cover_photo_url: Optional[str] = None
    cost_per_night: Optional[int] = Field(None, ge=0, description="Nightly price in cents")
    street: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    post_code: Optional[str] = None
    country: Optional[str] = None
    parking_spaces: Optional[int] = Field(None, ge=0)
    number_of_bathrooms: Optional[int] = Field(None, ge=0)
    number_of_bedrooms: Optional[int] = Field(None, ge=0)


class PropertyResponse(BaseModel):
    """A row of the properties table."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    title: str
    description: Optional[str] = None
    thumbnail_photo_url: str
    cover_photo_url: str
    cost_per_night: int
    street: str
    city: str
    province: str
    post_code: str
    country: str
    parking_spaces: int
    number_of_bathrooms: int
    number_of_bedrooms: int


class PropertyWithRating(PropertyResponse):
    """Property row with the average of its review ratings."""

    average_rating: Optional[float] = None


class PropertySearchOptions(BaseModel):
    """
    Filters for the property search.
    Prices are whole currency units per night; ratings are on the 1-5 scale.
    Blank strings, as submitted by empty form fields, count as absent.
    """

    owner_id: Optional[int] = None
    city: Optional[str] = None
    minimum_price_per_night: Optional[int] = Field(None, ge=0)
    maximum_price_per_night: Optional[int] = Field(None, ge=0)
    minimum_rating: Optional[float] = Field(None, ge=0, le=5)

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("city")
    @classmethod
    def strip_city(cls, v):
        return v.strip() if v is not None else v
