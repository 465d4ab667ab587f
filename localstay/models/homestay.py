from __future__ import annotations
from enum import Enum as PyEnum
from sqlalchemy import Integer, String, ForeignKey, Float, Text, Enum, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..db import Base, RecordMixin

class PropertyType(str, PyEnum):
    ENTIRE = "entire"
    PRIVATE = "private"
    SHARED = "shared"

class HomestayStatus(str, PyEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"

def _enum_column(enum_cls):
    return Enum(enum_cls, values_callable=lambda e: [m.value for m in e], native_enum=False, length=20)

class Homestay(RecordMixin, Base):
    __tablename__ = "homestays"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    property_type: Mapped[PropertyType] = mapped_column(_enum_column(PropertyType), default=PropertyType.ENTIRE, nullable=False)

    location_address: Mapped[str] = mapped_column(Text, nullable=False)
    location_district: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    location_state: Mapped[str] = mapped_column(Text, nullable=False)
    # Both set or both NULL
    location_lat: Mapped[float | None] = mapped_column(Float)
    location_lng: Mapped[float | None] = mapped_column(Float)

    pricing_base_price: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    pricing_cleaning_fee: Mapped[float | None] = mapped_column(Float)
    pricing_weekend_price: Mapped[float | None] = mapped_column(Float)

    capacity_guests: Mapped[float] = mapped_column(Float, nullable=False)
    capacity_bedrooms: Mapped[float] = mapped_column(Float, nullable=False)
    capacity_beds: Mapped[float] = mapped_column(Float, nullable=False)
    capacity_bathrooms: Mapped[float] = mapped_column(Float, nullable=False)

    amenities: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    house_rules: Mapped[list[str] | None] = mapped_column(JSON)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[HomestayStatus] = mapped_column(_enum_column(HomestayStatus), default=HomestayStatus.ACTIVE, nullable=False, index=True)

    # Inverted index over title + description
    search_terms: Mapped[list[HomestaySearchTerm]] = relationship(cascade="all, delete-orphan")

class HomestaySearchTerm(Base):
    __tablename__ = "homestay_search_terms"
    __table_args__ = (Index("ix_homestay_search_terms_term_homestay", "term", "homestay_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    homestay_id: Mapped[str] = mapped_column(ForeignKey("homestays.id", ondelete="CASCADE"), nullable=False, index=True)
    term: Mapped[str] = mapped_column(String(64), nullable=False)
    frequency: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
