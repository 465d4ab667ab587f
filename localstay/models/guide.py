from __future__ import annotations
from enum import Enum as PyEnum
from sqlalchemy import Integer, String, ForeignKey, Float, Text, Enum, JSON, Index
from sqlalchemy.ext.associationproxy import association_proxy, AssociationProxy
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..db import Base, RecordMixin

class GuideAvailability(str, PyEnum):
    AVAILABLE = "available"
    BUSY = "busy"
    UNAVAILABLE = "unavailable"

class Guide(RecordMixin, Base):
    __tablename__ = "guides"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    bio: Mapped[str] = mapped_column(Text, nullable=False)
    languages: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    experience: Mapped[str] = mapped_column(Text, nullable=False)
    location_district: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    location_state: Mapped[str] = mapped_column(Text, nullable=False)
    pricing_half_day: Mapped[float] = mapped_column(Float, nullable=False)
    pricing_full_day: Mapped[float] = mapped_column(Float, nullable=False)
    pricing_multi_day: Mapped[float | None] = mapped_column(Float)
    pricing_workshop: Mapped[float | None] = mapped_column(Float)
    certifications: Mapped[list[str] | None] = mapped_column(JSON)
    availability: Mapped[GuideAvailability] = mapped_column(
        Enum(GuideAvailability, values_callable=lambda e: [m.value for m in e], native_enum=False, length=20),
        default=GuideAvailability.AVAILABLE,
        nullable=False,
        index=True,
    )

    # One row per entry so lookups by specialization hit an index
    specialization_rows: Mapped[list[GuideSpecialization]] = relationship(
        back_populates="guide", cascade="all, delete-orphan", order_by="GuideSpecialization.id"
    )
    specializations: AssociationProxy[list[str]] = association_proxy(
        "specialization_rows", "value", creator=lambda value: GuideSpecialization(value=value)
    )

    # Inverted index over name + bio
    search_terms: Mapped[list[GuideSearchTerm]] = relationship(cascade="all, delete-orphan")

class GuideSpecialization(Base):
    __tablename__ = "guide_specializations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    guide_id: Mapped[str] = mapped_column(ForeignKey("guides.id", ondelete="CASCADE"), nullable=False, index=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, index=True)

    guide: Mapped[Guide] = relationship(back_populates="specialization_rows")

class GuideSearchTerm(Base):
    __tablename__ = "guide_search_terms"
    __table_args__ = (Index("ix_guide_search_terms_term_guide", "term", "guide_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    guide_id: Mapped[str] = mapped_column(ForeignKey("guides.id", ondelete="CASCADE"), nullable=False, index=True)
    term: Mapped[str] = mapped_column(String(64), nullable=False)
    frequency: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
