from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import Field, StringConstraints

from ..models import Guide, GuideAvailability
from .common import ApiModel, RequiredText, TrimmedText, Price, default_state

NonEmptyList = Annotated[List[str], Field(min_length=1)]
GuideName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class GuideLocation(ApiModel):
    district: RequiredText
    state: RequiredText = Field(default_factory=default_state)


class GuidePricing(ApiModel):
    half_day: Price
    full_day: Price
    multi_day: Optional[Price] = None
    workshop: Optional[Price] = None


class GuideCreate(ApiModel):
    name: GuideName
    bio: TrimmedText
    specializations: NonEmptyList
    languages: NonEmptyList
    experience: RequiredText
    location: GuideLocation
    pricing: GuidePricing
    certifications: Optional[List[str]] = None
    availability: GuideAvailability = GuideAvailability.AVAILABLE


class GuideUpdate(ApiModel):
    """Partial update: only the fields present in the input are applied."""

    name: Optional[GuideName] = None
    bio: Optional[TrimmedText] = None
    specializations: Optional[NonEmptyList] = None
    languages: Optional[NonEmptyList] = None
    experience: Optional[RequiredText] = None
    location: Optional[GuideLocation] = None
    pricing: Optional[GuidePricing] = None
    certifications: Optional[List[str]] = None
    availability: Optional[GuideAvailability] = None


class GuideOut(GuideCreate):
    id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, guide: Guide) -> "GuideOut":
        return cls(
            id=guide.id,
            name=guide.name,
            bio=guide.bio,
            specializations=list(guide.specializations),
            languages=list(guide.languages),
            experience=guide.experience,
            location=GuideLocation(district=guide.location_district, state=guide.location_state),
            pricing=GuidePricing(
                half_day=guide.pricing_half_day,
                full_day=guide.pricing_full_day,
                multi_day=guide.pricing_multi_day,
                workshop=guide.pricing_workshop,
            ),
            certifications=guide.certifications,
            availability=guide.availability,
            created_at=guide.created_at,
            updated_at=guide.updated_at,
        )
