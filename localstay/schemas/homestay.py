from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import Field, StringConstraints

from ..models import Homestay, HomestayStatus, PropertyType
from .common import ApiModel, RequiredText, TrimmedText, Price, default_state

HomestayTitle = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]


class Coordinates(ApiModel):
    lat: float
    lng: float


class HomestayLocation(ApiModel):
    address: RequiredText
    district: RequiredText
    state: RequiredText = Field(default_factory=default_state)
    coordinates: Optional[Coordinates] = None


class HomestayPricing(ApiModel):
    base_price: float = Field(ge=100)
    cleaning_fee: Optional[Price] = None
    weekend_price: Optional[Price] = None


class HomestayCapacity(ApiModel):
    guests: float = Field(ge=1)
    bedrooms: float = Field(ge=0)
    beds: float = Field(ge=1)
    bathrooms: float = Field(ge=0)


class HomestayCreate(ApiModel):
    # status is not accepted here; new listings always start active
    title: HomestayTitle
    description: TrimmedText
    property_type: PropertyType = PropertyType.ENTIRE
    location: HomestayLocation
    pricing: HomestayPricing
    capacity: HomestayCapacity
    amenities: List[str] = Field(default_factory=list)
    house_rules: Optional[List[str]] = None
    images: List[str] = Field(default_factory=list)


class HomestayUpdate(ApiModel):
    title: Optional[HomestayTitle] = None
    description: Optional[TrimmedText] = None
    property_type: Optional[PropertyType] = None
    location: Optional[HomestayLocation] = None
    pricing: Optional[HomestayPricing] = None
    capacity: Optional[HomestayCapacity] = None
    amenities: Optional[List[str]] = None
    house_rules: Optional[List[str]] = None
    images: Optional[List[str]] = None
    status: Optional[HomestayStatus] = None


class HomestayOut(HomestayCreate):
    id: str
    status: HomestayStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, homestay: Homestay) -> "HomestayOut":
        coordinates = None
        if homestay.location_lat is not None and homestay.location_lng is not None:
            coordinates = Coordinates(lat=homestay.location_lat, lng=homestay.location_lng)
        return cls(
            id=homestay.id,
            title=homestay.title,
            description=homestay.description,
            property_type=homestay.property_type,
            location=HomestayLocation(
                address=homestay.location_address,
                district=homestay.location_district,
                state=homestay.location_state,
                coordinates=coordinates,
            ),
            pricing=HomestayPricing(
                base_price=homestay.pricing_base_price,
                cleaning_fee=homestay.pricing_cleaning_fee,
                weekend_price=homestay.pricing_weekend_price,
            ),
            capacity=HomestayCapacity(
                guests=homestay.capacity_guests,
                bedrooms=homestay.capacity_bedrooms,
                beds=homestay.capacity_beds,
                bathrooms=homestay.capacity_bathrooms,
            ),
            amenities=list(homestay.amenities or []),
            house_rules=homestay.house_rules,
            images=list(homestay.images or []),
            status=homestay.status,
            created_at=homestay.created_at,
            updated_at=homestay.updated_at,
        )
