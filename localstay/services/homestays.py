import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import touch_timestamps, page_size
from ..errors import parse_input, reject_null_required, coerce_enum
from ..models import Homestay, HomestayStatus, HomestaySearchTerm
from ..schemas import HomestayCreate, HomestayUpdate
from . import text_search

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "title", "description", "property_type", "location", "pricing", "capacity", "status",
)
INDEXED_TEXT_FIELDS = {"title", "description"}


def _apply(homestay: Homestay, values: dict[str, Any]) -> None:
    for field, value in values.items():
        if field == "location":
            homestay.location_address = value.address
            homestay.location_district = value.district
            homestay.location_state = value.state
            coords = value.coordinates
            homestay.location_lat = coords.lat if coords else None
            homestay.location_lng = coords.lng if coords else None
        elif field == "pricing":
            homestay.pricing_base_price = value.base_price
            homestay.pricing_cleaning_fee = value.cleaning_fee
            homestay.pricing_weekend_price = value.weekend_price
        elif field == "capacity":
            homestay.capacity_guests = value.guests
            homestay.capacity_bedrooms = value.bedrooms
            homestay.capacity_beds = value.beds
            homestay.capacity_bathrooms = value.bathrooms
        elif field in ("amenities", "images"):
            # null resets to the default empty list
            setattr(homestay, field, list(value or []))
        elif field == "house_rules":
            homestay.house_rules = list(value) if value is not None else None
        else:
            setattr(homestay, field, value)
    if values.keys() & INDEXED_TEXT_FIELDS:
        homestay.search_terms = text_search.build_terms(HomestaySearchTerm, homestay.title, homestay.description)


def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def _save(db: Session, homestay: Homestay) -> Homestay:
    touch_timestamps(homestay)
    db.add(homestay)
    _commit(db)
    db.refresh(homestay)
    return homestay


def create_homestay(db: Session, data: HomestayCreate | dict) -> Homestay:
    payload = parse_input(HomestayCreate, data)
    homestay = Homestay(status=HomestayStatus.ACTIVE)
    _apply(homestay, {field: getattr(payload, field) for field in HomestayCreate.model_fields})
    _save(db, homestay)
    logger.info("Created homestay %s (%s)", homestay.id, homestay.title)
    return homestay


def get_homestay(db: Session, homestay_id: str) -> Homestay | None:
    return db.get(Homestay, homestay_id)


def update_homestay(db: Session, homestay_id: str, data: HomestayUpdate | dict) -> Homestay | None:
    """
    Apply a partial update. Returns None if no homestay has this id.
    Any status may be set directly; there is no transition workflow.
    """
    payload = parse_input(HomestayUpdate, data)
    reject_null_required(payload, REQUIRED_FIELDS)
    homestay = db.get(Homestay, homestay_id)
    if homestay is None:
        return None
    _apply(homestay, {field: getattr(payload, field) for field in payload.model_fields_set})
    _save(db, homestay)
    logger.info("Updated homestay %s fields=%s", homestay.id, sorted(payload.model_fields_set))
    return homestay


def add_homestay_image(db: Session, homestay_id: str, url: str) -> Homestay | None:
    homestay = db.get(Homestay, homestay_id)
    if homestay is None:
        return None
    # Assign a new list so the JSON column is flagged dirty
    homestay.images = [*(homestay.images or []), url]
    _save(db, homestay)
    logger.info("Added image to homestay %s", homestay.id)
    return homestay


def delete_homestay(db: Session, homestay_id: str) -> bool:
    homestay = db.get(Homestay, homestay_id)
    if homestay is None:
        return False
    db.delete(homestay)
    _commit(db)
    logger.info("Deleted homestay %s", homestay_id)
    return True


def find_homestays(
    db: Session,
    *,
    district: str | None = None,
    status: HomestayStatus | str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[Homestay]:
    """
    Homestays matching every given filter. Price bounds are inclusive.
    Ordered by base price (cheapest first) when a price bound is given,
    newest first otherwise.
    """
    q = db.query(Homestay)
    if district:
        q = q.filter(Homestay.location_district == district)
    if status:
        q = q.filter(Homestay.status == coerce_enum(HomestayStatus, status, "status"))
    if min_price is not None:
        q = q.filter(Homestay.pricing_base_price >= min_price)
    if max_price is not None:
        q = q.filter(Homestay.pricing_base_price <= max_price)
    if min_price is not None or max_price is not None:
        q = q.order_by(Homestay.pricing_base_price.asc(), Homestay.id)
    else:
        q = q.order_by(Homestay.created_at.desc(), Homestay.id)
    return q.offset(max(offset, 0)).limit(page_size(limit)).all()


def search_homestays(db: Session, query: str, limit: int | None = None) -> list[Homestay]:
    """Full-text search over title and description."""
    return text_search.search(
        db, Homestay, HomestaySearchTerm, HomestaySearchTerm.homestay_id, query, page_size(limit)
    )
