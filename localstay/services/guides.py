import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import touch_timestamps, page_size
from ..errors import parse_input, reject_null_required, coerce_enum
from ..models import Guide, GuideAvailability, GuideSpecialization, GuideSearchTerm
from ..schemas import GuideCreate, GuideUpdate
from . import text_search

logger = logging.getLogger(__name__)

# Fields a partial update may leave out but never set to null
REQUIRED_FIELDS = (
    "name", "bio", "specializations", "languages", "experience", "location", "pricing", "availability",
)
INDEXED_TEXT_FIELDS = {"name", "bio"}


def _apply(guide: Guide, values: dict[str, Any]) -> None:
    for field, value in values.items():
        if field == "location":
            guide.location_district = value.district
            guide.location_state = value.state
        elif field == "pricing":
            guide.pricing_half_day = value.half_day
            guide.pricing_full_day = value.full_day
            guide.pricing_multi_day = value.multi_day
            guide.pricing_workshop = value.workshop
        elif field in ("specializations", "languages", "certifications"):
            setattr(guide, field, list(value) if value is not None else None)
        else:
            setattr(guide, field, value)
    if values.keys() & INDEXED_TEXT_FIELDS:
        guide.search_terms = text_search.build_terms(GuideSearchTerm, guide.name, guide.bio)


def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def _save(db: Session, guide: Guide) -> Guide:
    touch_timestamps(guide)
    db.add(guide)
    _commit(db)
    db.refresh(guide)
    return guide


def create_guide(db: Session, data: GuideCreate | dict) -> Guide:
    payload = parse_input(GuideCreate, data)
    guide = Guide()
    _apply(guide, {field: getattr(payload, field) for field in GuideCreate.model_fields})
    _save(db, guide)
    logger.info("Created guide %s (%s)", guide.id, guide.name)
    return guide


def get_guide(db: Session, guide_id: str) -> Guide | None:
    return db.get(Guide, guide_id)


def update_guide(db: Session, guide_id: str, data: GuideUpdate | dict) -> Guide | None:
    """
    Apply a partial update. Returns None if no guide has this id.
    Nested objects (location, pricing) are replaced whole.
    """
    payload = parse_input(GuideUpdate, data)
    reject_null_required(payload, REQUIRED_FIELDS)
    guide = db.get(Guide, guide_id)
    if guide is None:
        return None
    _apply(guide, {field: getattr(payload, field) for field in payload.model_fields_set})
    _save(db, guide)
    logger.info("Updated guide %s fields=%s", guide.id, sorted(payload.model_fields_set))
    return guide


def delete_guide(db: Session, guide_id: str) -> bool:
    guide = db.get(Guide, guide_id)
    if guide is None:
        return False
    db.delete(guide)
    _commit(db)
    logger.info("Deleted guide %s", guide_id)
    return True


def find_guides(
    db: Session,
    *,
    specialization: str | None = None,
    availability: GuideAvailability | str | None = None,
    district: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[Guide]:
    """Guides matching every given filter, newest first."""
    q = db.query(Guide)
    if specialization:
        q = q.filter(Guide.specialization_rows.any(GuideSpecialization.value == specialization))
    if availability:
        q = q.filter(Guide.availability == coerce_enum(GuideAvailability, availability, "availability"))
    if district:
        q = q.filter(Guide.location_district == district)
    return q.order_by(Guide.created_at.desc(), Guide.id).offset(max(offset, 0)).limit(page_size(limit)).all()


def search_guides(db: Session, query: str, limit: int | None = None) -> list[Guide]:
    """Full-text search over name and bio."""
    return text_search.search(db, Guide, GuideSearchTerm, GuideSearchTerm.guide_id, query, page_size(limit))
