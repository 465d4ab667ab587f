from typing import List, Optional

from fastapi import APIRouter, Depends, Request, Response, HTTPException, Query
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..limiter import limiter
from ..models import GuideAvailability
from ..schemas import GuideCreate, GuideUpdate, GuideOut
from ..services import guides

router = APIRouter(prefix="/api/v1/guides", tags=["guides"])


def _not_found(guide_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Guide {guide_id} not found")


@router.post("", response_model=GuideOut, status_code=201)
@limiter.limit(settings.RATE_LIMIT_WRITE)
def api_create_guide(request: Request, payload: GuideCreate, db: Session = Depends(get_db)):
    return GuideOut.from_record(guides.create_guide(db, payload))


@router.get("", response_model=List[GuideOut])
def api_find_guides(
    db: Session = Depends(get_db),
    specialization: Optional[str] = None,
    availability: Optional[GuideAvailability] = None,
    district: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
):
    found = guides.find_guides(
        db, specialization=specialization, availability=availability, district=district, limit=limit, offset=offset
    )
    return [GuideOut.from_record(g) for g in found]


@router.get("/search", response_model=List[GuideOut])
def api_search_guides(q: str = Query(..., min_length=1), limit: Optional[int] = Query(None, ge=1, le=settings.MAX_PAGE_SIZE), db: Session = Depends(get_db)):
    return [GuideOut.from_record(g) for g in guides.search_guides(db, q, limit)]


@router.get("/{guide_id}", response_model=GuideOut)
def api_get_guide(guide_id: str, db: Session = Depends(get_db)):
    guide = guides.get_guide(db, guide_id)
    if not guide:
        raise _not_found(guide_id)
    return GuideOut.from_record(guide)


@router.patch("/{guide_id}", response_model=GuideOut)
@limiter.limit(settings.RATE_LIMIT_WRITE)
def api_update_guide(request: Request, guide_id: str, payload: GuideUpdate, db: Session = Depends(get_db)):
    guide = guides.update_guide(db, guide_id, payload)
    if not guide:
        raise _not_found(guide_id)
    return GuideOut.from_record(guide)


@router.delete("/{guide_id}", status_code=204)
def api_delete_guide(guide_id: str, db: Session = Depends(get_db)):
    if not guides.delete_guide(db, guide_id):
        raise _not_found(guide_id)
    return Response(status_code=204)
