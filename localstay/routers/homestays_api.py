from typing import List, Optional

from fastapi import APIRouter, Depends, Request, Response, HTTPException, Query, UploadFile, File
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..limiter import limiter
from ..models import HomestayStatus
from ..schemas import HomestayCreate, HomestayUpdate, HomestayOut
from ..services import homestays
from ..services.media import save_image, discard_image, ImageRejected

router = APIRouter(prefix="/api/v1/homestays", tags=["homestays"])


def _not_found(homestay_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Homestay {homestay_id} not found")


@router.post("", response_model=HomestayOut, status_code=201)
@limiter.limit(settings.RATE_LIMIT_WRITE)
def api_create_homestay(request: Request, payload: HomestayCreate, db: Session = Depends(get_db)):
    return HomestayOut.from_record(homestays.create_homestay(db, payload))


@router.get("", response_model=List[HomestayOut])
def api_find_homestays(
    db: Session = Depends(get_db),
    district: Optional[str] = None,
    status: Optional[HomestayStatus] = None,
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
):
    found = homestays.find_homestays(
        db,
        district=district,
        status=status,
        min_price=min_price,
        max_price=max_price,
        limit=limit,
        offset=offset,
    )
    return [HomestayOut.from_record(h) for h in found]


@router.get("/search", response_model=List[HomestayOut])
def api_search_homestays(q: str = Query(..., min_length=1), limit: Optional[int] = Query(None, ge=1, le=settings.MAX_PAGE_SIZE), db: Session = Depends(get_db)):
    return [HomestayOut.from_record(h) for h in homestays.search_homestays(db, q, limit)]


@router.get("/{homestay_id}", response_model=HomestayOut)
def api_get_homestay(homestay_id: str, db: Session = Depends(get_db)):
    hs = homestays.get_homestay(db, homestay_id)
    if not hs:
        raise _not_found(homestay_id)
    return HomestayOut.from_record(hs)


@router.patch("/{homestay_id}", response_model=HomestayOut)
@limiter.limit(settings.RATE_LIMIT_WRITE)
def api_update_homestay(request: Request, homestay_id: str, payload: HomestayUpdate, db: Session = Depends(get_db)):
    hs = homestays.update_homestay(db, homestay_id, payload)
    if not hs:
        raise _not_found(homestay_id)
    return HomestayOut.from_record(hs)


@router.post("/{homestay_id}/images", response_model=HomestayOut, status_code=201)
@limiter.limit(settings.RATE_LIMIT_WRITE)
async def api_upload_homestay_image(request: Request, homestay_id: str, image: UploadFile = File(...), db: Session = Depends(get_db)):
    if not homestays.get_homestay(db, homestay_id):
        raise _not_found(homestay_id)
    data = await image.read()
    try:
        url = save_image(data, folder="localstay/homestays")
    except ImageRejected as e:
        raise HTTPException(status_code=400, detail=str(e))
    # Do not leave the stored file behind if the listing cannot take it
    try:
        hs = homestays.add_homestay_image(db, homestay_id, url)
    except SQLAlchemyError:
        discard_image(url)
        raise
    if not hs:
        discard_image(url)
        raise _not_found(homestay_id)
    return HomestayOut.from_record(hs)


@router.delete("/{homestay_id}", status_code=204)
def api_delete_homestay(homestay_id: str, db: Session = Depends(get_db)):
    if not homestays.delete_homestay(db, homestay_id):
        raise _not_found(homestay_id)
    return Response(status_code=204)
