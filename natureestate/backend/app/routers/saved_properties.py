# backend/app/routers/saved_properties.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth import Principal, require_user
from ..db import get_db
from ..errors import DuplicateSave
from ..models import Property, PropertyPhoto, SavedProperty
from ..schemas import MessageOut, PropertyOut, SavedPropertyCreate, SavedPropertyOut, SavedPropertyUpdate
from ..services.analytics import bump_daily, bump_listing_counter
from ..services.ownership import must_get_property, must_own_saved_property
from ..services.search_specs import SAVED_PROPERTY_SEARCH

log = logging.getLogger("natureestate.saved")

router = APIRouter(prefix="/saved-properties", tags=["saved-properties"])


def _saved_out(row: SavedProperty, primary: dict[str, str]) -> dict:
    out = SavedPropertyOut.model_validate(row).model_dump()
    prop = PropertyOut.model_validate(row.property).model_dump()
    url = primary.get(row.property_id)
    prop["primary_photo"] = {"photo_url": url} if url else None
    out["property"] = prop
    return out


@router.get("")
def list_saved(request: Request, db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    """sort_by=date_saved|price_low_high|location, filter_country=<text>"""
    params = SAVED_PROPERTY_SEARCH.parse(request.query_params)
    scoped = (
        select(SavedProperty)
        .join(Property, Property.property_id == SavedProperty.property_id)
        .where(SavedProperty.user_id == p.user_id)
    )
    page = SAVED_PROPERTY_SEARCH.fetch(db, scoped, params)

    ids = [r.property_id for r in page.items]
    primary: dict[str, str] = {}
    if ids:
        for ph in db.scalars(
            select(PropertyPhoto)
            .where(PropertyPhoto.property_id.in_(ids), PropertyPhoto.is_primary.is_(True))
            .order_by(PropertyPhoto.photo_order.asc(), PropertyPhoto.created_at.asc(), PropertyPhoto.photo_id.asc())
        ).all():
            primary.setdefault(ph.property_id, ph.photo_url)

    return page.envelope("saved_properties", [_saved_out(r, primary) for r in page.items])


@router.post("", response_model=SavedPropertyOut, status_code=201)
def save_property(payload: SavedPropertyCreate, db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    existing = db.scalar(
        select(SavedProperty).where(SavedProperty.user_id == p.user_id, SavedProperty.property_id == payload.property_id)
    )
    if existing:
        raise DuplicateSave()
    must_get_property(db, property_id=payload.property_id)

    row = SavedProperty(user_id=p.user_id, property_id=payload.property_id, notes=payload.notes)
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateSave()
    db.refresh(row)

    bump_listing_counter(db, property_id=payload.property_id, counter="favorite_count")
    bump_daily(db, property_id=payload.property_id, field="favorites_count")
    log.info("property saved", extra={"user_id": p.user_id, "property_id": payload.property_id})
    return SavedPropertyOut.model_validate(row).model_dump()


@router.put("/{saved_property_id}", response_model=SavedPropertyOut)
def update_saved(
    saved_property_id: str,
    payload: SavedPropertyUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_user),
):
    row = must_own_saved_property(db, user_id=p.user_id, saved_property_id=saved_property_id)
    row.notes = payload.notes
    db.commit()
    db.refresh(row)
    return SavedPropertyOut.model_validate(row).model_dump()


@router.delete("/{saved_property_id}", response_model=MessageOut)
def remove_saved(saved_property_id: str, db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    row = must_own_saved_property(db, user_id=p.user_id, saved_property_id=saved_property_id)
    property_id = row.property_id
    db.delete(row)
    db.commit()

    bump_listing_counter(db, property_id=property_id, counter="favorite_count", delta=-1)
    return {"success": True, "message": "Property removed from favorites"}
