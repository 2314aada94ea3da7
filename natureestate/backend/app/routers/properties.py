# backend/app/routers/properties.py
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Optional

from fastapi import APIRouter, Depends, Header, Query, Request
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..auth import Principal, optional_user, require_user
from ..db import get_db
from ..models import (
    Property,
    PropertyAnalytics,
    PropertyInquiry,
    PropertyPhoto,
    PropertyView,
    SearchHistory,
    utcnow,
)
from ..schemas import (
    InquiryCreate,
    MessageOut,
    PhotoCreate,
    PhotoOut,
    PhotoUpdate,
    PropertyAnalyticsOut,
    PropertyCreate,
    PropertyOut,
    PropertyUpdate,
    PropertyViewCreate,
    UserPublicOut,
)
from ..services.analytics import bump_daily, bump_listing_counter
from ..services.inquiries import create_inquiry, inquiry_out
from ..services.ownership import must_get_photo, must_get_property, must_own_property
from ..services.query_builder import SearchParams, parse_datetime
from ..services.search_specs import PROPERTY_INQUIRY_SEARCH, PROPERTY_SEARCH

log = logging.getLogger("natureestate.properties")

router = APIRouter(prefix="/properties", tags=["properties"])


def _primary_photos(db: Session, property_ids: list[str]) -> dict[str, dict[str, Any]]:
    if not property_ids:
        return {}
    rows = db.scalars(
        select(PropertyPhoto)
        .where(PropertyPhoto.property_id.in_(property_ids), PropertyPhoto.is_primary.is_(True))
        .order_by(PropertyPhoto.photo_order.asc(), PropertyPhoto.created_at.asc(), PropertyPhoto.photo_id.asc())
    ).all()
    out: dict[str, dict[str, Any]] = {}
    for r in rows:
        out.setdefault(r.property_id, {"photo_url": r.photo_url, "caption": r.caption})
    return out


def _record_search(db: Session, *, user_id: str, params: SearchParams, total: int) -> None:
    v = params.values
    db.add(
        SearchHistory(
            user_id=user_id,
            search_query=v.get("query"),
            country=v.get("country"),
            property_type=v.get("property_type"),
            price_min=v.get("price_min"),
            price_max=v.get("price_max"),
            bedrooms_min=v.get("bedrooms_min"),
            bathrooms_min=v.get("bathrooms_min"),
            square_footage_min=v.get("square_footage_min"),
            square_footage_max=v.get("square_footage_max"),
            land_size_min=v.get("land_size_min"),
            land_size_max=v.get("land_size_max"),
            natural_features=v.get("natural_features"),
            outdoor_amenities=v.get("outdoor_amenities"),
            location_text=v.get("location_text"),
            sort_by=params.sort_key,
            results_count=total,
        )
    )
    db.commit()


def _set_primary(db: Session, *, property_id: str, keep_photo_id: str) -> None:
    db.execute(
        update(PropertyPhoto)
        .where(PropertyPhoto.property_id == property_id, PropertyPhoto.photo_id != keep_photo_id)
        .values(is_primary=False)
    )


@router.get("")
def search_properties(
    request: Request,
    db: Session = Depends(get_db),
    p: Optional[Principal] = Depends(optional_user),
):
    """
    Filterable, sortable, paginated listing search.

    Recognized filters: query, country, region, city, property_type, status,
    price_min/max, bedrooms_min, bathrooms_min, square_footage_min/max,
    land_size_min/max, year_built_min/max, natural_features,
    outdoor_amenities, location_text, is_featured.
    Sort: sort_by=created_at|price|view_count|title|square_footage, sort_order=asc|desc.
    """
    params = PROPERTY_SEARCH.parse(request.query_params)
    page = PROPERTY_SEARCH.fetch(db, select(Property), params)

    photos = _primary_photos(db, [r.property_id for r in page.items])
    items = []
    for r in page.items:
        d = PropertyOut.model_validate(r).model_dump()
        d["primary_photo"] = photos.get(r.property_id)
        items.append(d)

    if p is not None:
        _record_search(db, user_id=p.user_id, params=params, total=page.total_count)

    return page.envelope("properties", items)


@router.post("", response_model=PropertyOut, status_code=201)
def create_property(payload: PropertyCreate, db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    now = utcnow()
    row = Property(**payload.model_dump(exclude_none=True))
    row.user_id = p.user_id
    row.status = "active"
    row.created_at = now
    row.updated_at = now
    row.expires_at = now + timedelta(days=int(row.listing_duration_days or 90))
    db.add(row)
    db.commit()
    db.refresh(row)
    log.info("property created", extra={"user_id": p.user_id, "property_id": row.property_id})
    return PropertyOut.model_validate(row).model_dump()


@router.get("/{property_id}")
def get_property(
    property_id: str,
    request: Request,
    db: Session = Depends(get_db),
    p: Optional[Principal] = Depends(optional_user),
    x_session_id: Optional[str] = Header(default=None, alias="X-Session-Id"),
):
    row = must_get_property(db, property_id=property_id)

    # counter and view log commit separately
    bump_listing_counter(db, property_id=property_id, counter="view_count")
    if p is not None or x_session_id:
        db.add(
            PropertyView(
                property_id=property_id,
                user_id=p.user_id if p else None,
                session_id=x_session_id,
                ip_address=request.client.host if request.client else None,
                user_agent=request.headers.get("User-Agent"),
                referrer_url=request.headers.get("Referer"),
            )
        )
        db.commit()
    bump_daily(db, property_id=property_id, field="views_count")

    db.refresh(row)
    out = PropertyOut.model_validate(row).model_dump()
    out["owner"] = UserPublicOut.model_validate(row.owner).model_dump()
    out["photos"] = [PhotoOut.model_validate(ph).model_dump() for ph in row.photos]
    return out


def _apply_update(db: Session, row: Property, payload: PropertyUpdate) -> Property:
    data = payload.model_dump(exclude_unset=True)
    for k, v in data.items():
        if v is None and not Property.__table__.c[k].nullable:
            continue
        setattr(row, k, v)
    if data.get("listing_duration_days"):
        row.expires_at = row.created_at + timedelta(days=int(row.listing_duration_days))
    row.updated_at = utcnow()
    db.commit()
    db.refresh(row)
    return row


@router.put("/{property_id}", response_model=PropertyOut)
def update_property(
    property_id: str,
    payload: PropertyUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_user),
):
    row = must_own_property(db, user_id=p.user_id, property_id=property_id)
    row = _apply_update(db, row, payload)
    return PropertyOut.model_validate(row).model_dump()


@router.patch("/{property_id}", response_model=PropertyOut)
def patch_property(
    property_id: str,
    payload: PropertyUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_user),
):
    row = must_own_property(db, user_id=p.user_id, property_id=property_id)
    row = _apply_update(db, row, payload)
    return PropertyOut.model_validate(row).model_dump()


@router.delete("/{property_id}", response_model=MessageOut)
def delete_property(property_id: str, db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    row = must_own_property(db, user_id=p.user_id, property_id=property_id)
    db.delete(row)
    db.commit()
    log.info("property deleted", extra={"user_id": p.user_id, "property_id": property_id})
    return {"success": True, "message": "Property deleted successfully"}


@router.post("/{property_id}/view", response_model=MessageOut, status_code=201)
def track_view(
    property_id: str,
    payload: PropertyViewCreate,
    request: Request,
    db: Session = Depends(get_db),
    p: Optional[Principal] = Depends(optional_user),
    x_session_id: Optional[str] = Header(default=None, alias="X-Session-Id"),
):
    must_get_property(db, property_id=property_id)
    db.add(
        PropertyView(
            property_id=property_id,
            user_id=p.user_id if p else None,
            session_id=payload.session_id or x_session_id,
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("User-Agent"),
            referrer_url=payload.referrer_url,
            view_duration_seconds=payload.view_duration_seconds,
        )
    )
    db.commit()
    return {"success": True, "message": "Property view tracked"}


@router.get("/{property_id}/analytics", response_model=list[PropertyAnalyticsOut])
def property_analytics(
    property_id: str,
    date_from: Optional[str] = Query(default=None),
    date_to: Optional[str] = Query(default=None),
    limit: int = Query(default=30, ge=1, le=365),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    p: Principal = Depends(require_user),
):
    must_own_property(db, user_id=p.user_id, property_id=property_id)

    q = select(PropertyAnalytics).where(PropertyAnalytics.property_id == property_id)
    if date_from:
        q = q.where(PropertyAnalytics.date >= parse_datetime("date_from", date_from).date())
    if date_to:
        q = q.where(PropertyAnalytics.date <= parse_datetime("date_to", date_to).date())
    q = q.order_by(PropertyAnalytics.date.desc()).limit(limit).offset(offset)
    return [PropertyAnalyticsOut.model_validate(r).model_dump() for r in db.scalars(q).all()]


# -------------------- Photos --------------------

@router.get("/{property_id}/photos", response_model=list[PhotoOut])
def list_photos(property_id: str, db: Session = Depends(get_db)):
    row = must_get_property(db, property_id=property_id)
    return [PhotoOut.model_validate(ph).model_dump() for ph in row.photos]


@router.post("/{property_id}/photos", response_model=PhotoOut, status_code=201)
def add_photo(
    property_id: str,
    payload: PhotoCreate,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_user),
):
    must_own_property(db, user_id=p.user_id, property_id=property_id)
    ph = PropertyPhoto(property_id=property_id, **payload.model_dump(exclude_none=True))
    db.add(ph)
    db.flush()
    if ph.is_primary:
        _set_primary(db, property_id=property_id, keep_photo_id=ph.photo_id)
    db.commit()
    db.refresh(ph)
    return PhotoOut.model_validate(ph).model_dump()


@router.put("/{property_id}/photos/{photo_id}", response_model=PhotoOut)
def update_photo(
    property_id: str,
    photo_id: str,
    payload: PhotoUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_user),
):
    must_own_property(db, user_id=p.user_id, property_id=property_id)
    ph = must_get_photo(db, property_id=property_id, photo_id=photo_id)
    for k, v in payload.model_dump(exclude_unset=True).items():
        if v is None and k in ("photo_order", "is_primary"):
            continue
        setattr(ph, k, v)
    if ph.is_primary:
        _set_primary(db, property_id=property_id, keep_photo_id=ph.photo_id)
    db.commit()
    db.refresh(ph)
    return PhotoOut.model_validate(ph).model_dump()


@router.delete("/{property_id}/photos/{photo_id}", response_model=MessageOut)
def delete_photo(
    property_id: str,
    photo_id: str,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_user),
):
    must_own_property(db, user_id=p.user_id, property_id=property_id)
    ph = must_get_photo(db, property_id=property_id, photo_id=photo_id)
    db.delete(ph)
    db.commit()
    return {"success": True, "message": "Photo deleted successfully"}


# -------------------- Inquiries on a listing --------------------

@router.get("/{property_id}/inquiries")
def list_property_inquiries(
    property_id: str,
    request: Request,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_user),
):
    must_own_property(db, user_id=p.user_id, property_id=property_id)
    params = PROPERTY_INQUIRY_SEARCH.parse(request.query_params)
    page = PROPERTY_INQUIRY_SEARCH.fetch(
        db, select(PropertyInquiry).where(PropertyInquiry.property_id == property_id), params
    )
    return page.envelope("inquiries", [inquiry_out(r) for r in page.items])


@router.post("/{property_id}/inquiries", status_code=201)
def create_property_inquiry(
    property_id: str,
    payload: InquiryCreate,
    db: Session = Depends(get_db),
    p: Optional[Principal] = Depends(optional_user),
):
    prop = must_get_property(db, property_id=property_id)
    row = create_inquiry(db, prop=prop, payload=payload, sender=p)
    return inquiry_out(row)
