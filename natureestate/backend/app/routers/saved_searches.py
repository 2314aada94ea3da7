# backend/app/routers/saved_searches.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..auth import Principal, require_user
from ..db import get_db
from ..models import SavedSearch, utcnow
from ..schemas import MessageOut, SavedSearchCreate, SavedSearchOut, SavedSearchUpdate
from ..services.ownership import must_own_saved_search

router = APIRouter(prefix="/saved-searches", tags=["saved-searches"])

_NOT_NULL = ("search_name", "alert_frequency", "is_active")


@router.get("", response_model=list[SavedSearchOut])
def list_saved_searches(db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    rows = db.scalars(
        select(SavedSearch)
        .where(SavedSearch.user_id == p.user_id)
        .order_by(SavedSearch.created_at.desc(), SavedSearch.saved_search_id.asc())
    ).all()
    return [SavedSearchOut.model_validate(r).model_dump() for r in rows]


@router.post("", response_model=SavedSearchOut, status_code=201)
def create_saved_search(payload: SavedSearchCreate, db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    row = SavedSearch(user_id=p.user_id, **payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    return SavedSearchOut.model_validate(row).model_dump()


@router.put("/{saved_search_id}", response_model=SavedSearchOut)
def update_saved_search(
    saved_search_id: str,
    payload: SavedSearchUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_user),
):
    row = must_own_saved_search(db, user_id=p.user_id, saved_search_id=saved_search_id)
    for k, v in payload.model_dump(exclude_unset=True).items():
        if v is None and k in _NOT_NULL:
            continue
        setattr(row, k, v)
    row.updated_at = utcnow()
    db.commit()
    db.refresh(row)
    return SavedSearchOut.model_validate(row).model_dump()


@router.delete("/{saved_search_id}", response_model=MessageOut)
def delete_saved_search(saved_search_id: str, db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    row = must_own_saved_search(db, user_id=p.user_id, saved_search_id=saved_search_id)
    db.delete(row)
    db.commit()
    return {"success": True, "message": "Saved search deleted successfully"}
