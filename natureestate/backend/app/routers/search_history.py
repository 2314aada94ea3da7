# backend/app/routers/search_history.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..auth import Principal, optional_user, require_user
from ..db import get_db
from ..models import SearchHistory
from ..schemas import SearchHistoryCreate, SearchHistoryOut

router = APIRouter(prefix="/search-history", tags=["search-history"])


@router.get("", response_model=list[SearchHistoryOut])
def list_search_history(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    p: Principal = Depends(require_user),
):
    q = (
        select(SearchHistory)
        .where(SearchHistory.user_id == p.user_id)
        .order_by(desc(SearchHistory.created_at), SearchHistory.search_id.asc())
        .limit(limit)
        .offset(offset)
    )
    return [SearchHistoryOut.model_validate(r).model_dump() for r in db.scalars(q).all()]


@router.post("", response_model=SearchHistoryOut, status_code=201)
def record_search(
    payload: SearchHistoryCreate,
    db: Session = Depends(get_db),
    p: Optional[Principal] = Depends(optional_user),
):
    row = SearchHistory(user_id=p.user_id if p else None, **payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    return SearchHistoryOut.model_validate(row).model_dump()
