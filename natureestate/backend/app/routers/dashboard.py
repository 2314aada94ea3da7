# backend/app/routers/dashboard.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import Principal, require_user
from ..db import get_db
from ..services.dashboard import stats_for

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=dict)
def dashboard_stats(db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    """
    Top-of-dashboard cards.

    sellers/agents: listing aggregates, unread inquiries, recent inquiries + views
    buyers/admins:  saved properties, sent inquiries, saved searches, recent activity
    """
    return stats_for(db, user_id=p.user_id, user_type=p.user_type).as_dict()
