# backend/app/routers/notifications.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..auth import Principal, require_user
from ..db import get_db
from ..models import Notification
from ..schemas import MessageOut, NotificationOut
from ..services.ownership import must_own_notification
from ..services.search_specs import NOTIFICATION_SEARCH

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
def list_notifications(request: Request, db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    params = NOTIFICATION_SEARCH.parse(request.query_params)
    scoped = select(Notification).where(Notification.user_id == p.user_id)
    page = NOTIFICATION_SEARCH.fetch(db, scoped, params)

    # same filters, restricted to unread
    unread = NOTIFICATION_SEARCH.count(
        db, NOTIFICATION_SEARCH.apply(scoped, params).where(Notification.is_read.is_(False))
    )
    return page.envelope(
        "notifications",
        [NotificationOut.model_validate(r).model_dump() for r in page.items],
        unread_count=unread,
    )


@router.put("/mark-all-read", response_model=MessageOut)
def mark_all_read(db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    db.execute(
        update(Notification)
        .where(Notification.user_id == p.user_id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    db.commit()
    return {"success": True, "message": "All notifications marked as read"}


@router.put("/{notification_id}/read", response_model=MessageOut)
def mark_read(notification_id: str, db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    row = must_own_notification(db, user_id=p.user_id, notification_id=notification_id)
    row.is_read = True
    db.commit()
    return {"success": True, "message": "Notification marked as read"}
