# backend/app/services/notifications.py
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..models import Notification, User, utcnow
from .email import send_email

log = logging.getLogger("natureestate.notifications")


def notify(
    db: Session,
    *,
    user_id: str,
    type: str,
    title: str,
    message: str,
    related_property_id: Optional[str] = None,
    related_inquiry_id: Optional[str] = None,
    action_url: Optional[str] = None,
    priority: str = "normal",
    send_mail: bool = False,
) -> Notification:
    """
    Persist an in-app notification; optionally mirror it by (mocked) email.
    Commits on its own, so a failure here never rolls back the caller's write.
    """
    row = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        related_property_id=related_property_id,
        related_inquiry_id=related_inquiry_id,
        action_url=action_url,
        priority=priority,
        is_read=False,
        is_email_sent=False,
    )
    db.add(row)
    db.commit()

    if send_mail:
        user = db.get(User, user_id)
        if user is not None:
            receipt = send_email(to=user.email, subject=title, body=message, kind=f"notification:{type}")
            if receipt.success:
                row.is_email_sent = True
                row.email_sent_at = utcnow()
                db.commit()

    log.info("notification created", extra={"user_id": user_id, "notification_type": type})
    return row
