# backend/app/services/inquiries.py
from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from ..auth import Principal
from ..errors import NotFoundError
from ..models import Property, PropertyInquiry
from ..schemas import InquiryCreate, InquiryOut
from .analytics import bump_daily, bump_listing_counter
from .notifications import notify

log = logging.getLogger("natureestate.inquiries")


def inquiry_out(row: PropertyInquiry) -> dict[str, Any]:
    out = InquiryOut.model_validate(row).model_dump()
    prop = row.property
    out["property_title"] = prop.title if prop else None
    out["property_price"] = prop.price if prop else None
    out["property_country"] = prop.country if prop else None
    return out


def create_inquiry(
    db: Session,
    *,
    prop: Property,
    payload: InquiryCreate,
    sender: Optional[Principal],
) -> PropertyInquiry:
    if prop.status != "active":
        raise NotFoundError("property not found or not available")

    row = PropertyInquiry(
        property_id=prop.property_id,
        sender_user_id=sender.user_id if sender else None,
        recipient_user_id=prop.user_id,
        sender_name=payload.sender_name,
        sender_email=str(payload.sender_email),
        sender_phone=payload.sender_phone,
        message=payload.message,
        status="unread",
        is_interested_in_viewing=payload.is_interested_in_viewing,
        wants_similar_properties=payload.wants_similar_properties,
        priority=payload.priority,
    )
    db.add(row)
    db.commit()
    db.refresh(row)

    bump_listing_counter(db, property_id=prop.property_id, counter="inquiry_count")
    bump_daily(db, property_id=prop.property_id, field="inquiries_count")

    notify(
        db,
        user_id=prop.user_id,
        type="inquiry",
        title="New Property Inquiry",
        message=f"You have received a new inquiry for {prop.title} from {payload.sender_name}",
        related_property_id=prop.property_id,
        related_inquiry_id=row.inquiry_id,
        action_url=f"/inquiries/{row.inquiry_id}",
        priority=payload.priority,
        send_mail=True,
    )
    log.info("inquiry created", extra={"property_id": prop.property_id, "inquiry_id": row.inquiry_id})
    return row
