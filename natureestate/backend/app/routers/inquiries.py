# backend/app/routers/inquiries.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from ..auth import Principal, require_user
from ..db import get_db
from ..models import InquiryResponse, PropertyInquiry, utcnow
from ..schemas import InquiryResponseCreate, InquiryResponseOut, InquiryUpdate
from ..services.inquiries import inquiry_out
from ..services.ownership import must_receive_inquiry, must_see_inquiry
from ..services.search_specs import INQUIRY_SEARCH

router = APIRouter(prefix="/inquiries", tags=["inquiries"])


def _response_out(r: InquiryResponse) -> dict:
    out = InquiryResponseOut.model_validate(r).model_dump()
    out["sender_name"] = r.sender.name if r.sender else None
    out["sender_type"] = r.sender.user_type if r.sender else None
    return out


@router.get("")
def list_inquiries(request: Request, db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    """Inquiries the caller sent or received. Filters: property_id, status, priority, is_interested_in_viewing, date_from, date_to."""
    params = INQUIRY_SEARCH.parse(request.query_params)
    scoped = select(PropertyInquiry).where(
        or_(PropertyInquiry.sender_user_id == p.user_id, PropertyInquiry.recipient_user_id == p.user_id)
    )
    page = INQUIRY_SEARCH.fetch(db, scoped, params)
    return page.envelope("inquiries", [inquiry_out(r) for r in page.items])


@router.get("/{inquiry_id}")
def get_inquiry(inquiry_id: str, db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    row = must_see_inquiry(db, user_id=p.user_id, inquiry_id=inquiry_id)
    if row.recipient_user_id == p.user_id and row.status == "unread":
        row.status = "read"
        row.updated_at = utcnow()
        db.commit()
        db.refresh(row)
    return inquiry_out(row)


@router.put("/{inquiry_id}")
def update_inquiry(
    inquiry_id: str,
    payload: InquiryUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_user),
):
    row = must_receive_inquiry(db, user_id=p.user_id, inquiry_id=inquiry_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("status"):
        row.status = data["status"]
    if data.get("priority"):
        row.priority = data["priority"]
    if "response_message" in data:
        row.response_message = data["response_message"]
        if data["response_message"]:
            row.responded_at = utcnow()
    row.updated_at = utcnow()
    db.commit()
    db.refresh(row)
    return inquiry_out(row)


@router.get("/{inquiry_id}/responses")
def list_responses(inquiry_id: str, db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    must_see_inquiry(db, user_id=p.user_id, inquiry_id=inquiry_id)
    rows = db.scalars(
        select(InquiryResponse)
        .where(InquiryResponse.inquiry_id == inquiry_id)
        .order_by(InquiryResponse.created_at.asc(), InquiryResponse.response_id.asc())
    ).all()
    return [_response_out(r) for r in rows]


@router.post("/{inquiry_id}/responses", status_code=201)
def create_response(
    inquiry_id: str,
    payload: InquiryResponseCreate,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_user),
):
    inquiry = must_see_inquiry(db, user_id=p.user_id, inquiry_id=inquiry_id)

    r = InquiryResponse(
        inquiry_id=inquiry_id,
        sender_user_id=p.user_id,
        message=payload.message,
        attachments=payload.attachments,
        is_read=False,
    )
    db.add(r)
    inquiry.status = "responded"
    inquiry.updated_at = utcnow()
    db.commit()
    db.refresh(r)
    return _response_out(r)
