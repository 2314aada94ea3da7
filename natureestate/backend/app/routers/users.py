# backend/app/routers/users.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import Principal, require_user
from ..db import get_db
from ..errors import NotFoundError, UnknownUser
from ..models import User
from ..schemas import MessageOut, UserOut, UserPublicOut, UserUpdate

log = logging.getLogger("natureestate.users")

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserOut)
def get_me(db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    user = db.get(User, p.user_id)
    if user is None:
        raise UnknownUser()
    return UserOut.model_validate(user).model_dump()


@router.put("/me", response_model=UserOut)
def update_me(payload: UserUpdate, db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    user = db.get(User, p.user_id)
    if user is None:
        raise UnknownUser()

    for k, v in payload.model_dump(exclude_unset=True).items():
        if k in ("name", "user_type") and v is None:
            continue
        setattr(user, k, v)
    db.commit()
    db.refresh(user)
    return UserOut.model_validate(user).model_dump()


@router.delete("/me", response_model=MessageOut)
def delete_me(db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    user = db.get(User, p.user_id)
    if user is None:
        raise UnknownUser()
    # listings, sessions, saves, notifications go with the user (ON DELETE CASCADE)
    db.delete(user)
    db.commit()
    log.info("user deleted", extra={"user_id": p.user_id})
    return {"success": True, "message": "Account deleted successfully"}


@router.get("/{user_id}", response_model=UserPublicOut)
def get_user(user_id: str, db: Session = Depends(get_db)):
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("user not found")
    return UserPublicOut.model_validate(user).model_dump()
