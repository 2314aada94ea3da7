# backend/app/auth.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from .config import Settings
from .db import get_db, get_settings
from .models import User
from .services import auth_service


@dataclass(frozen=True)
class Principal:
    user_id: str
    email: str
    name: str
    user_type: str  # buyer | seller | agent | admin
    token: str


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, value = str(authorization).strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    value = value.strip()
    return value or None


def _principal(user: User, token: str) -> Principal:
    return Principal(
        user_id=str(user.user_id),
        email=str(user.email),
        name=str(user.name),
        user_type=str(user.user_type),
        token=token,
    )


def require_user(
    request: Request,
    db: Session = Depends(get_db),
    cfg: Settings = Depends(get_settings),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> Principal:
    """
    Authorization: Bearer <token>

      missing token          -> 401 missing_token
      bad/expired/revoked    -> 403 invalid_token
      user deleted since     -> 401 unknown_user
    """
    token = bearer_token(authorization)
    user = auth_service.verify_request(db, cfg, token)
    p = _principal(user, str(token))
    # picked up by the request log line
    request.state.user_id = p.user_id
    return p


def optional_user(
    request: Request,
    db: Session = Depends(get_db),
    cfg: Settings = Depends(get_settings),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> Principal | None:
    token = bearer_token(authorization)
    user = auth_service.optional_verify_request(db, cfg, token)
    if user is None:
        return None
    p = _principal(user, str(token))
    request.state.user_id = p.user_id
    return p
