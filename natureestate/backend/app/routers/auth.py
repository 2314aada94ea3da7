# backend/app/routers/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..auth import Principal, require_user
from ..config import Settings
from ..db import get_db, get_settings
from ..schemas import (
    AuthOut,
    ForgotPasswordIn,
    MessageOut,
    RefreshIn,
    ResetPasswordIn,
    UserCreate,
    UserLogin,
    UserOut,
    VerifyEmailIn,
)
from ..services import auth_service
from ..services.auth_service import AuthResult

router = APIRouter(prefix="/auth", tags=["auth"])


def _client(request: Request) -> tuple[str | None, str | None]:
    ua = request.headers.get("User-Agent")
    ip = request.client.host if request.client else None
    return ua, ip


def _auth_out(res: AuthResult) -> dict:
    return AuthOut(
        user=UserOut.model_validate(res.user),
        token=res.token,
        refresh_token=res.refresh_token,
        expires_at=res.expires_at,
    ).model_dump()


@router.post("/register", response_model=AuthOut, status_code=201)
def register(
    payload: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    cfg: Settings = Depends(get_settings),
):
    ua, ip = _client(request)
    res = auth_service.register(
        db,
        cfg,
        email=str(payload.email),
        password=payload.password,
        name=payload.name,
        phone=payload.phone,
        user_type=payload.user_type,
        countries_of_interest=payload.countries_of_interest,
        notification_preferences=payload.notification_preferences,
        device_info=ua,
        ip_address=ip,
    )
    return _auth_out(res)


@router.post("/login", response_model=AuthOut)
def login(
    payload: UserLogin,
    request: Request,
    db: Session = Depends(get_db),
    cfg: Settings = Depends(get_settings),
):
    ua, ip = _client(request)
    res = auth_service.authenticate(
        db, cfg, email=str(payload.email), password=payload.password, device_info=ua, ip_address=ip
    )
    return _auth_out(res)


@router.post("/logout", response_model=MessageOut)
def logout(db: Session = Depends(get_db), p: Principal = Depends(require_user)):
    auth_service.revoke(db, token=p.token)
    return {"success": True, "message": "Logged out successfully"}


@router.post("/refresh-token", response_model=AuthOut)
def refresh_token(
    payload: RefreshIn,
    db: Session = Depends(get_db),
    cfg: Settings = Depends(get_settings),
):
    res = auth_service.refresh(db, cfg, refresh_token=payload.refresh_token)
    return _auth_out(res)


@router.post("/forgot-password", response_model=MessageOut)
def forgot_password(
    payload: ForgotPasswordIn,
    db: Session = Depends(get_db),
    cfg: Settings = Depends(get_settings),
):
    auth_service.request_password_reset(db, cfg, email=str(payload.email))
    return {"success": True, "message": "If the email exists, a reset link has been sent"}


@router.post("/reset-password", response_model=MessageOut)
def reset_password(
    payload: ResetPasswordIn,
    db: Session = Depends(get_db),
    cfg: Settings = Depends(get_settings),
):
    auth_service.reset_password(db, cfg, token=payload.token, password=payload.password)
    return {"success": True, "message": "Password reset successfully"}


@router.post("/verify-email", response_model=MessageOut)
def verify_email(payload: VerifyEmailIn, db: Session = Depends(get_db)):
    auth_service.verify_email(db, token=payload.token)
    return {"success": True, "message": "Email verified successfully"}
