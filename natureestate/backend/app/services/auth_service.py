# backend/app/services/auth_service.py
from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt  # PyJWT

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import Settings
from ..errors import (
    DuplicateEmail,
    ExpiredSession,
    InvalidCredentials,
    InvalidRefreshToken,
    InvalidToken,
    MissingToken,
    UnknownUser,
    ValidationError,
)
from ..models import User, UserSession, new_id, utcnow
from .email import send_password_reset_email, send_verification_email

log = logging.getLogger("natureestate.auth")

MIN_PASSWORD_LEN = 8
MAX_PASSWORD_LEN = 128


def _now() -> datetime:
    return utcnow()


# -------------------------
# Passwords
# -------------------------
def hash_password(password: str, *, iterations: int = 210_000) -> str:
    salt = secrets.token_bytes(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, int(iterations))
    return f"pbkdf2_sha256${int(iterations)}${base64.b64encode(salt).decode()}${base64.b64encode(dk).decode()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        algo, iters_s, salt_b64, dk_b64 = stored.split("$", 3)
        if algo != "pbkdf2_sha256":
            return False
        salt = base64.b64decode(salt_b64.encode())
        dk = base64.b64decode(dk_b64.encode())
        test = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, int(iters_s))
    except (ValueError, TypeError):
        return False
    return hmac.compare_digest(test, dk)


def check_password_policy(password: str) -> None:
    if len(password) < MIN_PASSWORD_LEN or len(password) > MAX_PASSWORD_LEN:
        raise ValidationError(f"password must be {MIN_PASSWORD_LEN}-{MAX_PASSWORD_LEN} characters")


# -------------------------
# Tokens
# -------------------------
def hash_token(raw: str) -> str:
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def create_access_token(cfg: Settings, *, user: User, session_id: str) -> str:
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(user.user_id),
        "sid": str(session_id),
        "email": str(user.email),
        "jti": secrets.token_hex(8),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=int(cfg.access_token_minutes))).timestamp()),
    }
    return jwt.encode(payload, cfg.jwt_secret, algorithm=cfg.jwt_algorithm)


def decode_access_token(cfg: Settings, token: str) -> dict[str, Any]:
    return jwt.decode(token, cfg.jwt_secret, algorithms=[cfg.jwt_algorithm])


def new_refresh_token() -> str:
    return secrets.token_urlsafe(48)


@dataclass(frozen=True)
class AuthResult:
    user: User
    token: str
    refresh_token: str
    expires_at: datetime
    session_id: str


def _open_session(
    db: Session,
    cfg: Settings,
    user: User,
    *,
    device_info: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> AuthResult:
    now = _now()
    row = UserSession(
        session_id=new_id(),
        user_id=user.user_id,
        token_hash="",
        refresh_token_hash="",
        device_info=device_info,
        ip_address=ip_address,
        is_active=True,
        expires_at=now + timedelta(days=int(cfg.session_days)),
        created_at=now,
        last_activity_at=now,
    )
    token = create_access_token(cfg, user=user, session_id=row.session_id)
    refresh_token = new_refresh_token()
    row.token_hash = hash_token(token)
    row.refresh_token_hash = hash_token(refresh_token)

    db.add(row)
    db.commit()

    return AuthResult(
        user=user,
        token=token,
        refresh_token=refresh_token,
        expires_at=row.expires_at,
        session_id=row.session_id,
    )


def get_user_by_email(db: Session, email: str) -> User | None:
    email = (email or "").strip().lower()
    return db.scalar(select(User).where(func.lower(User.email) == email))


# -------------------------
# Operations
# -------------------------
def authenticate(
    db: Session,
    cfg: Settings,
    *,
    email: str,
    password: str,
    device_info: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> AuthResult:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        log.info("login rejected", extra={"email_domain": (email or "").rpartition("@")[2]})
        raise InvalidCredentials()

    user.last_login_at = _now()
    db.commit()

    out = _open_session(db, cfg, user, device_info=device_info, ip_address=ip_address)
    log.info("login", extra={"user_id": user.user_id})
    return out


def register(
    db: Session,
    cfg: Settings,
    *,
    email: str,
    password: str,
    name: str,
    phone: Optional[str] = None,
    user_type: str = "buyer",
    countries_of_interest: Optional[str] = None,
    notification_preferences: Optional[str] = None,
    device_info: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> AuthResult:
    email = (email or "").strip().lower()
    check_password_policy(password)

    if get_user_by_email(db, email):
        raise DuplicateEmail()

    user = User(
        email=email,
        password_hash=hash_password(password, iterations=cfg.pbkdf2_iterations),
        name=name.strip(),
        phone=phone,
        user_type=user_type,
        countries_of_interest=countries_of_interest,
        notification_preferences=notification_preferences,
        is_verified=False,
        email_verified=False,
        email_verification_token=secrets.token_urlsafe(32),
        last_login_at=_now(),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race against a concurrent registration
        db.rollback()
        raise DuplicateEmail()
    db.refresh(user)

    send_verification_email(
        to=user.email,
        name=user.name,
        token=str(user.email_verification_token),
        frontend_url=cfg.frontend_url,
    )

    out = _open_session(db, cfg, user, device_info=device_info, ip_address=ip_address)
    log.info("user registered", extra={"user_id": user.user_id})
    return out


def _decode(cfg: Settings, token: str) -> dict[str, Any]:
    try:
        claims = decode_access_token(cfg, token)
    except jwt.PyJWTError:
        raise InvalidToken()
    if not claims.get("sid") or not claims.get("sub"):
        raise InvalidToken("token missing claims")
    return claims


def _check_session(db: Session, claims: dict[str, Any], token: str) -> UserSession:
    sid = str(claims["sid"])
    sub = str(claims["sub"])
    sess = db.get(UserSession, sid)
    if sess is None or not sess.is_active or sess.user_id != sub:
        raise InvalidToken("session revoked")
    if not hmac.compare_digest(sess.token_hash, hash_token(token)):
        # rotated by refresh; only the newest bearer token is honoured
        raise InvalidToken("token superseded")
    if sess.expires_at < _now():
        raise InvalidToken("session expired")
    return sess


def verify_request(db: Session, cfg: Settings, token: Optional[str]) -> User:
    if not token:
        raise MissingToken()

    claims = _decode(cfg, token)
    user = db.get(User, str(claims["sub"]))
    if user is None:
        raise UnknownUser()
    _check_session(db, claims, token)
    return user


def optional_verify_request(db: Session, cfg: Settings, token: Optional[str]) -> User | None:
    if not token:
        return None
    try:
        return verify_request(db, cfg, token)
    except (InvalidToken, UnknownUser):
        return None


def refresh(db: Session, cfg: Settings, *, refresh_token: str) -> AuthResult:
    if not refresh_token:
        raise InvalidRefreshToken()

    old_hash = hash_token(refresh_token)
    sess = db.scalar(
        select(UserSession).where(
            UserSession.refresh_token_hash == old_hash,
            UserSession.is_active.is_(True),
        )
    )
    if sess is None:
        raise InvalidRefreshToken()

    now = _now()
    if sess.expires_at < now:
        sess.is_active = False
        db.commit()
        raise ExpiredSession()

    user = db.get(User, sess.user_id)
    if user is None:
        raise UnknownUser()

    session_id = sess.session_id
    token = create_access_token(cfg, user=user, session_id=session_id)
    new_refresh = new_refresh_token()
    expires_at = now + timedelta(days=int(cfg.session_days))

    # compare-and-swap on the old digest: of two concurrent refreshes only one rotates
    res = db.execute(
        update(UserSession)
        .where(
            UserSession.session_id == session_id,
            UserSession.refresh_token_hash == old_hash,
            UserSession.is_active.is_(True),
        )
        .values(
            token_hash=hash_token(token),
            refresh_token_hash=hash_token(new_refresh),
            expires_at=expires_at,
            last_activity_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    if res.rowcount != 1:
        db.rollback()
        log.warning("refresh token already rotated", extra={"user_id": sess.user_id, "session_id": session_id})
        raise InvalidRefreshToken()
    db.commit()

    log.info("session refreshed", extra={"user_id": user.user_id})
    return AuthResult(
        user=user,
        token=token,
        refresh_token=new_refresh,
        expires_at=expires_at,
        session_id=session_id,
    )


def revoke(db: Session, *, token: Optional[str]) -> None:
    """Deactivate the session behind `token`. Unknown or already-revoked tokens are a no-op."""
    if not token:
        return
    sess = db.scalar(select(UserSession).where(UserSession.token_hash == hash_token(token)))
    if sess is None or not sess.is_active:
        return
    sess.is_active = False
    sess.last_activity_at = _now()
    db.commit()
    log.info("session revoked", extra={"user_id": sess.user_id})


def revoke_all(db: Session, *, user_id: str) -> int:
    rows = list(
        db.scalars(select(UserSession).where(UserSession.user_id == user_id, UserSession.is_active.is_(True))).all()
    )
    for r in rows:
        r.is_active = False
    db.commit()
    return len(rows)


# -------------------------
# Account recovery / verification
# -------------------------
def request_password_reset(db: Session, cfg: Settings, *, email: str) -> None:
    user = get_user_by_email(db, email)
    if user is None:
        # same answer either way; nothing to do
        return
    user.password_reset_token = secrets.token_urlsafe(32)
    user.password_reset_expires = _now() + timedelta(minutes=int(cfg.password_reset_minutes))
    db.commit()
    send_password_reset_email(to=user.email, token=user.password_reset_token, frontend_url=cfg.frontend_url)


def reset_password(db: Session, cfg: Settings, *, token: str, password: str) -> User:
    check_password_policy(password)
    user = db.scalar(select(User).where(User.password_reset_token == token)) if token else None
    if user is None or user.password_reset_expires is None or user.password_reset_expires < _now():
        raise ValidationError("invalid or expired reset token")

    user.password_hash = hash_password(password, iterations=cfg.pbkdf2_iterations)
    user.password_reset_token = None
    user.password_reset_expires = None
    db.commit()
    # existing sessions were opened with the old password
    revoke_all(db, user_id=user.user_id)
    return user


def verify_email(db: Session, *, token: str) -> User:
    user = db.scalar(select(User).where(User.email_verification_token == token)) if token else None
    if user is None:
        raise ValidationError("invalid verification token")
    user.email_verified = True
    user.is_verified = True
    user.email_verification_token = None
    db.commit()
    return user
