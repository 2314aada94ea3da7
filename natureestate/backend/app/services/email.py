# backend/app/services/email.py
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

log = logging.getLogger("natureestate.email")


@dataclass(frozen=True)
class EmailReceipt:
    success: bool
    message_id: str


def send_email(*, to: str, subject: str, body: str, kind: str = "generic") -> EmailReceipt:
    """
    Delivery is mocked: the message is logged and acknowledged.
    Swap this for an SMTP/provider client when real delivery is wired.
    """
    message_id = f"mock-{uuid.uuid4()}"
    log.info("email queued", extra={"email_kind": kind, "to": to, "subject": subject, "message_id": message_id})
    return EmailReceipt(success=True, message_id=message_id)


def send_verification_email(*, to: str, name: str, token: str, frontend_url: str) -> EmailReceipt:
    link = f"{frontend_url.rstrip('/')}/verify-email?token={token}"
    return send_email(
        to=to,
        subject="Verify your NatureEstate account",
        body=f"Hi {name},\n\nConfirm your email address: {link}\n",
        kind="verify_email",
    )


def send_password_reset_email(*, to: str, token: str, frontend_url: str) -> EmailReceipt:
    link = f"{frontend_url.rstrip('/')}/reset-password?token={token}"
    return send_email(
        to=to,
        subject="Reset your NatureEstate password",
        body=f"A password reset was requested for this account.\n\nReset it here: {link}\n",
        kind="password_reset",
    )
