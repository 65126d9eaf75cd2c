"""Email delivery for one-time codes, over SMTP with STARTTLS."""
from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Callable

from app.core.config import settings

logger = logging.getLogger(__name__)

VERIFICATION = "Verification"
PASSWORD_RESET = "Password Reset"

# (to, otp, purpose) -> delivered?
OTPSender = Callable[[str, str, str], bool]


def _build_smtp_connection() -> smtplib.SMTP:
    """Open an authenticated SMTP TLS connection."""
    conn = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=15)
    conn.ehlo()
    conn.starttls()
    conn.ehlo()
    if settings.SMTP_USER:
        conn.login(settings.SMTP_USER, settings.SMTP_PASS)
    return conn


def send_email(to: str, subject: str, html_body: str, plain_body: str = "") -> bool:
    """
    Send a transactional email. Returns True on success, False on failure.

    Failures are logged and reported to the caller, never retried here.
    """
    try:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"Social <{settings.EMAIL_FROM}>"
        msg["To"] = to

        if plain_body:
            msg.attach(MIMEText(plain_body, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        with _build_smtp_connection() as conn:
            conn.sendmail(settings.EMAIL_FROM, [to], msg.as_string())

        logger.info(f"[Email] Sent '{subject}' → {to}")
        return True

    except (smtplib.SMTPException, OSError) as exc:
        logger.error(f"[Email] Failed to send '{subject}' to {to}: {exc}")
        return False


# ── Convenience senders ───────────────────────────────────────────────────────

def send_otp_email(to: str, otp: str, purpose: str = VERIFICATION) -> bool:
    """Send a 6-digit OTP, worded for email verification or password reset."""
    if purpose == PASSWORD_RESET:
        subject = "Social - Password Reset OTP"
        message = "Your OTP for password reset is:"
    else:
        subject = "Social - OTP Verification"
        message = "Your OTP for email verification is:"

    html_body = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #0095f6;">Social</h2>
  <p>{message}</p>
  <h1 style="color: #0095f6; font-size: 32px; letter-spacing: 5px;">{otp}</h1>
  <p>This OTP will expire in {settings.OTP_EXPIRE_MINUTES} minutes.</p>
  <p>If you didn't request this, please ignore this email.</p>
</div>
"""
    plain_body = f"{message} {otp}\n\nExpires in {settings.OTP_EXPIRE_MINUTES} minutes."
    return send_email(to, subject, html_body, plain_body)


def get_otp_sender() -> OTPSender:
    """FastAPI dependency returning the OTP dispatcher (overridden in tests)."""
    return send_otp_email
