from __future__ import annotations

from typing import Optional
from email.message import EmailMessage

from framework.config import settings
from framework.logging.logger import get_logger

logger = get_logger("notifier")


async def send_email(email_to: Optional[str], subject: str, body: str, kind: str = "generic") -> bool:
    """
    Outbound mail.
    - email_to empty: do not send, return False
    - NOTIFICATION_DRIVER=mock: log only, return True
    - NOTIFICATION_DRIVER=email: send via SMTP
    Never raises; callers treat mail as best effort.
    """
    if not email_to:
        return False

    driver = (settings.NOTIFICATION_DRIVER or "mock").lower()

    if driver == "mock":
        logger.info(f"[MOCK] send {kind} email to={email_to} subject={subject!r}")
        logger.debug(f"[MOCK] {kind} email body:\n{body}")
        return True

    if driver != "email":
        logger.warning(f"Unsupported NOTIFICATION_DRIVER={settings.NOTIFICATION_DRIVER!r}, skip sending")
        return False

    if not settings.SMTP_HOST or not settings.SMTP_USER or not settings.SMTP_PASSWORD:
        logger.warning("SMTP not configured (SMTP_HOST/SMTP_USER/SMTP_PASSWORD missing), skip sending")
        return False

    msg = EmailMessage()
    msg["From"] = settings.SMTP_USER
    msg["To"] = email_to
    msg["Subject"] = subject
    msg.set_content(body)

    try:
        import aiosmtplib

        await aiosmtplib.send(
            msg,
            hostname=settings.SMTP_HOST,
            port=settings.SMTP_PORT or 587,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            start_tls=True,
        )
        logger.info(f"{kind} email sent to={email_to}")
        return True
    except Exception as e:
        logger.warning(f"Failed to send {kind} email to={email_to}: {str(e)}")
        return False


async def notify_email_verification(email_to: str, full_name: Optional[str], link: str) -> bool:
    subject = f"[{settings.APP_NAME}] Confirm your email"
    body = (
        f"Hi {full_name or 'there'},\n\n"
        f"Thanks for signing up to {settings.APP_NAME}. Confirm your email address by opening the link below:\n\n"
        f"{link}\n\n"
        f"The link expires in {settings.EMAIL_VERIFICATION_EXPIRE_MINUTES // 60} hours.\n"
    )
    return await send_email(email_to, subject, body, kind="verification")


async def notify_password_reset(email_to: str, link: str) -> bool:
    subject = f"[{settings.APP_NAME}] Reset your password"
    body = (
        "We received a request to reset your password.\n\n"
        f"{link}\n\n"
        f"The link expires in {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes. "
        "If you did not ask for this, ignore this email.\n"
    )
    return await send_email(email_to, subject, body, kind="password_reset")
