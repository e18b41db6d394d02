"""Outbound email through the Resend API: contact-message replies and settings test emails."""

from __future__ import annotations

import html
import logging

import httpx

from library_cms.core.config import settings

logger = logging.getLogger(__name__)

RESEND_SEND_URL = "https://api.resend.com/emails"
RESEND_TIMEOUT_SECONDS = 20.0


def sender_configured() -> bool:
    return bool(settings.PLATFORM_RESEND_API_KEY and settings.PLATFORM_EMAIL_FROM)


def render_response_email(
    *,
    visitor_name: str,
    original_subject: str,
    response_message: str,
    library_name: str,
) -> str:
    """HTML body for a reply. All user-supplied text is escaped."""
    paragraphs = "".join(
        f"<p>{html.escape(line)}</p>" for line in response_message.splitlines() if line.strip()
    )
    return (
        f"<p>Dear {html.escape(visitor_name)},</p>"
        f"<p>Thank you for contacting {html.escape(library_name)} regarding "
        f"\"{html.escape(original_subject)}\".</p>"
        f"{paragraphs}"
        f"<p>Best regards,<br>{html.escape(library_name)}</p>"
    )


async def send_response_email(
    *,
    to_email: str,
    visitor_name: str,
    original_subject: str,
    subject: str,
    message: str,
    library_name: str,
) -> dict[str, object]:
    """
    Send a reply to a contact-form visitor.
    
    Returns {"success": bool, "message_id": str | None, "error": str | None}.
    Transport errors are reported in the result rather than raised.
    """
    payload = {
        "from": f"{library_name} <{settings.PLATFORM_EMAIL_FROM}>",
        "to": [to_email],
        "subject": subject,
        "html": render_response_email(
            visitor_name=visitor_name,
            original_subject=original_subject,
            response_message=message,
            library_name=library_name,
        ),
        "text": message,
    }
    return await _send(payload)


async def send_test_email(*, to_email: str, from_name: str) -> dict[str, object]:
    """Send a short message confirming the platform can deliver email."""
    text = "This is a test email from the Library Platform settings page."
    payload = {
        "from": f"{from_name} <{settings.PLATFORM_EMAIL_FROM}>",
        "to": [to_email],
        "subject": "Test email",
        "html": f"<p>{html.escape(text)}</p>",
        "text": text,
    }
    return await _send(payload)


async def _send(payload: dict[str, object]) -> dict[str, object]:
    if not sender_configured():
        return {"success": False, "message_id": None, "error": "Email sender not configured"}
    
    headers = {
        "Authorization": f"Bearer {settings.PLATFORM_RESEND_API_KEY}",
        "Content-Type": "application/json",
    }
    
    try:
        async with httpx.AsyncClient(timeout=RESEND_TIMEOUT_SECONDS) as client:
            response = await client.post(RESEND_SEND_URL, headers=headers, json=payload)
    except httpx.RequestError as exc:
        logger.warning("resend_request_failed", exc_info=exc)
        return {"success": False, "message_id": None, "error": "Email provider unreachable"}
    
    if 200 <= response.status_code < 300:
        message_id = response.json().get("id")
        return {"success": True, "message_id": message_id, "error": None}
    
    logger.warning(
        "resend_send_failed",
        extra={"event": "resend_send_failed", "status_code": response.status_code},
    )
    return {"success": False, "message_id": None, "error": f"Resend API error ({response.status_code})"}
