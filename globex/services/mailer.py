import logging
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

import aiosmtplib

from ..core.config import Config
from ..core.errors import TransportFailure
from ..models.contact import ContactSubmission


logger = logging.getLogger(__name__)

def _header_value(value: str) -> str:
    """Collapse line breaks so submitted text cannot add headers.

    Covers every boundary str.splitlines() knows (\\x0b, \\x85, \\u2028, ...),
    all of which the email policy refuses in header values.
    """
    return " ".join(part.strip() for part in value.splitlines() if part.strip())


def _text_body(submission: ContactSubmission) -> str:
    return (
        "New Contact Form Submission\n"
        "\n"
        f"Name: {submission.name}\n"
        f"Email: {submission.email}\n"
        f"Subject: {submission.subject}\n"
        "\n"
        "Message:\n"
        f"{submission.message}\n"
    )


def _html_body(submission: ContactSubmission) -> str:
    message_html = "<br />\n".join(submission.message.splitlines())
    return (
        "<html>\n"
        "<body>\n"
        "    <h2>New Contact Form Submission</h2>\n"
        f"    <p><strong>Name:</strong> {submission.name}</p>\n"
        f"    <p><strong>Email:</strong> {submission.email}</p>\n"
        f"    <p><strong>Subject:</strong> {submission.subject}</p>\n"
        "    <p><strong>Message:</strong></p>\n"
        f"    <p>{message_html}</p>\n"
        "</body>\n"
        "</html>\n"
    )


def build_contact_email(submission: ContactSubmission, body_format: Optional[str] = None) -> EmailMessage:
    """Build the outgoing mail for an already sanitized submission.

    The sender is the person who filled in the form; replies go back to them.
    """
    body_format = (body_format or Config.RELAY_BODY_FORMAT).lower()

    message = EmailMessage()
    message["From"] = formataddr((_header_value(submission.name), submission.email))
    message["Reply-To"] = submission.email
    message["To"] = Config.CONTACT_TO_ADDRESS
    message["Subject"] = _header_value(submission.subject)

    if body_format == "html":
        message.set_content(_html_body(submission), subtype="html", charset="utf-8")
    else:
        message.set_content(_text_body(submission), charset="utf-8")
    return message


async def send_email(message: EmailMessage) -> None:
    """Hand a message to the SMTP server.

    Only transport-layer acceptance is confirmed, not delivery. Any failure is
    raised as TransportFailure.
    """
    if not Config.SMTP_HOST:
        logger.error("SMTP_HOST is not configured, cannot send contact email")
        raise TransportFailure()

    try:
        await aiosmtplib.send(
            message,
            sender=Config.SMTP_ENVELOPE_FROM or None,
            hostname=Config.SMTP_HOST,
            port=Config.SMTP_PORT,
            username=Config.SMTP_USERNAME or None,
            password=Config.SMTP_PASSWORD or None,
            start_tls=Config.SMTP_STARTTLS,
            timeout=Config.SMTP_TIMEOUT_SECONDS,
        )
    except Exception as e:
        logger.error(f"Failed to send email via {Config.SMTP_HOST}:{Config.SMTP_PORT}: {type(e).__name__}: {e}")
        raise TransportFailure() from e
