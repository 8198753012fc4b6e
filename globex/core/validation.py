import html
import logging
import re
from typing import Any, Dict, Optional

from email_validator import EmailNotValidError, validate_email

from .errors import InvalidEmail, InvalidPassword, MissingField
from ..models.contact import ContactSubmission


logger = logging.getLogger(__name__)

CONTACT_FIELDS = ("name", "email", "subject", "message")

# Characters a mail address may contain; everything else is stripped
_EMAIL_DISALLOWED = re.compile(r"[^A-Za-z0-9!#$%&'*+\-=?^_`{|}~@.\[\]]")
_PASSWORD_SPECIAL = re.compile(r'[!@#$%^&*(),.?":{}|<>]')
_PASSWORD_DIGIT = re.compile(r"\d")
PASSWORD_MIN_LENGTH = 6


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def require_fields(values: Dict[str, Any], fields=CONTACT_FIELDS, message: Optional[str] = None) -> Dict[str, str]:
    """Return the named fields stripped, or raise MissingField if any is blank."""
    missing = [field for field in fields if _is_blank(values.get(field))]
    if missing:
        logger.debug(f"Missing fields: {', '.join(missing)}")
        raise MissingField(message)
    return {field: values[field].strip() for field in fields}


def sanitize_text(value: str) -> str:
    """Escape HTML-significant characters without double-encoding.

    Existing entities are decoded first, so running this on its own output
    returns the same string.
    """
    return html.escape(html.unescape(value), quote=True)


def sanitize_email(value: str) -> str:
    return _EMAIL_DISALLOWED.sub("", value)


def normalize_email(value: str) -> str:
    """Strict address check returning the ASCII form.

    Local parts that need SMTPUTF8 are rejected and internationalized domains
    come back IDNA-encoded, so sanitize_email never alters a normalized
    address.
    """
    try:
        info = validate_email(value, check_deliverability=False, allow_smtputf8=False)
    except EmailNotValidError as e:
        logger.debug(f"Rejected email address: {e}")
        raise InvalidEmail()
    return info.ascii_email


def validate_submission(
    name: Any,
    email: Any,
    subject: Any,
    message: Any,
    verification_token: Optional[str] = None,
) -> ContactSubmission:
    """Check a contact form before anything leaves the process.

    Raises MissingField when any of the four fields is empty and InvalidEmail
    when the address does not parse. No network access.
    """
    fields = require_fields({"name": name, "email": email, "subject": subject, "message": message})
    fields["email"] = normalize_email(fields["email"])
    return ContactSubmission(**fields, verification_token=verification_token)


def _sanitized_fields(fields: Dict[str, str]) -> Dict[str, str]:
    return {
        "name": sanitize_text(fields["name"]),
        "email": normalize_email(sanitize_email(fields["email"])),
        "subject": sanitize_text(fields["subject"]),
        "message": sanitize_text(fields["message"]),
    }


def prepare_relay_submission(payload: Any) -> ContactSubmission:
    """Turn a raw relay request body into a sanitized submission.

    Presence is checked on the raw values, the address is checked after
    sanitizing, matching what ends up in the outgoing mail.
    """
    values = payload if isinstance(payload, dict) else {}
    fields = require_fields(values)
    return ContactSubmission(**_sanitized_fields(fields))


def sanitize_submission(submission: ContactSubmission) -> ContactSubmission:
    return submission.model_copy(update=_sanitized_fields(submission.model_dump()))


def validate_password(password: str) -> bool:
    return (
        len(password) >= PASSWORD_MIN_LENGTH
        and bool(_PASSWORD_DIGIT.search(password))
        and bool(_PASSWORD_SPECIAL.search(password))
    )


def validate_password_change(current_password: Any, new_password: Any, confirm_password: Any) -> str:
    if _is_blank(current_password) or _is_blank(new_password) or _is_blank(confirm_password):
        raise InvalidPassword("All fields are required")
    if new_password != confirm_password:
        raise InvalidPassword("New passwords do not match")
    if not validate_password(new_password):
        raise InvalidPassword()
    return new_password


def validate_sign_in(email: Any, password: Any) -> None:
    if _is_blank(email) or _is_blank(password):
        raise MissingField("Please complete the required fields below.")


def validate_sign_up(email: Any, password: Any, first_name: Any, last_name: Any) -> None:
    if any(_is_blank(v) for v in (email, password, first_name, last_name)):
        raise MissingField("Please complete all required fields below.")
