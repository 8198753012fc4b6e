"""Error types raised by the site's flows.

Every error carries the user-facing message and the HTTP status it maps to.
The exception handler in ``core.middleware`` renders them as
``{"error": message}``.
"""

from typing import Optional


class SiteError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_response(self) -> dict:
        return {"error": self.message}


class MissingField(SiteError):
    status_code = 400
    default_message = "Missing required fields"


class InvalidEmail(SiteError):
    status_code = 400
    default_message = "Invalid email address"


class InvalidPassword(SiteError):
    status_code = 400
    default_message = (
        "Password must be at least 6 characters long and contain at least "
        "one number and one special character"
    )


class MethodNotAllowed(SiteError):
    status_code = 405
    default_message = "Method not allowed"


class ChallengeIncomplete(SiteError):
    status_code = 400
    default_message = "Please complete the reCAPTCHA verification"


class TransportFailure(SiteError):
    status_code = 500
    default_message = "Failed to send email"


class AuthFailure(SiteError):
    """Auth provider error, message surfaced verbatim."""

    status_code = 401
    default_message = "Not authenticated"


class NotFound(SiteError):
    status_code = 404
    default_message = "Not found"
