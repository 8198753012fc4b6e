from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field


class ContactSubmission(BaseModel):
    """A validated contact form submission. Lives for one request only."""

    name: str
    email: EmailStr
    subject: str
    message: str
    verification_token: Optional[str] = None


class ContactRequest(BaseModel):
    # Raw values: presence and shape are checked by core.validation so the
    # client gets the site's own error messages rather than a schema error.
    name: Any = None
    email: Any = None
    subject: Any = None
    message: Any = None
    verification_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("verification_token", "recaptchaToken", "g-recaptcha-response"),
    )
