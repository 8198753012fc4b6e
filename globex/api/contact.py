import logging

from fastapi import APIRouter, Request

from ..core.config import Config
from ..core.errors import MethodNotAllowed, TransportFailure
from ..core.middleware import cors_json_response
from ..core.validation import prepare_relay_submission, sanitize_submission, validate_submission
from ..models.contact import ContactRequest
from ..services import forms_relay, mailer, recaptcha


logger = logging.getLogger(__name__)

router = APIRouter(tags=["Contact"])

# Every method reaches the handler so non-POST gets the JSON 405 body
RELAY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


async def _read_json(request: Request):
    try:
        return await request.json()
    except ValueError:
        return None


@router.api_route("/process-form", methods=RELAY_METHODS)
@router.api_route("/process-form.php", methods=RELAY_METHODS, include_in_schema=False)
async def process_form(request: Request):
    """Relay a contact submission to the company inbox over SMTP.

    - Only POST is accepted
    - Requires name, email, subject and message
    - Escapes markup, strips invalid address characters, re-checks the address
    - Sends the mail and reports transport acceptance
    """
    if request.method != "POST":
        raise MethodNotAllowed()

    payload = await _read_json(request)
    submission = prepare_relay_submission(payload)

    message = mailer.build_contact_email(submission)
    await mailer.send_email(message)

    logger.info(f"Relayed contact email from {submission.email}")
    return cors_json_response(200, {"message": "Email sent successfully"})


@router.post("/api/contact")
async def submit_contact(payload: ContactRequest, request: Request):
    """Full contact form flow: validate, require the challenge token, deliver."""
    submission = validate_submission(
        payload.name,
        payload.email,
        payload.subject,
        payload.message,
    )
    token = recaptcha.require_verification_token(payload.verification_token)
    await recaptcha.verify_token(token, request.client.host if request.client else None)
    submission = submission.model_copy(update={"verification_token": token})

    try:
        if Config.CONTACT_DELIVERY == "relay":
            await mailer.send_email(mailer.build_contact_email(sanitize_submission(submission)))
        else:
            await forms_relay.submit_submission(submission)
    except TransportFailure as e:
        raise TransportFailure("Error sending message. Please try again.") from e

    return cors_json_response(200, {"message": "Message sent successfully!"})


@router.get("/api/public-config")
async def public_config():
    """Values the browser needs to render the contact form widget."""
    return {
        "recaptcha_site_key": Config.RECAPTCHA_SITE_KEY or None,
        "contact_delivery": Config.CONTACT_DELIVERY,
    }
