import logging

import httpx

from ..core import http
from ..core.config import Config
from ..core.errors import TransportFailure
from ..models.contact import ContactSubmission


logger = logging.getLogger(__name__)


async def submit_submission(submission: ContactSubmission) -> dict:
    """Post a submission to the hosted forms API (Web3Forms).

    The verification token goes along unmodified; the provider checks it.
    """
    if not Config.WEB3FORMS_ACCESS_KEY:
        logger.error("WEB3FORMS_ACCESS_KEY is not configured, cannot relay contact form")
        raise TransportFailure()

    payload = {
        "name": submission.name,
        "email": submission.email,
        "subject": submission.subject,
        "message": submission.message,
        "access_key": Config.WEB3FORMS_ACCESS_KEY,
    }
    if submission.verification_token:
        payload["recaptchaToken"] = submission.verification_token

    try:
        response = await http.post_json(Config.WEB3FORMS_URL, payload)
    except httpx.HTTPError as e:
        logger.error(f"Forms API request failed: {type(e).__name__}: {e}")
        raise TransportFailure() from e

    if not response.is_success:
        logger.error(f"Forms API rejected submission: HTTP {response.status_code}: {response.text[:200]}")
        raise TransportFailure()

    try:
        return response.json()
    except ValueError:
        return {}
