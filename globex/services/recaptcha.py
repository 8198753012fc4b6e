import logging
from typing import Optional

import httpx

from ..core import http
from ..core.config import Config
from ..core.errors import ChallengeIncomplete


logger = logging.getLogger(__name__)


def require_verification_token(token: Optional[str]) -> str:
    """Return the widget token unchanged, or raise if the user never got one."""
    if not isinstance(token, str) or not token.strip():
        raise ChallengeIncomplete()
    return token


async def verify_token(token: str, remote_ip: Optional[str] = None) -> bool:
    """Check a token with the reCAPTCHA siteverify endpoint.

    Skipped when no secret is configured; the hosted forms provider does the
    check in that setup. Tokens are single-use, so this must run at most once
    per submission.
    """
    if not Config.RECAPTCHA_SECRET_KEY:
        logger.debug("RECAPTCHA_SECRET_KEY not set, skipping server-side token check")
        return False

    data = {"secret": Config.RECAPTCHA_SECRET_KEY, "response": token}
    if remote_ip:
        data["remoteip"] = remote_ip

    try:
        response = await http.post_form(Config.RECAPTCHA_VERIFY_URL, data)
        result = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"reCAPTCHA verification request failed: {type(e).__name__}: {e}")
        raise ChallengeIncomplete() from e

    if not result.get("success"):
        logger.info(f"reCAPTCHA rejected token: {result.get('error-codes')}")
        raise ChallengeIncomplete()
    return True
