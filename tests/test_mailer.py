"""Mail building and SMTP hand-off."""

import httpx
import pytest

from globex.core.config import Config
from globex.core.errors import ChallengeIncomplete, TransportFailure
from globex.models.contact import ContactSubmission
from globex.services import mailer, recaptcha


SUBMISSION = ContactSubmission(name="Ada", email="ada@example.com", subject="Hi", message="Hello")


def test_destination_comes_from_config(monkeypatch):
    monkeypatch.setattr(Config, "CONTACT_TO_ADDRESS", "inbox@example.com")

    message = mailer.build_contact_email(SUBMISSION)

    assert message["To"] == "inbox@example.com"


def test_explicit_body_format_wins_over_config():
    message = mailer.build_contact_email(SUBMISSION, body_format="html")
    assert message.get_content_type() == "text/html"


async def test_send_uses_configured_transport(smtp, monkeypatch):
    monkeypatch.setattr(Config, "SMTP_PORT", 2525)
    monkeypatch.setattr(Config, "SMTP_USERNAME", "relay-user")
    monkeypatch.setattr(Config, "SMTP_PASSWORD", "relay-pass")
    monkeypatch.setattr(Config, "SMTP_TIMEOUT_SECONDS", 3.0)
    monkeypatch.setattr(Config, "SMTP_ENVELOPE_FROM", "bounce@example.com")

    await mailer.send_email(mailer.build_contact_email(SUBMISSION))

    call = smtp[0]
    assert call["hostname"] == "smtp.test"
    assert call["port"] == 2525
    assert call["username"] == "relay-user"
    assert call["password"] == "relay-pass"
    assert call["timeout"] == 3.0
    assert call["sender"] == "bounce@example.com"


async def test_blank_credentials_are_not_sent(smtp, monkeypatch):
    monkeypatch.setattr(Config, "SMTP_USERNAME", "")
    monkeypatch.setattr(Config, "SMTP_PASSWORD", "")
    monkeypatch.setattr(Config, "SMTP_ENVELOPE_FROM", "")

    await mailer.send_email(mailer.build_contact_email(SUBMISSION))

    assert smtp[0]["username"] is None
    assert smtp[0]["password"] is None
    assert smtp[0]["sender"] is None


async def test_transport_error_is_wrapped(smtp):
    smtp.error = ConnectionResetError("reset")

    with pytest.raises(TransportFailure) as exc:
        await mailer.send_email(mailer.build_contact_email(SUBMISSION))

    assert isinstance(exc.value.__cause__, ConnectionResetError)


# --- Challenge gate ------------------------------------------------------------

@pytest.mark.parametrize("token", [None, "", "   ", 123])
def test_token_required(token):
    with pytest.raises(ChallengeIncomplete):
        recaptcha.require_verification_token(token)


def test_token_forwarded_unmodified():
    assert recaptcha.require_verification_token(" tok ") == " tok "


async def test_verification_skipped_without_secret(providers):
    assert await recaptcha.verify_token("tok") is False
    assert providers["requests"] == []


async def test_verification_network_error_is_incomplete(providers, monkeypatch):
    monkeypatch.setattr(Config, "RECAPTCHA_SECRET_KEY", "captcha-secret")
    providers["responses"][Config.RECAPTCHA_VERIFY_URL] = httpx.ReadTimeout("timed out")

    with pytest.raises(ChallengeIncomplete):
        await recaptcha.verify_token("tok")
