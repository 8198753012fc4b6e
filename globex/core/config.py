import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv


load_dotenv()


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name, "").strip().lower()
    if not value:
        return None
    return value in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Config:
    """Application configuration loaded from environment variables.

    Provides validated access to third-party configuration: Supabase for auth
    and profiles, SMTP for the relay endpoint, Web3Forms and reCAPTCHA for the
    contact form.
    """

    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")
    SUPABASE_SERVICE_KEY: str = os.getenv("SUPABASE_SERVICE_KEY", "")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")

    CORS_ALLOWED_ORIGINS_ENV: str = os.getenv("CORS_ALLOWED_ORIGINS", "*")

    CONTACT_TO_ADDRESS: str = os.getenv("CONTACT_TO_ADDRESS", "hello@globexenterprises.net")
    # "forms" posts to the hosted forms API, "relay" sends mail through SMTP
    CONTACT_DELIVERY: str = os.getenv("CONTACT_DELIVERY", "forms").strip().lower()
    RELAY_BODY_FORMAT: str = os.getenv("RELAY_BODY_FORMAT", "text").strip().lower()

    SMTP_HOST: str = os.getenv("SMTP_HOST", "")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME: str = os.getenv("SMTP_USERNAME", "")
    SMTP_PASSWORD: str = os.getenv("SMTP_PASSWORD", "")
    SMTP_STARTTLS: Optional[bool] = _env_flag("SMTP_STARTTLS")
    SMTP_TIMEOUT_SECONDS: float = float(os.getenv("SMTP_TIMEOUT_SECONDS", "10"))
    SMTP_ENVELOPE_FROM: str = os.getenv("SMTP_ENVELOPE_FROM", "")

    WEB3FORMS_URL: str = os.getenv("WEB3FORMS_URL", "https://api.web3forms.com/submit")
    WEB3FORMS_ACCESS_KEY: str = os.getenv("WEB3FORMS_ACCESS_KEY", "")

    RECAPTCHA_SITE_KEY: str = os.getenv("RECAPTCHA_SITE_KEY", "")
    RECAPTCHA_SECRET_KEY: str = os.getenv("RECAPTCHA_SECRET_KEY", "")
    RECAPTCHA_VERIFY_URL: str = os.getenv(
        "RECAPTCHA_VERIFY_URL", "https://www.google.com/recaptcha/api/siteverify"
    )

    HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))

    @classmethod
    def allowed_origins(cls, extra_origins: List[str] | None = None) -> List[str]:
        env_origins = [o.strip() for o in cls.CORS_ALLOWED_ORIGINS_ENV.split(",") if o.strip()]
        merged = env_origins or ["*"]
        if extra_origins:
            merged.extend(extra_origins)
        # Deduplicate while preserving order
        seen = set()
        result: List[str] = []
        for origin in merged:
            if origin not in seen:
                seen.add(origin)
                result.append(origin)
        return result

    @classmethod
    def validate(cls) -> None:
        if not cls.SUPABASE_URL:
            raise ValueError("SUPABASE_URL environment variable is required")
        if not cls.SUPABASE_ANON_KEY:
            raise ValueError("SUPABASE_ANON_KEY environment variable is required")
        if not cls.SUPABASE_SERVICE_KEY:
            raise ValueError("SUPABASE_SERVICE_KEY environment variable is required")
