import logging
import time
from datetime import datetime

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .api import auth, contact
from .core.config import Config
from .core.errors import SiteError
from .core.middleware import (
    global_exception_handler,
    log_requests,
    site_error_handler,
    validation_error_handler,
)
from .services.supabase_service import check_connection

logger = logging.getLogger(__name__)


# Initialize FastAPI
app = FastAPI(title="Globex Site API")

# CORS setup
ALLOWED_ORIGINS = Config.allowed_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials="*" not in ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def _log_requests(request, call_next):
    return await log_requests(request, call_next)

@app.exception_handler(SiteError)
async def _site_error_handler(request, exc):
    return await site_error_handler(request, exc)

@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request, exc):
    return await validation_error_handler(request, exc)

@app.exception_handler(Exception)
async def _global_exception_handler(request, exc):
    return await global_exception_handler(request, exc)


app.include_router(contact.router)
app.include_router(auth.router)


@app.get("/health")
async def health_check():
    """Basic health and dependency checks for the API."""
    health_start_time = time.time()

    try:
        # Check configuration and Supabase connection
        Config.validate()
        check_connection()

        health_duration = time.time() - health_start_time

        return {
            "status": "healthy",
            "service": "globex-site-api",
            "environment": Config.ENVIRONMENT,
            "timestamp": datetime.now().isoformat(),
            "mail_configured": bool(Config.SMTP_HOST),
            "forms_configured": bool(Config.WEB3FORMS_ACCESS_KEY),
            "response_time_ms": round(health_duration * 1000, 2)
        }
    except Exception as e:
        health_duration = time.time() - health_start_time
        logger.error(f"Health check failed: {str(e)} - Duration: {health_duration:.1f}s")

        return {
            "status": "unhealthy",
            "service": "globex-site-api",
            "timestamp": datetime.now().isoformat(),
            "error": str(e),
            "response_time_ms": round(health_duration * 1000, 2)
        }


@app.get("/")
async def root():
    """Return basic API information."""

    return {
        "service": "Globex Site API",
        "version": "1.0",
        "endpoints": {
            "process_form": "/process-form",
            "contact": "/api/contact",
            "public_config": "/api/public-config",
            "sign_in": "/api/auth/sign-in",
            "sign_up": "/api/auth/sign-up",
            "sign_out": "/api/auth/sign-out",
            "session": "/api/auth/session",
            "profile": "/api/dashboard/profile",
            "change_password": "/api/dashboard/password",
            "health": "/health"
        },
        "timestamp": datetime.now().isoformat(),
        "description": "Backend for the Globex marketing site: contact relay, auth and dashboard"
    }
