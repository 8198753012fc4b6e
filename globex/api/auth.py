import logging
from typing import Iterator, Optional

from fastapi import APIRouter, Depends, Header

from ..core.errors import AuthFailure
from ..core.validation import validate_password_change, validate_sign_in, validate_sign_up
from ..models.auth import PasswordChangeRequest, Profile, SignInRequest, SignUpRequest
from ..services import supabase_service
from ..services.auth_session import AuthSession, session_payload, user_payload


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_auth_session() -> Iterator[AuthSession]:
    """Per-request auth context, closed when the request ends.

    Caller tokens are ignored here so sign-in and sign-up work even when the
    browser still holds an expired session.
    """
    auth = AuthSession(supabase_service.get_client()).start()
    try:
        yield auth
    finally:
        auth.close()


def require_auth_session(
    authorization: Optional[str] = Header(None),
    x_refresh_token: Optional[str] = Header(None),
    auth: AuthSession = Depends(get_auth_session),
) -> AuthSession:
    access_token = _bearer_token(authorization)
    if access_token and x_refresh_token:
        auth.restore(access_token, x_refresh_token)
    if not auth.is_authenticated:
        raise AuthFailure()
    return auth


@router.post("/auth/sign-in")
def sign_in(payload: SignInRequest, auth: AuthSession = Depends(get_auth_session)):
    validate_sign_in(payload.email, payload.password)
    response = auth.sign_in(payload.email.strip(), payload.password)
    return {
        "user": user_payload(response.user),
        "session": session_payload(response.session),
    }


@router.post("/auth/sign-up")
def sign_up(payload: SignUpRequest, auth: AuthSession = Depends(get_auth_session)):
    validate_sign_up(payload.email, payload.password, payload.first_name, payload.last_name)
    response = auth.sign_up(
        payload.email.strip(),
        payload.password,
        payload.first_name.strip(),
        payload.last_name.strip(),
    )
    # session is null when the provider asks for email confirmation first
    return {
        "user": user_payload(response.user),
        "session": session_payload(response.session),
    }


@router.post("/auth/sign-out")
def sign_out(auth: AuthSession = Depends(require_auth_session)):
    auth.sign_out()
    return {"message": "Signed out"}


@router.get("/auth/session")
def current_session(auth: AuthSession = Depends(require_auth_session)):
    return {
        "user": user_payload(auth.user),
        "session": session_payload(auth.session),
    }


@router.get("/dashboard/profile", response_model=Profile)
def get_profile(auth: AuthSession = Depends(require_auth_session)):
    return auth.get_profile()


@router.post("/dashboard/password")
def change_password(payload: PasswordChangeRequest, auth: AuthSession = Depends(require_auth_session)):
    new_password = validate_password_change(
        payload.current_password,
        payload.new_password,
        payload.confirm_password,
    )
    auth.update_password(payload.current_password, new_password)
    logger.info(f"Password updated for user {auth.user.id}")
    return {"message": "Password updated successfully"}
