"""Explicit auth context over one Supabase client.

An ``AuthSession`` owns the provider session for its lifetime: ``start()``
loads it from the provider and registers the only provider subscription,
provider-pushed events update it, and ``sign_out()`` / ``close()`` tear the
subscription down. Handlers receive the context instead of reading shared
state.
"""

import logging
from typing import Any, Callable, List, Optional

from supabase import Client

from ..core.errors import AuthFailure
from . import supabase_service


logger = logging.getLogger(__name__)

AuthListener = Callable[[str, Any], None]


def _event_name(event: Any) -> str:
    return getattr(event, "value", event)


class AuthSession:

    def __init__(self, client: Client):
        self._client = client
        self.session: Any = None
        self._subscription: Any = None
        self._listeners: List[AuthListener] = []

    @property
    def user(self) -> Any:
        return getattr(self.session, "user", None)

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    def start(self) -> "AuthSession":
        if self._subscription is None:
            self._subscription = self._client.auth.on_auth_state_change(self._on_auth_change)
        self.session = self._client.auth.get_session()
        return self

    def close(self) -> None:
        if self._subscription is not None:
            try:
                self._subscription.unsubscribe()
            finally:
                self._subscription = None
        self._listeners.clear()

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register a listener for auth events; returns its unsubscribe call."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _on_auth_change(self, event: Any, session: Any) -> None:
        self.session = session
        name = _event_name(event)
        logger.debug(f"Auth state changed: {name}")
        for listener in list(self._listeners):
            listener(name, session)

    def restore(self, access_token: str, refresh_token: str) -> Any:
        try:
            self._client.auth.set_session(access_token, refresh_token)
        except Exception as e:
            logger.info(f"Could not restore session: {e}")
            raise AuthFailure(str(e) or None) from e
        self.session = self._client.auth.get_session()
        if self.session is None:
            raise AuthFailure()
        return self.session

    def sign_in(self, email: str, password: str) -> Any:
        try:
            response = self._client.auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except Exception as e:
            raise AuthFailure(str(e) or None) from e
        self.session = response.session
        return response

    def sign_up(self, email: str, password: str, first_name: str, last_name: str) -> Any:
        try:
            response = self._client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {
                    "data": {
                        "first_name": first_name,
                        "last_name": last_name,
                    },
                },
            })
        except Exception as e:
            raise AuthFailure(str(e) or None, status_code=400) from e
        self.session = response.session
        return response

    def sign_out(self) -> None:
        try:
            self._client.auth.sign_out()
        finally:
            self.session = None
            self.close()

    def require_user(self) -> Any:
        if self.user is None:
            raise AuthFailure()
        return self.user

    def update_password(self, current_password: str, new_password: str) -> None:
        user = self.require_user()

        try:
            self._client.auth.sign_in_with_password({
                "email": user.email,
                "password": current_password,
            })
        except Exception as e:
            raise AuthFailure("Current password is incorrect", status_code=400) from e

        try:
            self._client.auth.update_user({"password": new_password})
        except Exception as e:
            logger.error(f"Password update failed for user {user.id}: {e}")
            raise AuthFailure("Failed to update password. Please try again.", status_code=500) from e

    def get_profile(self) -> dict:
        user = self.require_user()
        return supabase_service.fetch_profile(self._client, user.id)


def session_payload(session: Any) -> Optional[dict]:
    if session is None:
        return None
    return {
        "access_token": session.access_token,
        "refresh_token": session.refresh_token,
        "expires_at": getattr(session, "expires_at", None),
    }


def user_payload(user: Any) -> Optional[dict]:
    if user is None:
        return None
    return {
        "id": user.id,
        "email": user.email,
        "user_metadata": getattr(user, "user_metadata", None) or {},
    }
