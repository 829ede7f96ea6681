"""Session store backed by Supabase auth."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from supabase import create_client, Client

from .config import Settings
from .log import get_logger


logger = get_logger(__name__)


class AuthError(Exception):
    """Raised when the identity provider rejects a sign-in or sign-up."""


@dataclass
class AuthSession:
    """The parts of a Supabase session this app reads."""
    access_token: str
    user_id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = field(default_factory=dict)


def _to_auth_session(raw: Any) -> Optional[AuthSession]:
    """Convert a supabase-py Session into an AuthSession."""
    if raw is None:
        return None
    user = getattr(raw, "user", None)
    token = getattr(raw, "access_token", None)
    if not token or user is None:
        return None
    return AuthSession(
        access_token=token,
        user_id=str(getattr(user, "id", "")),
        email=getattr(user, "email", None),
        user_metadata=dict(getattr(user, "user_metadata", None) or {}),
    )


class SessionStore:
    """
    Wraps a Supabase client for the auth operations the panel needs.

    One store lives per browser session; the Supabase client keeps the
    signed-in session in memory.
    """

    def __init__(self, client: Optional[Client]):
        self._client = client
        self._listeners: List[Callable[[str, Optional[AuthSession]], None]] = []

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionStore":
        if not settings.supabase_url or not settings.supabase_anon_key:
            logger.warning("Supabase credentials not configured; every session check will fail")
            return cls(None)
        return cls(create_client(settings.supabase_url, settings.supabase_anon_key))

    @property
    def configured(self) -> bool:
        return self._client is not None

    def get_session(self) -> Optional[AuthSession]:
        """Return the current session or None. Provider errors propagate."""
        if self._client is None:
            return None
        return _to_auth_session(self._client.auth.get_session())

    def get_access_token(self) -> Optional[str]:
        """Token lookup used by the API client on every request."""
        try:
            session = self.get_session()
        except Exception as e:
            logger.warning("Session lookup failed: %s", e)
            return None
        return session.access_token if session else None

    def sign_in(self, email: str, password: str) -> AuthSession:
        if self._client is None:
            raise AuthError("Supabase credentials not configured")
        try:
            response = self._client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            raise AuthError(str(e)) from e

        session = _to_auth_session(getattr(response, "session", None))
        if session is None:
            raise AuthError("Sign in did not return a session")
        self._notify("SIGNED_IN", session)
        return session

    def sign_up(self, email: str, password: str, metadata: Optional[Dict[str, Any]] = None) -> Optional[AuthSession]:
        """Register a new account. Returns None when email confirmation is pending."""
        if self._client is None:
            raise AuthError("Supabase credentials not configured")
        try:
            response = self._client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": metadata or {}},
            })
        except Exception as e:
            raise AuthError(str(e)) from e

        session = _to_auth_session(getattr(response, "session", None))
        if session is not None:
            self._notify("SIGNED_IN", session)
        return session

    def sign_out(self) -> None:
        if self._client is not None:
            try:
                self._client.auth.sign_out()
            except Exception as e:
                logger.warning("Sign out failed: %s", e)
        self._notify("SIGNED_OUT", None)

    def subscribe(self, listener: Callable[[str, Optional[AuthSession]], None]) -> Callable[[], None]:
        """Register a session-change listener; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, event: str, session: Optional[AuthSession]) -> None:
        for listener in list(self._listeners):
            listener(event, session)
