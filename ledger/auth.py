"""
Auth gate: decides for each page run whether to render or redirect.

The gate never blocks: a session check either resolves to a session, to no
session, or fails (treated as no session), and the page is rendered or
redirected accordingly.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import quote

from .log import get_logger
from .session import AuthSession, SessionStore


logger = get_logger(__name__)

LOGIN_PATH = "/login"
PROFILE_PATH = "/profile"
ADMIN_ROLE = "admin"
DEFAULT_ROLE = "official"

PUBLIC_PATHS = frozenset({"/login", "/official-registration", "/privacy"})

ADMIN_ONLY_PATHS = frozenset({
    "/",
    "/content",
    "/officials",
    "/documents",
    "/issues",
    "/questions",
    "/newsletter",
})


class GateState(Enum):
    CHECKING = "checking"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass
class GateDecision:
    state: GateState
    redirect_to: Optional[str] = None
    show_navigation: bool = False
    role: Optional[str] = None
    session: Optional[AuthSession] = None

    @property
    def allowed(self) -> bool:
        return self.redirect_to is None


def login_redirect(path: str, query: str = "") -> str:
    """Login URL that brings the user back to ``path`` after sign-in."""
    target = f"{path}?{query}" if query else path
    return f"{LOGIN_PATH}?redirect={quote(target, safe='')}"


def role_of(session: Optional[AuthSession]) -> str:
    if session is None:
        return DEFAULT_ROLE
    role = (session.user_metadata or {}).get("role")
    return role or DEFAULT_ROLE


def is_public(path: str) -> bool:
    return path in PUBLIC_PATHS


class AuthGate:
    """
    Applies the redirect rule for one page path.

    Unauthenticated visitors to a protected page go to the login page with
    the original path in ``redirect``. Signed-in non-admins only get the
    profile page; navigation chrome is shown to admins only.
    """

    def __init__(self, store: SessionStore):
        self.store = store

    def check(self, path: str, query: str = "") -> GateDecision:
        try:
            session = self.store.get_session()
        except Exception as e:
            logger.warning("Session check failed, treating as signed out: %s", e)
            session = None
        return self.decide(path, session, query)

    def decide(self, path: str, session: Optional[AuthSession], query: str = "") -> GateDecision:
        if session is None:
            if is_public(path):
                return GateDecision(GateState.UNAUTHENTICATED)
            redirect = login_redirect(path, query)
            logger.info("No session for %s, redirecting to %s", path, redirect)
            return GateDecision(GateState.UNAUTHENTICATED, redirect_to=redirect)

        role = role_of(session)
        is_admin = role == ADMIN_ROLE
        if path in ADMIN_ONLY_PATHS and not is_admin:
            logger.info("Role %r may not open %s, redirecting to %s", role, path, PROFILE_PATH)
            return GateDecision(GateState.AUTHENTICATED, redirect_to=PROFILE_PATH, role=role, session=session)

        return GateDecision(
            GateState.AUTHENTICATED,
            show_navigation=is_admin and not is_public(path),
            role=role,
            session=session,
        )

    def on_session_change(self, event: str, session: Optional[AuthSession], path: str, query: str = "") -> GateDecision:
        """Re-apply the redirect rule after a sign-in or sign-out notification."""
        logger.info("Auth event %s on %s", event, path)
        if event == "SIGNED_OUT":
            session = None
        return self.decide(path, session, query)
