from __future__ import annotations

import pytest

from ledger.auth import (
    ADMIN_ONLY_PATHS,
    PROFILE_PATH,
    AuthGate,
    GateState,
    login_redirect,
    role_of,
)
from ledger.session import AuthSession


class FakeStore:
    def __init__(self, session=None, error=None):
        self.session = session
        self.error = error

    def get_session(self):
        if self.error:
            raise self.error
        return self.session


def make_session(role=None) -> AuthSession:
    metadata = {"role": role} if role else {}
    return AuthSession(access_token="t", user_id="u1", email="clerk@albany.gov", user_metadata=metadata)


def test_login_redirect_encodes_original_path():
    assert login_redirect("/calendar") == "/login?redirect=%2Fcalendar"
    assert login_redirect("/issues", "status=open") == "/login?redirect=%2Fissues%3Fstatus%3Dopen"


def test_role_defaults_to_official():
    assert role_of(make_session()) == "official"
    assert role_of(None) == "official"
    assert role_of(make_session("admin")) == "admin"


@pytest.mark.parametrize("path", sorted(ADMIN_ONLY_PATHS))
def test_signed_out_visitor_is_sent_to_login(path):
    decision = AuthGate(FakeStore()).check(path)
    assert decision.state is GateState.UNAUTHENTICATED
    assert decision.redirect_to == login_redirect(path)
    assert not decision.show_navigation


@pytest.mark.parametrize("path", ["/login", "/official-registration", "/privacy"])
def test_public_pages_render_without_session(path):
    decision = AuthGate(FakeStore()).check(path)
    assert decision.allowed
    assert not decision.show_navigation


def test_session_check_failure_counts_as_signed_out():
    decision = AuthGate(FakeStore(error=RuntimeError("network"))).check("/calendar")
    assert decision.state is GateState.UNAUTHENTICATED
    assert decision.redirect_to == "/login?redirect=%2Fcalendar"


def test_non_admin_is_confined_to_profile():
    gate = AuthGate(FakeStore(make_session("official")))
    decision = gate.check("/newsletter")
    assert decision.state is GateState.AUTHENTICATED
    assert decision.redirect_to == PROFILE_PATH

    profile = gate.check(PROFILE_PATH)
    assert profile.allowed
    assert not profile.show_navigation


def test_admin_gets_navigation_except_on_public_pages():
    gate = AuthGate(FakeStore(make_session("admin")))
    assert gate.check("/issues").show_navigation
    assert gate.check("/").allowed
    assert not gate.check("/privacy").show_navigation


def test_sign_out_event_reapplies_redirect_rule():
    gate = AuthGate(FakeStore(make_session("admin")))
    decision = gate.on_session_change("SIGNED_OUT", make_session("admin"), "/content")
    assert decision.redirect_to == "/login?redirect=%2Fcontent"


def test_sign_in_event_on_login_page_does_not_redirect():
    gate = AuthGate(FakeStore())
    decision = gate.on_session_change("SIGNED_IN", make_session("admin"), "/login")
    assert decision.allowed
    assert decision.state is GateState.AUTHENTICATED


def test_non_admin_may_view_calendar_without_navigation():
    decision = AuthGate(FakeStore(make_session("official"))).check("/calendar")
    assert decision.allowed
    assert decision.state is GateState.AUTHENTICATED
    assert not decision.show_navigation


def test_signed_out_redirect_keeps_query_string():
    decision = AuthGate(FakeStore()).check("/issues", "status=open")
    assert decision.redirect_to == "/login?redirect=%2Fissues%3Fstatus%3Dopen"


def test_sign_out_event_keeps_query_string_in_redirect():
    gate = AuthGate(FakeStore())
    decision = gate.on_session_change("SIGNED_OUT", None, "/questions", "status=pending")
    assert decision.redirect_to == "/login?redirect=%2Fquestions%3Fstatus%3Dpending"
