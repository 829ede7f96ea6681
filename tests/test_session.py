from __future__ import annotations

from types import SimpleNamespace

import pytest

from ledger.session import AuthError, SessionStore


class FakeAuth:
    def __init__(self, session=None, fail_with=None):
        self.session = session
        self.fail_with = fail_with
        self.signed_out = False

    def get_session(self):
        return self.session

    def sign_in_with_password(self, credentials):
        if self.fail_with:
            raise self.fail_with
        return SimpleNamespace(session=self.session)

    def sign_up(self, payload):
        self.sign_up_payload = payload
        return SimpleNamespace(session=self.session)

    def sign_out(self):
        self.signed_out = True


def raw_session(role="admin"):
    user = SimpleNamespace(id="user-1", email="admin@albany.gov", user_metadata={"role": role})
    return SimpleNamespace(access_token="jwt", user=user)


def make_store(auth: FakeAuth) -> SessionStore:
    return SessionStore(SimpleNamespace(auth=auth))


def test_unconfigured_store_has_no_session():
    store = SessionStore(None)
    assert not store.configured
    assert store.get_session() is None
    assert store.get_access_token() is None
    with pytest.raises(AuthError):
        store.sign_in("a@b.co", "secret")


def test_get_session_converts_supabase_session():
    session = make_store(FakeAuth(raw_session())).get_session()
    assert session.access_token == "jwt"
    assert session.user_id == "user-1"
    assert session.user_metadata == {"role": "admin"}


def test_access_token_lookup_swallows_provider_errors():
    class BrokenAuth(FakeAuth):
        def get_session(self):
            raise ConnectionError("offline")

    assert make_store(BrokenAuth()).get_access_token() is None


def test_sign_in_notifies_listeners():
    store = make_store(FakeAuth(raw_session()))
    events = []
    store.subscribe(lambda event, session: events.append((event, session.email)))

    session = store.sign_in("admin@albany.gov", "secret")

    assert session.email == "admin@albany.gov"
    assert events == [("SIGNED_IN", "admin@albany.gov")]


def test_rejected_sign_in_raises_auth_error():
    store = make_store(FakeAuth(fail_with=ValueError("Invalid login credentials")))
    with pytest.raises(AuthError, match="Invalid login credentials"):
        store.sign_in("admin@albany.gov", "wrong")


def test_sign_up_passes_metadata_and_may_return_no_session():
    auth = FakeAuth(session=None)
    assert make_store(auth).sign_up("new@albany.gov", "secret1", {"role": "official"}) is None
    assert auth.sign_up_payload["options"] == {"data": {"role": "official"}}


def test_sign_out_notifies_and_unsubscribe_stops_events():
    auth = FakeAuth(raw_session())
    store = make_store(auth)
    events = []
    unsubscribe = store.subscribe(lambda event, session: events.append((event, session)))

    store.sign_out()
    unsubscribe()
    store.sign_out()

    assert auth.signed_out
    assert events == [("SIGNED_OUT", None)]
