"""
Sign In
"""

from __future__ import annotations
from typing import Optional

import streamlit as st

from ledger.auth import ADMIN_ONLY_PATHS, ADMIN_ROLE, PROFILE_PATH, role_of
from ledger.forms import LoginForm, validate_form
from ledger.log import get_logger
from ledger.session import AuthError, AuthSession
from ledger.ui import go, page_setup, show_field_errors

logger = get_logger(__name__)

ctx = page_setup("/login", "Sign In", "🔐")


def after_login_target(session: AuthSession) -> str:
    """Where to go after signing in: the saved redirect if this role may open it."""
    target: Optional[str] = st.session_state.pop("login_redirect", None) or st.query_params.get("redirect")
    # Local paths only
    if not target or not target.startswith("/") or target.startswith("//"):
        target = None
    if role_of(session) == ADMIN_ROLE:
        return target or "/"
    if target and target.split("?", 1)[0] not in ADMIN_ONLY_PATHS:
        return target
    return PROFILE_PATH


if ctx.session is not None:
    go(after_login_target(ctx.session))

_, col_form, _ = st.columns([1, 2, 1])

with col_form:
    st.title("📰 Albany Ledger")
    st.markdown("Sign in to manage the Albany Ledger.")

    with st.form("login"):
        email = st.text_input("Email", placeholder="you@albany.gov")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign In", type="primary", use_container_width=True)

    if submitted:
        result = validate_form(LoginForm, {"email": email, "password": password})
        if not result.ok:
            show_field_errors(result.errors)
        else:
            try:
                with st.spinner("Signing in..."):
                    session = ctx.store.sign_in(result.data.email, result.data.password)
            except AuthError as e:
                logger.info("Sign in rejected for %s: %s", result.data.email, e)
                st.error(f"❌ {e}")
            else:
                go(after_login_target(session))

    st.divider()
    st.page_link("pages/10_Official_Registration.py", label="Official registration", icon="📝")
    st.page_link("pages/11_Privacy.py", label="Privacy policy", icon="🔒")
