"""
Official Registration
Self-service sign-up for officials: creates the account and the public profile
"""

from __future__ import annotations

import streamlit as st

from ledger.auth import DEFAULT_ROLE
from ledger.forms import OfficialRegistrationForm, official_from_form, validate_form
from ledger.log import get_logger
from ledger.session import AuthError
from ledger.ui import go, page_setup, show_field_errors

logger = get_logger(__name__)

ctx = page_setup("/official-registration", "Official Registration", "📝")

st.title("📝 Official Registration")
st.markdown("Create your account and public profile. An administrator may review it before it goes live.")

with st.form("official_registration"):
    col1, col2 = st.columns(2)
    with col1:
        name = st.text_input("Name *")
        role_title = st.text_input("Role/Title *", placeholder="Common Council Member")
        term_start = st.text_input("Term start * (YYYY-MM-DD)")
        term_end = st.text_input("Term end * (YYYY-MM-DD)")
        district = st.text_input("District")
    with col2:
        email = st.text_input("Email *")
        phone = st.text_input("Phone *")
        party = st.text_input("Party")
        password = st.text_input("Password *", type="password")
        confirm = st.text_input("Confirm password *", type="password")
    biography = st.text_area("Biography", height=150)
    submitted = st.form_submit_button("Create Account", type="primary")

if submitted:
    result = validate_form(OfficialRegistrationForm, {
        "name": name,
        "role_title": role_title,
        "term_start": term_start,
        "term_end": term_end,
        "contact": {"email": email, "phone": phone},
        "district": district,
        "party": party,
        "biography": biography,
        "status": "active",
        "password": password,
    })
    if not result.ok:
        show_field_errors(result.errors)
    elif password != confirm:
        st.error("**password**: Passwords do not match")
    else:
        form = result.data
        try:
            with st.spinner("Creating your account..."):
                session = ctx.store.sign_up(
                    form.contact.email,
                    form.password,
                    metadata={"role": DEFAULT_ROLE, "name": form.name},
                )
        except AuthError as e:
            logger.info("Registration rejected for %s: %s", form.contact.email, e)
            st.error(f"❌ {e}")
        else:
            if session is None:
                st.success("✅ Account created. Check your email to confirm it, then sign in to finish your profile.")
            else:
                response = ctx.officials.create(official_from_form(form))
                if response.success:
                    st.success("✅ Your profile has been created.")
                    go("/profile")
                else:
                    logger.warning("Profile creation after sign-up failed: %s", response.error)
                    st.warning(f"Your account was created but the profile could not be saved: {response.error}. "
                               "You can finish it from your profile page.")

st.divider()
st.page_link("pages/9_Login.py", label="Already registered? Sign in", icon="🔐")
