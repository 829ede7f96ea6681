"""
My Profile
The signed-in official's own public profile
"""

from __future__ import annotations

import streamlit as st

from ledger.ui import page_setup, render_header, show_load_error
from ledger.widgets import official_editor

ctx = page_setup("/profile", "My Profile", "👤")
render_header(ctx, "👤 My Profile", "This is what residents see on your public profile page.")

with st.spinner("Loading your profile..."):
    profile = ctx.officials.get_profile()
    committees_response = ctx.officials.list_committees()

committees = committees_response.data if committees_response.success else []

if profile.is_not_found:
    st.info("You don't have an official profile yet. Fill in the form below to create one.")
    if official_editor(ctx, None, committees, key="profile_new", show_status=False):
        st.rerun()
    st.stop()

if not profile.success:
    show_load_error(profile, "your profile", "profile")
    st.stop()

official = profile.data

col_photo, col_form = st.columns([1, 3], gap="large")

with col_photo:
    if official.image:
        st.image(official.image, use_container_width=True)
    else:
        st.markdown("### 👤")
    upload = st.file_uploader("Update photo", type=["png", "jpg", "jpeg", "webp"], key="profile_photo")
    if upload is not None and st.button("📤 Upload", key="profile_photo_upload"):
        response = ctx.officials.upload_profile_picture(official.id, upload.name, upload.getvalue(), upload.type)
        if response.success:
            st.toast("✅ Photo updated")
            st.rerun()
        st.error(f"❌ Upload failed: {response.error}")

with col_form:
    if official_editor(ctx, official, committees, key="profile_edit", show_status=False):
        st.rerun()
