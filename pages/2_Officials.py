"""
Officials
Public profiles of elected and appointed officials, and the committee catalog
"""

from __future__ import annotations
from typing import List

import pandas as pd
import streamlit as st

from ledger.forms import CommitteeForm, validate_form
from ledger.models import Official
from ledger.ui import confirm_button, notify, page_setup, render_header, show_field_errors, show_load_error
from ledger.widgets import official_editor

ctx = page_setup("/officials", "Officials", "👥")
render_header(ctx, "👥 Officials", "Manage official profiles, committee assignments and photos.")

# =============================================================================
# LOAD
# =============================================================================

committees_response = ctx.officials.list_committees()
committees = committees_response.data if committees_response.success else []

tab_officials, tab_committees = st.tabs(["👥 Officials", "🏛️ Committees"])

with tab_officials:
    col1, col2, col3 = st.columns([2, 1, 1])
    with col1:
        search = st.text_input("Search officials", placeholder="Name or title...", key="official_search")
    with col2:
        status_filter = st.selectbox("Status", ["All", "active", "inactive"], key="official_status")
    with col3:
        st.write("")
        if st.button("➕ New Official", type="primary", use_container_width=True):
            st.session_state.official_mode = "new"
            st.rerun()

    with st.spinner("Loading officials..."):
        officials_response = ctx.officials.list(
            search=search or None,
            status=None if status_filter == "All" else status_filter,
            committees_catalog=committees,
        )

    mode = st.session_state.get("official_mode")

    if mode == "new":
        st.subheader("➕ New Official")
        if official_editor(ctx, None, committees, key="official_new"):
            st.session_state.pop("official_mode", None)
            st.rerun()
        if st.button("Cancel", key="official_new_cancel"):
            st.session_state.pop("official_mode", None)
            st.rerun()

    elif not officials_response.success:
        show_load_error(officials_response, "officials", "officials")

    elif not officials_response.data:
        st.info("No officials found.")

    else:
        officials: List[Official] = officials_response.data
        df = pd.DataFrame([{
            "Name": o.name,
            "Role": o.role_title,
            "Term": f"{o.term_start} – {o.term_end}",
            "Email": o.contact.email,
            "Phone": o.contact.phone,
            "Committees": ", ".join(c.name for c in o.committees),
            "Status": o.status,
        } for o in officials])
        st.dataframe(df, use_container_width=True, hide_index=True)

        by_id = {o.id: o for o in officials}
        selected_id = st.selectbox("Select official", list(by_id.keys()),
                                   format_func=lambda i: by_id[i].name, key="official_selected")
        official = by_id[selected_id]

        st.divider()
        col_photo, col_info = st.columns([1, 3])

        with col_photo:
            if official.image:
                st.image(official.image, use_container_width=True)
            else:
                st.markdown("### 👤")
                st.caption("No photo")

            upload = st.file_uploader("Profile picture", type=["png", "jpg", "jpeg", "webp"], key=f"photo_{official.id}")
            if upload is not None and st.button("📤 Upload", key=f"photo_upload_{official.id}"):
                response = ctx.officials.upload_profile_picture(official.id, upload.name, upload.getvalue(), upload.type)
                if notify(response, "Profile picture updated"):
                    st.rerun()
            if official.image and confirm_button("🗑️ Remove photo", key=f"photo_delete_{official.id}"):
                if notify(ctx.officials.delete_profile_picture(official.id), "Profile picture removed"):
                    st.rerun()

        with col_info:
            if mode == "edit":
                if official_editor(ctx, official, committees, key=f"official_edit_{official.id}"):
                    st.session_state.pop("official_mode", None)
                    st.rerun()
                if st.button("Cancel", key="official_edit_cancel"):
                    st.session_state.pop("official_mode", None)
                    st.rerun()
            else:
                st.markdown(f"## {official.name}")
                st.caption(f"{official.role_title} • {official.term_start} – {official.term_end}")
                st.markdown(f"📧 {official.contact.email}  \n☎️ {official.contact.phone}")
                office = official.contact.office
                if office.address_line1:
                    st.markdown(f"🏢 {office.address_line1}{', Room ' + office.room if office.room else ''}, "
                                f"{office.city}, {office.state} {office.zip}")
                if office.hours:
                    st.caption(f"🕒 {office.hours}")
                if official.biography:
                    st.markdown(official.biography)

                if official.experience:
                    st.markdown("**💼 Experience**")
                    for exp in official.experience:
                        st.markdown(f"- **{exp.title}**, {exp.organization} ({exp.start_date} – {exp.end_date or 'present'})")
                if official.committees:
                    st.markdown("**🏛️ Committees**")
                    for comm in official.committees:
                        st.markdown(f"- {comm.name} ({comm.role})")
                if official.achievements:
                    st.markdown("**🏆 Achievements**")
                    for ach in official.achievements:
                        st.markdown(f"- **{ach.title}** {ach.period}: {ach.description}")

                b1, b2 = st.columns(2)
                with b1:
                    if st.button("✏️ Edit", key="official_edit", type="primary"):
                        st.session_state.official_mode = "edit"
                        st.rerun()
                with b2:
                    if confirm_button("🗑️ Delete", key=f"official_delete_{official.id}",
                                      prompt=f"Delete {official.name}? This cannot be undone."):
                        if notify(ctx.officials.delete(official.id), f"Deleted {official.name}"):
                            st.rerun()

# =============================================================================
# COMMITTEES
# =============================================================================

with tab_committees:
    if not committees_response.success:
        show_load_error(committees_response, "committees", "committees")
    elif not committees:
        st.info("No committees yet.")
    else:
        for committee in committees:
            with st.container(border=True):
                col_a, col_b = st.columns([4, 1])
                with col_a:
                    st.markdown(f"**{committee.name}**")
                    if committee.description:
                        st.caption(committee.description)
                with col_b:
                    if confirm_button("🗑️ Delete", key=f"committee_delete_{committee.id}"):
                        if notify(ctx.officials.delete_committee(committee.id), "Committee deleted"):
                            st.rerun()
                with st.expander("✏️ Edit"):
                    with st.form(f"committee_edit_{committee.id}"):
                        new_name = st.text_input("Name", value=committee.name)
                        new_description = st.text_area("Description", value=committee.description)
                        if st.form_submit_button("💾 Save"):
                            result = validate_form(CommitteeForm, {"name": new_name, "description": new_description})
                            if not result.ok:
                                show_field_errors(result.errors)
                            elif notify(ctx.officials.update_committee(committee.id, result.data.model_dump()),
                                        "Committee updated"):
                                st.rerun()

    with st.expander("➕ New Committee"):
        with st.form("committee_create"):
            name = st.text_input("Name")
            description = st.text_area("Description")
            if st.form_submit_button("💾 Create Committee", type="primary"):
                result = validate_form(CommitteeForm, {"name": name, "description": description})
                if not result.ok:
                    show_field_errors(result.errors)
                elif notify(ctx.officials.create_committee(result.data.name, result.data.description or ""),
                            "Committee created"):
                    st.rerun()
