"""Composite form widgets shared by the Officials and Profile pages."""

from __future__ import annotations
from typing import Any, Dict, List, Optional

import pandas as pd
import streamlit as st

from .forms import COMMITTEE_ROLES, OfficialForm, official_form_data, official_from_form, validate_form
from .models import CommitteeCatalogItem, Official
from .ui import AppContext, notify, show_field_errors


def editor_rows(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Editor rows with blank cells as None; fully empty rows dropped."""
    rows = []
    for record in df.to_dict("records"):
        cleaned = {k: (None if not isinstance(v, (list, dict)) and pd.isna(v) else v) for k, v in record.items()}
        if any(value not in (None, "") for key, value in cleaned.items() if key != "id"):
            rows.append(cleaned)
    return rows


def official_editor(
    ctx: AppContext,
    official: Optional[Official],
    committees: List[CommitteeCatalogItem],
    key: str,
    show_status: bool = True,
) -> bool:
    """
    Create/edit form for an official. Experience, committees and achievements
    are edited as tables. Returns True once a save succeeds.
    """
    data = official_form_data(official) if official else {"contact": {"office": {}}}
    contact = data.get("contact", {})
    office = contact.get("office", {})

    col1, col2 = st.columns(2)
    with col1:
        name = st.text_input("Name *", value=data.get("name", ""), key=f"{key}_name")
        role_title = st.text_input("Role/Title *", value=data.get("role_title", ""), key=f"{key}_role")
        term_start = st.text_input("Term start * (YYYY-MM-DD)", value=data.get("term_start", ""), key=f"{key}_ts")
        term_end = st.text_input("Term end * (YYYY-MM-DD)", value=data.get("term_end", ""), key=f"{key}_te")
        party = st.text_input("Party", value=data.get("party") or "", key=f"{key}_party")
    with col2:
        email = st.text_input("Email *", value=contact.get("email", ""), key=f"{key}_email")
        phone = st.text_input("Phone *", value=contact.get("phone", ""), key=f"{key}_phone")
        district = st.text_input("District", value=data.get("district") or "", key=f"{key}_district")
        status = data.get("status") or "active"
        if show_status:
            status = st.selectbox("Status", ["active", "inactive"],
                                  index=0 if status == "active" else 1, key=f"{key}_status")

    st.markdown("**🏢 Office**")
    o1, o2, o3 = st.columns(3)
    with o1:
        address = st.text_input("Address", value=office.get("address_line1") or "", key=f"{key}_addr")
    with o2:
        room = st.text_input("Room", value=office.get("room") or "", key=f"{key}_room")
    with o3:
        hours = st.text_input("Hours", value=office.get("hours") or "", key=f"{key}_hours")

    biography = st.text_area("Biography", value=data.get("biography") or "", height=150, key=f"{key}_bio")

    st.markdown("**💼 Experience**")
    experience_df = st.data_editor(
        pd.DataFrame(data.get("experience") or [],
                     columns=["id", "title", "organization", "start_date", "end_date", "description"]),
        num_rows="dynamic",
        column_config={"id": None},
        use_container_width=True,
        key=f"{key}_experience",
    )

    st.markdown("**🏛️ Committees**")
    committee_names = {c.id: c.name for c in committees}
    committees_df = st.data_editor(
        pd.DataFrame(data.get("committees") or [], columns=["id", "committee_id", "name", "role"]),
        num_rows="dynamic",
        column_config={
            "id": None,
            "name": None,
            "committee_id": st.column_config.SelectboxColumn(
                "Committee", options=list(committee_names.keys()),
            ),
            "role": st.column_config.SelectboxColumn("Role", options=list(COMMITTEE_ROLES), default="Member"),
        },
        use_container_width=True,
        key=f"{key}_committees",
    )
    if committee_names:
        st.caption(" • ".join(f"{cid}: {cname}" for cid, cname in committee_names.items()))

    st.markdown("**🏆 Achievements**")
    achievements_df = st.data_editor(
        pd.DataFrame(data.get("achievements") or [], columns=["id", "title", "description", "period"]),
        num_rows="dynamic",
        column_config={"id": None},
        use_container_width=True,
        key=f"{key}_achievements",
    )

    if st.button("💾 Save Official", type="primary", key=f"{key}_save"):
        committee_rows = editor_rows(committees_df)
        for row in committee_rows:
            if row.get("committee_id") is not None:
                row["name"] = committee_names.get(int(row["committee_id"]), "")

        result = validate_form(OfficialForm, {
            "name": name,
            "role_title": role_title,
            "term_start": term_start,
            "term_end": term_end,
            "contact": {
                "email": email,
                "phone": phone,
                "office": {"address_line1": address, "room": room, "hours": hours},
            },
            "biography": biography,
            "district": district,
            "party": party,
            "status": status,
            "experience": editor_rows(experience_df),
            "committees": committee_rows,
            "achievements": editor_rows(achievements_df),
        })
        if not result.ok:
            show_field_errors(result.errors)
            return False

        to_save = official_from_form(result.data, official.id if official else None, official.image if official else None)
        if official:
            response = ctx.officials.update(official.id, to_save)
        else:
            response = ctx.officials.create(to_save)
        return notify(response, f"Saved {to_save.name}")
    return False

