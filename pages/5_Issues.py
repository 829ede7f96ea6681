"""
Issue Reports
Resident-reported issues: triage, status changes, public updates and statistics
"""

from __future__ import annotations

import pandas as pd
import plotly.express as px
import streamlit as st

from ledger.parallel import gather
from ledger.ui import confirm_button, notify, page_setup, render_badge, render_header, show_load_error
from ledger.workflow import (
    ISSUE_STATUSES,
    UPDATE_TYPE_LABELS,
    change_issue_status,
    format_status_name,
    issue_status_style,
)

ctx = page_setup("/issues", "Issue Reports", "🚧")
render_header(ctx, "🚧 Issue Reports", "Track, update and resolve issues reported by residents.")

PAGE_SIZE = 25

categories_response = ctx.issues.list_categories()
categories = categories_response.data if categories_response.success else []
category_names = {c["id"]: c.get("name", str(c["id"])) for c in categories}

tab_issues, tab_stats = st.tabs(["📋 Issues", "📊 Statistics"])

# =============================================================================
# ISSUES
# =============================================================================

with tab_issues:
    col1, col2, col3, col4 = st.columns([2, 1, 1, 1])
    with col1:
        search = st.text_input("Search", placeholder="Title, description or tracking id...", key="issue_search")
    with col2:
        status_filter = st.selectbox("Status", ["All"] + ISSUE_STATUSES,
                                     format_func=lambda s: s if s == "All" else issue_status_style(s).label,
                                     key="issue_status")
    with col3:
        category_filter = st.selectbox("Category", [None] + list(category_names.keys()),
                                       format_func=lambda c: "All" if c is None else category_names[c],
                                       key="issue_category")
    with col4:
        page = st.number_input("Page", min_value=1, value=1, step=1, key="issue_page")

    with st.spinner("Loading issues..."):
        response = ctx.issues.list({
            "search": search or None,
            "status": None if status_filter == "All" else status_filter,
            "category_id": category_filter,
            "sort_by": "created_at",
            "sort_order": "desc",
            "limit": PAGE_SIZE,
            "offset": (page - 1) * PAGE_SIZE,
        })

    if not response.success:
        show_load_error(response, "issues", "issues")
    elif not response.data["issues"]:
        st.info("No issues match these filters.")
    else:
        issues = response.data["issues"]
        st.caption(f"Showing {len(issues)} of {response.data['total']} issues")

        df = pd.DataFrame([{
            "ID": i.short_id,
            "Title": i.title,
            "Status": issue_status_style(i.status).label,
            "Category": i.category_name or category_names.get(i.category_id, ""),
            "Location": i.location_address or "",
            "Reported": i.created_at.strftime("%Y-%m-%d") if i.created_at else "",
            "Views": i.view_count,
        } for i in issues])
        st.dataframe(df, use_container_width=True, hide_index=True)

        by_short_id = {i.short_id: i for i in issues}
        selected = st.selectbox("Open issue", list(by_short_id.keys()),
                                format_func=lambda sid: f"#{sid} — {by_short_id[sid].title}", key="issue_selected")
        issue = by_short_id[selected]

        st.divider()
        col_main, col_side = st.columns([3, 2], gap="large")

        # Updates and photos load together; one failing still shows the other
        details = gather({
            "updates": lambda: ctx.issues.list_updates(issue.id),
            "photos": lambda: ctx.issues.list_photos(issue.id),
        })

        with col_main:
            st.markdown(f"## {issue.title}")
            render_badge(issue_status_style(issue.status))
            st.caption(f"#{issue.short_id} • {issue.category_name or 'Uncategorized'}"
                       f" • reported by {issue.reporter_name or 'Anonymous'}"
                       f"{' <' + issue.reporter_email + '>' if issue.reporter_email else ''}")
            if issue.location_address:
                st.markdown(f"📍 {issue.location_address}"
                            f"{' • Ward ' + issue.ward if issue.ward else ''}"
                            f"{' • District ' + issue.district if issue.district else ''}")
            st.markdown(issue.description)

            st.markdown("### 📷 Photos")
            photos = details["photos"]
            if not photos.success:
                st.warning(f"Could not load photos: {photos.error}")
            elif not photos.data:
                st.caption("No photos.")
            else:
                photo_cols = st.columns(3)
                for index, photo in enumerate(sorted(photos.data, key=lambda p: p.sort_order)):
                    with photo_cols[index % 3]:
                        st.image(photo.file_url, caption=photo.caption or photo.file_name, use_container_width=True)
                        if confirm_button("🗑️", key=f"photo_delete_{photo.id}", prompt="Delete this photo?"):
                            if notify(ctx.issues.delete_photo(photo.id), "Photo deleted"):
                                st.rerun()

            st.markdown("### 🕒 Timeline")
            updates = details["updates"]
            if not updates.success:
                st.warning(f"Could not load updates: {updates.error}")
            elif not updates.data:
                st.caption("No updates yet.")
            else:
                for update in sorted(updates.data, key=lambda u: u.created_at.timestamp() if u.created_at else 0):
                    with st.container(border=True):
                        label = UPDATE_TYPE_LABELS.get(update.update_type, format_status_name(update.update_type))
                        when = update.created_at.strftime("%b %d, %Y %I:%M %p") if update.created_at else ""
                        st.markdown(f"**{update.title or label}** · {when}")
                        if update.old_status and update.new_status:
                            st.caption(f"{format_status_name(update.old_status)} → {format_status_name(update.new_status)}")
                        st.markdown(update.description)
                        if not update.is_public:
                            st.caption("🔒 Internal")

        with col_side:
            st.markdown("### 🔄 Change Status")
            with st.form(f"issue_status_{issue.short_id}"):
                new_status = st.selectbox("New status", ISSUE_STATUSES,
                                          index=ISSUE_STATUSES.index(issue.status) if issue.status in ISSUE_STATUSES else 0,
                                          format_func=lambda s: issue_status_style(s).label)
                note = st.text_area("Note (optional)")
                if st.form_submit_button("Update Status", type="primary"):
                    result = change_issue_status(ctx.issues, issue, new_status, note.strip())
                    if notify(result, f"Status is now {issue_status_style(new_status).label}"):
                        st.rerun()

            st.markdown("### 💬 Post Update")
            with st.form(f"issue_update_{issue.short_id}"):
                update_title = st.text_input("Title (optional)")
                message = st.text_area("Message *")
                is_public = st.checkbox("Visible to the public", value=True)
                resolution = st.checkbox("This update resolves the issue")
                if st.form_submit_button("Post Update"):
                    if not message.strip():
                        st.error("Message is required")
                    else:
                        result = ctx.issues.create_update_by_short_id(
                            issue.short_id,
                            message.strip(),
                            update_type="resolution" if resolution else "message",
                            title=update_title.strip() or None,
                            is_public=is_public,
                        )
                        if notify(result, "Update posted"):
                            st.rerun()

            st.markdown("### 📤 Add Photos")
            uploads = st.file_uploader("Photos", type=["png", "jpg", "jpeg", "webp"],
                                       accept_multiple_files=True, key=f"issue_photos_{issue.short_id}")
            if uploads and st.button("Upload photos", key=f"issue_photos_btn_{issue.short_id}"):
                files = [("photos", (f.name, f.getvalue(), f.type or "image/jpeg")) for f in uploads]
                if notify(ctx.issues.upload_photos(issue.id, files), f"Uploaded {len(files)} photo(s)"):
                    st.rerun()

            st.markdown("### ⚠️ Danger Zone")
            if confirm_button("🗑️ Delete issue", key=f"issue_delete_{issue.short_id}",
                              prompt=f"Delete issue #{issue.short_id}? This cannot be undone."):
                if notify(ctx.issues.delete_by_short_id(issue.short_id), f"Deleted #{issue.short_id}"):
                    st.rerun()

# =============================================================================
# STATISTICS
# =============================================================================

with tab_stats:
    stats_response = ctx.issues.statistics()
    if not stats_response.success:
        show_load_error(stats_response, "statistics", "issue_stats")
    else:
        stats = stats_response.data
        col1, col2 = st.columns(2)
        col1.metric("Total issues", stats.get("total_issues", 0))
        col2.metric("Categories", stats.get("total_categories", len(categories)))

        by_status = stats.get("issues_by_status") or []
        if isinstance(by_status, dict):
            by_status = [{"status": k, "count": v} for k, v in by_status.items()]
        if by_status:
            df = pd.DataFrame(by_status)
            df["label"] = df["status"].map(lambda s: issue_status_style(s).label)
            fig = px.bar(df, x="label", y="count", color="status",
                         color_discrete_map={s: issue_status_style(s).text_color for s in df["status"]},
                         labels={"label": "Status", "count": "Issues"})
            fig.update_layout(showlegend=False, height=350)
            st.plotly_chart(fig, use_container_width=True)

        by_category = stats.get("issues_by_category") or []
        if by_category:
            df = pd.DataFrame(by_category)
            name_col = "category_name" if "category_name" in df.columns else df.columns[0]
            fig = px.pie(df, names=name_col, values="count", title="Issues by Category")
            st.plotly_chart(fig, use_container_width=True)

        by_location = stats.get("issues_by_location") or []
        if by_location:
            st.markdown("**Top locations**")
            st.dataframe(pd.DataFrame(by_location), use_container_width=True, hide_index=True)

    # Category management
    st.divider()
    st.markdown("### 🏷️ Issue Categories")
    for category in categories:
        col_a, col_b = st.columns([4, 1])
        with col_a:
            st.markdown(f"{category.get('icon') or '•'} **{category.get('name')}**")
            if category.get("description"):
                st.caption(category["description"])
        with col_b:
            if confirm_button("🗑️", key=f"issue_cat_delete_{category['id']}"):
                if notify(ctx.issues.delete_category(category["id"]), "Category deleted"):
                    st.rerun()
    with st.expander("➕ New Category"):
        with st.form("issue_category_create"):
            name = st.text_input("Name")
            description = st.text_area("Description")
            icon = st.text_input("Icon (emoji)")
            if st.form_submit_button("💾 Create Category", type="primary"):
                if not name.strip():
                    st.error("Name is required")
                elif notify(ctx.issues.create_category(name.strip(), description.strip(), icon.strip()),
                            "Category created"):
                    st.rerun()
