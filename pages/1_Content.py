"""
Content Management
Articles, breaking news alerts and emergency contacts
"""

from __future__ import annotations
import pandas as pd
import streamlit as st

from ledger.content_api import (
    ALERT_PRIORITIES,
    ALERT_TYPES,
    ARTICLE_STATUSES,
    DEPARTMENTS,
    generate_slug,
)
from ledger.markdown import ARTICLE_CLASSES, render_markdown
from ledger.ui import (
    badge_html,
    confirm_button,
    notify,
    page_setup,
    render_header,
    show_load_error,
)
from ledger.workflow import content_status_style, priority_style

ctx = page_setup("/content", "Content", "📰")
render_header(ctx, "📰 Content Management", "Articles, breaking news and emergency contacts.")

tab_articles, tab_alerts, tab_contacts = st.tabs(["📝 Articles", "🚨 Breaking News", "📞 Emergency Contacts"])

# =============================================================================
# ARTICLES
# =============================================================================

with tab_articles:
    col1, col2, col3 = st.columns([2, 1, 1])
    with col1:
        article_search = st.text_input("Search articles", placeholder="Title or author...", key="article_search")
    with col2:
        article_status = st.selectbox("Status", ["All"] + ARTICLE_STATUSES, key="article_status")
    with col3:
        featured_only = st.toggle("Featured only", key="article_featured")

    with st.spinner("Loading articles..."):
        articles_response = ctx.content.list_articles(
            search=article_search or None,
            status=None if article_status == "All" else article_status,
            featured=True if featured_only else None,
        )

    if not articles_response.success:
        show_load_error(articles_response, "articles", "articles")
        articles = []
    else:
        articles = articles_response.data

    if articles:
        df = pd.DataFrame([{
            "ID": a.get("id"),
            "Title": a.get("title", ""),
            "Category": a.get("category") or "",
            "Status": a.get("status", ""),
            "Featured": "⭐" if a.get("featured") else "",
            "Author": a.get("author", ""),
            "Views": a.get("views", 0),
            "Published": (a.get("publish_date") or "")[:10],
        } for a in articles])
        st.dataframe(df, use_container_width=True, hide_index=True)
    elif articles_response.success:
        st.info("No articles match these filters.")

    # Viewer / actions
    if articles:
        options = {a["id"]: a.get("title", f"Article {a['id']}") for a in articles}
        selected_id = st.selectbox(
            "Open article",
            options=list(options.keys()),
            format_func=lambda i: options[i],
            key="article_selected",
        )
        article = next(a for a in articles if a["id"] == selected_id)

        with st.expander(f"👁️ {article.get('title', '')}", expanded=True):
            st.markdown(badge_html(content_status_style(article.get("status", ""))), unsafe_allow_html=True)
            st.caption(f"By {article.get('author', 'Unknown')} • /{article.get('slug', '')}")
            if article.get("excerpt"):
                st.markdown(f"*{article['excerpt']}*")
            st.markdown(render_markdown(article.get("content") or "", ARTICLE_CLASSES), unsafe_allow_html=True)

            a1, a2, a3, a4, a5 = st.columns(5)
            with a1:
                if article.get("status") == "Published":
                    if st.button("📥 Unpublish", key="article_unpublish"):
                        if notify(ctx.content.unpublish_article(article["id"]), "Article unpublished"):
                            st.rerun()
                else:
                    if st.button("📤 Publish", key="article_publish", type="primary"):
                        if notify(ctx.content.publish_article(article["id"]), "Article published"):
                            st.rerun()
            with a2:
                label = "☆ Unfeature" if article.get("featured") else "⭐ Feature"
                if st.button(label, key="article_feature"):
                    if notify(ctx.content.toggle_featured(article["id"]), "Featured flag updated"):
                        st.rerun()
            with a3:
                if st.button("📄 Duplicate", key="article_duplicate"):
                    if notify(ctx.content.duplicate_article(article["id"]), "Article duplicated"):
                        st.rerun()
            with a4:
                if st.button("✏️ Edit", key="article_edit"):
                    st.session_state.article_editing = article
                    st.rerun()
            with a5:
                if confirm_button("🗑️ Delete", key=f"article_delete_{article['id']}",
                                  prompt=f"Delete \"{article.get('title', '')}\"?"):
                    if notify(ctx.content.delete_article(article["id"]), "Article deleted"):
                        st.rerun()

    # Editor
    editing = st.session_state.get("article_editing")
    with st.expander("✏️ Edit Article" if editing else "➕ New Article", expanded=editing is not None):
        source = editing or {}
        with st.form("article_form"):
            title = st.text_input("Title", value=source.get("title", ""))
            slug = st.text_input("Slug", value=source.get("slug", ""), help="Leave blank to generate from the title")
            excerpt = st.text_area("Excerpt", value=source.get("excerpt") or "", height=80)
            col_a, col_b, col_c = st.columns(3)
            with col_a:
                category = st.text_input("Category", value=source.get("category") or "")
            with col_b:
                status_index = ARTICLE_STATUSES.index(source["status"]) if source.get("status") in ARTICLE_STATUSES else 1
                status = st.selectbox("Status", ARTICLE_STATUSES, index=status_index)
            with col_c:
                featured = st.checkbox("Featured", value=bool(source.get("featured")))
            image_url = st.text_input("Image URL", value=source.get("image_url") or "")
            meta_description = st.text_input("Meta description", value=source.get("meta_description") or "")
            body = st.text_area("Content (markdown)", value=source.get("content") or "", height=300)
            submitted = st.form_submit_button("💾 Save Article", type="primary")

        if body:
            st.markdown("**Preview**")
            st.markdown(render_markdown(body, ARTICLE_CLASSES), unsafe_allow_html=True)

        if submitted:
            if not title.strip():
                st.error("Title is required")
            else:
                payload = {
                    "title": title.strip(),
                    "slug": slug.strip() or generate_slug(title),
                    "excerpt": excerpt,
                    "category": category,
                    "status": status,
                    "featured": featured,
                    "image_url": image_url or None,
                    "meta_description": meta_description,
                    "content": body,
                }
                if editing:
                    response = ctx.content.update_article(editing["id"], payload)
                else:
                    payload["author"] = (ctx.session.email if ctx.session else None) or "Admin"
                    response = ctx.content.create_article(payload)
                if notify(response, "Article saved"):
                    st.session_state.pop("article_editing", None)
                    st.rerun()

        if editing and st.button("Cancel editing", key="article_cancel_edit"):
            st.session_state.pop("article_editing", None)
            st.rerun()

# =============================================================================
# BREAKING NEWS
# =============================================================================

with tab_alerts:
    col1, col2, col3 = st.columns(3)
    with col1:
        alert_type = st.selectbox("Type", ["All"] + ALERT_TYPES, key="alert_type")
    with col2:
        alert_priority = st.selectbox("Priority", ["All"] + ALERT_PRIORITIES, key="alert_priority")
    with col3:
        alert_status = st.selectbox("Status", ["All", "Active", "Scheduled", "Expired", "Draft"], key="alert_status")

    with st.spinner("Loading alerts..."):
        alerts_response = ctx.content.list_alerts(
            type=None if alert_type == "All" else alert_type,
            priority=None if alert_priority == "All" else alert_priority,
            status=None if alert_status == "All" else alert_status,
        )

    if not alerts_response.success:
        show_load_error(alerts_response, "breaking news", "alerts")
    elif not alerts_response.data:
        st.info("No alerts.")
    else:
        for alert in alerts_response.data:
            with st.container(border=True):
                col_a, col_b = st.columns([4, 2])
                with col_a:
                    st.markdown(f"### {alert.get('title', '')}")
                    st.markdown(
                        badge_html(priority_style(alert.get("priority", ""))) + " " +
                        badge_html(content_status_style(alert.get("status", ""))),
                        unsafe_allow_html=True,
                    )
                    st.caption(f"{alert.get('type', '')} • {alert.get('author', '')} • 👁️ {alert.get('views', 0)}")
                    st.markdown(alert.get("content", ""))
                with col_b:
                    alert_id = alert["id"]
                    if alert.get("status") != "Active":
                        if st.button("📤 Publish", key=f"alert_publish_{alert_id}"):
                            if notify(ctx.content.publish_alert(alert_id), "Alert published"):
                                st.rerun()
                    else:
                        if st.button("⌛ Expire", key=f"alert_expire_{alert_id}"):
                            if notify(ctx.content.expire_alert(alert_id), "Alert expired"):
                                st.rerun()
                    if st.button("✉️ Email subscribers", key=f"alert_send_{alert_id}"):
                        notify(ctx.content.send_alert(alert_id), "Alert sent to subscribers")
                    if st.button("📄 Duplicate", key=f"alert_duplicate_{alert_id}"):
                        if notify(ctx.content.duplicate_alert(alert_id), "Alert duplicated"):
                            st.rerun()
                    if confirm_button("🗑️ Delete", key=f"alert_delete_{alert_id}"):
                        if notify(ctx.content.delete_alert(alert_id), "Alert deleted"):
                            st.rerun()

                with st.expander("✏️ Edit"):
                    with st.form(f"alert_edit_{alert['id']}"):
                        new_title = st.text_input("Title", value=alert.get("title", ""))
                        new_content = st.text_area("Content", value=alert.get("content", ""))
                        on_website = st.checkbox("Show on website", value="website" in (alert.get("channels") or []))
                        if st.form_submit_button("💾 Save"):
                            response = ctx.content.update_alert(alert["id"], title=new_title, content=new_content,
                                                                website=on_website)
                            if notify(response, "Alert updated"):
                                st.rerun()

    with st.expander("➕ New Alert"):
        with st.form("alert_create"):
            title = st.text_input("Title")
            content = st.text_area("Content")
            col_a, col_b = st.columns(2)
            with col_a:
                new_type = st.selectbox("Type", ALERT_TYPES)
            with col_b:
                new_priority = st.selectbox("Priority", ALERT_PRIORITIES, index=2)
            channels = st.multiselect("Channels", ["website", "email", "sms", "social"], default=["website"])
            if st.form_submit_button("🚨 Create Alert", type="primary"):
                if not title.strip() or not content.strip():
                    st.error("Title and content are required")
                else:
                    response = ctx.content.create_alert({
                        "title": title.strip(),
                        "content": content.strip(),
                        "type": new_type,
                        "priority": new_priority,
                        "status": "Draft",
                        "channels": channels,
                        "author": (ctx.session.email if ctx.session else None) or "Admin",
                    })
                    if notify(response, "Alert created"):
                        st.rerun()

# =============================================================================
# EMERGENCY CONTACTS
# =============================================================================

with tab_contacts:
    col1, col2 = st.columns([2, 1])
    with col1:
        contact_search = st.text_input("Search contacts", key="contact_search")
    with col2:
        contact_department = st.selectbox("Department", ["All"] + DEPARTMENTS, key="contact_department")

    contacts_response = ctx.content.list_contacts(
        search=contact_search or None,
        department=None if contact_department == "All" else contact_department,
    )

    if not contacts_response.success:
        show_load_error(contacts_response, "emergency contacts", "contacts")
    elif not contacts_response.data:
        st.info("No emergency contacts.")
    else:
        for contact in contacts_response.data:
            with st.container(border=True):
                col_a, col_b = st.columns([4, 1])
                with col_a:
                    st.markdown(f"**{contact.get('name', '')}** · {contact.get('department', '')}")
                    st.caption(
                        f"🚨 {contact.get('emergency_number', '')}"
                        + (f" • ☎️ {contact['non_emergency_number']}" if contact.get("non_emergency_number") else "")
                        + (f" • 🌙 {contact['after_hours_number']}" if contact.get("after_hours_number") else "")
                        + (f" • 📧 {contact['email']}" if contact.get("email") else "")
                    )
                    if contact.get("hours"):
                        st.caption(f"🕒 {contact['hours']}")
                with col_b:
                    if confirm_button("🗑️ Delete", key=f"contact_delete_{contact['id']}"):
                        if notify(ctx.content.delete_contact(contact["id"]), "Contact deleted"):
                            st.rerun()

    with st.expander("➕ New Contact"):
        with st.form("contact_create"):
            name = st.text_input("Name")
            department = st.selectbox("Department", DEPARTMENTS)
            col_a, col_b, col_c = st.columns(3)
            with col_a:
                emergency_number = st.text_input("Emergency number")
            with col_b:
                non_emergency_number = st.text_input("Non-emergency number")
            with col_c:
                after_hours_number = st.text_input("After-hours number")
            hours = st.text_input("Hours")
            address = st.text_input("Address")
            email = st.text_input("Email")
            notes = st.text_area("Notes")
            if st.form_submit_button("💾 Save Contact", type="primary"):
                if not name.strip() or not emergency_number.strip():
                    st.error("Name and emergency number are required")
                else:
                    response = ctx.content.create_contact({
                        "name": name.strip(),
                        "department": department,
                        "emergency_number": emergency_number.strip(),
                        "non_emergency_number": non_emergency_number or None,
                        "after_hours_number": after_hours_number or None,
                        "hours": hours or None,
                        "address": address or None,
                        "email": email or None,
                        "notes": notes or None,
                    })
                    if notify(response, "Contact created"):
                        st.rerun()
