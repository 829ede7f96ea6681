"""
Newsletter
Compose, schedule and send the newsletter; subscribers and delivery settings
"""

from __future__ import annotations
from datetime import date, datetime, time, timedelta
from typing import Optional

import pandas as pd
import streamlit as st

from ledger.forms import EMAIL_PATTERN, NewsletterForm, validate_form
from ledger.markdown import NEWSLETTER_CLASSES, render_markdown
from ledger.models import NewsletterIssue
from ledger.transforms import newsletter_issue_to_api
from ledger.ui import (
    badge_html,
    confirm_button,
    notify,
    page_setup,
    render_header,
    show_field_errors,
    show_load_error,
)
from ledger.workflow import NEWSLETTER_STATUSES, newsletter_actions, newsletter_status_style

ctx = page_setup("/newsletter", "Newsletter", "✉️")
render_header(ctx, "✉️ Newsletter", "Write issues in Markdown, test them, then send or schedule.")


def newsletter_editor(existing: Optional[NewsletterIssue], key: str) -> None:
    """Editor with a live preview of the rendered email body."""
    col_edit, col_preview = st.columns(2, gap="large")
    with col_edit:
        subject = st.text_input("Subject *", value=existing.subject if existing else "", key=f"{key}_subject")
        preheader = st.text_input("Preheader", value=(existing.preheader or "") if existing else "",
                                  key=f"{key}_preheader", help="Preview text shown by mail clients")
        body = st.text_area("Content (Markdown) *", value=existing.markdown if existing else "",
                            height=420, key=f"{key}_markdown")
        schedule = st.checkbox("Schedule delivery",
                               value=bool(existing and existing.scheduled_at), key=f"{key}_schedule")
        scheduled_at = None
        if schedule:
            default = existing.scheduled_at if existing and existing.scheduled_at else datetime.now() + timedelta(days=1)
            c1, c2 = st.columns(2)
            send_date = c1.date_input("Send date", value=default.date(), min_value=date.today(), key=f"{key}_date")
            send_time = c2.time_input("Send time", value=time(default.hour, default.minute), key=f"{key}_time")
            scheduled_at = datetime.combine(send_date, send_time)

    with col_preview:
        st.markdown("**Preview**")
        with st.container(border=True):
            st.markdown(f"#### {subject or '(no subject)'}")
            if preheader:
                st.caption(preheader)
            st.markdown(render_markdown(body, NEWSLETTER_CLASSES), unsafe_allow_html=True)

    if st.button("💾 Save Issue", type="primary", key=f"{key}_save"):
        result = validate_form(NewsletterForm, {
            "subject": subject,
            "preheader": preheader or None,
            "markdown": body,
            "scheduled_at": scheduled_at,
        })
        if not result.ok:
            show_field_errors(result.errors)
            return
        form = result.data
        issue = NewsletterIssue(
            id=existing.id if existing else None,
            subject=form.subject,
            markdown=form.markdown,
            preheader=form.preheader,
            scheduled_at=form.scheduled_at,
            status="scheduled" if form.scheduled_at else "draft",
        )
        if existing:
            response = ctx.newsletter.update(existing.id, newsletter_issue_to_api(issue))
        else:
            response = ctx.newsletter.create(issue)
        if notify(response, f"Saved \"{issue.subject}\""):
            st.session_state.pop("newsletter_editing", None)
            st.rerun()


tab_issues, tab_compose, tab_subscribers, tab_settings = st.tabs(
    ["📰 Issues", "✍️ Compose", "👥 Subscribers", "⚙️ Settings"]
)

# =============================================================================
# ISSUES
# =============================================================================

with tab_issues:
    status_filter = st.selectbox("Status", ["All"] + NEWSLETTER_STATUSES, key="newsletter_status")
    with st.spinner("Loading issues..."):
        response = ctx.newsletter.list(status=None if status_filter == "All" else status_filter)

    if not response.success:
        show_load_error(response, "newsletter issues", "newsletter_issues")
    elif not response.data:
        st.info("No newsletter issues yet. Start one in the Compose tab.")
    else:
        for issue in response.data:
            actions = newsletter_actions(issue)
            with st.container(border=True):
                col_a, col_b = st.columns([4, 1])
                with col_a:
                    st.markdown(f"**{issue.subject}**")
                    if issue.preheader:
                        st.caption(issue.preheader)
                    if issue.status == "scheduled" and issue.scheduled_at:
                        st.caption(f"📅 Scheduled for {issue.scheduled_at.strftime('%b %d, %Y %I:%M %p')}")
                    elif issue.status == "sent" and issue.sent_at:
                        st.caption(f"📨 Sent {issue.sent_at.strftime('%b %d, %Y %I:%M %p')}")
                with col_b:
                    st.markdown(badge_html(newsletter_status_style(issue.status)), unsafe_allow_html=True)

                editing = st.session_state.get("newsletter_editing") == issue.id
                if editing and "edit" in actions:
                    newsletter_editor(issue, key=f"newsletter_edit_{issue.id}")
                    if st.button("Cancel", key=f"newsletter_cancel_{issue.id}"):
                        st.session_state.pop("newsletter_editing", None)
                        st.rerun()
                    continue

                if "view" in actions:
                    with st.expander("👁️ View"):
                        st.markdown(render_markdown(issue.markdown, NEWSLETTER_CLASSES), unsafe_allow_html=True)

                cols = st.columns(4)
                if "edit" in actions:
                    with cols[0]:
                        if st.button("✏️ Edit", key=f"newsletter_edit_btn_{issue.id}"):
                            st.session_state.newsletter_editing = issue.id
                            st.rerun()
                if "cancel_schedule" in actions:
                    with cols[1]:
                        if st.button("⏹️ Unschedule", key=f"newsletter_unschedule_{issue.id}"):
                            if notify(ctx.newsletter.cancel_schedule(issue.id), "Schedule cancelled"):
                                st.rerun()
                if "send" in actions:
                    with cols[2]:
                        if confirm_button("📨 Send now", key=f"newsletter_send_{issue.id}",
                                          prompt=f"Send \"{issue.subject}\" to all active subscribers?"):
                            if notify(ctx.newsletter.send(issue.id), "Newsletter sent"):
                                st.rerun()
                if "test_send" in actions:
                    with st.expander("🧪 Send a test"):
                        default_email = ctx.session.email if ctx.session else ""
                        to_email = st.text_input("Send test to", value=default_email, key=f"newsletter_test_{issue.id}")
                        if st.button("Send test", key=f"newsletter_test_btn_{issue.id}"):
                            if not EMAIL_PATTERN.match(to_email.strip()):
                                st.error("Please enter a valid email address")
                            else:
                                notify(ctx.newsletter.test_send(issue.id, to_email.strip()),
                                       f"Test sent to {to_email.strip()}")

# =============================================================================
# COMPOSE
# =============================================================================

with tab_compose:
    newsletter_editor(None, key="newsletter_new")

# =============================================================================
# SUBSCRIBERS
# =============================================================================

with tab_subscribers:
    summary = ctx.newsletter.subscriber_summary()
    stats = ctx.newsletter.stats()
    if summary.success:
        col1, col2, col3 = st.columns(3)
        col1.metric("Active", summary.data.get("active", 0))
        col2.metric("Pending", summary.data.get("pending", 0))
        col3.metric("Unsubscribed", summary.data.get("unsubscribed", 0))
    if stats.success and stats.data:
        with st.expander("📈 Delivery stats"):
            st.json(stats.data)

    sub_status = st.selectbox("Status", ["All", "active", "pending", "unsubscribed"], key="subscriber_status")
    subscribers = ctx.newsletter.list_subscribers(limit=500, status=None if sub_status == "All" else sub_status)
    if not subscribers.success:
        show_load_error(subscribers, "subscribers", "subscribers")
    elif not subscribers.data:
        st.info("No subscribers.")
    else:
        df = pd.DataFrame([{
            "Email": s.email,
            "Name": s.name or "",
            "Status": s.status,
            "Joined": s.created_at.strftime("%Y-%m-%d") if s.created_at else "",
        } for s in subscribers.data])
        st.dataframe(df, use_container_width=True, hide_index=True)
        st.download_button("📥 Download CSV", df.to_csv(index=False),
                           file_name=f"subscribers-{date.today().isoformat()}.csv", mime="text/csv")

# =============================================================================
# SETTINGS
# =============================================================================

with tab_settings:
    st.markdown("### 🏢 Footer Address")
    st.caption("Printed at the bottom of every newsletter.")
    footer = ctx.newsletter.get_footer_address()
    if not footer.success:
        show_load_error(footer, "footer address", "footer_address")
    else:
        with st.form("footer_address"):
            address = st.text_area("Mailing address", value=footer.data or "")
            if st.form_submit_button("💾 Save"):
                notify(ctx.newsletter.set_footer_address(address.strip()), "Footer address saved")

    st.markdown("### ⏱️ Scheduled Delivery")
    if st.button("Process scheduled issues now", key="newsletter_process"):
        result = ctx.newsletter.process_scheduled()
        if notify(result, "Scheduled issues processed"):
            st.caption(f"Processed: {result.data.get('processed', 0)}")
