"""
Albany Ledger Admin - Dashboard
Overview of open issues, pending questions, upcoming events and the newsletter
"""

from __future__ import annotations
from collections import Counter
from datetime import date, timedelta

import pandas as pd
import plotly.express as px
import streamlit as st

from ledger.calendar_utils import event_type_style, format_event_when
from ledger.parallel import gather
from ledger.ui import page_setup, render_badge, render_header, show_load_error
from ledger.workflow import ISSUE_STATUS_STYLES, issue_status_style

ctx = page_setup("/", "Dashboard", "📊")
render_header(ctx, "📊 Dashboard", "Welcome back. Here is what needs attention today.")

# =============================================================================
# LOAD
# =============================================================================

today = date.today()

with st.spinner("Loading dashboard..."):
    results = gather({
        "issue_stats": ctx.issues.statistics,
        "recent_issues": lambda: ctx.issues.list({"limit": 5, "sort_by": "created_at", "sort_order": "desc"}),
        "questions": lambda: ctx.questions.list({"status": "pending", "limit": 5}),
        "events": lambda: ctx.calendar.get_events(
            start_date=today.isoformat(),
            end_date=(today + timedelta(days=30)).isoformat(),
        ),
        "event_types": ctx.calendar.get_event_types,
        "newsletter": ctx.newsletter.stats,
    })

issue_stats = results["issue_stats"].data if results["issue_stats"].success else None
events = results["events"].data if results["events"].success else []
event_types = results["event_types"].data if results["event_types"].success else []
questions_page = results["questions"].data if results["questions"].success else {"questions": [], "total": 0}
newsletter_stats = results["newsletter"].data if results["newsletter"].success else {}


def _status_counts(stats) -> dict:
    """issues_by_status arrives as [{'status': .., 'count': ..}] or as a mapping."""
    by_status = (stats or {}).get("issues_by_status") or []
    if isinstance(by_status, dict):
        return {str(k): int(v) for k, v in by_status.items()}
    return {row.get("status", "unknown"): int(row.get("count", 0)) for row in by_status}


status_counts = _status_counts(issue_stats)
open_issues = sum(count for status, count in status_counts.items() if status not in ("resolved", "closed"))

# =============================================================================
# METRICS
# =============================================================================

col1, col2, col3, col4 = st.columns(4)

with col1:
    st.metric("🚧 Open Issues", open_issues if issue_stats is not None else "—")
with col2:
    st.metric("📅 Events (next 30 days)", len(events))
with col3:
    st.metric("❓ Pending Questions", questions_page.get("total", 0))
with col4:
    st.metric("✉️ Active Subscribers", newsletter_stats.get("active_subscribers", newsletter_stats.get("subscribers", "—")))

for name, label in [("issue_stats", "issue statistics"), ("events", "events"), ("questions", "questions")]:
    if not results[name].success:
        show_load_error(results[name], label, f"dashboard_{name}")

st.divider()

# =============================================================================
# CHARTS
# =============================================================================

chart_col1, chart_col2 = st.columns(2, gap="large")

with chart_col1:
    st.subheader("📊 Issues by Status")
    if status_counts:
        df = pd.DataFrame([
            {"Status": issue_status_style(status).label, "Count": count, "status": status}
            for status, count in status_counts.items()
        ])
        fig = px.bar(
            df,
            x="Status",
            y="Count",
            color="status",
            color_discrete_map={s: style.text_color for s, style in ISSUE_STATUS_STYLES.items()},
        )
        fig.update_layout(showlegend=False, height=350, margin=dict(l=10, r=10, t=10, b=10))
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("No issue statistics yet.")

with chart_col2:
    st.subheader("📅 Upcoming Events by Type")
    if events:
        counts = Counter(event.type for event in events)
        df = pd.DataFrame([
            {"Type": event_type_style(name, event_types).label, "Count": count,
             "Color": event_type_style(name, event_types).color}
            for name, count in counts.items()
        ])
        fig = px.pie(df, names="Type", values="Count", color="Type",
                     color_discrete_map=dict(zip(df["Type"], df["Color"])))
        fig.update_layout(height=350, margin=dict(l=10, r=10, t=10, b=10))
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("No events in the next 30 days.")

st.divider()

# =============================================================================
# RECENT ACTIVITY
# =============================================================================

list_col1, list_col2 = st.columns(2, gap="large")

with list_col1:
    st.subheader("🚧 Recent Issues")
    recent = results["recent_issues"]
    if not recent.success:
        show_load_error(recent, "recent issues", "dashboard_recent_issues")
    elif not recent.data["issues"]:
        st.caption("No issues reported yet.")
    else:
        for issue in recent.data["issues"]:
            col_a, col_b = st.columns([3, 1])
            with col_a:
                st.markdown(f"**{issue.title}**")
                st.caption(f"#{issue.short_id} • {issue.category_name or 'Uncategorized'} • {issue.location_address or 'No location'}")
            with col_b:
                render_badge(issue_status_style(issue.status))
        if st.button("View all issues →", key="dashboard_all_issues"):
            st.switch_page("pages/5_Issues.py")

with list_col2:
    st.subheader("❓ Pending Questions")
    if not questions_page["questions"]:
        st.caption("No questions waiting for an answer.")
    else:
        for question in questions_page["questions"]:
            st.markdown(f"**{question.question[:120]}**")
            st.caption(f"{question.submitter} • {question.category_name or 'General'}")
        if st.button("Answer questions →", key="dashboard_all_questions"):
            st.switch_page("pages/6_Questions.py")

    st.subheader("📅 Next Up")
    if events:
        for event in sorted(events, key=lambda e: e.start_date)[:5]:
            st.markdown(f"**{event.title}**")
            st.caption(format_event_when(event))
    else:
        st.caption("Nothing scheduled.")
