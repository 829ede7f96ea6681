"""
Community Calendar
Month and week views, event editing, event types and export
"""

from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import Optional

import streamlit as st

from ledger.calendar_api import EXPORT_FORMATS
from ledger.calendar_utils import (
    event_type_style,
    events_to_csv,
    events_to_ics,
    events_to_pdf,
    filter_events,
    format_date,
    format_event_when,
    format_time,
    get_events_for_day,
    get_month_days,
    get_week_days,
    is_today,
)
from ledger.forms import EventForm, EventTypeForm, validate_form
from ledger.models import CalendarEvent
from ledger.ui import (
    color_chip_html,
    confirm_button,
    notify,
    page_setup,
    render_header,
    show_field_errors,
    show_load_error,
)

ctx = page_setup("/calendar", "Calendar", "📅")
render_header(ctx, "📅 Community Calendar", "Commission meetings, county sessions, school board and elections.")

EXPORT_MIME = {
    "ics": "text/calendar",
    "csv": "text/csv",
    "pdf": "application/pdf",
}

if "calendar_anchor" not in st.session_state:
    st.session_state.calendar_anchor = date.today()

# =============================================================================
# TOOLBAR
# =============================================================================

col_prev, col_today, col_next, col_view, col_label = st.columns([1, 1, 1, 2, 4])
view = col_view.radio("View", ["Month", "Week"], horizontal=True, label_visibility="collapsed", key="calendar_view")
step = timedelta(days=7) if view == "Week" else None

with col_prev:
    if st.button("◀", key="calendar_prev", use_container_width=True):
        anchor = st.session_state.calendar_anchor
        st.session_state.calendar_anchor = anchor - step if step else (anchor.replace(day=1) - timedelta(days=1)).replace(day=1)
        st.rerun()
with col_today:
    if st.button("Today", key="calendar_today", use_container_width=True):
        st.session_state.calendar_anchor = date.today()
        st.rerun()
with col_next:
    if st.button("▶", key="calendar_next", use_container_width=True):
        anchor = st.session_state.calendar_anchor
        st.session_state.calendar_anchor = anchor + step if step else (anchor.replace(day=28) + timedelta(days=4)).replace(day=1)
        st.rerun()

anchor = st.session_state.calendar_anchor
days = get_week_days(anchor) if view == "Week" else get_month_days(anchor)
with col_label:
    st.markdown(f"### {anchor.strftime('%B %Y')}")

# =============================================================================
# LOAD
# =============================================================================

with st.spinner("Loading events..."):
    types_response = ctx.calendar.get_event_types()
    events_response = ctx.calendar.get_events(
        start_date=days[0].isoformat(),
        end_date=(days[-1] + timedelta(days=1)).isoformat(),
    )

event_types = types_response.data if types_response.success else []
if not types_response.success:
    show_load_error(types_response, "event types", "event_types")

type_labels = {t.name: t.display_name for t in event_types}
selected_types = st.multiselect(
    "Filter by type",
    options=list(type_labels.keys()),
    format_func=lambda name: type_labels.get(name, name),
    key="calendar_type_filter",
)

if not events_response.success:
    show_load_error(events_response, "events", "events")
    events = []
else:
    events = filter_events(events_response.data, selected_types)

# =============================================================================
# GRID
# =============================================================================

header_cols = st.columns(7)
for col, name in zip(header_cols, ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]):
    col.markdown(f"**{name}**")

for week_start in range(0, len(days), 7):
    cols = st.columns(7)
    for col, day in zip(cols, days[week_start:week_start + 7]):
        with col:
            with st.container(border=True):
                label = f"**{day.day}**" if day.month == anchor.month or view == "Week" else f"<span style='opacity:.4'>{day.day}</span>"
                if is_today(day):
                    label = f"🔶 {label}"
                st.markdown(label, unsafe_allow_html=True)
                day_events = get_events_for_day(events, day)
                for event in day_events[:4 if view == "Month" else 20]:
                    style = event_type_style(event.type, event_types)
                    when = "" if event.all_day else f"{format_time(event.start_date)} "
                    st.markdown(color_chip_html(style.color, f"{when}{event.title[:24]}"), unsafe_allow_html=True)
                if view == "Month" and len(day_events) > 4:
                    st.caption(f"+{len(day_events) - 4} more")

st.divider()

# =============================================================================
# EVENT DETAILS
# =============================================================================


def event_form(existing: Optional[CalendarEvent] = None, key: str = "event_new") -> None:
    type_by_name = {t.name: t for t in event_types}
    with st.form(key):
        title = st.text_input("Title *", value=existing.title if existing else "")
        type_names = list(type_by_name.keys())
        type_index = type_names.index(existing.type) if existing and existing.type in type_names else None
        type_name = st.selectbox("Type *", type_names, index=type_index,
                                 format_func=lambda n: type_by_name[n].display_name, placeholder="Select a type")
        all_day = st.checkbox("All day", value=existing.all_day if existing else False)
        col_a, col_b = st.columns(2)
        with col_a:
            start_date = st.date_input("Start date *", value=existing.start_date.date() if existing else anchor)
            start_time = st.text_input("Start time (HH:MM)",
                                       value=existing.start_date.strftime("%H:%M") if existing and not existing.all_day else "")
        with col_b:
            end_date = st.date_input("End date", value=existing.end_date.date() if existing else anchor)
            end_time = st.text_input("End time (HH:MM)",
                                     value=existing.end_date.strftime("%H:%M") if existing and not existing.all_day else "")
        location = st.text_input("Location", value=(existing.location or "") if existing else "")
        description = st.text_area("Description", value=(existing.description or "") if existing else "")
        submitted = st.form_submit_button("💾 Save Event", type="primary")

    if not submitted:
        return

    result = validate_form(EventForm, {
        "title": title,
        "type": type_name or "",
        "all_day": all_day,
        "start_date": start_date,
        "end_date": end_date if all_day else None,
        "start_time": start_time,
        "end_time": end_time,
        "location": location,
        "description": description,
    })
    if not result.ok:
        show_field_errors(result.errors)
        return

    form = result.data
    start, end = form.schedule()
    event_type = type_by_name[form.type]
    event = CalendarEvent(
        id=existing.id if existing else None,
        title=form.title,
        description=form.description or None,
        start_date=start,
        end_date=end,
        all_day=form.all_day,
        type=event_type.name,
        location=form.location,
        event_type_id=event_type.id,
    )
    if existing:
        response = ctx.calendar.update_event(existing.id, event, event_type.id)
    else:
        response = ctx.calendar.create_event(event, event_type.id)
    if notify(response, f"Saved \"{event.title}\""):
        st.session_state.pop("calendar_editing", None)
        st.rerun()


col_list, col_side = st.columns([3, 2], gap="large")

with col_list:
    st.subheader("🗓️ Events in View")
    if not events:
        st.info("No events in this range.")
    for event in sorted(events, key=lambda e: e.start_date):
        style = event_type_style(event.type, event_types)
        with st.expander(f"{event.title} — {format_date(event.start_date)}"):
            st.markdown(color_chip_html(style.color, style.label), unsafe_allow_html=True)
            st.caption(format_event_when(event))
            if event.location:
                st.markdown(f"📍 {event.location}")
            if event.description:
                st.markdown(event.description)

            if st.session_state.get("calendar_editing") == event.id:
                event_form(event, key=f"event_edit_{event.id}")
                if st.button("Cancel", key=f"event_cancel_{event.id}"):
                    st.session_state.pop("calendar_editing", None)
                    st.rerun()
            else:
                b1, b2 = st.columns(2)
                with b1:
                    if st.button("✏️ Edit", key=f"event_edit_btn_{event.id}"):
                        st.session_state.calendar_editing = event.id
                        st.rerun()
                with b2:
                    if confirm_button("🗑️ Delete", key=f"event_delete_{event.id}",
                                      prompt=f"Delete \"{event.title}\"?"):
                        if notify(ctx.calendar.delete_event(event.id), "Event deleted"):
                            st.rerun()

with col_side:
    st.subheader("➕ New Event")
    if event_types:
        event_form()
    else:
        st.caption("Create an event type first.")

    st.subheader("📥 Export")
    export_format = st.selectbox("Format", EXPORT_FORMATS, format_func=str.upper, key="calendar_export_format")
    source = st.radio("Source", ["Server", "Events in view"], horizontal=True, key="calendar_export_source")
    if st.button("Prepare export", key="calendar_export"):
        if source == "Server":
            response = ctx.calendar.export_calendar(
                export_format,
                start_date=days[0].isoformat(),
                end_date=days[-1].isoformat(),
                event_type_ids=[t.id for t in event_types if t.name in selected_types] or None,
            )
            if response.success:
                st.session_state.calendar_export_file = response.data["content"]
            else:
                st.error(f"❌ Export failed: {response.error}")
                st.session_state.pop("calendar_export_file", None)
        else:
            if export_format == "ics":
                st.session_state.calendar_export_file = events_to_ics(events, event_types).encode("utf-8")
            elif export_format == "csv":
                st.session_state.calendar_export_file = events_to_csv(events, event_types).encode("utf-8")
            else:
                with st.spinner("Generating PDF..."):
                    st.session_state.calendar_export_file = events_to_pdf(events, event_types)

    if st.session_state.get("calendar_export_file"):
        st.download_button(
            label=f"📥 Download {export_format.upper()}",
            data=st.session_state.calendar_export_file,
            file_name=f"calendar-events-{datetime.now().strftime('%Y%m%d')}.{export_format}",
            mime=EXPORT_MIME[export_format],
        )

    # Event types
    st.subheader("🏷️ Event Types")
    for event_type in event_types:
        col_a, col_b = st.columns([3, 1])
        with col_a:
            st.markdown(color_chip_html(event_type.color_hex, event_type.display_name), unsafe_allow_html=True)
            st.caption(f"{event_type.name} • {event_type.color_hex}")
        with col_b:
            if confirm_button("🗑️", key=f"event_type_delete_{event_type.id}",
                              prompt=f"Delete type \"{event_type.display_name}\"?"):
                if notify(ctx.calendar.delete_event_type(event_type.id), "Event type deleted"):
                    st.rerun()
        with st.expander(f"✏️ Edit {event_type.display_name}"):
            with st.form(f"event_type_edit_{event_type.id}"):
                display_name = st.text_input("Display name", value=event_type.display_name)
                color_hex = st.color_picker("Color", value=event_type.color_hex)
                if st.form_submit_button("💾 Save"):
                    result = validate_form(EventTypeForm, {
                        "name": event_type.name, "display_name": display_name, "color_hex": color_hex,
                    })
                    if not result.ok:
                        show_field_errors(result.errors)
                    elif notify(ctx.calendar.update_event_type(event_type.id, {
                        "display_name": result.data.display_name, "color_hex": result.data.color_hex,
                    }), "Event type updated"):
                        st.rerun()

    with st.expander("➕ New Event Type"):
        with st.form("event_type_create"):
            display_name = st.text_input("Display name", placeholder="Planning Board")
            name = st.text_input("Key", placeholder="planning-board")
            color_hex = st.color_picker("Color", value="#d36530")
            if st.form_submit_button("💾 Create Type", type="primary"):
                result = validate_form(EventTypeForm, {
                    "name": name or display_name.strip().lower().replace(" ", "-"),
                    "display_name": display_name,
                    "color_hex": color_hex,
                })
                if not result.ok:
                    show_field_errors(result.errors)
                elif notify(ctx.calendar.create_event_type(result.data.name, result.data.display_name,
                                                           result.data.color_hex), "Event type created"):
                    st.rerun()
