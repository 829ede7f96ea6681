"""
Calendar grid helpers and local export formats.

Exports built here back the calendar page when the backend export endpoint
is unavailable: ICS text, a pandas CSV and a reportlab PDF.
"""

from __future__ import annotations
import io
from html import escape
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Union

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .models import CalendarEvent, EventType
from .workflow import format_status_name


DateLike = Union[date, datetime]

ICS_PRODID = "-//Calendar App//Calendar App//EN"
ICS_UID_DOMAIN = "calendar-app.com"
UNKNOWN_TYPE_COLOR = "#6b7280"


@dataclass(frozen=True)
class TypeStyle:
    label: str
    color: str


EVENT_TYPE_CONFIG: Dict[str, TypeStyle] = {
    "commission": TypeStyle("Commission", "#d36530"),
    "county": TypeStyle("County", "#059669"),
    "school-board": TypeStyle("School Board", "#7c3aed"),
    "election": TypeStyle("Election", "#dc2626"),
}


def event_type_style(type_name: str, event_types: Optional[Iterable[EventType]] = None) -> TypeStyle:
    """
    Colour and label for an event type name.

    User-defined types from the backend win over the built-in table; an
    unknown name gets a grey badge labelled after the name itself.
    """
    for event_type in event_types or []:
        if event_type.name == type_name:
            return TypeStyle(event_type.display_name or event_type.name, event_type.color_hex)
    if type_name in EVENT_TYPE_CONFIG:
        return EVENT_TYPE_CONFIG[type_name]
    return TypeStyle(format_status_name((type_name or "unknown").replace("-", " ")), UNKNOWN_TYPE_COLOR)


# =============================================================================
# GRID
# =============================================================================

def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def _sunday_index(day: date) -> int:
    # Python weeks start on Monday (0); the grid starts on Sunday
    return (day.weekday() + 1) % 7


def get_week_days(value: DateLike) -> List[date]:
    """The seven days (Sunday first) of the week containing ``value``."""
    day = _as_date(value)
    start = day - timedelta(days=_sunday_index(day))
    return [start + timedelta(days=i) for i in range(7)]


def get_month_days(value: DateLike) -> List[date]:
    """Every day shown on a month grid: full Sunday-to-Saturday weeks."""
    day = _as_date(value)
    first = day.replace(day=1)
    next_month = (first + timedelta(days=32)).replace(day=1)
    last = next_month - timedelta(days=1)

    start = first - timedelta(days=_sunday_index(first))
    end = last + timedelta(days=6 - _sunday_index(last))
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def is_same_day(a: DateLike, b: DateLike) -> bool:
    return _as_date(a) == _as_date(b)


def is_today(value: DateLike, today: Optional[date] = None) -> bool:
    return is_same_day(value, today or date.today())


def get_events_for_day(events: Sequence[CalendarEvent], day: DateLike) -> List[CalendarEvent]:
    """Events that start, end or span across ``day``."""
    target = _as_date(day)
    found = []
    for event in events:
        start = _as_date(event.start_date)
        end = _as_date(event.end_date)
        if start <= target <= end:
            found.append(event)
    return found


def filter_events(events: Sequence[CalendarEvent], type_names: Optional[Iterable[str]]) -> List[CalendarEvent]:
    """Keep events whose type is selected; no selection keeps everything."""
    selected = set(type_names or [])
    if not selected:
        return list(events)
    return [event for event in events if event.type in selected]


def format_date(value: DateLike) -> str:
    """e.g. 'Monday, January 6, 2025'"""
    day = _as_date(value)
    return f"{day.strftime('%A, %B')} {day.day}, {day.year}"


def format_time(value: Union[datetime, time]) -> str:
    """e.g. '9:05 AM'"""
    hour = value.hour % 12 or 12
    return f"{hour}:{value.minute:02d} {'AM' if value.hour < 12 else 'PM'}"


def format_event_when(event: CalendarEvent) -> str:
    if event.all_day:
        if is_same_day(event.start_date, event.end_date):
            return f"{format_date(event.start_date)} (all day)"
        return f"{format_date(event.start_date)} - {format_date(event.end_date)}"
    return f"{format_date(event.start_date)}, {format_time(event.start_date)} - {format_time(event.end_date)}"


# =============================================================================
# EXPORT
# =============================================================================

def _ics_timestamp(value: datetime) -> str:
    # Naive datetimes are local wall-clock times: emit them as floating times
    if value.tzinfo is None:
        return value.strftime("%Y%m%dT%H%M%S")
    return value.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _ics_text(value: Optional[str]) -> str:
    if not value:
        return ""
    return (value.replace("\\", "\\\\")
                 .replace(";", "\\;")
                 .replace(",", "\\,")
                 .replace("\r\n", "\\n")
                 .replace("\n", "\\n"))


def events_to_ics(events: Sequence[CalendarEvent], event_types: Optional[Iterable[EventType]] = None) -> str:
    """iCalendar text, CRLF line endings, one VEVENT per event."""
    types = list(event_types or [])
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{ICS_PRODID}",
        "CALSCALE:GREGORIAN",
    ]
    for event in events:
        lines.extend([
            "BEGIN:VEVENT",
            f"UID:{event.id}@{ICS_UID_DOMAIN}",
            f"DTSTART:{_ics_timestamp(event.start_date)}",
            f"DTEND:{_ics_timestamp(event.end_date)}",
            f"SUMMARY:{_ics_text(event.title)}",
            f"DESCRIPTION:{_ics_text(event.description)}",
            f"LOCATION:{_ics_text(event.location)}",
            f"CATEGORIES:{_ics_text(event_type_style(event.type, types).label)}",
            "END:VEVENT",
        ])
    lines.append("END:VCALENDAR")
    return "\r\n".join(lines)


def events_to_dataframe(events: Sequence[CalendarEvent], event_types: Optional[Iterable[EventType]] = None) -> pd.DataFrame:
    types = list(event_types or [])
    rows = []
    for event in events:
        rows.append({
            "Title": event.title,
            "Type": event_type_style(event.type, types).label,
            "Start": event.start_date.strftime("%Y-%m-%d") if event.all_day else event.start_date.strftime("%Y-%m-%d %H:%M"),
            "End": event.end_date.strftime("%Y-%m-%d") if event.all_day else event.end_date.strftime("%Y-%m-%d %H:%M"),
            "All Day": "Yes" if event.all_day else "No",
            "Location": event.location or "",
            "Description": event.description or "",
        })
    return pd.DataFrame(rows, columns=["Title", "Type", "Start", "End", "All Day", "Location", "Description"])


def events_to_csv(events: Sequence[CalendarEvent], event_types: Optional[Iterable[EventType]] = None) -> str:
    return events_to_dataframe(events, event_types).to_csv(index=False)


def events_to_pdf(
    events: Sequence[CalendarEvent],
    event_types: Optional[Iterable[EventType]] = None,
    title: str = "Albany Ledger Calendar",
) -> bytes:
    """Generate a PDF listing of events."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=landscape(letter))
    story = []
    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        'CalendarTitle',
        parent=styles['Heading1'],
        fontSize=20,
        textColor=colors.HexColor('#d36530'),
        spaceAfter=12,
    )
    cell_style = ParagraphStyle('CalendarCell', parent=styles['Normal'], fontSize=9, leading=11)

    story.append(Paragraph(title, title_style))
    story.append(Paragraph(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}", styles['Normal']))
    story.append(Spacer(1, 0.2 * inch))

    df = events_to_dataframe(events, event_types)
    if df.empty:
        story.append(Paragraph("No events in the selected range.", styles['Normal']))
    else:
        columns = ["Title", "Type", "Start", "End", "Location"]
        table_data = [columns]
        for _, row in df.iterrows():
            table_data.append([Paragraph(escape(str(row[col])), cell_style) for col in columns])

        table = Table(table_data, colWidths=[3 * inch, 1.3 * inch, 1.4 * inch, 1.4 * inch, 2.4 * inch], repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#5e6461')),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f2f0e3')]),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#d1d5db')),
        ]))
        story.append(table)

    doc.build(story)
    buffer.seek(0)
    return buffer.getvalue()
