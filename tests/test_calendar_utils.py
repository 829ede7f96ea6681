from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from ledger.calendar_utils import (
    UNKNOWN_TYPE_COLOR,
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
from ledger.models import CalendarEvent, EventType


def make_event(event_id="1", title="Council Meeting", start=datetime(2025, 1, 6, 18, 0),
               hours=2, type_name="commission", **kwargs) -> CalendarEvent:
    return CalendarEvent(id=event_id, title=title, start_date=start, end_date=start + timedelta(hours=hours),
                         type=type_name, **kwargs)


def test_month_grid_starts_on_sunday_and_covers_whole_weeks():
    days = get_month_days(date(2025, 1, 15))
    assert days[0] == date(2024, 12, 29)
    assert days[-1] == date(2025, 2, 1)
    assert len(days) % 7 == 0
    assert all(d.weekday() == 6 for d in days[::7])


def test_month_that_fits_four_weeks_exactly():
    days = get_month_days(date(2026, 2, 10))
    assert days[0] == date(2026, 2, 1)
    assert len(days) == 28


def test_week_days_run_sunday_to_saturday():
    days = get_week_days(datetime(2025, 1, 8, 9, 30))
    assert days[0] == date(2025, 1, 5)
    assert days[-1] == date(2025, 1, 11)


def test_is_today_uses_given_reference():
    assert is_today(datetime(2025, 3, 1, 23, 59), today=date(2025, 3, 1))
    assert not is_today(date(2025, 3, 2), today=date(2025, 3, 1))


def test_events_for_day_include_multi_day_spans():
    festival = make_event("2", "Tulip Festival", start=datetime(2025, 5, 9, 10), hours=50)
    meeting = make_event("3", start=datetime(2025, 5, 10, 18))
    assert get_events_for_day([festival, meeting], date(2025, 5, 11)) == [festival]
    assert get_events_for_day([festival, meeting], date(2025, 5, 10)) == [festival, meeting]


def test_filter_events_by_type():
    events = [make_event("1", type_name="county"), make_event("2", type_name="election")]
    assert filter_events(events, []) == events
    assert [e.id for e in filter_events(events, ["election"])] == ["2"]


def test_user_defined_event_type_wins_over_builtin():
    custom = [EventType(id="9", name="commission", display_name="Common Council", color_hex="#123456")]
    assert event_type_style("commission", custom).label == "Common Council"
    assert event_type_style("commission").label == "Commission"
    unknown = event_type_style("planning-board")
    assert unknown.label == "Planning Board"
    assert unknown.color == UNKNOWN_TYPE_COLOR


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (datetime(2025, 1, 6, 9, 5), "9:05 AM"),
        (datetime(2025, 1, 6, 0, 0), "12:00 AM"),
        (datetime(2025, 1, 6, 12, 30), "12:30 PM"),
        (datetime(2025, 1, 6, 18, 0), "6:00 PM"),
    ],
)
def test_format_time(value, expected):
    assert format_time(value) == expected


def test_format_date_and_event_when():
    assert format_date(date(2025, 1, 6)) == "Monday, January 6, 2025"
    assert format_event_when(make_event()) == "Monday, January 6, 2025, 6:00 PM - 8:00 PM"
    all_day = make_event(start=datetime(2025, 1, 6), hours=23, all_day=True)
    assert format_event_when(all_day) == "Monday, January 6, 2025 (all day)"


def test_ics_export_structure():
    events = [
        make_event("1", "Budget, Hearing", start=datetime(2025, 1, 6, 18, tzinfo=timezone(timedelta(hours=-5))),
                   description="Line one\nLine two", location="City Hall; Room 200"),
        make_event("2", "Election Day", type_name="election"),
    ]
    text = events_to_ics(events)
    lines = text.split("\r\n")

    assert lines[0] == "BEGIN:VCALENDAR"
    assert lines[-1] == "END:VCALENDAR"
    assert text.count("BEGIN:VEVENT") == 2
    assert "UID:1@calendar-app.com" in lines
    assert "DTSTART:20250106T230000Z" in lines
    assert "SUMMARY:Budget\\, Hearing" in lines
    assert "DESCRIPTION:Line one\\nLine two" in lines
    assert "LOCATION:City Hall\\; Room 200" in lines
    assert "CATEGORIES:Election" in lines


def test_ics_naive_times_are_floating_not_utc():
    lines = events_to_ics([make_event(start=datetime(2025, 1, 6, 18, 0))]).split("\r\n")
    assert "DTSTART:20250106T180000" in lines
    assert "DTEND:20250106T200000" in lines


def test_csv_export_has_header_and_rows():
    csv_text = events_to_csv([make_event(location="City Hall")])
    rows = csv_text.strip().splitlines()
    assert rows[0] == "Title,Type,Start,End,All Day,Location,Description"
    assert rows[1].startswith("Council Meeting,Commission,2025-01-06 18:00,2025-01-06 20:00,No,City Hall")


def test_pdf_export_produces_pdf_bytes():
    assert events_to_pdf([make_event()]).startswith(b"%PDF")
    assert events_to_pdf([]).startswith(b"%PDF")
