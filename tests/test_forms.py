from __future__ import annotations

from datetime import date, datetime

import pytest

from ledger.forms import (
    CommitteeForm,
    EventForm,
    EventTypeForm,
    LoginForm,
    NewsletterForm,
    OfficialForm,
    OfficialRegistrationForm,
    official_from_form,
    validate_form,
)
from ledger.transforms import NEW_ID_PREFIX


def event_input(**overrides):
    data = {
        "title": "Council Meeting",
        "type": "commission",
        "start_date": date(2025, 1, 6),
        "start_time": "18:00",
        "end_time": "20:00",
    }
    data.update(overrides)
    return data


def official_input(**overrides):
    data = {
        "name": "Dana Reyes",
        "role_title": "Council Member",
        "term_start": "2024-01-01",
        "term_end": "2027-12-31",
        "contact": {"email": "dreyes@albany.gov", "phone": "518-555-0100"},
        "district": "Ward 4",
    }
    data.update(overrides)
    return data


def test_timed_event_schedule():
    result = validate_form(EventForm, event_input(location="  City Hall  "))
    assert result.ok
    assert result.data.location == "City Hall"
    assert result.data.schedule() == (datetime(2025, 1, 6, 18, 0), datetime(2025, 1, 6, 20, 0))


def test_all_day_event_spans_whole_days():
    result = validate_form(EventForm, event_input(all_day=True, end_date=date(2025, 1, 7),
                                                  start_time="", end_time=""))
    assert result.ok
    start, end = result.data.schedule()
    assert start == datetime(2025, 1, 6, 0, 0)
    assert end == datetime(2025, 1, 7, 23, 59, 59)


@pytest.mark.parametrize(
    ("overrides", "field", "message"),
    [
        ({"title": "  "}, "title", "Event title is required"),
        ({"title": "x" * 256}, "title", "Event title must be less than 255 characters"),
        ({"type": ""}, "type", "Please select an event type"),
        ({"start_date": None}, "start_date", "Start date is required"),
        ({"start_date": "not-a-date"}, "start_date", "Please select a valid start date"),
        ({"start_time": "25:00"}, "start_time", "Please enter a valid time (HH:MM)"),
        ({"end_time": ""}, "start_time", "Start time and end time are required for timed events"),
        ({"end_time": "17:30"}, "end_time", "End time must be after start time"),
        ({"all_day": True}, "end_date", "End date is required for all-day events"),
        ({"all_day": True, "end_date": date(2025, 1, 5)}, "end_date", "End date cannot be before start date"),
    ],
)
def test_event_rules(overrides, field, message):
    result = validate_form(EventForm, event_input(**overrides))
    assert not result.ok
    assert result.first_error(field) == message


def test_event_type_name_is_normalised_and_checked():
    result = validate_form(EventTypeForm, {"name": "Planning-Board", "display_name": "Planning Board",
                                           "color_hex": "#ABCDEF"})
    assert result.ok
    assert result.data.name == "planning-board"
    assert result.data.color_hex == "#abcdef"

    bad = validate_form(EventTypeForm, {"name": "planning board", "display_name": "", "color_hex": "red"})
    assert set(bad.errors) == {"name", "display_name", "color_hex"}


def test_valid_official():
    result = validate_form(OfficialForm, official_input())
    assert result.ok
    assert result.data.contact.email == "dreyes@albany.gov"


def test_official_requires_contact_details():
    result = validate_form(OfficialForm, official_input(contact={}))
    assert result.first_error("contact.email") == "Please enter a valid email address"
    assert result.first_error("contact.phone") == "Phone is required"


def test_official_nested_errors_have_dotted_paths():
    result = validate_form(OfficialForm, official_input(
        experience=[
            {"title": "Principal", "organization": "Albany High", "start_date": "2010-09-01"},
            {"title": "", "organization": "City", "start_date": ""},
        ],
        committees=[{"committee_id": None, "role": "Boss"}],
        achievements=[{"title": "Award", "description": None}],
    ))
    assert not result.ok
    assert result.first_error("experience.1.title") == "Title is required"
    assert result.first_error("experience.1.start_date") == "Start date is required"
    assert result.first_error("committees.0.committee_id") == "Committee is required"
    assert result.first_error("committees.0.role") == "Role must be Chair, Vice Chair or Member"
    assert result.first_error("achievements.0.description") == "Description is required"
    assert "experience.0.title" not in result.errors


def test_official_from_form_assigns_local_ids_to_new_items():
    result = validate_form(OfficialForm, official_input(
        experience=[{"id": "e1", "title": "Principal", "organization": "Albany High", "start_date": "2010"}],
        committees=[{"committee_id": "2", "name": "Finance", "role": "Chair"}],
    ))
    official = official_from_form(result.data, official_id=7, image="https://cdn.test/d.jpg")

    assert official.id == 7
    assert official.image == "https://cdn.test/d.jpg"
    assert official.experience[0].id == "e1"
    assert official.committees[0].id.startswith(NEW_ID_PREFIX)
    assert official.committees[0].committee_id == 2
    assert official.contact.office.address_line2 == "Ward 4"
    assert official.contact.office.city == "Albany"
    assert official.status == "active"


def test_registration_requires_six_character_password():
    short = validate_form(OfficialRegistrationForm, official_input(password="12345"))
    assert short.first_error("password") == "Password must be at least 6 characters long"
    assert validate_form(OfficialRegistrationForm, official_input(password="123456")).ok


def test_committee_and_newsletter_required_fields():
    assert validate_form(CommitteeForm, {"name": " "}).first_error("name") == "Committee name is required"
    result = validate_form(NewsletterForm, {"subject": "", "markdown": ""})
    assert result.first_error("subject") == "Subject is required"
    assert result.first_error("markdown") == "Content is required"


def test_login_form_messages():
    result = validate_form(LoginForm, {"email": "nobody", "password": ""})
    assert result.first_error("email") == "Please enter a valid email address"
    assert result.first_error("password") == "Password is required"
