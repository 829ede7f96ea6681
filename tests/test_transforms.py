from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest

from ledger.models import (
    Achievement,
    CommitteeCatalogItem,
    CommitteeMembership,
    Contact,
    NewsletterIssue,
    OfficeDetails,
    Official,
    RoleExperience,
)
from ledger.transforms import (
    NEW_ID_PREFIX,
    UNKNOWN_EVENT_TYPE,
    event_from_api,
    issue_from_api,
    new_local_id,
    newsletter_issue_to_api,
    official_from_api,
    official_to_api,
    parse_datetime,
    question_from_api,
)


OFFICIAL_RECORD = {
    "id": 7,
    "name": "Dana Reyes",
    "role_title": "Council Member",
    "term_start": "2024-01-01",
    "term_end": "2027-12-31",
    "email": "dreyes@albany.gov",
    "phone": "518-555-0100",
    "district": "Ward 4",
    "office_address": "24 Eagle St",
    "office_hours": "Mon-Fri 9-5",
    "biography": "Lifelong Albany resident.",
    "image_url": "https://cdn.test/dana.jpg",
    "party": "Independent",
    "committees": [
        {"id": "c2", "committee_id": 2, "role": "Chair"},
        {"id": "c1", "committee_id": 1, "role": "Member"},
    ],
    "experience": [
        {"id": "e1", "title": "Principal", "organization": "Albany High", "start_date": "2010-09-01"},
    ],
    "achievements": [
        {"id": "a1", "title": "Park renovation", "description": "Led the effort", "period": "2022"},
    ],
}


def test_official_from_api_resolves_committee_names_from_catalog():
    catalog = [CommitteeCatalogItem(1, "Finance"), CommitteeCatalogItem(2, "Public Safety")]
    official = official_from_api(OFFICIAL_RECORD, catalog)

    assert official.name == "Dana Reyes"
    assert official.contact.office.address_line1 == "24 Eagle St"
    assert official.contact.office.address_line2 == "Ward 4"
    assert [c.name for c in official.committees] == ["Public Safety", "Finance"]
    assert official.image == "https://cdn.test/dana.jpg"


def test_official_round_trip_preserves_ids_and_order():
    payload = official_to_api(official_from_api(OFFICIAL_RECORD))

    assert [c["id"] for c in payload["committees"]] == ["c2", "c1"]
    assert [c["committee_id"] for c in payload["committees"]] == [2, 1]
    assert payload["experience"][0]["id"] == "e1"
    assert payload["achievements"][0]["id"] == "a1"
    assert payload["district"] == "Ward 4"
    assert payload["office_address"] == "24 Eagle St"


def test_official_to_api_omits_local_ids():
    official = Official(
        id=None,
        name="New Person",
        role_title="Clerk",
        term_start="2025-01-01",
        term_end="2026-01-01",
        contact=Contact(email="n@albany.gov", phone="1", office=OfficeDetails()),
        experience=[RoleExperience(id=new_local_id(), title="Aide", organization="City")],
        committees=[CommitteeMembership(id=new_local_id(), committee_id=3)],
        achievements=[Achievement(id=new_local_id(), title="Award")],
    )
    payload = official_to_api(official)

    assert "id" not in payload
    assert "id" not in payload["experience"][0]
    assert "id" not in payload["committees"][0]
    assert "id" not in payload["achievements"][0]
    assert payload["district"] == "Citywide"


def test_new_local_id_has_prefix_and_is_unique():
    first, second = new_local_id(), new_local_id()
    assert first.startswith(NEW_ID_PREFIX)
    assert first != second


def test_event_from_api_flattens_event_type():
    event = event_from_api({
        "id": 5,
        "title": "Council Meeting",
        "start_date": "2025-01-06T18:00:00Z",
        "end_date": "2025-01-06T20:00:00Z",
        "event_types": {"name": "commission"},
        "event_type_id": 9,
    })
    assert event.id == "5"
    assert event.type == "commission"
    assert event.event_type_id == "9"
    assert event.start_date == datetime(2025, 1, 6, 18, tzinfo=timezone.utc)


def test_event_without_type_relation_is_unknown_and_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="ledger"):
        event = event_from_api({"id": 1, "title": "Orphan", "start_date": "2025-02-01T10:00:00"})
    assert event.type == UNKNOWN_EVENT_TYPE
    assert event.end_date == event.start_date
    assert "missing event_types" in caplog.text


def test_parse_datetime_handles_offsets():
    value = parse_datetime("2025-03-01T12:30:00-05:00")
    assert value.utcoffset() == timedelta(hours=-5)
    with pytest.raises(ValueError):
        parse_datetime("")


def test_issue_from_api_reads_category_relation():
    issue = issue_from_api({
        "id": 12,
        "short_id": "ABC123",
        "title": "Pothole",
        "description": "Deep one",
        "status": "under_review",
        "issue_categories": {"name": "Streets"},
        "created_at": "not a date",
    })
    assert issue.short_id == "ABC123"
    assert issue.category_name == "Streets"
    assert issue.created_at is None


def test_question_anonymous_submitter():
    question = question_from_api({
        "id": 1, "question": "When is trash pickup?", "submitter_name": "Sam", "is_anonymous": True,
    })
    assert question.status == "pending"
    assert question.submitter == "Anonymous"
    assert question.short_id == "1"


def test_newsletter_issue_to_api_skips_empty_optional_fields():
    payload = newsletter_issue_to_api(NewsletterIssue(id=None, subject="Weekly", markdown="# Hi"))
    assert payload == {"subject": "Weekly", "markdown": "# Hi", "status": "draft"}
