from __future__ import annotations

import pytest

from conftest import FakeResponse
from ledger.api_client import NOT_AUTHENTICATED, ApiClient
from ledger.calendar_api import CalendarApi
from ledger.content_api import generate_slug
from ledger.documents_api import DocumentsApi, file_color, format_file_size
from ledger.issues_api import EMPTY_STATISTICS, IssuesApi
from ledger.models import Official, Question
from ledger.newsletter_api import NewsletterApi
from ledger.officials_api import OfficialsApi
from ledger.parallel import gather
from ledger.questions_api import QuestionsApi
from ledger.workflow import answer_question, change_issue_status


ISSUE = {"id": 42, "short_id": "ABC123", "title": "Pothole", "description": "Deep", "status": "submitted"}


def test_short_id_helpers_resolve_numeric_id_first(client, fake_session):
    fake_session.add("GET", "/api/issues/track/ABC123", FakeResponse(200, {"issue": ISSUE}))
    fake_session.add("PUT", "/api/issues/42/status",
                     FakeResponse(200, {"issue": {**ISSUE, "status": "resolved"}}))

    response = IssuesApi(client).update_status_by_short_id("ABC123", "resolved", "Patched")

    assert response.success
    assert response.data.status == "resolved"
    assert [c["path"] for c in fake_session.calls] == ["/api/issues/track/ABC123", "/api/issues/42/status"]
    assert fake_session.calls[1]["json"] == {"status": "resolved", "description": "Patched"}


def test_short_id_resolution_failure_is_passed_through(client, fake_session):
    fake_session.add("GET", "/api/issues/track/NOPE", FakeResponse(500, content=b"db down"))
    response = IssuesApi(client).get_updates_by_short_id("NOPE")
    assert response.error == "HTTP 500: db down"
    assert len(fake_session.calls) == 1


def test_issue_detail_loads_by_numeric_id_without_lookup(client, fake_session):
    fake_session.add("GET", "/api/issues/42/updates", FakeResponse(200, {"updates": []}))
    fake_session.add("GET", "/api/issues/42/photos", FakeResponse(200, {"photos": []}))
    api = IssuesApi(client)

    details = gather({
        "updates": lambda: api.list_updates(42),
        "photos": lambda: api.list_photos(42),
    })

    assert details["updates"].data == [] and details["photos"].data == []
    assert sorted(c["path"] for c in fake_session.calls) == ["/api/issues/42/photos", "/api/issues/42/updates"]


def test_issue_list_and_statistics_tolerate_missing_endpoints(client):
    api = IssuesApi(client)
    assert api.list().data == {"issues": [], "total": 0}
    assert api.statistics().data == EMPTY_STATISTICS
    assert api.list_categories().data == []


def test_issue_list_reads_total(client, fake_session):
    fake_session.add("GET", "/api/issues", FakeResponse(200, {"issues": [ISSUE], "total": 17}))
    data = IssuesApi(client).list({"status": "submitted"}).data
    assert data["total"] == 17
    assert data["issues"][0].short_id == "ABC123"
    assert ("status", "submitted") in fake_session.calls[0]["params"]


def test_issue_update_rejects_unknown_type(client, fake_session):
    response = IssuesApi(client).create_update(42, "hello", update_type="gossip")
    assert response.error == "Unknown update type: gossip"
    assert fake_session.calls == []


def test_malformed_issue_list_is_an_error(client, fake_session):
    fake_session.add("GET", "/api/issues", FakeResponse(200, {"items": []}))
    response = IssuesApi(client).list()
    assert not response.success
    assert response.error.startswith("Malformed response")


def test_question_answer_returns_question(client, fake_session):
    fake_session.add("PUT", "/api/questions/4/answer", FakeResponse(200, {
        "question": {"id": 4, "short_id": "Q4", "question": "When?", "status": "answered", "answer": "Soon"},
    }))
    response = QuestionsApi(client).answer(4, "Soon")
    assert response.data.status == "answered"
    assert fake_session.calls[0]["json"] == {"answer": "Soon"}


BODYLESS_REPLIES = [
    FakeResponse(204),
    FakeResponse(200, {"message": "Updated"}),
]


@pytest.mark.parametrize("reply", BODYLESS_REPLIES)
def test_status_change_without_issue_body_patches_local_copy(client, fake_session, reply):
    fake_session.add("GET", "/api/issues/track/ABC123", FakeResponse(200, {"issue": ISSUE}))
    fake_session.add("PUT", "/api/issues/42/status", reply)
    issue = IssuesApi(client).get_by_short_id("ABC123").data

    result = change_issue_status(IssuesApi(client), issue, "in_progress", "Crew assigned")

    assert result.success
    assert result.data.status == "in_progress"
    assert result.data.short_id == "ABC123"


@pytest.mark.parametrize("reply", BODYLESS_REPLIES)
def test_answer_without_question_body_marks_local_copy_answered(client, fake_session, reply):
    fake_session.add("PUT", "/api/questions/4/answer", reply)
    question = Question(id=4, short_id="Q4", question="When?", status="pending")

    result = answer_question(QuestionsApi(client), question, "Next week")

    assert result.success
    assert result.data.status == "answered"
    assert result.data.answer == "Next week"
    assert result.data.answered_at is not None


def test_events_come_back_as_view_models(client, fake_session):
    fake_session.add("GET", "/api/events", FakeResponse(200, {"events": [{
        "id": 1, "title": "Board Meeting", "start_date": "2025-01-06T18:00:00Z",
        "end_date": "2025-01-06T19:00:00Z", "event_types": {"name": "school-board"},
    }]}))
    response = CalendarApi(client).get_events(start_date="2025-01-01", end_date="2025-02-01")
    assert response.data[0].type == "school-board"
    assert ("start_date", "2025-01-01") in fake_session.calls[0]["params"]


def test_calendar_export_validates_format_and_returns_bytes(client, fake_session):
    api = CalendarApi(client)
    assert api.export_calendar("docx").error == "Unsupported export format: docx"

    fake_session.add("GET", "/api/calendar/export",
                     FakeResponse(200, content=b"%PDF-1.4", headers={"Content-Type": "application/pdf"}))
    response = api.export_calendar("pdf", event_type_ids=["1", "2"])
    assert response.data["content"] == b"%PDF-1.4"
    assert fake_session.calls[-1]["params"] == [("format", "pdf"), ("event_type_ids", "1"), ("event_type_ids", "2")]


def test_official_create_drops_id_and_unwraps_official(client, fake_session):
    fake_session.add("POST", "/api/officials", FakeResponse(201, {"official": {"id": 9, "name": "Dana"}}))
    response = OfficialsApi(client).create(Official(id=3, name="Dana", role_title="", term_start="", term_end=""))
    assert response.data.id == 9
    assert "id" not in fake_session.calls[0]["json"]


def test_profile_picture_upload_is_multipart(client, fake_session):
    fake_session.add("POST", "/api/officials/9/profile-picture", FakeResponse(200, {"image_url": "u"}))
    OfficialsApi(client).upload_profile_picture(9, "me.png", b"png", "image/png")
    call = fake_session.calls[0]
    assert call["files"] == [("file", ("me.png", b"png", "image/png"))]
    assert "Content-Type" not in call["headers"]


def test_document_create_chooses_multipart_for_files(client, fake_session):
    fake_session.add("POST", "/api/documents", FakeResponse(201, {"document": {"id": 1}}))
    api = DocumentsApi(client)

    api.create({"title": "Budget", "category_id": 2, "document_type": "file"}, ("b.pdf", b"%PDF", "application/pdf"))
    api.create({"title": "Portal", "category_id": 2, "document_type": "external_link",
                "external_url": "https://albany.gov"})

    file_call, link_call = fake_session.calls
    assert file_call["data"] == {"title": "Budget", "category_id": "2", "document_type": "file"}
    assert link_call["json"]["external_url"] == "https://albany.gov"
    assert api.create({"document_type": "video"}).error == "Unknown document type: video"


@pytest.mark.parametrize(
    ("size", "expected"),
    [(None, "Unknown"), (0, "Unknown"), (512, "512.0 Bytes"), (2048, "2.0 KB"), (5 * 1024 ** 2, "5.0 MB")],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


def test_file_color():
    assert file_color("minutes.PDF") == "#dc2626"
    assert file_color(None, "external_link") == "#2563eb"
    assert file_color("README") == "#4b5563"


def test_newsletter_footer_address_unwraps_value(client, fake_session):
    fake_session.add("GET", "/newsletter/admin/settings/footer-address",
                     FakeResponse(200, {"footer_address": "24 Eagle St, Albany NY"}))
    assert NewsletterApi(client).get_footer_address().data == "24 Eagle St, Albany NY"


def test_newsletter_send_and_test_send_paths(client, fake_session):
    fake_session.add("POST", "/newsletter/admin/issues/n1/test-send", FakeResponse(200, {"ok": True}))
    fake_session.add("POST", "/newsletter/admin/issues/n1/send", FakeResponse(200, {"sent": 120}))
    api = NewsletterApi(client)
    assert api.test_send("n1", "me@albany.gov").success
    assert api.send("n1").data == {"sent": 120}
    assert fake_session.calls[0]["json"] == {"to_email": "me@albany.gov"}


def test_signed_out_client_never_calls_domain_endpoints(fake_session):
    client = ApiClient("http://api.test", token_provider=lambda: None, session=fake_session)
    assert CalendarApi(client).get_events().error == NOT_AUTHENTICATED
    assert fake_session.calls == []


@pytest.mark.parametrize(
    ("title", "slug"),
    [("City Budget: 2025 Update!", "city-budget-2025-update"), ("  Spaces   and -- dashes ", "spaces-and-dashes")],
)
def test_generate_slug(title, slug):
    assert generate_slug(title) == slug
