from __future__ import annotations

import pytest

from ledger.api_client import ApiResponse
from ledger.models import Issue, NewsletterIssue, Question
from ledger.workflow import (
    DEFAULT_STATUS_STYLE,
    ISSUE_STATUS_STYLES,
    ISSUE_STATUSES,
    answer_question,
    can_answer,
    change_issue_status,
    format_status_name,
    issue_status_style,
    newsletter_actions,
    question_status_style,
)


class FakeIssuesApi:
    def __init__(self, reply: ApiResponse):
        self.reply = reply
        self.calls = []

    def update_status_by_short_id(self, short_id, status, description=""):
        self.calls.append((short_id, status, description))
        return self.reply


class FakeQuestionsApi:
    def __init__(self, reply: ApiResponse):
        self.reply = reply
        self.calls = []

    def answer(self, question_id, answer):
        self.calls.append((question_id, answer))
        return self.reply


def make_issue(status: str = "submitted") -> Issue:
    return Issue(id=1, short_id="ABC123", title="Broken light", description="Corner of State St", status=status)


def make_question(status: str = "pending") -> Question:
    return Question(id=4, short_id="Q4", question="When is leaf pickup?", status=status)


def test_every_issue_status_has_a_style():
    assert set(ISSUE_STATUS_STYLES) == set(ISSUE_STATUSES)
    assert len(ISSUE_STATUSES) == 6
    assert issue_status_style("under_review").label == "Under Review"
    assert issue_status_style("resolved").icon == "✅"


def test_unknown_status_falls_back_to_grey_default():
    style = issue_status_style("escalated_to_mayor")
    assert style.color == DEFAULT_STATUS_STYLE.color
    assert style.label == "Escalated To Mayor"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("in_progress", "In Progress"),
        ("on_hold", "On Hold"),
        ("closed", "Closed"),
    ],
)
def test_format_status_name(raw, expected):
    assert format_status_name(raw) == expected


def test_change_to_same_status_is_a_no_op():
    api = FakeIssuesApi(ApiResponse.fail("should not be called"))
    issue = make_issue("in_progress")
    result = change_issue_status(api, issue, "in_progress")
    assert result.success
    assert result.data is issue
    assert api.calls == []


def test_change_status_uses_server_issue():
    server_issue = make_issue("resolved")
    api = FakeIssuesApi(ApiResponse.ok(server_issue))
    result = change_issue_status(api, make_issue(), "resolved", "Fixed by DPW")
    assert result.data is server_issue
    assert api.calls == [("ABC123", "resolved", "Fixed by DPW")]


def test_change_status_patches_local_copy_when_server_returns_nothing():
    api = FakeIssuesApi(ApiResponse.ok(None))
    original = make_issue()
    result = change_issue_status(api, original, "closed")
    assert result.data.status == "closed"
    assert original.status == "submitted"


def test_change_status_failure_is_returned():
    api = FakeIssuesApi(ApiResponse.fail("HTTP 403: forbidden"))
    result = change_issue_status(api, make_issue(), "closed")
    assert not result.success
    assert result.error == "HTTP 403: forbidden"


def test_answered_question_cannot_be_answered_again():
    api = FakeQuestionsApi(ApiResponse.ok(None))
    question = make_question("answered")
    assert not can_answer(question)
    result = answer_question(api, question, "Again")
    assert result.error == "Question has already been answered"
    assert api.calls == []


def test_answer_is_required():
    api = FakeQuestionsApi(ApiResponse.ok(None))
    assert answer_question(api, make_question(), "   ").error == "Answer is required"
    assert api.calls == []


def test_answer_question_marks_answered():
    api = FakeQuestionsApi(ApiResponse.ok(None))
    result = answer_question(api, make_question(), "  First week of November.  ")
    assert result.success
    assert result.data.status == "answered"
    assert result.data.answer == "First week of November."
    assert api.calls == [(4, "First week of November.")]
    assert question_status_style(result.data.status).label == "Answered"


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        ("draft", ["edit", "test_send", "send"]),
        ("scheduled", ["edit", "test_send", "cancel_schedule", "send"]),
        ("sent", ["view"]),
        ("archived", ["view"]),
    ],
)
def test_newsletter_actions_by_status(status, expected):
    issue = NewsletterIssue(id="n1", subject="Weekly", markdown="Hi", status=status)
    assert newsletter_actions(issue) == expected
