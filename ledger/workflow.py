"""
Status workflows for issues, questions and newsletter issues.

The backend is the only authority on legal transitions. This module maps
statuses to display styles and wraps the status-changing calls so each one
returns the new entity for the caller to apply to its own state.
"""

from __future__ import annotations
import re
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, List

from .api_client import ApiResponse
from .issues_api import IssuesApi
from .log import get_logger
from .models import Issue, NewsletterIssue, Question
from .questions_api import QuestionsApi


logger = get_logger(__name__)


@dataclass(frozen=True)
class StatusStyle:
    label: str
    color: str       # badge background
    text_color: str  # badge foreground
    icon: str


# =============================================================================
# ISSUES
# =============================================================================

ISSUE_STATUSES = ["submitted", "under_review", "in_progress", "resolved", "closed", "on_hold"]

ISSUE_STATUS_STYLES: Dict[str, StatusStyle] = {
    "submitted": StatusStyle("Submitted", "#dbeafe", "#1e40af", "🆕"),
    "under_review": StatusStyle("Under Review", "#fef9c3", "#854d0e", "👀"),
    "in_progress": StatusStyle("In Progress", "#f3e8ff", "#6b21a8", "🕒"),
    "resolved": StatusStyle("Resolved", "#dcfce7", "#166534", "✅"),
    "closed": StatusStyle("Closed", "#f3f4f6", "#1f2937", "⛔"),
    "on_hold": StatusStyle("On Hold", "#ffedd5", "#9a3412", "⏸️"),
}

DEFAULT_STATUS_STYLE = StatusStyle("Unknown", "#f3f4f6", "#1f2937", "❔")

UPDATE_TYPE_LABELS = {
    "status_change": "Status Change",
    "message": "Message",
    "resolution": "Resolution",
    "system": "System",
}


def format_status_name(status: str) -> str:
    """'under_review' -> 'Under Review'."""
    return re.sub(r'\b\w', lambda m: m.group(0).upper(), status.replace("_", " "))


def _style_for(styles: Dict[str, StatusStyle], status: str) -> StatusStyle:
    style = styles.get(status)
    if style is None:
        return replace(DEFAULT_STATUS_STYLE, label=format_status_name(status or "unknown"))
    return style


def issue_status_style(status: str) -> StatusStyle:
    return _style_for(ISSUE_STATUS_STYLES, status)


def change_issue_status(api: IssuesApi, issue: Issue, new_status: str, description: str = "") -> ApiResponse:
    """
    Move an issue to a new status.

    No legality check is made here. An unchanged status is a successful
    no-op. On success the payload is the server's issue, or the local copy
    patched with the new status when the server returned none.
    """
    if new_status == issue.status:
        return ApiResponse.ok(issue)

    response = api.update_status_by_short_id(issue.short_id, new_status, description)
    if not response.success:
        logger.warning("Status change for issue %s failed: %s", issue.short_id, response.error)
        return response

    updated = response.data if isinstance(response.data, Issue) else None
    if updated is None:
        updated = replace(issue, status=new_status)
    logger.info("Issue %s: %s -> %s", issue.short_id, issue.status, updated.status)
    return ApiResponse.ok(updated)


# =============================================================================
# QUESTIONS
# =============================================================================

QUESTION_STATUSES = ["pending", "answered"]

QUESTION_STATUS_STYLES: Dict[str, StatusStyle] = {
    "pending": StatusStyle("Pending", "#fef9c3", "#854d0e", "⏳"),
    "answered": StatusStyle("Answered", "#dcfce7", "#166534", "✅"),
}


def question_status_style(status: str) -> StatusStyle:
    return _style_for(QUESTION_STATUS_STYLES, status)


def can_answer(question: Question) -> bool:
    """Answering is one-way: an answered question is never re-offered."""
    return question.status != "answered"


def answer_question(api: QuestionsApi, question: Question, answer: str) -> ApiResponse:
    """Answer a pending question; returns the answered Question."""
    if not can_answer(question):
        return ApiResponse.fail("Question has already been answered")
    if not answer or not answer.strip():
        return ApiResponse.fail("Answer is required")

    response = api.answer(question.id, answer.strip())
    if not response.success:
        return response

    answered = response.data if isinstance(response.data, Question) else None
    if answered is None or answered.status != "answered":
        answered = replace(question, status="answered", answer=answer.strip(),
                           answered_at=question.answered_at or datetime.now())
    return ApiResponse.ok(answered)


# =============================================================================
# NEWSLETTER
# =============================================================================

NEWSLETTER_STATUSES = ["draft", "scheduled", "sent"]

NEWSLETTER_STATUS_STYLES: Dict[str, StatusStyle] = {
    "draft": StatusStyle("Draft", "#f3f4f6", "#1f2937", "📝"),
    "scheduled": StatusStyle("Scheduled", "#dbeafe", "#1e40af", "📅"),
    "sent": StatusStyle("Sent", "#dcfce7", "#166534", "📨"),
}

NEWSLETTER_ACTIONS: Dict[str, List[str]] = {
    "draft": ["edit", "test_send", "send"],
    "scheduled": ["edit", "test_send", "cancel_schedule", "send"],
    "sent": ["view"],
}


def newsletter_status_style(status: str) -> StatusStyle:
    return _style_for(NEWSLETTER_STATUS_STYLES, status)


def newsletter_actions(issue: NewsletterIssue) -> List[str]:
    """Actions offered for an issue; sent issues are read-only."""
    return list(NEWSLETTER_ACTIONS.get(issue.status, ["view"]))


# =============================================================================
# CONTENT
# =============================================================================

CONTENT_STATUS_STYLES: Dict[str, StatusStyle] = {
    "Published": StatusStyle("Published", "#dcfce7", "#166534", "🟢"),
    "Active": StatusStyle("Active", "#dcfce7", "#166534", "🟢"),
    "Scheduled": StatusStyle("Scheduled", "#dbeafe", "#1e40af", "📅"),
    "Draft": StatusStyle("Draft", "#fef9c3", "#854d0e", "📝"),
    "Expired": StatusStyle("Expired", "#f3f4f6", "#1f2937", "⌛"),
    "Archived": StatusStyle("Archived", "#f3f4f6", "#1f2937", "🗄️"),
}

PRIORITY_STYLES: Dict[str, StatusStyle] = {
    "Critical": StatusStyle("Critical", "#fee2e2", "#991b1b", "🚨"),
    "High": StatusStyle("High", "#ffedd5", "#9a3412", "⚠️"),
    "Medium": StatusStyle("Medium", "#fef9c3", "#854d0e", "🔔"),
    "Low": StatusStyle("Low", "#dcfce7", "#166534", "ℹ️"),
}


def content_status_style(status: str) -> StatusStyle:
    return _style_for(CONTENT_STATUS_STYLES, status)


def priority_style(priority: str) -> StatusStyle:
    return _style_for(PRIORITY_STYLES, priority)
