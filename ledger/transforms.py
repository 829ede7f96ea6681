"""
Conversions between API wire shapes and local view models.

The wire format is snake_case with nested relations; the view models are
the dataclasses in ``ledger.models``. Every function here is pure: given a
well-formed payload it always returns a value, and a missing optional
relation degrades to a sentinel instead of failing.
"""

from __future__ import annotations
import uuid
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from .log import get_logger
from .models import (
    Achievement,
    CalendarEvent,
    CommitteeCatalogItem,
    CommitteeMembership,
    Contact,
    EventType,
    Issue,
    IssuePhoto,
    IssueUpdate,
    NewsletterIssue,
    OfficeDetails,
    Official,
    Question,
    RoleExperience,
    Subscriber,
)


logger = get_logger(__name__)

UNKNOWN_EVENT_TYPE = "unknown"
NEW_ID_PREFIX = "new-"


def new_local_id() -> str:
    """Id for list items created in the UI and not yet saved."""
    return f"{NEW_ID_PREFIX}{uuid.uuid4().hex[:12]}"


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First non-empty value among camelCase/snake_case spellings."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return default


def parse_datetime(value: Any) -> datetime:
    """Parse an ISO 8601 timestamp; a trailing 'Z' means UTC."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        raise ValueError(f"Invalid timestamp: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def parse_optional_datetime(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    try:
        return parse_datetime(value)
    except ValueError:
        logger.warning("Ignoring unparseable timestamp %r", value)
        return None


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# =============================================================================
# OFFICIALS
# =============================================================================

def official_from_api(
    data: Dict[str, Any],
    committees_catalog: Optional[Iterable[CommitteeCatalogItem]] = None,
) -> Official:
    """
    Build an Official from an API record.

    Args:
        data: Official record (snake_case or camelCase keys)
        committees_catalog: Optional catalog used to resolve committee names

    Returns:
        Official view model
    """
    names = {item.id: item.name for item in committees_catalog or []}

    experience = []
    for exp in data.get("experience") or []:
        experience.append(RoleExperience(
            id=str(exp.get("id") or new_local_id()),
            title=exp.get("title") or "",
            organization=exp.get("organization") or "",
            start_date=_pick(exp, "start_date", "startDate", default=""),
            end_date=_pick(exp, "end_date", "endDate", default=""),
            description=exp.get("description") or "",
        ))

    committees = []
    for comm in data.get("committees") or []:
        committee_id = int(_pick(comm, "committee_id", "committeeId", default=1))
        committees.append(CommitteeMembership(
            id=str(comm.get("id") or new_local_id()),
            committee_id=committee_id,
            name=comm.get("name") or names.get(committee_id, f"Committee {committee_id}"),
            role=comm.get("role") or "Member",
        ))

    achievements = []
    for ach in data.get("achievements") or []:
        achievements.append(Achievement(
            id=str(ach.get("id") or new_local_id()),
            title=ach.get("title") or "",
            description=ach.get("description") or "",
            period=ach.get("period") or "",
        ))

    office = OfficeDetails(
        address_line1=_pick(data, "office_address", "officeAddress", default=""),
        address_line2=data.get("district") or "",
        room=data.get("office_room"),
        hours=_pick(data, "office_hours", "officeHours", default=""),
    )

    return Official(
        id=data.get("id"),
        name=data.get("name") or "",
        role_title=_pick(data, "role_title", "roleTitle", default=""),
        term_start=_pick(data, "term_start", "termStart", default=""),
        term_end=_pick(data, "term_end", "termEnd", default=""),
        contact=Contact(
            email=data.get("email") or "",
            phone=data.get("phone") or "",
            office=office,
        ),
        biography=data.get("biography") or "",
        experience=experience,
        committees=committees,
        achievements=achievements,
        image=_pick(data, "image_url", "imageUrl"),
        party=data.get("party") or "",
        status=data.get("status") or "active",
    )


def _wire_id(local_id: str) -> Optional[str]:
    if not local_id or local_id.startswith(NEW_ID_PREFIX):
        return None
    return local_id


def official_to_api(official: Official) -> Dict[str, Any]:
    """Shape an Official for create/update requests (snake_case)."""
    payload: Dict[str, Any] = {}
    if official.id is not None:
        payload["id"] = official.id

    payload.update({
        "name": official.name,
        "role_title": official.role_title,
        "term_start": official.term_start,
        "term_end": official.term_end,
        "email": official.contact.email,
        "phone": official.contact.phone,
        "biography": official.biography or "",
        "district": official.contact.office.address_line2 or "Citywide",
        "office_address": official.contact.office.address_line1 or "",
        "office_hours": official.contact.office.hours or "",
        "status": official.status or "active",
    })
    if official.party:
        payload["party"] = official.party
    if official.image:
        payload["image_url"] = official.image
    if official.contact.office.room:
        payload["office_room"] = official.contact.office.room

    committees = []
    for comm in official.committees:
        item: Dict[str, Any] = {"committee_id": comm.committee_id or 1, "role": comm.role or "Member"}
        if _wire_id(comm.id):
            item = {"id": comm.id, **item}
        committees.append(item)

    experience = []
    for exp in official.experience:
        item = {
            "title": exp.title or "",
            "organization": exp.organization or "",
            "start_date": exp.start_date or "",
            "end_date": exp.end_date or "",
            "description": exp.description or "",
        }
        if _wire_id(exp.id):
            item = {"id": exp.id, **item}
        experience.append(item)

    achievements = []
    for ach in official.achievements:
        item = {
            "title": ach.title or "",
            "description": ach.description or "",
            "period": ach.period or "",
        }
        if _wire_id(ach.id):
            item = {"id": ach.id, **item}
        achievements.append(item)

    payload["committees"] = committees
    payload["experience"] = experience
    payload["achievements"] = achievements
    return payload


def committee_from_api(data: Dict[str, Any]) -> CommitteeCatalogItem:
    return CommitteeCatalogItem(
        id=int(data["id"]),
        name=data.get("name") or "",
        description=data.get("description") or "",
    )


# =============================================================================
# CALENDAR
# =============================================================================

def event_type_from_api(data: Dict[str, Any]) -> EventType:
    return EventType(
        id=str(data["id"]),
        name=data.get("name") or "",
        display_name=data.get("display_name") or data.get("name") or "",
        color_hex=data.get("color_hex") or "#6b7280",
    )


def event_from_api(data: Dict[str, Any]) -> CalendarEvent:
    """
    Build a CalendarEvent, flattening the nested event type to its name.

    An event delivered without its ``event_types`` relation gets the
    'unknown' type and a warning in the log.
    """
    event_type = data.get("event_types")
    if not event_type:
        logger.warning("Event missing event_types: %s %r", data.get("id"), data.get("title"))
        type_name = UNKNOWN_EVENT_TYPE
    else:
        type_name = event_type.get("name") or UNKNOWN_EVENT_TYPE

    start = parse_datetime(data["start_date"])
    end = parse_datetime(data["end_date"]) if data.get("end_date") else start

    return CalendarEvent(
        id=str(data["id"]) if data.get("id") is not None else None,
        title=data.get("title") or "",
        description=data.get("description") or None,
        start_date=start,
        end_date=end,
        all_day=bool(data.get("all_day", False)),
        type=type_name,
        location=data.get("location") or None,
        event_type_id=str(data["event_type_id"]) if data.get("event_type_id") is not None else None,
    )


def event_to_api(event: CalendarEvent, event_type_id: str) -> Dict[str, Any]:
    """Request body for creating or updating an event."""
    return {
        "title": event.title,
        "description": event.description,
        "start_date": event.start_date.isoformat(),
        "end_date": event.end_date.isoformat() if event.end_date else None,
        "all_day": bool(event.all_day),
        "event_type_id": event_type_id,
        "location": event.location,
    }


# =============================================================================
# ISSUES & QUESTIONS
# =============================================================================

def issue_update_from_api(data: Dict[str, Any]) -> IssueUpdate:
    return IssueUpdate(
        id=data["id"],
        issue_id=data.get("issue_id"),
        update_type=data.get("update_type") or "message",
        title=data.get("title"),
        description=data.get("description") or "",
        old_status=data.get("old_status"),
        new_status=data.get("new_status"),
        is_public=bool(data.get("is_public", True)),
        created_by=data.get("created_by"),
        created_at=parse_optional_datetime(data.get("created_at")),
    )


def issue_photo_from_api(data: Dict[str, Any]) -> IssuePhoto:
    return IssuePhoto(
        id=data["id"],
        issue_id=data.get("issue_id"),
        file_url=data.get("file_url") or "",
        file_name=data.get("file_name") or "",
        file_size=data.get("file_size"),
        caption=data.get("caption"),
        upload_type=data.get("upload_type") or "initial",
        sort_order=data.get("sort_order") or 0,
    )


def issue_from_api(data: Dict[str, Any]) -> Issue:
    category = data.get("issue_categories") or {}
    return Issue(
        id=data["id"],
        short_id=str(data.get("short_id") or data["id"]),
        title=data.get("title") or "",
        description=data.get("description") or "",
        status=data.get("status") or "submitted",
        category_id=data.get("category_id"),
        category_name=data.get("category_name") or category.get("name"),
        reporter_name=data.get("reporter_name") or "",
        reporter_email=data.get("reporter_email") or "",
        location_address=data.get("location_address"),
        ward=data.get("ward"),
        district=data.get("district"),
        view_count=data.get("view_count") or 0,
        created_at=parse_optional_datetime(data.get("created_at")),
        updated_at=parse_optional_datetime(data.get("updated_at")),
        photos=[issue_photo_from_api(p) for p in data.get("photos") or []],
        updates=[issue_update_from_api(u) for u in data.get("updates") or []],
    )


def question_from_api(data: Dict[str, Any]) -> Question:
    category = data.get("question_categories") or {}
    return Question(
        id=data["id"],
        short_id=str(data.get("short_id") or data["id"]),
        question=data.get("question") or "",
        status=data.get("status") or "pending",
        answer=data.get("answer"),
        answered_at=parse_optional_datetime(data.get("answered_at")),
        submitter_name=data.get("submitter_name"),
        submitter_email=data.get("submitter_email"),
        is_anonymous=bool(data.get("is_anonymous", False)),
        category_id=data.get("category_id"),
        category_name=data.get("category_name") or category.get("name"),
        created_at=parse_optional_datetime(data.get("created_at")),
    )


# =============================================================================
# NEWSLETTER
# =============================================================================

def newsletter_issue_from_api(data: Dict[str, Any]) -> NewsletterIssue:
    return NewsletterIssue(
        id=str(data["id"]) if data.get("id") is not None else None,
        subject=data.get("subject") or "",
        preheader=data.get("preheader"),
        markdown=data.get("markdown") or "",
        status=data.get("status") or "draft",
        scheduled_at=parse_optional_datetime(data.get("scheduled_at")),
        sent_at=parse_optional_datetime(data.get("sent_at")),
        created_at=parse_optional_datetime(data.get("created_at")),
    )


def newsletter_issue_to_api(issue: NewsletterIssue) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "subject": issue.subject,
        "markdown": issue.markdown,
        "status": issue.status,
    }
    if issue.preheader:
        payload["preheader"] = issue.preheader
    if issue.scheduled_at:
        payload["scheduled_at"] = _format_datetime(issue.scheduled_at)
    return payload


def subscriber_from_api(data: Dict[str, Any]) -> Subscriber:
    return Subscriber(
        id=str(data["id"]),
        email=data.get("email") or "",
        name=data.get("name"),
        status=data.get("status") or "pending",
        created_at=parse_optional_datetime(data.get("created_at")),
    )


def many(func, records: Any) -> List[Any]:
    """Apply a record transform to a list payload."""
    return [func(record) for record in records or []]
