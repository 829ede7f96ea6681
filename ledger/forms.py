"""
Form validation models.

Every editor validates its input here before any request is made. Errors
come back per field (dotted paths for nested items, e.g.
``experience.0.title``) so pages can show them next to the inputs.
"""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .models import Achievement, CommitteeMembership, Contact, OfficeDetails, Official, RoleExperience
from .transforms import new_local_id


TIME_PATTERN = re.compile(r'^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$')
EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
HEX_COLOR_PATTERN = re.compile(r'^#[0-9A-Fa-f]{6}$')
TYPE_NAME_PATTERN = re.compile(r'^[a-z0-9]+(-[a-z0-9]+)*$')

COMMITTEE_ROLES = ("Chair", "Vice Chair", "Member")


class FieldError(ValueError):
    """A cross-field check failure reported against one field."""

    def __init__(self, field_name: str, message: str):
        super().__init__(message)
        self.field_name = field_name


def _require(value: Optional[str], message: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(message)
    return str(value).strip()


def _minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class _Form(BaseModel):
    model_config = ConfigDict(validate_default=True, str_strip_whitespace=True)

    # Replacement messages for type errors on specific fields
    invalid_messages: ClassVar[Dict[str, str]] = {}


# =============================================================================
# CALENDAR
# =============================================================================

class EventForm(_Form):
    title: str = ""
    description: Optional[str] = None
    type: str = ""
    location: Optional[str] = None
    all_day: bool = False
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    invalid_messages: ClassVar[Dict[str, str]] = {
        "start_date": "Please select a valid start date",
        "end_date": "Please select a valid end date",
    }

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v: str) -> str:
        v = _require(v, "Event title is required")
        if len(v) > 255:
            raise ValueError("Event title must be less than 255 characters")
        return v

    @field_validator("type", mode="before")
    @classmethod
    def check_type(cls, v: str) -> str:
        return _require(v, "Please select an event type")

    @field_validator("location", mode="before")
    @classmethod
    def check_location(cls, v: Optional[str]) -> Optional[str]:
        v = (v or "").strip()
        if len(v) > 255:
            raise ValueError("Location must be less than 255 characters")
        return v or None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def check_time(cls, v: Optional[str]) -> Optional[str]:
        v = (v or "").strip()
        if not v:
            return None
        if not TIME_PATTERN.match(v):
            raise ValueError("Please enter a valid time (HH:MM)")
        return v

    @model_validator(mode="after")
    def check_schedule(self) -> "EventForm":
        if self.start_date is None:
            raise FieldError("start_date", "Start date is required")
        if self.all_day:
            if self.end_date is None:
                raise FieldError("end_date", "End date is required for all-day events")
            if self.end_date < self.start_date:
                raise FieldError("end_date", "End date cannot be before start date")
        else:
            if not self.start_time or not self.end_time:
                raise FieldError("start_time", "Start time and end time are required for timed events")
            if _minutes(self.end_time) <= _minutes(self.start_time):
                raise FieldError("end_time", "End time must be after start time")
        return self

    def schedule(self) -> Tuple[datetime, datetime]:
        """Start and end datetimes for the event this form describes."""
        if self.all_day:
            return (datetime.combine(self.start_date, time.min),
                    datetime.combine(self.end_date, time(23, 59, 59)))
        start_h, start_m = (int(p) for p in self.start_time.split(":"))
        end_h, end_m = (int(p) for p in self.end_time.split(":"))
        return (datetime.combine(self.start_date, time(start_h, start_m)),
                datetime.combine(self.start_date, time(end_h, end_m)))


class EventTypeForm(_Form):
    name: str = ""
    display_name: str = ""
    color_hex: str = "#6b7280"

    @field_validator("display_name", mode="before")
    @classmethod
    def check_display_name(cls, v: str) -> str:
        return _require(v, "Display name is required")

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v: str) -> str:
        v = _require(v, "Name is required").lower()
        if not TYPE_NAME_PATTERN.match(v):
            raise ValueError("Name may only contain lowercase letters, numbers and hyphens")
        return v

    @field_validator("color_hex", mode="before")
    @classmethod
    def check_color(cls, v: str) -> str:
        v = (v or "").strip()
        if not HEX_COLOR_PATTERN.match(v):
            raise ValueError("Color must be a hex value like #d36530")
        return v.lower()


# =============================================================================
# OFFICIALS
# =============================================================================

class RoleExperienceForm(_Form):
    id: Optional[str] = None
    title: str = ""
    organization: str = ""
    start_date: str = ""
    end_date: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v: str) -> str:
        return _require(v, "Title is required")

    @field_validator("organization", mode="before")
    @classmethod
    def check_organization(cls, v: str) -> str:
        return _require(v, "Organization is required")

    @field_validator("start_date", mode="before")
    @classmethod
    def check_start(cls, v: str) -> str:
        return _require(v, "Start date is required")


class CommitteeMembershipForm(_Form):
    id: Optional[str] = None
    committee_id: int = 0
    name: Optional[str] = None
    role: str = "Member"

    @field_validator("committee_id", mode="before")
    @classmethod
    def check_committee(cls, v: Any) -> int:
        try:
            value = int(v)
        except (TypeError, ValueError):
            raise ValueError("Committee is required")
        if value < 1:
            raise ValueError("Committee is required")
        return value

    @field_validator("role", mode="before")
    @classmethod
    def check_role(cls, v: str) -> str:
        if v not in COMMITTEE_ROLES:
            raise ValueError("Role must be Chair, Vice Chair or Member")
        return v


class AchievementForm(_Form):
    id: Optional[str] = None
    title: str = ""
    description: str = ""
    period: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v: str) -> str:
        return _require(v, "Title is required")

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, v: str) -> str:
        return _require(v, "Description is required")


class OfficeForm(_Form):
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    room: Optional[str] = None
    hours: Optional[str] = None


class ContactForm(_Form):
    email: str = ""
    phone: str = ""
    office: OfficeForm = Field(default_factory=dict)

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = (v or "").strip()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Please enter a valid email address")
        return v

    @field_validator("phone", mode="before")
    @classmethod
    def check_phone(cls, v: str) -> str:
        return _require(v, "Phone is required")


class OfficialForm(_Form):
    name: str = ""
    role_title: str = ""
    term_start: str = ""
    term_end: str = ""
    contact: ContactForm = Field(default_factory=dict)
    biography: Optional[str] = None
    district: Optional[str] = None
    party: Optional[str] = None
    ward: Optional[str] = None
    status: Optional[str] = None
    experience: List[RoleExperienceForm] = []
    committees: List[CommitteeMembershipForm] = []
    achievements: List[AchievementForm] = []

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v: str) -> str:
        return _require(v, "Name is required")

    @field_validator("role_title", mode="before")
    @classmethod
    def check_role_title(cls, v: str) -> str:
        return _require(v, "Role/Title is required")

    @field_validator("term_start", mode="before")
    @classmethod
    def check_term_start(cls, v: str) -> str:
        return _require(v, "Term start date is required")

    @field_validator("term_end", mode="before")
    @classmethod
    def check_term_end(cls, v: str) -> str:
        return _require(v, "Term end date is required")


class OfficialRegistrationForm(OfficialForm):
    password: str = ""

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, v: str) -> str:
        v = v or ""
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters long")
        return v


def official_form_data(official: Official) -> Dict[str, Any]:
    """Form input pre-filled from an existing official."""
    office = official.contact.office
    return {
        "name": official.name,
        "role_title": official.role_title,
        "term_start": official.term_start,
        "term_end": official.term_end,
        "contact": {
            "email": official.contact.email,
            "phone": official.contact.phone,
            "office": {
                "address_line1": office.address_line1,
                "address_line2": office.address_line2,
                "city": office.city,
                "state": office.state,
                "zip": office.zip,
                "room": office.room,
                "hours": office.hours,
            },
        },
        "biography": official.biography,
        "district": office.address_line2,
        "party": official.party,
        "status": official.status,
        "experience": [vars(exp).copy() for exp in official.experience],
        "committees": [vars(comm).copy() for comm in official.committees],
        "achievements": [vars(ach).copy() for ach in official.achievements],
    }


def official_from_form(form: OfficialForm, official_id: Optional[int] = None, image: Optional[str] = None) -> Official:
    """Build the Official to save from a validated form; unsaved items get local ids."""
    office = form.contact.office
    return Official(
        id=official_id,
        name=form.name,
        role_title=form.role_title,
        term_start=form.term_start,
        term_end=form.term_end,
        contact=Contact(
            email=form.contact.email,
            phone=form.contact.phone,
            office=OfficeDetails(
                address_line1=office.address_line1 or "",
                address_line2=form.district or office.address_line2 or "",
                city=office.city or "Albany",
                state=office.state or "NY",
                zip=office.zip or "12207",
                room=office.room or None,
                hours=office.hours or "",
            ),
        ),
        biography=form.biography or "",
        experience=[
            RoleExperience(
                id=exp.id or new_local_id(),
                title=exp.title,
                organization=exp.organization,
                start_date=exp.start_date,
                end_date=exp.end_date or "",
                description=exp.description or "",
            )
            for exp in form.experience
        ],
        committees=[
            CommitteeMembership(
                id=comm.id or new_local_id(),
                committee_id=comm.committee_id,
                name=comm.name or "",
                role=comm.role,
            )
            for comm in form.committees
        ],
        achievements=[
            Achievement(
                id=ach.id or new_local_id(),
                title=ach.title,
                description=ach.description,
                period=ach.period or "",
            )
            for ach in form.achievements
        ],
        image=image,
        party=form.party or "",
        status=form.status or "active",
    )


class CommitteeForm(_Form):
    name: str = ""
    description: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, v: str) -> str:
        return _require(v, "Committee name is required")


# =============================================================================
# NEWSLETTER & AUTH
# =============================================================================

class NewsletterForm(_Form):
    subject: str = ""
    preheader: Optional[str] = None
    markdown: str = ""
    scheduled_at: Optional[datetime] = None

    @field_validator("subject", mode="before")
    @classmethod
    def check_subject(cls, v: str) -> str:
        return _require(v, "Subject is required")

    @field_validator("markdown", mode="before")
    @classmethod
    def check_markdown(cls, v: str) -> str:
        return _require(v, "Content is required")


class LoginForm(_Form):
    email: str = ""
    password: str = ""

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = (v or "").strip()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Please enter a valid email address")
        return v

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


# =============================================================================
# RESULT
# =============================================================================

@dataclass
class FormResult:
    ok: bool
    data: Optional[BaseModel] = None
    errors: Dict[str, List[str]] = field(default_factory=dict)

    def first_error(self, name: str) -> Optional[str]:
        messages = self.errors.get(name)
        return messages[0] if messages else None


def _error_path(error: Dict[str, Any]) -> str:
    cause = (error.get("ctx") or {}).get("error")
    if isinstance(cause, FieldError):
        return cause.field_name
    path = ".".join(str(part) for part in error.get("loc", ()))
    return path or "general"


def _error_message(model: Type[_Form], path: str, error: Dict[str, Any]) -> str:
    cause = (error.get("ctx") or {}).get("error")
    if isinstance(cause, ValueError):
        return str(cause)
    if path in model.invalid_messages:
        return model.invalid_messages[path]
    message = error.get("msg", "Invalid value")
    return message[len("Value error, "):] if message.startswith("Value error, ") else message


def validate_form(model: Type[_Form], data: Dict[str, Any]) -> FormResult:
    """Validate raw form input against a form model."""
    try:
        return FormResult(ok=True, data=model.model_validate(data))
    except ValidationError as e:
        errors: Dict[str, List[str]] = {}
        for error in e.errors():
            path = _error_path(error)
            errors.setdefault(path, []).append(_error_message(model, path, error))
        return FormResult(ok=False, errors=errors)
