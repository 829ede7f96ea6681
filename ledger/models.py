"""View-model dataclasses for Albany Ledger admin data."""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List


# =============================================================================
# OFFICIALS
# =============================================================================

@dataclass
class OfficeDetails:
    address_line1: str = ""
    address_line2: str = ""  # district
    city: str = "Albany"
    state: str = "NY"
    zip: str = "12207"
    room: Optional[str] = None
    hours: str = ""


@dataclass
class Contact:
    email: str = ""
    phone: str = ""
    office: OfficeDetails = field(default_factory=OfficeDetails)


@dataclass
class RoleExperience:
    id: str
    title: str
    organization: str
    start_date: str = ""  # YYYY-MM-DD
    end_date: str = ""
    description: str = ""


@dataclass
class CommitteeMembership:
    id: str
    committee_id: int
    name: str = ""
    role: str = "Member"  # 'Chair', 'Vice Chair', 'Member'


@dataclass
class Achievement:
    id: str
    title: str
    description: str = ""
    period: str = ""  # e.g., Jan 2023 - Dec 2023


@dataclass
class CommitteeCatalogItem:
    id: int
    name: str
    description: str = ""


@dataclass
class Official:
    """An elected or appointed official's public profile."""
    id: Optional[int]
    name: str
    role_title: str
    term_start: str
    term_end: str
    contact: Contact = field(default_factory=Contact)
    biography: str = ""
    experience: List[RoleExperience] = field(default_factory=list)
    committees: List[CommitteeMembership] = field(default_factory=list)
    achievements: List[Achievement] = field(default_factory=list)
    image: Optional[str] = None
    party: str = ""
    status: str = "active"


# =============================================================================
# CALENDAR
# =============================================================================

@dataclass
class EventType:
    """User-defined calendar category."""
    id: str
    name: str
    display_name: str
    color_hex: str


@dataclass
class CalendarEvent:
    id: Optional[str]
    title: str
    start_date: datetime
    end_date: datetime
    type: str  # event type name, 'unknown' when the relation is missing
    description: Optional[str] = None
    location: Optional[str] = None
    all_day: bool = False
    event_type_id: Optional[str] = None


# =============================================================================
# ISSUE REPORTS
# =============================================================================

@dataclass
class IssueUpdate:
    """One entry of an issue's append-only update log."""
    id: int
    issue_id: int
    update_type: str  # 'status_change', 'message', 'resolution', 'system'
    description: str
    title: Optional[str] = None
    old_status: Optional[str] = None
    new_status: Optional[str] = None
    is_public: bool = True
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class IssuePhoto:
    id: int
    issue_id: int
    file_url: str
    file_name: str = ""
    file_size: Optional[int] = None
    caption: Optional[str] = None
    upload_type: str = "initial"  # 'initial', 'update', 'resolution'
    sort_order: int = 0


@dataclass
class Issue:
    """A citizen-submitted problem report."""
    id: int
    short_id: str
    title: str
    description: str
    status: str
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    reporter_name: str = ""
    reporter_email: str = ""
    location_address: Optional[str] = None
    ward: Optional[str] = None
    district: Optional[str] = None
    view_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    photos: List[IssuePhoto] = field(default_factory=list)
    updates: List[IssueUpdate] = field(default_factory=list)


# =============================================================================
# QUESTIONS
# =============================================================================

@dataclass
class Question:
    id: int
    short_id: str
    question: str
    status: str  # 'pending' or 'answered'
    answer: Optional[str] = None
    answered_at: Optional[datetime] = None
    submitter_name: Optional[str] = None
    submitter_email: Optional[str] = None
    is_anonymous: bool = False
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def submitter(self) -> str:
        if self.is_anonymous or not self.submitter_name:
            return "Anonymous"
        return self.submitter_name


# =============================================================================
# NEWSLETTER
# =============================================================================

@dataclass
class NewsletterIssue:
    id: Optional[str]
    subject: str
    markdown: str
    status: str = "draft"  # 'draft', 'scheduled', 'sent'
    preheader: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass
class Subscriber:
    id: str
    email: str
    status: str  # 'pending', 'active', 'unsubscribed'
    name: Optional[str] = None
    created_at: Optional[datetime] = None
