"""Albany Ledger admin panel: API client, domain APIs and view helpers."""

from .api_client import ApiClient, ApiResponse
from .models import (
    CalendarEvent,
    EventType,
    Issue,
    NewsletterIssue,
    Official,
    Question,
    Subscriber,
)

__version__ = "0.1.0"

__all__ = [
    'ApiClient',
    'ApiResponse',
    'CalendarEvent',
    'EventType',
    'Issue',
    'NewsletterIssue',
    'Official',
    'Question',
    'Subscriber',
]
