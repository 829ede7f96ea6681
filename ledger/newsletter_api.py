"""Newsletter admin endpoints (issues, subscribers, stats, settings)."""

from __future__ import annotations
from typing import Any, Dict, Optional

from .api_client import ApiClient, ApiResponse, expect_dict, expect_list, map_data
from .models import NewsletterIssue
from .transforms import many, newsletter_issue_from_api, newsletter_issue_to_api, subscriber_from_api


BASE = "/newsletter/admin"


class NewsletterApi:

    def __init__(self, client: ApiClient):
        self.client = client

    # Issues

    def list(self, status: Optional[str] = None, limit: int = 50) -> ApiResponse:
        response = self.client.get(f"{BASE}/issues", params={"status": status, "limit": limit})
        return map_data(expect_list(response, "issues"), lambda rows: many(newsletter_issue_from_api, rows))

    def get(self, issue_id: str) -> ApiResponse:
        return map_data(expect_dict(self.client.get(f"{BASE}/issues/{issue_id}")), newsletter_issue_from_api)

    def create(self, issue: NewsletterIssue) -> ApiResponse:
        response = self.client.post(f"{BASE}/issues", newsletter_issue_to_api(issue))
        return map_data(expect_dict(response), newsletter_issue_from_api)

    def update(self, issue_id: str, changes: Dict[str, Any]) -> ApiResponse:
        response = self.client.patch(f"{BASE}/issues/{issue_id}", changes)
        return map_data(expect_dict(response), newsletter_issue_from_api)

    def test_send(self, issue_id: str, to_email: str) -> ApiResponse:
        return self.client.post(f"{BASE}/issues/{issue_id}/test-send", {"to_email": to_email})

    def send(self, issue_id: str) -> ApiResponse:
        """Send to all active subscribers."""
        return self.client.post(f"{BASE}/issues/{issue_id}/send")

    def cancel_schedule(self, issue_id: str) -> ApiResponse:
        """Revert a scheduled issue to draft."""
        response = self.client.post(f"{BASE}/issues/{issue_id}/cancel-schedule")
        return map_data(expect_dict(response), newsletter_issue_from_api)

    # Subscribers (read-only)

    def subscriber_summary(self) -> ApiResponse:
        return expect_dict(self.client.get(f"{BASE}/subscribers/summary"))

    def list_subscribers(self, limit: Optional[int] = None, status: Optional[str] = None) -> ApiResponse:
        response = self.client.get(f"{BASE}/subscribers", params={"limit": limit, "status": status})
        return map_data(expect_list(response, "subscribers"), lambda rows: many(subscriber_from_api, rows))

    # Stats & settings

    def stats(self) -> ApiResponse:
        return expect_dict(self.client.get(f"{BASE}/stats"))

    def get_footer_address(self) -> ApiResponse:
        response = expect_dict(self.client.get(f"{BASE}/settings/footer-address"))
        return map_data(response, lambda data: data.get("footer_address", ""))

    def set_footer_address(self, footer_address: str) -> ApiResponse:
        response = self.client.put(f"{BASE}/settings/footer-address", {"footer_address": footer_address})
        return map_data(expect_dict(response), lambda data: data.get("footer_address", footer_address))

    def process_scheduled(self) -> ApiResponse:
        """Trigger delivery of issues whose schedule is due."""
        return expect_dict(self.client.post(f"{BASE}/process-scheduled"))
