"""Content endpoints: emergency contacts, breaking news alerts and articles."""

from __future__ import annotations
import re
from typing import Any, Dict, Optional

from .api_client import ApiClient, ApiResponse, expect_dict, expect_list


DEPARTMENTS = ["Public Safety", "Public Works", "Utilities", "Health Services"]
ALERT_TYPES = ["Emergency", "Weather", "Traffic", "Announcement"]
ALERT_PRIORITIES = ["Critical", "High", "Medium", "Low"]
ARTICLE_STATUSES = ["Published", "Draft", "Archived"]


def generate_slug(title: str) -> str:
    """URL slug from an article title."""
    slug = title.lower()
    slug = re.sub(r'[^a-z0-9\s-]', '', slug)
    slug = re.sub(r'\s+', '-', slug)
    slug = re.sub(r'-+', '-', slug)
    return slug.strip('-')


class ContentApi:
    """Thin wrappers; payloads stay as API dicts."""

    def __init__(self, client: ApiClient):
        self.client = client

    # Emergency contacts

    def list_contacts(self, search: Optional[str] = None, department: Optional[str] = None) -> ApiResponse:
        response = self.client.get("/api/emergency-contacts", params={"search": search, "department": department})
        return expect_list(response, "contacts")

    def create_contact(self, data: Dict[str, Any]) -> ApiResponse:
        return expect_dict(self.client.post("/api/emergency-contacts", data))

    def update_contact(self, contact_id: int, changes: Dict[str, Any]) -> ApiResponse:
        return expect_dict(self.client.put(f"/api/emergency-contacts/{contact_id}", changes))

    def delete_contact(self, contact_id: int) -> ApiResponse:
        return self.client.delete(f"/api/emergency-contacts/{contact_id}")

    # Breaking news alerts

    def list_alerts(
        self,
        search: Optional[str] = None,
        type: Optional[str] = None,
        priority: Optional[str] = None,
        status: Optional[str] = None,
    ) -> ApiResponse:
        response = self.client.get("/newsletter/admin/alerts", params={
            "search": search,
            "type": type,
            "priority": priority,
            "status": status,
        })
        return expect_list(response, "alerts")

    def create_alert(self, data: Dict[str, Any]) -> ApiResponse:
        return expect_dict(self.client.post("/newsletter/admin/alerts", data))

    def update_alert(self, alert_id: int, title: Optional[str] = None, content: Optional[str] = None,
                     website: Optional[bool] = None) -> ApiResponse:
        """Only title, content and the website toggle are editable after creation."""
        changes = {k: v for k, v in {"title": title, "content": content, "website": website}.items() if v is not None}
        return expect_dict(self.client.put(f"/api/breaking-news/{alert_id}", changes))

    def delete_alert(self, alert_id: int) -> ApiResponse:
        return self.client.delete(f"/newsletter/admin/alerts/{alert_id}")

    def publish_alert(self, alert_id: int) -> ApiResponse:
        return self.client.post(f"/api/breaking-news/{alert_id}/publish", {})

    def expire_alert(self, alert_id: int) -> ApiResponse:
        return self.client.post(f"/api/breaking-news/{alert_id}/expire", {})

    def duplicate_alert(self, alert_id: int) -> ApiResponse:
        return expect_dict(self.client.post(f"/api/breaking-news/{alert_id}/duplicate", {}))

    def send_alert(self, alert_id: int) -> ApiResponse:
        """Email the alert to newsletter subscribers."""
        return self.client.post(f"/newsletter/admin/alerts/{alert_id}/send", {})

    # Articles

    def list_articles(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        status: Optional[str] = None,
        featured: Optional[bool] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> ApiResponse:
        response = self.client.get("/api/articles", params={
            "search": search,
            "category": category,
            "status": status,
            "featured": featured,
            "limit": limit,
            "offset": offset,
        })
        return expect_list(response, "articles")

    def get_article(self, article_id: int) -> ApiResponse:
        return expect_dict(self.client.get(f"/api/articles/{article_id}"), "article")

    def get_article_by_slug(self, slug: str) -> ApiResponse:
        return expect_dict(self.client.get(f"/api/articles/slug/{slug}"), "article")

    def create_article(self, data: Dict[str, Any]) -> ApiResponse:
        body = dict(data)
        if not body.get("slug") and body.get("title"):
            body["slug"] = generate_slug(body["title"])
        return expect_dict(self.client.post("/api/articles", body), "article")

    def update_article(self, article_id: int, changes: Dict[str, Any]) -> ApiResponse:
        return expect_dict(self.client.put(f"/api/articles/{article_id}", changes), "article")

    def delete_article(self, article_id: int) -> ApiResponse:
        return self.client.delete(f"/api/articles/{article_id}")

    def publish_article(self, article_id: int) -> ApiResponse:
        return self.client.post(f"/api/articles/{article_id}/publish", {})

    def unpublish_article(self, article_id: int) -> ApiResponse:
        return self.client.post(f"/api/articles/{article_id}/unpublish", {})

    def toggle_featured(self, article_id: int) -> ApiResponse:
        return self.client.post(f"/api/articles/{article_id}/toggle-featured", {})

    def duplicate_article(self, article_id: int) -> ApiResponse:
        return expect_dict(self.client.post(f"/api/articles/{article_id}/duplicate", {}), "article")

    def content_stats(self) -> ApiResponse:
        return expect_dict(self.client.get("/api/content/stats"))
