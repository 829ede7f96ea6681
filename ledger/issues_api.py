"""
Issue reporting endpoints.

Admin screens address issues by their public short id; the short-id helpers
resolve the numeric primary key first and pass any failure through unchanged.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

from .api_client import ApiClient, ApiResponse, FileField, expect_dict, expect_list, map_data, optional_entity
from .transforms import issue_from_api, issue_photo_from_api, issue_update_from_api, many


UPDATE_TYPES = ("status_change", "message", "resolution", "system")

EMPTY_STATISTICS: Dict[str, Any] = {
    "total_issues": 0,
    "total_categories": 0,
    "issues_by_status": [],
    "issues_by_category": [],
    "issues_by_location": [],
    "recent_issues": [],
}


class IssuesApi:

    def __init__(self, client: ApiClient):
        self.client = client

    # Categories

    def list_categories(self) -> ApiResponse:
        response = self.client.get("/api/issues/categories")
        # Endpoint may not be deployed yet
        if response.is_not_found:
            return ApiResponse.ok([])
        return expect_list(response, "categories")

    def create_category(self, name: str, description: str = "", icon: str = "") -> ApiResponse:
        return self.client.post("/api/issues/categories", {"name": name, "description": description, "icon": icon})

    def update_category(self, category_id: int, changes: Dict[str, Any]) -> ApiResponse:
        return self.client.put(f"/api/issues/categories/{category_id}", changes)

    def delete_category(self, category_id: int) -> ApiResponse:
        return self.client.delete(f"/api/issues/categories/{category_id}")

    # Issues

    def list(self, filters: Optional[Dict[str, Any]] = None) -> ApiResponse:
        """
        List issues.

        Args:
            filters: search, category_id, status, ward, district, date_from,
                date_to, sort_by, sort_order, limit, offset

        Returns:
            ApiResponse with {'issues': [Issue], 'total': int}
        """
        response = self.client.get("/api/issues", params=filters)
        if response.is_not_found:
            return ApiResponse.ok({"issues": [], "total": 0})
        if not response.success:
            return response

        data = response.data
        listed = expect_list(response, "issues")
        if not listed.success:
            return listed
        total = data.get("total", len(listed.data)) if isinstance(data, dict) else len(listed.data)
        return map_data(listed, lambda rows: {"issues": many(issue_from_api, rows), "total": total})

    def get(self, issue_id: int) -> ApiResponse:
        return map_data(expect_dict(self.client.get(f"/api/issues/{issue_id}"), "issue"), issue_from_api)

    def get_by_short_id(self, short_id: str) -> ApiResponse:
        response = self.client.get(f"/api/issues/track/{short_id}")
        return map_data(expect_dict(response, "issue"), issue_from_api)

    def create(
        self,
        title: str,
        description: str,
        category_id: int,
        location: Optional[str] = None,
        reporter_name: str = "",
        reporter_email: str = "",
        photos: Optional[List[FileField]] = None,
    ) -> ApiResponse:
        """Create an issue; sent as multipart when photos are attached."""
        if photos:
            fields = {
                "title": title,
                "description": description,
                "category_id": str(category_id),
                "reporter_name": reporter_name,
                "reporter_email": reporter_email,
            }
            if location:
                fields["location"] = location
            response = self.client.post_form("/api/issues", files=photos, fields=fields)
        else:
            body = {
                "title": title,
                "description": description,
                "category_id": category_id,
                "reporter_name": reporter_name,
                "reporter_email": reporter_email,
            }
            if location:
                body["location"] = location
            response = self.client.post("/api/issues", body)
        return map_data(expect_dict(response, "issue"), issue_from_api)

    def update(self, issue_id: int, changes: Dict[str, Any]) -> ApiResponse:
        response = self.client.put(f"/api/issues/{issue_id}", changes)
        return map_data(expect_dict(response, "issue"), issue_from_api)

    def update_status(self, issue_id: int, status: str, description: str = "") -> ApiResponse:
        """Change status; the server appends the audit entry. Payload: updated Issue, or None when the reply omits it."""
        response = self.client.put(f"/api/issues/{issue_id}/status", {"status": status, "description": description})
        return optional_entity(response, "issue", issue_from_api)

    def delete(self, issue_id: int) -> ApiResponse:
        return self.client.delete(f"/api/issues/{issue_id}")

    # Updates

    def list_updates(self, issue_id: int) -> ApiResponse:
        response = self.client.get(f"/api/issues/{issue_id}/updates")
        return map_data(expect_list(response, "updates"), lambda rows: many(issue_update_from_api, rows))

    def create_update(
        self,
        issue_id: int,
        description: str,
        update_type: str = "message",
        title: Optional[str] = None,
        is_public: bool = True,
        new_status: Optional[str] = None,
    ) -> ApiResponse:
        if update_type not in UPDATE_TYPES:
            return ApiResponse.fail(f"Unknown update type: {update_type}")
        body: Dict[str, Any] = {
            "update_type": update_type,
            "description": description,
            "is_public": is_public,
        }
        if title:
            body["title"] = title
        if new_status:
            body["new_status"] = new_status
        response = self.client.post(f"/api/issues/{issue_id}/updates", body)
        return map_data(expect_dict(response), issue_update_from_api)

    # Photos

    def list_photos(self, issue_id: int) -> ApiResponse:
        response = self.client.get(f"/api/issues/{issue_id}/photos")
        return map_data(expect_list(response, "photos"), lambda rows: many(issue_photo_from_api, rows))

    def upload_photos(self, issue_id: int, photos: List[FileField]) -> ApiResponse:
        return self.client.post_form(f"/api/issues/{issue_id}/photos", files=photos)

    def delete_photo(self, photo_id: int) -> ApiResponse:
        return self.client.delete(f"/api/issues/photos/{photo_id}")

    # Search & statistics

    def statistics(self) -> ApiResponse:
        response = self.client.get("/api/issues/statistics")
        if response.is_not_found:
            return ApiResponse.ok(dict(EMPTY_STATISTICS))
        return expect_dict(response)

    # Short id wrappers

    def _numeric_id(self, short_id: str) -> ApiResponse:
        response = self.get_by_short_id(short_id)
        if not response.success:
            return response
        return ApiResponse.ok(response.data.id)

    def get_updates_by_short_id(self, short_id: str) -> ApiResponse:
        resolved = self._numeric_id(short_id)
        return self.list_updates(resolved.data) if resolved.success else resolved

    def get_photos_by_short_id(self, short_id: str) -> ApiResponse:
        resolved = self._numeric_id(short_id)
        return self.list_photos(resolved.data) if resolved.success else resolved

    def update_status_by_short_id(self, short_id: str, status: str, description: str = "") -> ApiResponse:
        resolved = self._numeric_id(short_id)
        return self.update_status(resolved.data, status, description) if resolved.success else resolved

    def create_update_by_short_id(self, short_id: str, description: str, **kwargs: Any) -> ApiResponse:
        resolved = self._numeric_id(short_id)
        return self.create_update(resolved.data, description, **kwargs) if resolved.success else resolved

    def update_by_short_id(self, short_id: str, changes: Dict[str, Any]) -> ApiResponse:
        resolved = self._numeric_id(short_id)
        return self.update(resolved.data, changes) if resolved.success else resolved

    def delete_by_short_id(self, short_id: str) -> ApiResponse:
        resolved = self._numeric_id(short_id)
        return self.delete(resolved.data) if resolved.success else resolved
