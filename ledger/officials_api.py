"""Officials and committees endpoints."""

from __future__ import annotations
from typing import Any, Dict, List, Optional

from .api_client import ApiClient, ApiResponse, expect_dict, expect_list, map_data
from .models import CommitteeCatalogItem, Official
from .transforms import committee_from_api, many, official_from_api, official_to_api


class OfficialsApi:
    """Officials admin endpoints. Successful payloads are Official objects."""

    def __init__(self, client: ApiClient):
        self.client = client

    def list(
        self,
        search: Optional[str] = None,
        role: Optional[str] = None,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        committees_catalog: Optional[List[CommitteeCatalogItem]] = None,
    ) -> ApiResponse:
        response = self.client.get("/api/officials", params={
            "search": search,
            "role": role,
            "status": status,
            "limit": limit,
            "offset": offset,
        })
        return map_data(
            expect_list(response, "officials"),
            lambda rows: [official_from_api(row, committees_catalog) for row in rows],
        )

    def get(self, official_id: int, committees_catalog: Optional[List[CommitteeCatalogItem]] = None) -> ApiResponse:
        response = self.client.get(f"/api/officials/{official_id}")
        return map_data(expect_dict(response, "official"), lambda row: official_from_api(row, committees_catalog))

    def create(self, official: Official) -> ApiResponse:
        payload = official_to_api(official)
        payload.pop("id", None)
        response = self.client.post("/api/officials", payload)
        return map_data(expect_dict(response, "official"), official_from_api)

    def update(self, official_id: int, official: Official) -> ApiResponse:
        response = self.client.put(f"/api/officials/{official_id}", official_to_api(official))
        return map_data(expect_dict(response, "official"), official_from_api)

    def delete(self, official_id: int) -> ApiResponse:
        return self.client.delete(f"/api/officials/{official_id}")

    def upload_profile_picture(self, official_id: int, filename: str, content: bytes, mime: str) -> ApiResponse:
        """Upload a profile picture. Payload: {'image_url': str, 'official': dict}."""
        return self.client.post_form(
            f"/api/officials/{official_id}/profile-picture",
            files=[("file", (filename, content, mime))],
        )

    def delete_profile_picture(self, official_id: int) -> ApiResponse:
        return self.client.delete(f"/api/officials/{official_id}/profile-picture")

    def get_profile(self) -> ApiResponse:
        """The signed-in user's own official profile."""
        response = self.client.get("/api/profile")
        return map_data(expect_dict(response, "official"), official_from_api)

    # Committees

    def list_committees(self) -> ApiResponse:
        response = self.client.get("/api/committees")
        return map_data(expect_list(response, "committees"), lambda rows: many(committee_from_api, rows))

    def create_committee(self, name: str, description: str = "") -> ApiResponse:
        response = self.client.post("/api/committees", {"name": name, "description": description})
        return map_data(expect_dict(response), committee_from_api)

    def update_committee(self, committee_id: int, changes: Dict[str, Any]) -> ApiResponse:
        response = self.client.put(f"/api/committees/{committee_id}", changes)
        return map_data(expect_dict(response), committee_from_api)

    def delete_committee(self, committee_id: int) -> ApiResponse:
        return self.client.delete(f"/api/committees/{committee_id}")
