"""Calendar events, event types and export endpoints."""

from __future__ import annotations
from typing import Any, Dict, List, Optional

from .api_client import ApiClient, ApiResponse, expect_dict, expect_list, map_data
from .models import CalendarEvent
from .transforms import event_from_api, event_to_api, event_type_from_api, many


EXPORT_FORMATS = ("ics", "csv", "pdf")


class CalendarApi:
    """Calendar endpoints. Events come back as CalendarEvent objects."""

    def __init__(self, client: ApiClient):
        self.client = client

    # Events

    def get_events(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        event_type_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> ApiResponse:
        response = self.client.get("/api/events", params={
            "start_date": start_date,
            "end_date": end_date,
            "event_type_id": event_type_id,
            "limit": limit,
            "offset": offset,
        })
        return map_data(expect_list(response, "events"), lambda rows: many(event_from_api, rows))

    def get_event(self, event_id: str) -> ApiResponse:
        return map_data(expect_dict(self.client.get(f"/api/events/{event_id}")), event_from_api)

    def create_event(self, event: CalendarEvent, event_type_id: str) -> ApiResponse:
        response = self.client.post("/api/events", event_to_api(event, event_type_id))
        return map_data(expect_dict(response), event_from_api)

    def update_event(self, event_id: str, event: CalendarEvent, event_type_id: str) -> ApiResponse:
        response = self.client.put(f"/api/events/{event_id}", event_to_api(event, event_type_id))
        return map_data(expect_dict(response), event_from_api)

    def delete_event(self, event_id: str) -> ApiResponse:
        return self.client.delete(f"/api/events/{event_id}")

    def get_calendar_events(self, month: int, year: int, view: Optional[str] = None) -> ApiResponse:
        """Events for a month grid; month is 1-12."""
        response = self.client.get("/api/calendar/events", params={"month": month, "year": year, "view": view})
        return map_data(expect_list(response, "events"), lambda rows: many(event_from_api, rows))

    def export_calendar(
        self,
        format: str = "ics",
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        event_type_ids: Optional[List[str]] = None,
    ) -> ApiResponse:
        """Export file from the backend. Payload: {'content': bytes, 'content_type': str}."""
        if format not in EXPORT_FORMATS:
            return ApiResponse.fail(f"Unsupported export format: {format}")
        return self.client.request(
            "/api/calendar/export",
            params={
                "format": format,
                "start_date": start_date,
                "end_date": end_date,
                "event_type_ids": event_type_ids or None,
            },
            raw=True,
        )

    def get_calendar_stats(self) -> ApiResponse:
        return expect_dict(self.client.get("/api/calendar/stats"))

    # Event types

    def get_event_types(self) -> ApiResponse:
        response = self.client.get("/api/event-types")
        return map_data(expect_list(response, "event_types"), lambda rows: many(event_type_from_api, rows))

    def create_event_type(self, name: str, display_name: str, color_hex: str) -> ApiResponse:
        response = self.client.post("/api/event-types", {
            "name": name,
            "display_name": display_name,
            "color_hex": color_hex,
        })
        return map_data(expect_dict(response), event_type_from_api)

    def update_event_type(self, type_id: str, changes: Dict[str, Any]) -> ApiResponse:
        response = self.client.put(f"/api/event-types/{type_id}", changes)
        return map_data(expect_dict(response), event_type_from_api)

    def delete_event_type(self, type_id: str) -> ApiResponse:
        return self.client.delete(f"/api/event-types/{type_id}")
