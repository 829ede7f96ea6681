"""Document library endpoints."""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple

from .api_client import ApiClient, ApiResponse, expect_dict, expect_list


DOCUMENT_TYPES = ("file", "external_link")

FILE_TYPE_COLORS = {
    "pdf": "#dc2626",
    "doc": "#2563eb",
    "docx": "#2563eb",
    "xls": "#16a34a",
    "xlsx": "#16a34a",
    "ppt": "#ea580c",
    "pptx": "#ea580c",
    "jpg": "#9333ea",
    "jpeg": "#9333ea",
    "png": "#9333ea",
    "gif": "#9333ea",
    "zip": "#ca8a04",
    "txt": "#374151",
    "md": "#374151",
}


def format_file_size(size: Optional[int]) -> str:
    if not size:
        return "Unknown"
    sizes = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    i = 0
    while value >= 1024 and i < len(sizes) - 1:
        value /= 1024
        i += 1
    return f"{value:.1f} {sizes[i]}"


def file_color(file_name: Optional[str], document_type: Optional[str] = None) -> str:
    if document_type == "external_link":
        return "#2563eb"
    if not file_name or "." not in file_name:
        return "#4b5563"
    return FILE_TYPE_COLORS.get(file_name.rsplit(".", 1)[-1].lower(), "#4b5563")


class DocumentsApi:

    def __init__(self, client: ApiClient):
        self.client = client

    def list(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        """
        List documents.

        Args:
            params: search, category_id, document_type, date_from, date_to,
                limit, offset, sort_by, sort_order
        """
        return expect_list(self.client.get("/api/documents", params=params), "documents")

    def get(self, document_id: int) -> ApiResponse:
        return expect_dict(self.client.get(f"/api/documents/{document_id}"), "document")

    def create(self, data: Dict[str, Any], file: Optional[Tuple[str, bytes, str]] = None) -> ApiResponse:
        """Create a document; multipart when a file is attached, JSON for external links."""
        if data.get("document_type") not in DOCUMENT_TYPES:
            return ApiResponse.fail(f"Unknown document type: {data.get('document_type')}")

        if file and data["document_type"] == "file":
            fields = {
                "title": data["title"],
                "category_id": str(data["category_id"]),
                "document_type": "file",
            }
            if data.get("description"):
                fields["description"] = data["description"]
            response = self.client.post_form("/api/documents", files=[("file", file)], fields=fields)
        else:
            response = self.client.post("/api/documents", data)
        return expect_dict(response, "document")

    def update(self, document_id: int, changes: Dict[str, Any]) -> ApiResponse:
        return expect_dict(self.client.put(f"/api/documents/{document_id}", changes), "document")

    def delete(self, document_id: int) -> ApiResponse:
        return self.client.delete(f"/api/documents/{document_id}")

    def upload_file(self, document_id: int, file: Tuple[str, bytes, str]) -> ApiResponse:
        return self.client.post_form(f"/api/documents/{document_id}/upload", files=[("file", file)])

    def delete_file(self, document_id: int) -> ApiResponse:
        return self.client.delete(f"/api/documents/{document_id}/file")

    def search(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return expect_dict(self.client.get("/api/documents/search", params=params))

    def stats(self) -> ApiResponse:
        return expect_dict(self.client.get("/api/documents/stats"))

    # Categories

    def list_categories(self) -> ApiResponse:
        return expect_list(self.client.get("/api/document-categories"), "categories")

    def create_category(self, display_name: str, color_hex: str, description: str = "",
                        sort_order: Optional[int] = None) -> ApiResponse:
        body: Dict[str, Any] = {"display_name": display_name, "color_hex": color_hex, "description": description}
        if sort_order is not None:
            body["sort_order"] = sort_order
        return expect_dict(self.client.post("/api/document-categories", body))

    def update_category(self, category_id: int, changes: Dict[str, Any]) -> ApiResponse:
        return expect_dict(self.client.put(f"/api/document-categories/{category_id}", changes))

    def delete_category(self, category_id: int) -> ApiResponse:
        return self.client.delete(f"/api/document-categories/{category_id}")

    def reorder_categories(self, order: List[Dict[str, int]]) -> ApiResponse:
        """order: [{'id': .., 'sort_order': ..}, ...]"""
        return self.client.post("/api/document-categories/reorder", order)
