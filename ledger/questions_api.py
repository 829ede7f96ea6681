"""Q&A endpoints."""

from __future__ import annotations
from typing import Any, Dict, Optional

from .api_client import ApiClient, ApiResponse, expect_dict, expect_list, map_data, optional_entity
from .transforms import many, question_from_api


class QuestionsApi:

    def __init__(self, client: ApiClient):
        self.client = client

    def list_categories(self) -> ApiResponse:
        response = self.client.get("/api/questions/categories")
        if response.is_not_found:
            return ApiResponse.ok([])
        return expect_list(response, "categories")

    def list(self, filters: Optional[Dict[str, Any]] = None) -> ApiResponse:
        """List questions. Payload: {'questions': [Question], 'total': int}."""
        response = self.client.get("/api/questions", params=filters)
        if response.is_not_found:
            return ApiResponse.ok({"questions": [], "total": 0})
        listed = expect_list(response, "questions")
        if not listed.success:
            return listed
        data = response.data
        total = data.get("total", len(listed.data)) if isinstance(data, dict) else len(listed.data)
        return map_data(listed, lambda rows: {"questions": many(question_from_api, rows), "total": total})

    def get(self, question_id: int) -> ApiResponse:
        response = self.client.get(f"/api/questions/{question_id}")
        return map_data(expect_dict(response, "question"), question_from_api)

    def get_by_short_id(self, short_id: str) -> ApiResponse:
        response = self.client.get(f"/api/questions/track/{short_id}")
        return map_data(expect_dict(response, "question"), question_from_api)

    def update(self, question_id: int, changes: Dict[str, Any]) -> ApiResponse:
        response = self.client.put(f"/api/questions/{question_id}", changes)
        return map_data(expect_dict(response, "question"), question_from_api)

    def answer(self, question_id: int, answer: str) -> ApiResponse:
        """Answer a question; the server marks it answered. Payload: Question, or None when the reply omits it."""
        response = self.client.put(f"/api/questions/{question_id}/answer", {"answer": answer})
        return optional_entity(response, "question", question_from_api)

    def delete(self, question_id: int) -> ApiResponse:
        return self.client.delete(f"/api/questions/{question_id}")
