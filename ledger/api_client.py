"""Authenticated wrapper around the Albany Ledger REST API."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import requests

from .log import get_logger


logger = get_logger(__name__)

NOT_AUTHENTICATED = "Not authenticated"
MALFORMED = "Malformed response"

# (field name, (filename, content, mime type))
FileField = Tuple[str, Tuple[str, bytes, str]]


@dataclass
class ApiResponse:
    """Uniform result of every API call: success flag, payload or error string."""
    success: bool
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "ApiResponse":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ApiResponse":
        return cls(success=False, error=error)

    @property
    def is_not_found(self) -> bool:
        return not self.success and bool(self.error) and self.error.startswith("HTTP 404")


def build_params(params: Optional[Dict[str, Any]]) -> List[Tuple[str, str]]:
    """
    Flatten query parameters, dropping unset values.

    Lists become repeated keys. Booleans are sent as "true"/"false".
    """
    if not params:
        return []
    pairs: List[Tuple[str, str]] = []
    for key, value in params.items():
        if value is None or value == "":
            continue
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            if isinstance(item, bool):
                item = "true" if item else "false"
            pairs.append((key, str(item)))
    return pairs


def expect_list(response: ApiResponse, key: Optional[str] = None) -> ApiResponse:
    """
    Validate a list envelope.

    The backend answers list endpoints either with a bare JSON array or with
    the array under one documented key. Anything else is a malformed response.
    """
    if not response.success:
        return response
    data = response.data
    if isinstance(data, list):
        return response
    if key and isinstance(data, dict) and isinstance(data.get(key), list):
        return ApiResponse.ok(data[key])
    logger.warning("Malformed list response (expected %s): %r", key or "array", type(data).__name__)
    return ApiResponse.fail(f"{MALFORMED}: expected {'`' + key + '` list' if key else 'a list'}")


def expect_dict(response: ApiResponse, key: Optional[str] = None) -> ApiResponse:
    """Validate an object envelope, optionally unwrapping one key."""
    if not response.success:
        return response
    data = response.data
    if key and isinstance(data, dict) and isinstance(data.get(key), dict):
        return ApiResponse.ok(data[key])
    if isinstance(data, dict):
        return response
    logger.warning("Malformed object response: %r", type(data).__name__)
    return ApiResponse.fail(f"{MALFORMED}: expected an object")


def optional_entity(response: ApiResponse, key: str, func: Callable[[Any], Any]) -> ApiResponse:
    """
    Unwrap a mutation reply that may or may not echo the entity.

    A 2xx reply without an object carrying an ``id`` (204, or a bare
    ``{"message": ...}``) is a success with no payload.
    """
    if not response.success:
        return response
    data = response.data
    if isinstance(data, dict) and isinstance(data.get(key), dict):
        data = data[key]
    if not isinstance(data, dict) or "id" not in data:
        return ApiResponse.ok(None)
    return map_data(ApiResponse.ok(data), func)


def map_data(response: ApiResponse, func: Callable[[Any], Any]) -> ApiResponse:
    """Apply a transform to a successful payload."""
    if not response.success:
        return response
    try:
        return ApiResponse.ok(func(response.data))
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Could not transform response: %s", e)
        return ApiResponse.fail(f"{MALFORMED}: {e}")


class ApiClient:
    """
    Generic API client for all admin panel requests.

    A bearer token is looked up for every call through ``token_provider``.
    No exception crosses this boundary: every outcome is an ApiResponse.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Callable[[], Optional[str]],
        session: Optional[requests.Session] = None,
        timeout: float = 15.0,
    ):
        self.base_url = base_url.rstrip("/")
        self._token_provider = token_provider
        self._session = session or requests.Session()
        self.timeout = timeout

    def request(
        self,
        endpoint: str,
        method: str = "GET",
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        files: Optional[Sequence[FileField]] = None,
        data: Optional[Dict[str, Any]] = None,
        raw: bool = False,
    ) -> ApiResponse:
        """
        Make a request to the API with error handling.

        Args:
            endpoint: Path beginning with "/" (e.g., "/api/events")
            method: HTTP method
            json: JSON body
            params: Query parameters
            files: Multipart file fields; switches the body to multipart
            data: Multipart form fields sent alongside ``files``
            raw: Return the body bytes and content type instead of JSON

        Returns:
            ApiResponse with the decoded body or an error string
        """
        try:
            token = self._token_provider()
        except Exception as e:
            logger.warning("Token provider failed: %s", e)
            token = None
        if not token:
            return ApiResponse.fail(NOT_AUTHENTICATED)

        headers = {"Authorization": f"Bearer {token}"}
        if not files:
            # Multipart requests need requests to set its own boundary header
            headers["Content-Type"] = "application/json"

        url = f"{self.base_url}{endpoint}"
        try:
            response = self._session.request(
                method,
                url,
                headers=headers,
                params=build_params(params),
                json=json if not files else None,
                data=data if files else None,
                files=list(files) if files else None,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            logger.warning("%s %s timed out", method, endpoint)
            return ApiResponse.fail("Request timed out. Please try again.")
        except requests.exceptions.RequestException as e:
            logger.warning("%s %s failed: %s", method, endpoint, e)
            return ApiResponse.fail(str(e) or e.__class__.__name__)

        if not 200 <= response.status_code < 300:
            error = f"HTTP {response.status_code}: {response.text}"
            logger.warning("%s %s -> %s", method, endpoint, error[:200])
            return ApiResponse.fail(error)

        if raw:
            return ApiResponse.ok({
                "content": response.content,
                "content_type": response.headers.get("Content-Type", ""),
            })

        if response.status_code == 204 or not response.content:
            return ApiResponse.ok(None)

        try:
            return ApiResponse.ok(response.json())
        except ValueError as e:
            logger.warning("%s %s returned invalid JSON: %s", method, endpoint, e)
            return ApiResponse.fail(f"{MALFORMED}: {e}")

    # Helper methods for common HTTP operations

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self.request(endpoint, "GET", params=params)

    def post(self, endpoint: str, body: Any = None) -> ApiResponse:
        return self.request(endpoint, "POST", json=body)

    def put(self, endpoint: str, body: Any = None) -> ApiResponse:
        return self.request(endpoint, "PUT", json=body)

    def patch(self, endpoint: str, body: Any = None) -> ApiResponse:
        return self.request(endpoint, "PATCH", json=body)

    def delete(self, endpoint: str) -> ApiResponse:
        return self.request(endpoint, "DELETE")

    def post_form(
        self,
        endpoint: str,
        files: Sequence[FileField],
        fields: Optional[Dict[str, Any]] = None,
    ) -> ApiResponse:
        return self.request(endpoint, "POST", files=files, data=fields)
