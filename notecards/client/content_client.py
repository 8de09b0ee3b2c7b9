"""
Content API client.

Typed async caller for the content procedures over HTTP. Error envelopes
are turned back into the exceptions the server raised, so callers handle
``ContentNotFoundError`` and friends the same way on both sides of the wire.
Connection problems and timeouts surface as ``StoreUnavailableError``.
"""

from typing import Any, List, Mapping, Optional, Union
from urllib.parse import quote

import httpx

from notecards.core.config import settings
from notecards.core.exceptions import (
    ERRORS_BY_CODE,
    ContentValidationError,
    NotecardsError,
    StoreUnavailableError,
)
from notecards.core.logging import get_logger
from notecards.models.content import ContentType
from notecards.schemas.content import ContentDraft, ContentItemResponse, ContentPatch

logger = get_logger(__name__)


class ContentClient:
    """
    HTTP binding for the six content procedures.

    Usage:
        async with ContentClient("http://localhost:8000/api/v1") as client:
            items = await client.list_all()
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        headers: Optional[Mapping[str, str]] = None,
    ):
        self.base_url = (base_url or settings.CLIENT_BASE_URL).rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.CLIENT_TIMEOUT_SECONDS,
            transport=transport,
            headers=dict(headers or {}),
        )

    async def __aenter__(self) -> "ContentClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ========================================
    # Transport
    # ========================================

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error("content_api_timeout", method=method, path=path, error=str(e))
            raise StoreUnavailableError() from e
        except httpx.HTTPError as e:
            # Transport, decoding and redirect failures alike
            logger.error(
                "content_api_unreachable",
                method=method,
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise StoreUnavailableError() from e

        if response.is_error:
            raise self._error_from_response(response)
        return response

    @staticmethod
    def _error_from_response(response: httpx.Response) -> NotecardsError:
        try:
            body = response.json()
        except ValueError:
            body = None

        error = body.get("error") if isinstance(body, dict) else None
        if not isinstance(error, dict):
            logger.error(
                "content_api_unexpected_error",
                status_code=response.status_code,
            )
            if response.status_code >= 500:
                return StoreUnavailableError()
            return NotecardsError(f"Unexpected response status {response.status_code}")

        error_cls = ERRORS_BY_CODE.get(error.get("code"), NotecardsError)
        return error_cls.from_envelope(error.get("message"), error.get("details"))

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.error("content_api_malformed_response", error=str(e))
            raise NotecardsError("Malformed JSON in response") from e

    @staticmethod
    def _parse_item(data: Any) -> ContentItemResponse:
        try:
            return ContentItemResponse.model_validate(data)
        except ValueError as e:
            logger.error("content_api_malformed_response", error=str(e))
            raise NotecardsError("Malformed content item in response") from e

    def _parse_items(self, response: httpx.Response) -> List[ContentItemResponse]:
        data = self._json(response)
        if not isinstance(data, list):
            raise NotecardsError("Malformed content list in response")
        return [self._parse_item(item) for item in data]

    @staticmethod
    def _path_id(content_id: str) -> str:
        if not isinstance(content_id, str) or not content_id.strip():
            raise ContentValidationError(
                details=[{"loc": ["id"], "msg": "id must be a non-empty string", "type": "value_error"}]
            )
        return quote(content_id, safe="")

    @staticmethod
    def _path_type(content_type: Union[ContentType, str]) -> str:
        parsed = ContentType.parse(content_type)
        if parsed is None:
            raise ContentValidationError(
                details=[{"loc": ["type"], "msg": f"unknown content type: {content_type}", "type": "enum"}]
            )
        return quote(parsed.value, safe="")

    @staticmethod
    def _payload(model: Union[ContentDraft, ContentPatch, Mapping[str, Any]]) -> Any:
        if isinstance(model, ContentPatch):
            return model.changes()
        if isinstance(model, ContentDraft):
            return model.model_dump(mode="json", exclude_none=True)
        return dict(model)

    # ========================================
    # Procedures
    # ========================================

    async def list_all(self) -> List[ContentItemResponse]:
        response = await self._request("GET", "/content")
        return self._parse_items(response)

    async def get_by_id(self, content_id: str) -> ContentItemResponse:
        response = await self._request("GET", f"/content/{self._path_id(content_id)}")
        return self._parse_item(self._json(response))

    async def get_by_type(self, content_type: Union[ContentType, str]) -> List[ContentItemResponse]:
        response = await self._request("GET", f"/content/by-type/{self._path_type(content_type)}")
        return self._parse_items(response)

    async def create(self, draft: Union[ContentDraft, Mapping[str, Any]]) -> ContentItemResponse:
        response = await self._request("POST", "/content", json=self._payload(draft))
        return self._parse_item(self._json(response))

    async def update(
        self,
        content_id: str,
        patch: Union[ContentPatch, Mapping[str, Any]],
    ) -> ContentItemResponse:
        response = await self._request(
            "PATCH", f"/content/{self._path_id(content_id)}", json=self._payload(patch)
        )
        return self._parse_item(self._json(response))

    async def delete(self, content_id: str) -> None:
        await self._request("DELETE", f"/content/{self._path_id(content_id)}")
