"""
Tests for ContentClient.

The happy paths run against the real application through ASGITransport;
failure modes use httpx.MockTransport.
"""

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport

from notecards.client import ContentClient
from notecards.core.exceptions import (
    ContentNotFoundError,
    ContentValidationError,
    MutationForbiddenError,
    NotecardsError,
    StoreUnavailableError,
)
from notecards.models.content import ContentType
from notecards.schemas.content import ContentDraft, ContentPatch

BASE_URL = "http://test/api/v1"


# ========================================
# Fixtures
# ========================================


@pytest_asyncio.fixture
async def content_client(app):
    async with ContentClient(BASE_URL, transport=ASGITransport(app=app)) as client:
        yield client


@pytest_asyncio.fixture
async def public_content_client(public_app):
    async with ContentClient(BASE_URL, transport=ASGITransport(app=public_app)) as client:
        yield client


def mock_client(handler) -> ContentClient:
    return ContentClient(BASE_URL, transport=httpx.MockTransport(handler))


# ========================================
# Procedures over HTTP
# ========================================


@pytest.mark.asyncio
async def test_full_lifecycle(content_client, youtube_draft):
    created = await content_client.create(ContentDraft(**youtube_draft))
    assert created.id
    assert created.content_type is ContentType.YOUTUBE

    fetched = await content_client.get_by_id(created.id)
    assert fetched == created

    updated = await content_client.update(created.id, ContentPatch(note="seen it"))
    assert updated.note == "seen it"
    assert updated.title == youtube_draft["title"]

    assert [i.id for i in await content_client.list_all()] == [created.id]
    assert [i.id for i in await content_client.get_by_type(ContentType.YOUTUBE)] == [created.id]
    assert await content_client.get_by_type("book") == []

    await content_client.delete(created.id)
    assert await content_client.list_all() == []


@pytest.mark.asyncio
async def test_create_accepts_plain_mapping(content_client, article_draft):
    created = await content_client.create(article_draft)
    assert created.title == "Foo"
    assert created.note == ""


@pytest.mark.asyncio
async def test_not_found_is_rebuilt(content_client):
    with pytest.raises(ContentNotFoundError) as exc_info:
        await content_client.get_by_id("missing")

    assert exc_info.value.content_id == "missing"


@pytest.mark.asyncio
async def test_validation_error_is_rebuilt(content_client, youtube_draft):
    youtube_draft["url"] = "not-a-url"

    with pytest.raises(ContentValidationError) as exc_info:
        await content_client.create(youtube_draft)

    assert any(detail["loc"][-1] == "url" for detail in exc_info.value.details)


@pytest.mark.asyncio
async def test_unknown_type_is_validation_error(content_client):
    with pytest.raises(ContentValidationError):
        await content_client.get_by_type("podcast")


@pytest.mark.asyncio
async def test_blank_id_rejected_without_request(content_client):
    with pytest.raises(ContentValidationError):
        await content_client.get_by_id("  ")


@pytest.mark.asyncio
async def test_public_mode_is_forbidden(public_content_client, youtube_draft):
    with pytest.raises(MutationForbiddenError):
        await public_content_client.create(youtube_draft)

    assert await public_content_client.list_all() == []


# ========================================
# Transport failures
# ========================================


@pytest.mark.asyncio
async def test_connection_error_is_store_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with mock_client(handler) as client:
        with pytest.raises(StoreUnavailableError):
            await client.list_all()


@pytest.mark.asyncio
async def test_timeout_is_store_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with mock_client(handler) as client:
        with pytest.raises(StoreUnavailableError):
            await client.get_by_id("abc")


@pytest.mark.asyncio
async def test_server_error_without_envelope_is_store_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    async with mock_client(handler) as client:
        with pytest.raises(StoreUnavailableError):
            await client.list_all()


@pytest.mark.asyncio
async def test_store_unavailable_envelope_is_rebuilt():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            503,
            json={"error": {"code": "store_unavailable", "message": "try later", "details": None}},
        )

    async with mock_client(handler) as client:
        with pytest.raises(StoreUnavailableError, match="try later"):
            await client.list_all()


@pytest.mark.asyncio
async def test_malformed_list_is_notecards_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"items": []})

    async with mock_client(handler) as client:
        with pytest.raises(NotecardsError):
            await client.list_all()


@pytest.mark.asyncio
async def test_ids_are_quoted_in_path():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.raw_path)
        return httpx.Response(204)

    async with mock_client(handler) as client:
        await client.delete("a/b")

    assert seen == [b"/api/v1/content/a%2Fb"]


@pytest.mark.asyncio
async def test_undecodable_body_is_store_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"content-encoding": "gzip"}, content=b"not gzip")

    async with mock_client(handler) as client:
        with pytest.raises(StoreUnavailableError):
            await client.list_all()


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["get_by_id", "update"])
async def test_non_json_item_body_is_notecards_error(method):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>proxy page</html>")

    async with mock_client(handler) as client:
        with pytest.raises(NotecardsError, match="Malformed JSON"):
            if method == "get_by_id":
                await client.get_by_id("abc")
            else:
                await client.update("abc", {"note": "x"})


@pytest.mark.asyncio
async def test_type_with_slash_is_validation_error_without_request():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(404, json={"detail": "Not Found"})

    async with mock_client(handler) as client:
        with pytest.raises(ContentValidationError) as exc_info:
            await client.get_by_type("movie/extra")

    assert calls == []
    assert exc_info.value.details[0]["loc"] == ["type"]


@pytest.mark.asyncio
async def test_type_member_is_sent_as_value():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json=[])

    async with mock_client(handler) as client:
        assert await client.get_by_type(ContentType.MOVIE) == []

    assert seen == ["/api/v1/content/by-type/movie"]
