"""Tests for AttachmentUploader."""

import asyncio
import base64
from dataclasses import replace
from unittest.mock import AsyncMock

import pytest
import requests

from tests.fixtures.connection_fixtures import UPLOAD_URL, make_response
from threadline.adapters.attachment_uploader import AttachmentUploader, build_upload_url
from threadline.adapters.data_source import DataSourceResolver
from threadline.exceptions import AttachmentError, MissingParameterError, ServerError
from threadline.schemas.message import BytesSource, ContentDescriptor


def _descriptor(name: str, data: bytes = b"data") -> ContentDescriptor:
    return ContentDescriptor(
        data=BytesSource(data=data),
        mime_type="image/png",
        file_name=f"{name}.png",
        friendly_name=name.title(),
    )


def test_build_upload_url(connection_context):
    assert build_upload_url(connection_context) == UPLOAD_URL


@pytest.mark.parametrize(
    "changes",
    [{"chat_url": ""}, {"chat_url": "not a url"}, {"brand_id": 0}, {"channel_id": ""}],
)
def test_build_upload_url_missing_parts(connection_context, changes):
    with pytest.raises(MissingParameterError) as exc_info:
        build_upload_url(replace(connection_context, **changes))
    assert exc_info.value.name == "url"


@pytest.mark.asyncio
async def test_upload_no_descriptors_makes_no_request(connection_context, http_session):
    result = await AttachmentUploader().upload([], connection_context)
    assert result == []
    http_session.post.assert_not_called()


@pytest.mark.asyncio
async def test_upload_posts_base64_json_body(connection_context, http_session, bytes_attachment):
    result = await AttachmentUploader().upload([bytes_attachment], connection_context)

    http_session.post.assert_called_once()
    args, kwargs = http_session.post.call_args
    assert args[0] == UPLOAD_URL
    assert kwargs["json"] == {
        "content": base64.b64encode(b"%PDF-1.4 fake").decode("ascii"),
        "fileName": "invoice.pdf",
        "mimeType": "application/pdf",
    }
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert len(result) == 1
    assert result[0].url == "https://files.example.com/attachments/1"
    assert result[0].friendly_name == "Invoice"
    assert result[0].mime_type == "application/pdf"
    assert result[0].file_name == "invoice.pdf"


@pytest.mark.asyncio
async def test_upload_preserves_input_order(connection_context, http_session):
    def post(url, json, headers, timeout):
        return make_response(200, {"fileUrl": f"https://files.example.com/{json['fileName']}"})

    http_session.post.side_effect = post
    descriptors = [_descriptor(name) for name in ("first", "second", "third")]

    result = await AttachmentUploader().upload(descriptors, connection_context)

    assert [r.file_name for r in result] == ["first.png", "second.png", "third.png"]
    assert [r.url for r in result] == [
        "https://files.example.com/first.png",
        "https://files.example.com/second.png",
        "https://files.example.com/third.png",
    ]


@pytest.mark.asyncio
async def test_upload_preserves_order_when_completion_is_reversed(connection_context):
    delays = {"slow": 0.05, "fast": 0.0}

    async def fetch(source):
        name = source.data.decode()
        await asyncio.sleep(delays[name])
        return source.data

    resolver = DataSourceResolver()
    resolver.fetch = AsyncMock(side_effect=fetch)
    descriptors = [_descriptor("slow", b"slow"), _descriptor("fast", b"fast")]

    result = await AttachmentUploader(resolver).upload(descriptors, connection_context)

    assert [r.file_name for r in result] == ["slow.png", "fast.png"]


@pytest.mark.asyncio
async def test_upload_non_2xx_raises_server_error(connection_context, http_session, bytes_attachment):
    http_session.post.return_value = make_response(500, {"error": "boom"})
    with pytest.raises(ServerError) as exc_info:
        await AttachmentUploader().upload([bytes_attachment], connection_context)
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_upload_missing_file_url_raises_missing_parameter(
    connection_context, http_session, bytes_attachment
):
    http_session.post.return_value = make_response(201, {"url": "elsewhere"})
    with pytest.raises(MissingParameterError) as exc_info:
        await AttachmentUploader().upload([bytes_attachment], connection_context)
    assert exc_info.value.name == "decodedData"


@pytest.mark.asyncio
async def test_upload_non_json_body_raises_missing_parameter(
    connection_context, http_session, bytes_attachment
):
    http_session.post.return_value = make_response(
        200, requests.exceptions.JSONDecodeError("Expecting value", "", 0)
    )
    with pytest.raises(MissingParameterError):
        await AttachmentUploader().upload([bytes_attachment], connection_context)


@pytest.mark.asyncio
async def test_upload_single_failure_fails_whole_upload(connection_context, http_session):
    def post(url, json, headers, timeout):
        if json["fileName"] == "bad.png":
            return make_response(503)
        return make_response(200, {"fileUrl": "https://files.example.com/ok"})

    http_session.post.side_effect = post
    descriptors = [_descriptor("good"), _descriptor("bad"), _descriptor("other")]

    with pytest.raises(ServerError):
        await AttachmentUploader().upload(descriptors, connection_context)


@pytest.mark.asyncio
async def test_upload_transport_error_passes_through(connection_context, http_session, bytes_attachment):
    http_session.post.side_effect = requests.ConnectionError("connection reset")
    with pytest.raises(requests.ConnectionError):
        await AttachmentUploader().upload([bytes_attachment], connection_context)


@pytest.mark.asyncio
async def test_upload_shortfall_raises_attachment_error(connection_context, bytes_attachment):
    uploader = AttachmentUploader()

    async def drop(url, descriptor, context):
        return None

    uploader._upload_one = drop
    with pytest.raises(AttachmentError) as exc_info:
        await uploader.upload([bytes_attachment], connection_context)
    assert exc_info.value.requested == 1
    assert exc_info.value.uploaded == 0


@pytest.mark.asyncio
async def test_upload_failure_cancels_in_flight_siblings(connection_context, http_session):
    cancelled: list[bytes] = []
    siblings_started = asyncio.Event()
    started: list[bytes] = []

    async def fetch(source):
        if source.data == b"bad":
            await siblings_started.wait()
            raise ServerError(502)
        started.append(source.data)
        if len(started) == 2:
            siblings_started.set()
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.append(source.data)
            raise
        return source.data

    resolver = DataSourceResolver()
    resolver.fetch = AsyncMock(side_effect=fetch)
    descriptors = [_descriptor("a", b"a"), _descriptor("bad", b"bad"), _descriptor("c", b"c")]

    with pytest.raises(ServerError):
        await AttachmentUploader(resolver).upload(descriptors, connection_context)

    assert sorted(cancelled) == [b"a", b"c"]
    http_session.post.assert_not_called()
