"""Uploads message attachments to the chat attachment store."""

from __future__ import annotations

import asyncio
import base64
from typing import Optional, Sequence

import requests
from pydantic import ValidationError

from threadline.adapters.data_source import DataSourceResolver
from threadline.config import get_settings
from threadline.exceptions import AttachmentError, MissingParameterError, ServerError
from threadline.infra.logging_config import get_logger
from threadline.schemas.connection import ConnectionContext
from threadline.schemas.events import AttachmentDTO, AttachmentUploadSuccessResponse
from threadline.schemas.message import ContentDescriptor

logger = get_logger("attachment_uploader")

UPLOAD_PATH = "/1.0/brand/{brand_id}/channel/{channel_id}/attachment"


def build_upload_url(context: ConnectionContext) -> str:
    """
    Upload endpoint for the brand/channel of the connection.

    Raises MissingParameterError("url") when the chat URL is blank or not an
    absolute http(s) URL, when the channel id is blank, or when the brand id
    is unset (0). Any of these would produce an endpoint the server rejects.
    """
    chat_url = (context.chat_url or "").strip().rstrip("/")
    if not chat_url or not context.brand_id or not context.channel_id:
        raise MissingParameterError("url")
    if not chat_url.startswith(("http://", "https://")):
        raise MissingParameterError("url")
    return chat_url + UPLOAD_PATH.format(
        brand_id=context.brand_id, channel_id=context.channel_id
    )


class AttachmentUploader:
    """
    Upload every attachment of a message and return their references.

    Uploads run concurrently; results come back in the order the
    descriptors were given. Any single failure fails the whole upload.
    """

    def __init__(self, resolver: Optional[DataSourceResolver] = None) -> None:
        self._resolver = resolver or DataSourceResolver(
            documents_dir=get_settings().documents_path
        )

    async def upload(
        self,
        descriptors: Sequence[ContentDescriptor],
        context: ConnectionContext,
    ) -> list[AttachmentDTO]:
        if not descriptors:
            return []

        url = build_upload_url(context)
        tasks = [
            asyncio.ensure_future(self._upload_one(url, descriptor, context))
            for descriptor in descriptors
        ]
        try:
            uploaded = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        uploaded = [item for item in uploaded if item is not None]
        if len(uploaded) < len(descriptors):
            raise AttachmentError(requested=len(descriptors), uploaded=len(uploaded))
        return uploaded

    async def _upload_one(
        self,
        url: str,
        descriptor: ContentDescriptor,
        context: ConnectionContext,
    ) -> AttachmentDTO:
        content = await self._resolver.fetch(descriptor.data)
        body = {
            "content": base64.b64encode(content).decode("ascii"),
            "fileName": descriptor.file_name,
            "mimeType": descriptor.mime_type,
        }
        logger.debug(
            "Uploading attachment %s (%s, %d bytes) to %s",
            descriptor.file_name,
            descriptor.mime_type,
            len(content),
            url,
        )
        resp = await asyncio.to_thread(self._post, context, url, body)

        if not 200 <= resp.status_code <= 299:
            logger.warning(
                "Attachment upload of %s failed: HTTP %s",
                descriptor.file_name,
                resp.status_code,
            )
            raise ServerError(resp.status_code)

        try:
            decoded = AttachmentUploadSuccessResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise MissingParameterError("decodedData") from e

        return AttachmentDTO(
            url=decoded.file_url,
            friendly_name=descriptor.friendly_name,
            mime_type=descriptor.mime_type,
            file_name=descriptor.file_name,
        )

    @staticmethod
    def _post(
        context: ConnectionContext, url: str, body: dict[str, str]
    ) -> requests.Response:
        return context.session.post(
            url,
            json=body,
            headers={"Content-Type": "application/json"},
            timeout=context.upload_timeout_seconds,
        )
