"""
Outbound message pipeline.

send() uploads the attachments, builds the sendMessage envelope, pushes it
through the connection and hands back the message as the client will show
it until the server confirms it. load_more() asks the server for older
history of a thread.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional, Sequence

from threadline.adapters.attachment_uploader import AttachmentUploader
from threadline.adapters.base import (
    ChatConnection,
    ContactFieldsSource,
    CustomerFieldsSource,
)
from threadline.exceptions import CustomerAssociationFailureError
from threadline.infra.logging_config import get_logger
from threadline.schemas.custom_fields import CustomField
from threadline.schemas.events import AttachmentDTO, EventType
from threadline.schemas.message import (
    Attachment,
    ChatThread,
    ContentDescriptor,
    Message,
    MessageDirection,
    MessagePayload,
    OutboundMessage,
)
from threadline.services.envelope_builder import MessageEnvelopeBuilder
from threadline.services.events_service import EventsService
from threadline.services.pagination_builder import PaginationRequestBuilder

logger = get_logger("messages_service")


def map_attachment(dto: AttachmentDTO) -> Attachment:
    return Attachment(
        url=dto.url,
        friendly_name=dto.friendly_name,
        mime_type=dto.mime_type,
        file_name=dto.file_name,
    )


class MessagesService:
    def __init__(
        self,
        connection: ChatConnection,
        contact_fields: Optional[ContactFieldsSource] = None,
        customer_fields: Optional[CustomerFieldsSource] = None,
        uploader: Optional[AttachmentUploader] = None,
        events_service: Optional[EventsService] = None,
    ) -> None:
        self.connection = connection
        self._contact_fields = contact_fields
        self._customer_fields = customer_fields
        self._uploader = uploader or AttachmentUploader()
        self._events_service = events_service or EventsService()
        self._envelope_builder = MessageEnvelopeBuilder()
        self._pagination_builder = PaginationRequestBuilder()

    def load_more(self, thread: ChatThread) -> None:
        """
        Request the page of messages older than the thread's oldest one.

        Raises:
            NotConnectedError: the connection is not established.
            NoMoreMessagesError: the thread has no older history.
            InvalidOldestDateError: the thread has no message to page from.
            CustomerAssociationFailureError: no customer identity is set.
            EncodingFailureError: the request could not be serialized.
        """
        logger.debug("Loading more messages for thread %s", thread.id)
        self.connection.check_for_connection()

        data = self._pagination_builder.build(thread)
        event = self._events_service.create(
            EventType.LOAD_MORE_MESSAGES, data, self.connection.connection_context
        )
        self.connection.send(event)

    async def send_text(self, text: str, thread: ChatThread) -> Message:
        return await self.send(OutboundMessage(text=text), thread)

    async def send_with_attachments(
        self,
        text: str,
        attachments: Sequence[ContentDescriptor],
        thread: ChatThread,
    ) -> Message:
        return await self.send(
            OutboundMessage(text=text, attachments=list(attachments)), thread
        )

    async def send(self, message: OutboundMessage, thread: ChatThread) -> Message:
        """
        Send a message into a thread.

        Nothing is written to the connection unless every attachment was
        uploaded and the envelope serialized. The returned message shares
        its id with the envelope's idOnExternalPlatform.

        Raises:
            NotConnectedError: the connection is not established.
            MissingParameterError: upload URL could not be built, or an
                upload response had no fileUrl.
            ServerError: the upload endpoint answered with a non-2xx status.
            AttachmentError: fewer attachments were uploaded than requested.
            NoSuchFileError: an attachment file could not be accessed.
            CustomerAssociationFailureError: no customer identity is set.
            EncodingFailureError: the envelope could not be serialized.
        """
        logger.debug("Sending a message in thread %s", thread.id)
        self.connection.check_for_connection()
        context = self.connection.connection_context
        if context.customer is None:
            raise CustomerAssociationFailureError()

        customer_fields = self._resolve_customer_fields()
        contact_fields = self._resolve_contact_fields(thread.id)
        uploaded = await self._uploader.upload(message.attachments, context)

        message_id = uuid.uuid4()
        data = self._envelope_builder.build(
            message,
            thread,
            uploaded,
            customer_fields=customer_fields,
            contact_fields=contact_fields,
            context=context,
            access_token=self.connection.access_token,
            message_id=message_id,
        )
        event = self._events_service.create(EventType.SEND_MESSAGE, data, context)
        self.connection.send(event)

        return Message(
            id=str(message_id),
            thread_id=thread.id,
            content=MessagePayload(text=message.text, postback=message.postback),
            created_at=datetime.now(timezone.utc),
            attachments=[map_attachment(dto) for dto in uploaded],
            direction=MessageDirection.TO_AGENT,
            user_statistics=None,
            author_user=thread.assigned_agent,
            author_end_user_identity=context.customer,
        )

    def _resolve_customer_fields(self) -> list[CustomField]:
        if self._customer_fields is None:
            return []
        try:
            return list(self._customer_fields.customer_fields())
        except Exception as e:
            logger.warning("Customer custom fields unavailable, sending none: %s", e)
            return []

    def _resolve_contact_fields(self, thread_id: str) -> list[CustomField]:
        if self._contact_fields is None:
            return []
        try:
            return list(self._contact_fields.contact_fields_for(thread_id))
        except Exception as e:
            logger.warning(
                "Contact custom fields for thread %s unavailable, sending none: %s",
                thread_id,
                e,
            )
            return []
