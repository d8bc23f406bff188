from __future__ import annotations

import uuid
from typing import Iterable, Optional, Sequence
from uuid import UUID

from threadline.schemas.connection import AccessToken, ConnectionContext
from threadline.schemas.custom_fields import CustomField
from threadline.schemas.events import (
    AttachmentDTO,
    ContactCustomFieldsDataDTO,
    CustomerCustomFieldsDataDTO,
    CustomFieldDTO,
    DeviceFingerprintDTO,
    MessageContentDTO,
    MessagePayloadDTO,
    SendMessageEventDataDTO,
    ThreadDTO,
)
from threadline.schemas.message import ChatThread, OutboundMessage


def to_custom_field_dtos(fields: Iterable[CustomField]) -> list[CustomFieldDTO]:
    """Keep only fields that carry a non-empty value."""
    return [
        CustomFieldDTO(ident=f.ident, value=f.value, updated_at=f.updated_at)
        for f in fields
        if f.value
    ]


class MessageEnvelopeBuilder:
    """Assembles the sendMessage event data. No I/O."""

    def build(
        self,
        message: OutboundMessage,
        thread: ChatThread,
        uploaded_attachments: Sequence[AttachmentDTO],
        customer_fields: Iterable[CustomField],
        contact_fields: Iterable[CustomField],
        context: ConnectionContext,
        access_token: Optional[AccessToken] = None,
        message_id: Optional[UUID] = None,
    ) -> SendMessageEventDataDTO:
        return SendMessageEventDataDTO(
            thread=ThreadDTO(id_on_external_platform=thread.id, thread_name=thread.name),
            content=MessageContentDTO(
                payload=MessagePayloadDTO(text=message.text, postback=message.postback)
            ),
            id_on_external_platform=message_id or uuid.uuid4(),
            customer=CustomerCustomFieldsDataDTO(
                custom_fields=to_custom_field_dtos(customer_fields)
            ),
            contact=ContactCustomFieldsDataDTO(
                custom_fields=to_custom_field_dtos(contact_fields)
            ),
            attachments=list(uploaded_attachments),
            device_fingerprint=DeviceFingerprintDTO(device_token=context.device_token),
            access_token=access_token.token if access_token else None,
        )
