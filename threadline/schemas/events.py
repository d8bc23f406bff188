"""
Wire contracts for events sent over the chat connection.

Field names are snake_case in Python and camelCase on the wire; dump with
``by_alias=True`` (EventsService does).
"""

from __future__ import annotations

import platform
from datetime import datetime
from enum import Enum
from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CHAT_WINDOW_ACTION = "chatWindowEvent"


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EventType(str, Enum):
    SEND_MESSAGE = "sendMessage"
    LOAD_MORE_MESSAGES = "loadMoreMessages"


class ThreadDTO(WireModel):
    id_on_external_platform: str
    thread_name: Optional[str] = None


class MessagePayloadDTO(WireModel):
    text: str
    postback: Optional[str] = None


class MessageContentDTO(WireModel):
    type: str = "TEXT"
    payload: MessagePayloadDTO


class CustomFieldDTO(WireModel):
    ident: str
    value: str
    updated_at: datetime


class CustomerCustomFieldsDataDTO(WireModel):
    custom_fields: list[CustomFieldDTO] = Field(default_factory=list)


class ContactCustomFieldsDataDTO(WireModel):
    custom_fields: list[CustomFieldDTO] = Field(default_factory=list)


class AttachmentDTO(WireModel):
    """Reference to an attachment already stored by the upload endpoint."""

    model_config = ConfigDict(frozen=True)

    url: str
    friendly_name: str
    mime_type: str
    file_name: str


class AttachmentUploadSuccessResponse(WireModel):
    file_url: str


class DeviceFingerprintDTO(WireModel):
    device_token: Optional[str] = None
    os: str = Field(default_factory=platform.system)
    os_version: str = Field(default_factory=platform.release)
    application_type: str = "native"


class SendMessageEventDataDTO(WireModel):
    """The message envelope."""

    thread: ThreadDTO
    content: MessageContentDTO
    id_on_external_platform: UUID
    customer: CustomerCustomFieldsDataDTO = Field(
        default_factory=CustomerCustomFieldsDataDTO
    )
    contact: ContactCustomFieldsDataDTO = Field(
        default_factory=ContactCustomFieldsDataDTO
    )
    attachments: list[AttachmentDTO] = Field(default_factory=list)
    device_fingerprint: DeviceFingerprintDTO = Field(
        default_factory=DeviceFingerprintDTO
    )
    access_token: Optional[str] = Field(default=None, alias="token")


class LoadMoreMessagesEventDataDTO(WireModel):
    scroll_token: str
    thread: ThreadDTO
    oldest_message_datetime: datetime


class BrandDTO(WireModel):
    id: int


class ChannelDTO(WireModel):
    id: str


class ConsumerIdentityDTO(WireModel):
    id_on_external_platform: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class EventPayloadDTO(WireModel):
    event_type: EventType
    brand: BrandDTO
    channel: ChannelDTO
    consumer_identity: ConsumerIdentityDTO
    data: Union[SendMessageEventDataDTO, LoadMoreMessagesEventDataDTO]


class EventDTO(WireModel):
    """Outer wrapper every outbound event travels in."""

    action: str = CHAT_WINDOW_ACTION
    event_id: UUID
    payload: EventPayloadDTO
