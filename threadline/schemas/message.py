"""
Caller-facing message contracts.

OutboundMessage and ContentDescriptor are what callers hand to the
pipeline; ChatThread and Message are the thread state it reads and the
local message it returns.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BytesSource(BaseModel):
    """Attachment content held in memory."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["bytes"] = "bytes"
    data: bytes

    def describe(self) -> str:
        return f"BytesSource(length={len(self.data)})"


class UriSource(BaseModel):
    """Attachment content referenced by a file path or file:// URI."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["uri"] = "uri"
    uri: str

    def describe(self) -> str:
        return f"UriSource(uri={self.uri})"


ContentDescriptorSource = Annotated[
    Union[BytesSource, UriSource], Field(discriminator="kind")
]


class ContentDescriptor(BaseModel):
    """An attachment to upload alongside a message."""

    model_config = ConfigDict(frozen=True)

    data: ContentDescriptorSource
    mime_type: str
    file_name: str
    friendly_name: str


class OutboundMessage(BaseModel):
    """User-authored message to send into a thread."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    attachments: list[ContentDescriptor] = Field(default_factory=list)
    postback: Optional[str] = None

    @model_validator(mode="after")
    def require_text_or_attachments(self) -> OutboundMessage:
        if not self.text.strip() and not self.attachments:
            raise ValueError("Message needs text or at least one attachment")
        return self


class MessageDirection(str, Enum):
    TO_AGENT = "toAgent"
    TO_CLIENT = "toClient"


class MessagePayload(BaseModel):
    text: str
    postback: Optional[str] = None


class Attachment(BaseModel):
    """Uploaded attachment as shown on a message."""

    url: str
    friendly_name: str
    mime_type: str
    file_name: str


class Agent(BaseModel):
    id: int
    first_name: str = ""
    last_name: str = ""
    nickname: Optional[str] = None
    image_url: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class CustomerIdentity(BaseModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UserStatistics(BaseModel):
    seen_at: Optional[datetime] = None
    read_at: Optional[datetime] = None


class Message(BaseModel):
    """
    Chat message.

    The pipeline returns one of these right after the wire send, before the
    server acknowledges it. Its id equals the idOnExternalPlatform of the
    envelope that was sent so the acknowledgment can be matched to it.
    """

    id: str
    thread_id: str
    content: MessagePayload
    created_at: datetime
    attachments: list[Attachment] = Field(default_factory=list)
    direction: MessageDirection
    user_statistics: Optional[UserStatistics] = None
    author_user: Optional[Agent] = None
    author_end_user_identity: Optional[CustomerIdentity] = None


class ChatThread(BaseModel):
    """Conversation thread; messages are ordered oldest first."""

    id: str
    name: Optional[str] = None
    messages: list[Message] = Field(default_factory=list)
    scroll_token: str = ""
    has_more_messages_to_load: bool = False
    assigned_agent: Optional[Agent] = None

    @property
    def oldest_message_datetime(self) -> Optional[datetime]:
        if not self.messages:
            return None
        return self.messages[0].created_at
