"""
Errors raised by the outbound message pipeline.

Any of these reaching the caller of send/load_more means nothing was
transmitted over the connection; the whole call can be retried.
"""

from __future__ import annotations

from typing import Optional


class ChatError(Exception):
    """Base class for chat pipeline failures."""


class NotConnectedError(ChatError):
    def __init__(self) -> None:
        super().__init__("Not connected; call connect before using the chat")


class NoMoreMessagesError(ChatError):
    def __init__(self) -> None:
        super().__init__("Thread has no more messages to load")


class InvalidOldestDateError(ChatError):
    def __init__(self) -> None:
        super().__init__("Thread is missing the creation date of its oldest message")


class CustomerAssociationFailureError(ChatError):
    def __init__(self) -> None:
        super().__init__("Customer identity is not set on the connection")


class MissingParameterError(ChatError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Missing parameter: {name}")


class ServerError(ChatError):
    def __init__(self, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(f"Server error (status={status_code})")


class AttachmentError(ChatError):
    def __init__(self, requested: int, uploaded: int) -> None:
        self.requested = requested
        self.uploaded = uploaded
        super().__init__(
            f"Only {uploaded} of {requested} attachments were uploaded"
        )


class NoSuchFileError(ChatError):
    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"No such file: {location}")


class EncodingFailureError(ChatError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Unable to encode event: {detail}")
