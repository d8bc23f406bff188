"""
Interfaces to the collaborators the message pipeline depends on.

The connection owns its own lifecycle (connect, reconnect, token refresh);
the pipeline only checks it is up and pushes serialized events through it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Protocol, runtime_checkable

from threadline.schemas.connection import AccessToken, ConnectionContext
from threadline.schemas.custom_fields import CustomField


class ChatConnection(ABC):
    """Contract for an established bidirectional chat connection."""

    @abstractmethod
    def check_for_connection(self) -> None:
        """Raise NotConnectedError if the connection is not established."""
        ...

    @abstractmethod
    def send(self, message: str) -> None:
        """Write a serialized event to the connection. Does not wait for an ack."""
        ...

    @property
    @abstractmethod
    def connection_context(self) -> ConnectionContext: ...

    @property
    def access_token(self) -> Optional[AccessToken]:
        """Current bearer token, if the channel uses authorization."""
        return None


@runtime_checkable
class ContactFieldsSource(Protocol):
    def contact_fields_for(self, thread_id: str) -> list[CustomField]: ...


@runtime_checkable
class CustomerFieldsSource(Protocol):
    def customer_fields(self) -> list[CustomField]: ...
