"""Client-side outbound message pipeline for real-time chat."""

from threadline.services.messages_service import MessagesService

__all__ = ["MessagesService"]
