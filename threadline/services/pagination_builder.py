from __future__ import annotations

from threadline.exceptions import InvalidOldestDateError, NoMoreMessagesError
from threadline.schemas.events import LoadMoreMessagesEventDataDTO, ThreadDTO
from threadline.schemas.message import ChatThread


class PaginationRequestBuilder:
    """Builds the loadMoreMessages event data for a thread's older history."""

    def build(self, thread: ChatThread) -> LoadMoreMessagesEventDataDTO:
        if not thread.has_more_messages_to_load:
            raise NoMoreMessagesError()
        oldest = thread.oldest_message_datetime
        if oldest is None:
            raise InvalidOldestDateError()
        return LoadMoreMessagesEventDataDTO(
            scroll_token=thread.scroll_token,
            thread=ThreadDTO(id_on_external_platform=thread.id, thread_name=thread.name),
            oldest_message_datetime=oldest,
        )
