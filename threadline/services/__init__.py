from threadline.services.custom_fields_service import (
    ContactCustomFieldsService,
    CustomerCustomFieldsService,
)
from threadline.services.envelope_builder import MessageEnvelopeBuilder
from threadline.services.events_service import EventsService
from threadline.services.messages_service import MessagesService
from threadline.services.pagination_builder import PaginationRequestBuilder

__all__ = [
    "ContactCustomFieldsService",
    "CustomerCustomFieldsService",
    "EventsService",
    "MessageEnvelopeBuilder",
    "MessagesService",
    "PaginationRequestBuilder",
]
