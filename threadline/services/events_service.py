"""
Wraps event data into the chat window event and serializes it to JSON.

Every outbound event names the brand, channel and consumer it belongs to,
so a connection without a customer identity cannot produce one.
"""

from __future__ import annotations

import uuid
from typing import Union

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from threadline.exceptions import CustomerAssociationFailureError, EncodingFailureError
from threadline.schemas.connection import ConnectionContext
from threadline.schemas.events import (
    BrandDTO,
    ChannelDTO,
    ConsumerIdentityDTO,
    EventDTO,
    EventPayloadDTO,
    EventType,
    LoadMoreMessagesEventDataDTO,
    SendMessageEventDataDTO,
)

EventData = Union[SendMessageEventDataDTO, LoadMoreMessagesEventDataDTO]


class EventsService:
    def create(
        self,
        event_type: EventType,
        data: EventData,
        context: ConnectionContext,
    ) -> str:
        """
        Build the outer event for ``data`` and return it as a JSON string.

        Raises:
            CustomerAssociationFailureError: context has no customer identity.
            EncodingFailureError: the event could not be built or serialized.
        """
        customer = context.customer
        if customer is None:
            raise CustomerAssociationFailureError()

        try:
            event = EventDTO(
                event_id=uuid.uuid4(),
                payload=EventPayloadDTO(
                    event_type=event_type,
                    brand=BrandDTO(id=context.brand_id),
                    channel=ChannelDTO(id=context.channel_id),
                    consumer_identity=ConsumerIdentityDTO(
                        id_on_external_platform=customer.id,
                        first_name=customer.first_name,
                        last_name=customer.last_name,
                    ),
                    data=data,
                ),
            )
            return event.model_dump_json(by_alias=True)
        except (ValidationError, PydanticSerializationError, TypeError, ValueError) as e:
            raise EncodingFailureError(str(e)) from e
