from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import requests

from threadline.config import Settings
from threadline.schemas.message import CustomerIdentity


@dataclass(frozen=True)
class AccessToken:
    token: str
    expires_in: Optional[int] = None


@dataclass
class ConnectionContext:
    """Read-only view of the established connection used by the pipeline."""

    chat_url: str
    brand_id: int
    channel_id: str
    device_token: Optional[str] = None
    customer: Optional[CustomerIdentity] = None
    session: requests.Session = field(default_factory=requests.Session)
    upload_timeout_seconds: int = 30

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        customer: Optional[CustomerIdentity] = None,
        session: Optional[requests.Session] = None,
    ) -> ConnectionContext:
        return cls(
            chat_url=settings.chat_url,
            brand_id=settings.brand_id,
            channel_id=settings.channel_id,
            device_token=settings.device_token,
            customer=customer,
            session=session or requests.Session(),
            upload_timeout_seconds=settings.upload_timeout_seconds,
        )
