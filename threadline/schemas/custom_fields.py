"""Customer and contact custom field values held on the client."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class CustomField(BaseModel):
    ident: str
    value: Optional[str] = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def has_value(self) -> bool:
        return bool(self.value)
