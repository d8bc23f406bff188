"""
In-memory stores for customer and contact custom fields.

Customer fields are global to the signed-in customer; contact fields are
kept per thread. When the same ident is set twice, the newer updated_at
wins.
"""

from __future__ import annotations

from typing import Iterable

from threadline.schemas.custom_fields import CustomField


def _merge(current: dict[str, CustomField], incoming: Iterable[CustomField]) -> None:
    for custom_field in incoming:
        existing = current.get(custom_field.ident)
        if existing is None or custom_field.updated_at >= existing.updated_at:
            current[custom_field.ident] = custom_field


class CustomerCustomFieldsService:
    """Global customer custom fields."""

    def __init__(self) -> None:
        self._fields: dict[str, CustomField] = {}

    def customer_fields(self) -> list[CustomField]:
        return list(self._fields.values())

    def set_fields(self, fields: Iterable[CustomField]) -> None:
        _merge(self._fields, fields)

    def reset(self) -> None:
        self._fields.clear()


class ContactCustomFieldsService:
    """Contact custom fields, keyed by thread id."""

    def __init__(self) -> None:
        self._fields: dict[str, dict[str, CustomField]] = {}

    def contact_fields_for(self, thread_id: str) -> list[CustomField]:
        return list(self._fields.get(thread_id, {}).values())

    def set_fields(self, thread_id: str, fields: Iterable[CustomField]) -> None:
        _merge(self._fields.setdefault(thread_id, {}), fields)

    def reset(self) -> None:
        self._fields.clear()
