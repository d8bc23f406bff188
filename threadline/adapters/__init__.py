"""Collaborator interfaces and I/O adapters for the message pipeline."""

from threadline.adapters.attachment_uploader import AttachmentUploader
from threadline.adapters.base import (
    ChatConnection,
    ContactFieldsSource,
    CustomerFieldsSource,
)
from threadline.adapters.data_source import DataSourceResolver

__all__ = [
    "AttachmentUploader",
    "ChatConnection",
    "ContactFieldsSource",
    "CustomerFieldsSource",
    "DataSourceResolver",
]
