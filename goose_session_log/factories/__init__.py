"""Factory modules for creating typed objects from raw data."""

from .message_factory import (
    # Registries
    CONTENT_ITEM_CREATORS,
    RESULT_CONTENT_CREATORS,
    # Content item creation
    create_content_item,
    create_message_content,
    create_result_content,
    # Message and metadata creation
    create_message,
    create_session_metadata,
    is_message_data,
)

__all__ = [
    # Registries
    "CONTENT_ITEM_CREATORS",
    "RESULT_CONTENT_CREATORS",
    # Content item creation
    "create_content_item",
    "create_message_content",
    "create_result_content",
    # Message and metadata creation
    "create_message",
    "create_session_metadata",
    "is_message_data",
]
