"""Factory for creating Message and content item instances from raw data.

This module creates typed model instances from session JSONL data:
- MessageContentItem subclasses (Text, ToolRequest, ToolResponse, Image,
  Thinking, RedactedThinking), with UnknownContent as the fallback
- ResultContentItem subclasses for tool response payloads
- SessionMetadata from the first line of a session file
"""

import logging
from typing import Any, Optional, cast

from pydantic import BaseModel, ValidationError

from ..models import (
    ImageContent,
    Message,
    MessageContentItem,
    RedactedThinkingContent,
    ResultContentItem,
    ResultImageContent,
    ResultResourceContent,
    ResultTextContent,
    Role,
    SessionMetadata,
    TextContent,
    ThinkingContent,
    ToolRequestContent,
    ToolResponseContent,
    ToolResponseResult,
    UnknownContent,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Content Item Registry
# =============================================================================

# Maps content type strings to their model classes
CONTENT_ITEM_CREATORS: dict[str, type[BaseModel]] = {
    "text": TextContent,
    "toolRequest": ToolRequestContent,
    "image": ImageContent,
    "thinking": ThinkingContent,
    "redactedThinking": RedactedThinkingContent,
}

RESULT_CONTENT_CREATORS: dict[str, type[BaseModel]] = {
    "text": ResultTextContent,
    "image": ResultImageContent,
    "resource": ResultResourceContent,
}


# =============================================================================
# Result Content Creation
# =============================================================================


def create_result_content(item_data: dict[str, Any]) -> Optional[ResultContentItem]:
    """Create a ResultContentItem from raw data, or None if it cannot be parsed."""
    content_type = str(item_data.get("type", ""))
    model_class = RESULT_CONTENT_CREATORS.get(content_type)
    if model_class is None:
        logger.warning("Dropping tool result content of unknown type %r", content_type)
        return None
    try:
        return cast(ResultContentItem, model_class.model_validate(item_data))
    except ValidationError as e:
        logger.warning("Dropping invalid %s tool result content: %s", content_type, e)
        return None


def _create_tool_response(item_data: dict[str, Any]) -> ToolResponseContent:
    """Create a ToolResponseContent, building each result item via the registry.

    Result items that fail validation are dropped instead of failing the
    whole response.
    """
    data_copy = item_data.copy()
    tool_result = data_copy.get("toolResult")
    if isinstance(tool_result, dict):
        result_copy = cast(dict[str, Any], tool_result).copy()
        value = result_copy.get("value")
        if isinstance(value, list):
            items: list[ResultContentItem] = []
            for raw in cast(list[Any], value):
                if isinstance(raw, dict):
                    if created := create_result_content(cast(dict[str, Any], raw)):
                        items.append(created)
            result_copy["value"] = items
        data_copy["toolResult"] = ToolResponseResult.model_validate(result_copy)
    return ToolResponseContent.model_validate(data_copy)


# =============================================================================
# Content Item Creation
# =============================================================================


def create_content_item(item_data: dict[str, Any]) -> MessageContentItem:
    """Create a MessageContentItem from raw data using the registry.

    Returns:
        MessageContentItem instance, with fallback to UnknownContent for
        unknown types or data that fails validation
    """
    content_type = str(item_data.get("type", ""))
    try:
        if content_type == "toolResponse":
            return _create_tool_response(item_data)
        model_class = CONTENT_ITEM_CREATORS.get(content_type)
        if model_class is not None:
            return cast(MessageContentItem, model_class.model_validate(item_data))
    except ValidationError as e:
        logger.warning("Invalid %s content item: %s", content_type or "untyped", e)
    return UnknownContent(type_name=content_type or "unknown", raw=item_data)


def create_message_content(content_data: Any) -> list[MessageContentItem]:
    """Create a list of content items from message content data.

    Always returns a list. String content is wrapped in a TextContent item.
    """
    if isinstance(content_data, str):
        return [TextContent(text=content_data)]
    if isinstance(content_data, list):
        result: list[MessageContentItem] = []
        for item in cast(list[Any], content_data):
            if isinstance(item, dict):
                result.append(create_content_item(cast(dict[str, Any], item)))
            else:
                # Non-dict items (e.g., raw strings) become TextContent
                result.append(TextContent(text=str(item)))
        return result
    if content_data is None:
        return []
    return [TextContent(text=str(content_data))]


# =============================================================================
# Message and Metadata Creation
# =============================================================================


def create_message(data: dict[str, Any]) -> Message:
    """Create a Message from raw data.

    Raises:
        ValidationError: if the role or envelope fields are invalid.
    """
    data_copy = data.copy()
    data_copy["content"] = create_message_content(data_copy.get("content"))
    return Message.model_validate(data_copy)


def create_session_metadata(data: dict[str, Any]) -> SessionMetadata:
    """Create SessionMetadata from the first line of a session file."""
    return SessionMetadata.model_validate(data)


def is_message_data(data: dict[str, Any]) -> bool:
    """Whether a decoded JSONL line looks like a message rather than metadata."""
    return data.get("role") in (Role.USER.value, Role.ASSISTANT.value)
