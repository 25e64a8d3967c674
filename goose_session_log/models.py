"""Pydantic models for Goose session JSONL structures.

A session file holds one metadata object followed by one message per line.
Messages carry typed content items; tool responses carry MCP result content.
"""

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Author of a message.

    Using str as base class keeps plain string comparisons working.
    """

    USER = "user"
    ASSISTANT = "assistant"


# =============================================================================
# Tool Result Content Models
# =============================================================================
# MCP content returned by a tool. Each item may restrict its audience.


class Annotations(BaseModel):
    audience: Optional[list[Role]] = None
    priority: Optional[float] = None


class ResultContent(BaseModel):
    """Base class for content items inside a tool response."""

    annotations: Optional[Annotations] = None

    def audience(self) -> Optional[list[Role]]:
        """Roles allowed to see this item, or None when unrestricted."""
        if self.annotations is None:
            return None
        return self.annotations.audience


class ResultTextContent(ResultContent):
    type: Literal["text"]
    text: str


class ResultImageContent(ResultContent):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["image"]
    data: str
    mime_type: str = Field(alias="mimeType")


class TextResourceContents(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uri: str
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    text: str


class BlobResourceContents(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uri: str
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    blob: str


class ResultResourceContent(ResultContent):
    type: Literal["resource"]
    resource: Union[TextResourceContents, BlobResourceContents]


ResultContentItem = Union[
    ResultTextContent,
    ResultImageContent,
    ResultResourceContent,
]


# =============================================================================
# Tool Call Models
# =============================================================================


class ToolCall(BaseModel):
    name: str
    arguments: Any = None


class ToolCallResult(BaseModel):
    """Outcome of parsing a tool call: a ToolCall on success, else an error."""

    status: Literal["success", "error"]
    value: Optional[ToolCall] = None
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.status == "error" or self.value is None


class ToolResponseResult(BaseModel):
    """Outcome of running a tool: result content on success, else an error."""

    status: Literal["success", "error"]
    value: list[ResultContentItem] = []
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.status == "error"


# =============================================================================
# Message Content Models
# =============================================================================


class MessageContent(BaseModel):
    """Base class for one typed content item of a message.

    Renderers dispatch on the concrete subclass name.
    """


class TextContent(MessageContent):
    type: Literal["text"] = "text"
    text: str


class ToolRequestContent(MessageContent):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["toolRequest"] = "toolRequest"
    id: str = ""
    tool_call: ToolCallResult = Field(alias="toolCall")


class ToolResponseContent(MessageContent):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["toolResponse"] = "toolResponse"
    id: str = ""
    tool_result: ToolResponseResult = Field(alias="toolResult")


class ImageContent(MessageContent):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["image"] = "image"
    data: str
    mime_type: str = Field(alias="mimeType")


class ThinkingContent(MessageContent):
    type: Literal["thinking"] = "thinking"
    thinking: str
    signature: Optional[str] = None


class RedactedThinkingContent(MessageContent):
    type: Literal["redactedThinking"] = "redactedThinking"
    data: str = ""


class UnknownContent(MessageContent):
    """Fallback for content types without a dedicated model.

    Stores the raw type name and payload so nothing is lost on load.
    """

    type_name: str
    raw: dict[str, Any] = {}


MessageContentItem = Union[
    TextContent,
    ToolRequestContent,
    ToolResponseContent,
    ImageContent,
    ThinkingContent,
    RedactedThinkingContent,
    UnknownContent,
]


# =============================================================================
# Messages and Sessions
# =============================================================================


class Message(BaseModel):
    id: Optional[str] = None
    role: Role
    created: int = 0
    content: list[MessageContentItem] = []

    def is_only_tool_response(self) -> bool:
        """True for a user message made up entirely of tool responses."""
        return self.role == Role.USER and all(
            isinstance(item, ToolResponseContent) for item in self.content
        )

    def has_tool_request(self) -> bool:
        return any(isinstance(item, ToolRequestContent) for item in self.content)


class SessionMetadata(BaseModel):
    """First line of a session file."""

    working_dir: str = ""
    description: str = ""
    schedule_id: Optional[str] = None
    message_count: int = 0
    total_tokens: Optional[int] = None
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None


class SessionInfo(BaseModel):
    """A session file found on disk, as shown by the session listing."""

    id: str
    path: str
    modified: str
    metadata: SessionMetadata
