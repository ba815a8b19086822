from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chatflow.models.message import MessageRole


class CreateConversationRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)

    model_config = ConfigDict(str_strip_whitespace=True)


class UpdateConversationTitleRequest(BaseModel):
    conversation_id: int = Field(..., gt=0)
    title: str = Field(..., min_length=1, max_length=255)

    model_config = ConfigDict(str_strip_whitespace=True)


class SendMessageRequest(BaseModel):
    conversation_id: int = Field(..., gt=0)
    content: str = Field(..., min_length=1)
    role: MessageRole

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        # Stored verbatim, but must carry some text.
        if not value.strip():
            raise ValueError("Message content must not be blank")
        return value


class ConversationListItem(BaseModel):
    id: int
    title: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    id: int
    conversation_id: int
    user_id: int
    role: MessageRole
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ConversationDetail(BaseModel):
    id: int
    title: str
    created_at: datetime
    updated_at: datetime
    messages: list[MessageResponse]
