from typing import Optional

from pydantic import BaseModel, Field

from chatflow.schemas.conversation_schema import MessageResponse


class GenerateResponseRequest(BaseModel):
    conversation_id: int = Field(..., gt=0, description="Conversation whose history is sent to the model")
    message: str = Field(..., min_length=1, description="New user message")
    save_reply: bool = Field(
        default=False,
        description="Persist the reply (or the error text on failure) as an assistant message",
    )


class GenerateResponseResponse(BaseModel):
    response: str = Field(..., description="Assistant reply text")
    message: Optional[MessageResponse] = Field(default=None, description="Stored assistant message (save_reply only)")
