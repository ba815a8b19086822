import logging

from fastapi import APIRouter, Depends, HTTPException

from chatflow.api.dependencies import get_chat_provider, get_conversation_service
from chatflow.api.security import get_current_user
from chatflow.core.errors import (
    ConversationNotFoundError,
    ProviderConfigurationError,
    ProviderError,
    ProviderRateLimitError,
)
from chatflow.models.message import MessageRole
from chatflow.schemas.auth_schema import SessionUser
from chatflow.schemas.chat_schema import GenerateResponseRequest, GenerateResponseResponse
from chatflow.schemas.conversation_schema import MessageResponse
from chatflow.services.chat_provider import ChatProvider
from chatflow.services.conversation_service import ConversationService

logger = logging.getLogger(__name__)
router = APIRouter()


def _provider_status(error: ProviderError) -> int:
    if isinstance(error, ProviderConfigurationError):
        return 503
    if isinstance(error, ProviderRateLimitError):
        return 429
    return 502


@router.post("/generateResponse", response_model=GenerateResponseResponse)
def generate_response(
    request: GenerateResponseRequest,
    service: ConversationService = Depends(get_conversation_service),
    provider: ChatProvider = Depends(get_chat_provider),
    user: SessionUser = Depends(get_current_user),
):
    try:
        conv = service.get_owned(request.conversation_id, user.id)
    except ConversationNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    history = service.get_history(conv.id)
    try:
        answer = provider.generate(history, request.message)
    except ProviderError as e:
        logger.error("AI generation failed for conversation id=%s: %s", conv.id, e.message)
        if request.save_reply:
            # Keep the turn visible in the thread instead of dropping it.
            service.send_message(conv.id, user.id, f"⚠️ {e.message}", MessageRole.ASSISTANT)
        raise HTTPException(status_code=_provider_status(e), detail=e.message)

    saved = None
    if request.save_reply:
        saved = MessageResponse.model_validate(
            service.send_message(conv.id, user.id, answer, MessageRole.ASSISTANT)
        )
    return GenerateResponseResponse(response=answer, message=saved)
