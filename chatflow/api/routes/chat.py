from fastapi import APIRouter, Depends, HTTPException, Query

from chatflow.api.dependencies import get_conversation_service
from chatflow.api.security import get_current_user
from chatflow.core.errors import ConversationNotFoundError
from chatflow.schemas.auth_schema import SessionUser
from chatflow.schemas.conversation_schema import (
    ConversationDetail,
    ConversationListItem,
    CreateConversationRequest,
    MessageResponse,
    SendMessageRequest,
    UpdateConversationTitleRequest,
)
from chatflow.services.conversation_service import ConversationService


router = APIRouter()


@router.get("/getConversations", response_model=list[ConversationListItem])
def get_conversations(
    service: ConversationService = Depends(get_conversation_service),
    user: SessionUser = Depends(get_current_user),
):
    return service.list_conversations(user.id)


@router.get("/getConversation", response_model=ConversationDetail)
def get_conversation(
    conversation_id: int = Query(...),
    service: ConversationService = Depends(get_conversation_service),
    user: SessionUser = Depends(get_current_user),
):
    if conversation_id <= 0:
        raise HTTPException(status_code=400, detail="Invalid conversation ID")

    try:
        conv, messages = service.get_conversation(conversation_id, user.id)
    except ConversationNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    return ConversationDetail(
        id=conv.id,
        title=conv.title,
        created_at=conv.created_at,
        updated_at=conv.updated_at,
        messages=[MessageResponse.model_validate(m) for m in messages],
    )


@router.post("/createConversation", response_model=ConversationListItem)
def create_conversation(
    request: CreateConversationRequest,
    service: ConversationService = Depends(get_conversation_service),
    user: SessionUser = Depends(get_current_user),
):
    return service.create_conversation(user.id, title=request.title)


@router.post("/updateConversationTitle", response_model=ConversationListItem)
def update_conversation_title(
    request: UpdateConversationTitleRequest,
    service: ConversationService = Depends(get_conversation_service),
    user: SessionUser = Depends(get_current_user),
):
    try:
        return service.update_conversation_title(request.conversation_id, user.id, request.title)
    except ConversationNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/sendMessage", response_model=MessageResponse)
def send_message(
    request: SendMessageRequest,
    service: ConversationService = Depends(get_conversation_service),
    user: SessionUser = Depends(get_current_user),
):
    try:
        return service.send_message(request.conversation_id, user.id, request.content, request.role)
    except ConversationNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
