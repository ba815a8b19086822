"""
Conversation Service

CRUD operations for conversations and messages. Every lookup is scoped to the
owning user; a conversation owned by someone else is reported as missing.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from chatflow.core.config import settings
from chatflow.core.errors import ConversationNotFoundError
from chatflow.models.conversation import Conversation, utcnow
from chatflow.models.message import Message, MessageRole

logger = logging.getLogger(__name__)


def derive_title(content: str, max_length: Optional[int] = None) -> str:
    """Title for a conversation taken from its first user message."""
    limit = max_length if max_length is not None else settings.CONVERSATION_TITLE_MAX_LENGTH
    text = " ".join(content.split())
    return (text[:limit] + "...") if len(text) > limit else text


class ConversationService:
    """Service for managing conversations and messages"""

    def __init__(self, db: Session, *, title_max_length: Optional[int] = None):
        self.db = db
        self.title_max_length = title_max_length

    def list_conversations(self, user_id: int) -> List[Conversation]:
        """Conversations owned by the user, most recently updated first"""
        return (
            self.db.query(Conversation)
            .filter(Conversation.user_id == user_id)
            .order_by(Conversation.updated_at.desc(), Conversation.id.desc())
            .all()
        )

    def get_owned(self, conversation_id: int, user_id: int) -> Conversation:
        conv = (
            self.db.query(Conversation)
            .filter(Conversation.id == conversation_id, Conversation.user_id == user_id)
            .first()
        )
        if not conv:
            raise ConversationNotFoundError()
        return conv

    def get_history(self, conversation_id: int) -> List[Message]:
        """All messages of a conversation, oldest first"""
        return (
            self.db.query(Message)
            .filter(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
            .all()
        )

    def get_conversation(self, conversation_id: int, user_id: int) -> tuple[Conversation, List[Message]]:
        conv = self.get_owned(conversation_id, user_id)
        return conv, self.get_history(conv.id)

    def create_conversation(self, user_id: int, title: Optional[str] = None) -> Conversation:
        now = utcnow()
        conv = Conversation(
            user_id=user_id,
            title=title or settings.DEFAULT_CONVERSATION_TITLE,
            created_at=now,
            updated_at=now,
        )
        self.db.add(conv)
        self.db.commit()
        self.db.refresh(conv)
        logger.info("Created conversation id=%s for user id=%s", conv.id, user_id)
        return conv

    def update_conversation_title(self, conversation_id: int, user_id: int, title: str) -> Conversation:
        conv = self.get_owned(conversation_id, user_id)
        conv.title = title
        conv.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(conv)
        return conv

    def send_message(self, conversation_id: int, user_id: int, content: str, role: MessageRole) -> Message:
        """Append a message and refresh the conversation metadata.

        The first user-role message also names the conversation. The insert and
        the conversation update are committed together.
        """
        conv = self.get_owned(conversation_id, user_id)
        role = MessageRole(role)

        is_first_user_message = False
        if role == MessageRole.USER:
            earlier = (
                self.db.query(Message.id)
                .filter(Message.conversation_id == conv.id, Message.role == MessageRole.USER.value)
                .first()
            )
            is_first_user_message = earlier is None

        now = utcnow()
        message = Message(
            conversation_id=conv.id,
            user_id=user_id,
            role=role.value,
            content=content,
            created_at=now,
        )
        self.db.add(message)

        if is_first_user_message:
            conv.title = derive_title(content, self.title_max_length) or conv.title
        conv.updated_at = now

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(message)
        return message
