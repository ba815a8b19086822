from typing import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from chatflow.core.database import SessionLocal
from chatflow.services.chat_provider import ChatProvider
from chatflow.services.conversation_service import ConversationService


def get_db() -> Generator:
    """
    Dependency Injection function to get a database session.
    It ensures the database connection is closed after the request is finished.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_conversation_service(db: Session = Depends(get_db)) -> ConversationService:
    return ConversationService(db)


def get_chat_provider(request: Request) -> ChatProvider:
    """The provider chosen at startup (see ``chatflow.main.lifespan``)."""
    return request.app.state.chat_provider
