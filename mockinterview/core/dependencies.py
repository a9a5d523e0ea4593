"""
Description:
FastAPI dependency providers that wire stores, generation clients and services
together per request. Tests swap any layer through app.dependency_overrides.

Dependencies:
- fastapi: For Depends.
- motor: For the database handle type.

Author: @kcaparas1630
"""
from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from mockinterview.core.ai_client_manager import get_ai_client_manager
from mockinterview.core.config import Settings, get_settings
from mockinterview.database import get_database
from mockinterview.services.conversation.conversation_service import InterviewConversationService
from mockinterview.services.conversation.conversation_store import ConversationStore
from mockinterview.services.conversation.session_store import SessionStore
from mockinterview.services.generation import GenerationClient
from mockinterview.services.interview_ai_service import InterviewAIService


def get_conversation_store(db: AsyncIOMotorDatabase = Depends(get_database)) -> ConversationStore:
    return ConversationStore(db)


def get_session_store(db: AsyncIOMotorDatabase = Depends(get_database)) -> SessionStore:
    return SessionStore(db)


def get_generation_client(settings: Settings = Depends(get_settings)) -> GenerationClient:
    return GenerationClient(get_ai_client_manager().get_conversation_client(), model=settings.ai_model)


def get_question_generation_client(settings: Settings = Depends(get_settings)) -> GenerationClient:
    return GenerationClient(get_ai_client_manager().get_question_generation_client(), model=settings.ai_questions_model)


def get_conversation_service(
    store: ConversationStore = Depends(get_conversation_store),
    sessions: SessionStore = Depends(get_session_store),
    generation: GenerationClient = Depends(get_generation_client),
) -> InterviewConversationService:
    return InterviewConversationService(store, sessions, generation)


def get_interview_ai_service(
    conversation_client: GenerationClient = Depends(get_generation_client),
    question_client: GenerationClient = Depends(get_question_generation_client),
) -> InterviewAIService:
    return InterviewAIService(conversation_client, question_client)


def get_conversation_creator(
    store: ConversationStore = Depends(get_conversation_store),
    sessions: SessionStore = Depends(get_session_store),
) -> InterviewConversationService:
    """Service for create only; it never calls the generation service, so no AI client is built."""
    return InterviewConversationService(store, sessions, generation=None)
