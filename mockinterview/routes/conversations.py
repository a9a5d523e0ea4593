"""Conversation Routes Module

This module defines FastAPI routes for conversational interviews: creating or
reusing the open conversation for a session, appending messages, completing,
pausing and resuming, listing, and the server-driven start/advance/finish
phases that call the generation service and persist its replies.

All routes run under the authenticated user's Firebase UID and only touch
conversations that user owns.

Dependencies:
- fastapi: For API routing and dependency injection.
- loguru: For logging operations.
- pymongo: For database error types.
- mockinterview.core.route_limiters: For rate limiting on generation-backed routes.
- mockinterview.core.dependencies: For store and service providers.
- mockinterview.services.auth.firebase_auth: For the authenticated user dependency.
- mockinterview.errors.exceptions: For custom exception handling.

Author: @kcaparas1630
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from starlette.status import HTTP_200_OK, HTTP_201_CREATED
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError
from loguru import logger
from mockinterview.core.dependencies import (
    get_conversation_creator,
    get_conversation_service,
    get_conversation_store,
    get_session_store,
)
from mockinterview.core.route_limiters import AI_RATE_LIMIT, limiter
from mockinterview.errors.exceptions import InternalServerError, PersistenceError, ValidationError
from mockinterview.models.conversation_models import ConversationMessage, ConversationStatus
from mockinterview.schemas.ai.ai_requests import (
    AdvanceConversationRequest,
    FinishConversationRequest,
    StartConversationRequest,
)
from mockinterview.schemas.conversation.conversation_schemas import (
    AddMessageRequest,
    CompleteConversationRequest,
    ContinuePhaseResponse,
    ConversationListItem,
    ConversationListResponse,
    ConversationResponse,
    CreateConversationRequest,
    FinishPhaseResponse,
    MessageAppendedResponse,
    StartPhaseResponse,
)
from mockinterview.services.auth.firebase_auth import get_current_user_uid
from mockinterview.services.conversation.conversation_service import InterviewConversationService
from mockinterview.services.conversation.conversation_store import ConversationStore
from mockinterview.services.conversation.session_store import SessionStore

router = APIRouter(
    prefix="/api/conversations",
    tags=["conversations"],
    responses={404: {"description": "Not found"}}
)


@router.post("/create", response_model=ConversationResponse)
async def create_conversation_route(
    payload: CreateConversationRequest,
    response: Response,
    user_id: str = Depends(get_current_user_uid),
    service: InterviewConversationService = Depends(get_conversation_creator),
):
    """Create the conversation for a session, or return the one already open.

    Returns 201 when a conversation was created and 200 when an active or
    paused one was reused.
    """
    try:
        conversation, created = await service.create(payload.sessionId, user_id)
        response.status_code = HTTP_201_CREATED if created else HTTP_200_OK
        return {"success": True, "conversation": conversation}
    except HTTPException:
        raise
    except PyMongoError as e:
        logger.error(f"Database error creating conversation: {e}")
        raise PersistenceError(error=str(e)) from e
    except Exception as e:
        logger.exception("Unhandled exception in create conversation endpoint")
        raise InternalServerError("Failed to create conversation.", error=str(e)) from e


@router.get("/my-conversations", response_model=ConversationListResponse)
async def get_my_conversations_route(
    user_id: str = Depends(get_current_user_uid),
    store: ConversationStore = Depends(get_conversation_store),
    sessions: SessionStore = Depends(get_session_store),
):
    """List the user's conversations, newest first, each with its session summary."""
    try:
        conversations = await store.list_by_user(user_id)
        summaries = await sessions.get_summaries(conversation.session for conversation in conversations)
        items = [
            ConversationListItem(
                **conversation.model_dump(by_alias=True),
                sessionSummary=summaries.get(conversation.session),
            )
            for conversation in conversations
        ]
        return {"success": True, "conversations": items}
    except HTTPException:
        raise
    except PyMongoError as e:
        logger.error(f"Database error listing conversations: {e}")
        raise PersistenceError(error=str(e)) from e
    except Exception as e:
        logger.exception("Unhandled exception in list conversations endpoint")
        raise InternalServerError("Failed to list conversations.", error=str(e)) from e


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation_route(
    conversation_id: str,
    user_id: str = Depends(get_current_user_uid),
    store: ConversationStore = Depends(get_conversation_store),
    sessions: SessionStore = Depends(get_session_store),
):
    try:
        conversation = await store.get_by_id(conversation_id, user_id)
        summaries = await sessions.get_summaries([conversation.session])
        return {"success": True, "conversation": conversation, "session": summaries.get(conversation.session)}
    except HTTPException:
        raise
    except PyMongoError as e:
        raise PersistenceError(error=str(e)) from e


@router.post("/{conversation_id}/message", response_model=MessageAppendedResponse)
async def add_message_route(
    conversation_id: str,
    payload: AddMessageRequest,
    user_id: str = Depends(get_current_user_uid),
    store: ConversationStore = Depends(get_conversation_store),
):
    """Append one message to the conversation's log.

    Raises:
        ConversationNotFound: If the conversation does not exist
        AuthorizationError: If the user does not own it
        ConversationClosedError: If it is completed
    """
    try:
        new_message = ConversationMessage(**payload.model_dump())
    except PydanticValidationError as e:
        raise ValidationError("Missing required fields") from e
    try:
        conversation = await store.append_message(conversation_id, user_id, new_message)
        return {"success": True, "conversation": conversation, "newMessage": new_message}
    except HTTPException:
        raise
    except PyMongoError as e:
        logger.error(f"Database error appending to conversation {conversation_id}: {e}")
        raise PersistenceError(error=str(e)) from e


@router.post("/{conversation_id}/complete", response_model=ConversationResponse)
async def complete_conversation_route(
    conversation_id: str,
    payload: CompleteConversationRequest,
    user_id: str = Depends(get_current_user_uid),
    store: ConversationStore = Depends(get_conversation_store),
):
    """Mark the conversation completed with the client-supplied evaluation. Terminal."""
    try:
        conversation = await store.mark_completed(conversation_id, user_id, payload.finalFeedback, payload.duration)
        return {"success": True, "conversation": conversation}
    except HTTPException:
        raise
    except PyMongoError as e:
        logger.error(f"Database error completing conversation {conversation_id}: {e}")
        raise PersistenceError(error=str(e)) from e


@router.post("/{conversation_id}/pause", response_model=ConversationResponse)
async def pause_conversation_route(
    conversation_id: str,
    user_id: str = Depends(get_current_user_uid),
    store: ConversationStore = Depends(get_conversation_store),
):
    try:
        conversation = await store.set_status(conversation_id, user_id, ConversationStatus.PAUSED)
        return {"success": True, "conversation": conversation}
    except HTTPException:
        raise
    except PyMongoError as e:
        raise PersistenceError(error=str(e)) from e


@router.post("/{conversation_id}/resume", response_model=ConversationResponse)
async def resume_conversation_route(
    conversation_id: str,
    user_id: str = Depends(get_current_user_uid),
    store: ConversationStore = Depends(get_conversation_store),
):
    try:
        conversation = await store.set_status(conversation_id, user_id, ConversationStatus.ACTIVE)
        return {"success": True, "conversation": conversation}
    except HTTPException:
        raise
    except PyMongoError as e:
        raise PersistenceError(error=str(e)) from e


@router.post("/{conversation_id}/start", response_model=StartPhaseResponse)
@limiter.limit(AI_RATE_LIMIT)
async def start_conversation_route(
    request: Request,
    conversation_id: str,
    payload: StartConversationRequest,
    user_id: str = Depends(get_current_user_uid),
    service: InterviewConversationService = Depends(get_conversation_service),
):
    """Generate and store the interviewer's greeting and first question.

    Rate Limit:
        AI_RATE_LIMIT per client
    """
    try:
        conversation, reply = await service.start(
            conversation_id, user_id, payload.role, payload.experience, payload.topicsToFocus
        )
        return {"success": True, "conversation": conversation, "reply": reply}
    except HTTPException:
        raise
    except PyMongoError as e:
        raise PersistenceError(error=str(e)) from e
    except Exception as e:
        logger.exception(f"Unhandled exception starting conversation {conversation_id}")
        raise InternalServerError("Failed to start conversation", error=str(e)) from e


@router.post("/{conversation_id}/advance", response_model=ContinuePhaseResponse)
@limiter.limit(AI_RATE_LIMIT)
async def advance_conversation_route(
    request: Request,
    conversation_id: str,
    payload: AdvanceConversationRequest,
    user_id: str = Depends(get_current_user_uid),
    service: InterviewConversationService = Depends(get_conversation_service),
):
    """Store the candidate's answer, then generate and store the interviewer's reply.

    Rate Limit:
        AI_RATE_LIMIT per client
    """
    try:
        conversation, reply = await service.advance(
            conversation_id,
            user_id,
            payload.role,
            payload.experience,
            payload.topicsToFocus,
            payload.userResponse,
            conversation_history=payload.conversationHistory,
        )
        return {"success": True, "conversation": conversation, "reply": reply}
    except HTTPException:
        raise
    except PyMongoError as e:
        raise PersistenceError(error=str(e)) from e
    except Exception as e:
        logger.exception(f"Unhandled exception continuing conversation {conversation_id}")
        raise InternalServerError("Failed to continue conversation", error=str(e)) from e


@router.post("/{conversation_id}/finish", response_model=FinishPhaseResponse)
@limiter.limit(AI_RATE_LIMIT)
async def finish_conversation_route(
    request: Request,
    conversation_id: str,
    payload: FinishConversationRequest,
    user_id: str = Depends(get_current_user_uid),
    service: InterviewConversationService = Depends(get_conversation_service),
):
    """Generate the final evaluation and complete the conversation.

    Rate Limit:
        AI_RATE_LIMIT per client
    """
    try:
        conversation, reply = await service.finish(
            conversation_id,
            user_id,
            payload.role,
            payload.experience,
            payload.topicsToFocus,
            duration=payload.duration,
        )
        return {"success": True, "conversation": conversation, "reply": reply}
    except HTTPException:
        raise
    except PyMongoError as e:
        raise PersistenceError(error=str(e)) from e
    except Exception as e:
        logger.exception(f"Unhandled exception finishing conversation {conversation_id}")
        raise InternalServerError("Failed to end conversation", error=str(e)) from e
