"""
AI Conversation API Routes

Description:
This module defines stateless FastAPI routes that call the generation service
directly for clients that keep the conversation log themselves: the three
interview phases, question generation and concept explanation. Nothing here is
persisted.

Arguments:
- request: An instance of Request, required for rate limiting.
- payload: The phase-specific request body.

Returns:
- The phase result as returned by the generation service.

Dependencies:
- fastapi: For creating the FastAPI application and defining routes.
- mockinterview.core.route_limiters: For rate limiting functionality.
- mockinterview.services.interview_ai_service: For the generation calls.
- loguru: For logging information about the request and any errors that occur.

Author: @kcaparas1630

"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger
from mockinterview.core.dependencies import get_interview_ai_service
from mockinterview.core.route_limiters import AI_RATE_LIMIT, limiter
from mockinterview.errors.exceptions import InternalServerError
from mockinterview.schemas.ai.ai_requests import (
    ContinueConversationRequest,
    EndConversationRequest,
    GenerateExplanationRequest,
    GenerateQuestionsRequest,
    StartConversationRequest,
)
from mockinterview.schemas.ai.generation_results import (
    ConceptExplanation,
    ContinueResult,
    EndResult,
    GeneratedQuestion,
    StartResult,
)
from mockinterview.services.auth.firebase_auth import get_current_user_uid
from mockinterview.services.interview_ai_service import InterviewAIService

router = APIRouter(
    prefix="/api/ai",
    tags=["ai-conversation"],
    dependencies=[Depends(get_current_user_uid)],
    responses={404: {"description": "Not found"}}
)


@router.post("/start-conversation", response_model=StartResult)
@limiter.limit(AI_RATE_LIMIT)
async def start_conversation(
    request: Request,
    payload: StartConversationRequest,
    service: InterviewAIService = Depends(get_interview_ai_service),
):
    """
    Get the interviewer's greeting and first question
    """
    try:
        return await service.start_conversation(payload)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Unhandled exception starting AI conversation")
        raise InternalServerError("Failed to start conversation", error=str(e)) from e


@router.post("/continue-conversation", response_model=ContinueResult)
@limiter.limit(AI_RATE_LIMIT)
async def continue_conversation(
    request: Request,
    payload: ContinueConversationRequest,
    service: InterviewAIService = Depends(get_interview_ai_service),
):
    """
    Get feedback on the candidate's answer and the next question
    """
    try:
        return await service.continue_conversation(payload)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Unhandled exception continuing AI conversation")
        raise InternalServerError("Failed to continue conversation", error=str(e)) from e


@router.post("/end-conversation", response_model=EndResult)
@limiter.limit(AI_RATE_LIMIT)
async def end_conversation(
    request: Request,
    payload: EndConversationRequest,
    service: InterviewAIService = Depends(get_interview_ai_service),
):
    """
    Get the closing message and the final evaluation
    """
    try:
        return await service.end_conversation(payload)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Unhandled exception ending AI conversation")
        raise InternalServerError("Failed to end conversation", error=str(e)) from e


@router.post("/generate-questions", response_model=List[GeneratedQuestion])
@limiter.limit(AI_RATE_LIMIT)
async def generate_questions(
    request: Request,
    payload: GenerateQuestionsRequest,
    service: InterviewAIService = Depends(get_interview_ai_service),
):
    try:
        return await service.generate_questions(payload)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Unhandled exception generating interview questions")
        raise InternalServerError("Failed to generate questions", error=str(e)) from e


@router.post("/generate-explanation", response_model=ConceptExplanation)
@limiter.limit(AI_RATE_LIMIT)
async def generate_explanation(
    request: Request,
    payload: GenerateExplanationRequest,
    service: InterviewAIService = Depends(get_interview_ai_service),
):
    try:
        return await service.generate_explanation(payload)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Unhandled exception generating concept explanation")
        raise InternalServerError("Failed to generate explanation", error=str(e)) from e
