"""
Interview AI Service Module

This module serves the stateless generation endpoints. The client keeps the
conversation log itself and sends it with each call.

It provides:
- start, continue and end of a conversational interview
- interview question generation
- concept explanations for a single question

Dependencies:
- mockinterview.services.generation: For the generation clients
- mockinterview.core.secure_prompt_manager: For prompt building
- mockinterview.services.conversation.parameter_validator: For required field checks
- loguru: For logging operations

Author: @kcaparas1630
"""

from typing import List
from loguru import logger
from mockinterview.core.secure_prompt_manager import ConversationPhase, SecurePromptManager, secure_prompt_manager
from mockinterview.errors.exceptions import ValidationError
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
from mockinterview.services.conversation.parameter_validator import is_missing, validate_interview_parameters
from mockinterview.services.generation import GenerationClient


class InterviewAIService:
    """
    Stateless generation calls for clients that keep the conversation log themselves.

    Nothing here touches the database; the caller persists whatever it keeps.
    """

    def __init__(
        self,
        conversation_client: GenerationClient,
        question_client: GenerationClient,
        prompts: SecurePromptManager = secure_prompt_manager,
    ):
        """
        Initialize the service with its generation clients.

        Args:
            conversation_client (GenerationClient): Client for the interview phases.
            question_client (GenerationClient): Client for question and explanation generation.
            prompts (SecurePromptManager): Prompt builder.
        """
        self.conversation_client = conversation_client
        self.question_client = question_client
        self.prompts = prompts

    async def start_conversation(self, request: StartConversationRequest) -> StartResult:
        validate_interview_parameters(request.role, request.experience, request.topicsToFocus)
        prompt = self.prompts.get_conversation_prompt(
            request.role, request.experience, request.topicsToFocus, ConversationPhase.START
        )
        return await self.conversation_client.generate_structured(prompt, StartResult)

    async def continue_conversation(self, request: ContinueConversationRequest) -> ContinueResult:
        validate_interview_parameters(request.role, request.experience, request.topicsToFocus)
        if is_missing(request.userResponse):
            raise ValidationError("Missing required fields")
        prompt = self.prompts.get_conversation_prompt(
            request.role,
            request.experience,
            request.topicsToFocus,
            ConversationPhase.CONTINUE,
            conversation_history=request.conversationHistory,
            user_response=request.userResponse,
        )
        return await self.conversation_client.generate_structured(prompt, ContinueResult)

    async def end_conversation(self, request: EndConversationRequest) -> EndResult:
        validate_interview_parameters(request.role, request.experience, request.topicsToFocus)
        if request.conversationHistory is None:
            raise ValidationError("Missing required fields")
        prompt = self.prompts.get_conversation_prompt(
            request.role,
            request.experience,
            request.topicsToFocus,
            ConversationPhase.END,
            conversation_history=request.conversationHistory,
        )
        result = await self.conversation_client.generate_structured(prompt, EndResult)
        logger.info(f"Generated end-of-interview evaluation with score {result.score}")
        return result

    async def generate_questions(self, request: GenerateQuestionsRequest) -> List[GeneratedQuestion]:
        validate_interview_parameters(request.role, request.experience, request.topicsToFocus)
        if request.numberOfQuestions is None:
            raise ValidationError("Missing required fields")
        prompt = self.prompts.get_questions_prompt(
            request.role, request.experience, request.topicsToFocus, request.numberOfQuestions
        )
        questions = await self.question_client.generate_structured(prompt, List[GeneratedQuestion])
        logger.info(f"Generated {len(questions)} questions for {request.role}")
        return questions

    async def generate_explanation(self, request: GenerateExplanationRequest) -> ConceptExplanation:
        if is_missing(request.question):
            raise ValidationError("Missing required fields")
        prompt = self.prompts.get_explanation_prompt(request.question)
        return await self.question_client.generate_structured(prompt, ConceptExplanation)
