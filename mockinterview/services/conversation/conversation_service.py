"""
Conversational Interview Service

This service runs the conversational interview state machine over a stored
conversation:

    create -> start -> advance* -> finish

- create reuses the open conversation for (session, user) or makes a new one.
- start asks for a greeting and first question. It is only valid on an empty log.
- advance asks for feedback on the candidate's answer and the next question,
  then records the answer and the reply in one update.
- finish asks for the closing message and evaluation and completes the
  conversation. Nothing can be appended afterwards.

The stored log is the source of truth for prompts. Preconditions are checked
before any generation call or write. A failed generation call therefore never
leaves a half-written turn behind.

Dependencies:
- mockinterview.services.generation: For the generation client
- mockinterview.core.secure_prompt_manager: For phase prompts
- loguru: For logging operations

Author: @kcaparas1630
"""

from datetime import timezone
from typing import Any, Dict, List, Optional, Tuple, Union
from loguru import logger
from mockinterview.core.secure_prompt_manager import ConversationPhase, SecurePromptManager, secure_prompt_manager
from mockinterview.errors.exceptions import ConversationClosedError, ValidationError
from mockinterview.models.conversation_models import Conversation, ConversationMessage, Sender, utc_now
from mockinterview.schemas.ai.generation_results import ContinueResult, EndResult, StartResult
from mockinterview.services.conversation.conversation_store import ConversationStore
from mockinterview.services.conversation.parameter_validator import is_missing, validate_interview_parameters
from mockinterview.services.conversation.session_store import SessionStore
from mockinterview.services.generation import GenerationClient

Experience = Union[int, float, str, None]


def elapsed_seconds(conversation: Conversation) -> int:
    started_at = conversation.startedAt
    if started_at.tzinfo is None:
        started_at = started_at.replace(tzinfo=timezone.utc)
    return max(0, int((utc_now() - started_at).total_seconds()))


class InterviewConversationService:
    """
    Drives a stored conversation through its phases.

    Args:
        store: Conversation persistence
        sessions: Interview-prep session lookup
        generation: Client for the text-generation service; None when only create is used
        prompts: Prompt builder
    """

    def __init__(
        self,
        store: ConversationStore,
        sessions: SessionStore,
        generation: Optional[GenerationClient],
        prompts: SecurePromptManager = secure_prompt_manager,
    ):
        self.store = store
        self.sessions = sessions
        self.generation = generation
        self.prompts = prompts

    async def create(self, session_id: Optional[str], user_id: str) -> Tuple[Conversation, bool]:
        """
        Return the open conversation for (session, user), creating it if needed.

        Returns:
            Tuple of the conversation and whether it was newly created

        Raises:
            ValidationError: If session_id is missing
            SessionNotFound: If the session does not exist
        """
        if is_missing(session_id):
            raise ValidationError("Session ID is required")
        await self.sessions.get_owned_session(session_id, user_id)
        return await self.store.create_or_reuse(session_id, user_id)

    async def _load_open(self, conversation_id: str, user_id: str) -> Conversation:
        conversation = await self.store.get_by_id(conversation_id, user_id)
        if conversation.is_completed:
            raise ConversationClosedError(conversation_id)
        return conversation

    async def start(
        self,
        conversation_id: str,
        user_id: str,
        role: Optional[str],
        experience: Experience,
        topics_to_focus: Optional[str],
    ) -> Tuple[Conversation, StartResult]:
        validate_interview_parameters(role, experience, topics_to_focus)
        conversation = await self._load_open(conversation_id, user_id)
        if conversation.messages:
            raise ValidationError("Conversation has already started")

        prompt = self.prompts.get_conversation_prompt(role, experience, topics_to_focus, ConversationPhase.START)
        reply = await self.generation.generate_structured(prompt, StartResult)

        opening = ConversationMessage(
            sender=Sender.INTERVIEWER,
            message=reply.message,
            questionType=reply.questionType,
            difficulty=reply.difficulty,
        )
        conversation = await self.store.append_message(conversation_id, user_id, opening, require_empty_log=True)
        logger.info(f"Conversation {conversation_id} started")
        return conversation, reply

    async def advance(
        self,
        conversation_id: str,
        user_id: str,
        role: Optional[str],
        experience: Experience,
        topics_to_focus: Optional[str],
        user_response: Optional[str],
        conversation_history: Optional[List[Dict[str, Any]]] = None,
    ) -> Tuple[Conversation, ContinueResult]:
        validate_interview_parameters(role, experience, topics_to_focus)
        if is_missing(user_response):
            raise ValidationError("User response is required")
        conversation = await self._load_open(conversation_id, user_id)
        if not conversation.messages:
            raise ValidationError("Conversation has not started")

        if conversation_history is not None and len(conversation_history) != len(conversation.messages):
            logger.debug(
                f"Client history for {conversation_id} has {len(conversation_history)} messages, "
                f"stored log has {len(conversation.messages)}; using stored log"
            )

        answer = ConversationMessage(sender=Sender.CANDIDATE, message=user_response)
        prompt = self.prompts.get_conversation_prompt(
            role,
            experience,
            topics_to_focus,
            ConversationPhase.CONTINUE,
            conversation_history=conversation.history(),
            user_response=user_response,
        )
        reply = await self.generation.generate_structured(prompt, ContinueResult)

        follow_up = ConversationMessage(
            sender=Sender.INTERVIEWER,
            message=reply.message,
            feedback=reply.feedback,
            questionType=reply.questionType,
            difficulty=reply.difficulty,
        )
        # both messages or neither
        conversation = await self.store.append_messages(conversation_id, user_id, [answer, follow_up])
        return conversation, reply

    async def finish(
        self,
        conversation_id: str,
        user_id: str,
        role: Optional[str],
        experience: Experience,
        topics_to_focus: Optional[str],
        duration: Optional[float] = None,
    ) -> Tuple[Conversation, EndResult]:
        validate_interview_parameters(role, experience, topics_to_focus)
        conversation = await self._load_open(conversation_id, user_id)
        if not conversation.messages:
            raise ValidationError("Conversation has no messages to evaluate")

        prompt = self.prompts.get_conversation_prompt(
            role,
            experience,
            topics_to_focus,
            ConversationPhase.END,
            conversation_history=conversation.history(),
        )
        reply = await self.generation.generate_structured(prompt, EndResult)

        if duration is None:
            duration = elapsed_seconds(conversation)
        closing = ConversationMessage(sender=Sender.INTERVIEWER, message=reply.message)
        conversation = await self.store.mark_completed(
            conversation_id,
            user_id,
            reply.final_feedback(),
            duration,
            closing_message=closing,
        )
        logger.info(f"Conversation {conversation_id} finished with score {reply.score}")
        return conversation, reply
