"""
Description:
Request and response schemas for the conversation endpoints.

Dependencies:
- pydantic: For data validation and settings management.
- mockinterview.models.conversation_models: For the stored document models.

Author: @kcaparas1630
"""
from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator
from mockinterview.models.conversation_models import (
    Conversation,
    ConversationMessage,
    Difficulty,
    FinalFeedback,
    QuestionType,
    Sender,
    SessionSummary,
    lower_enum_value,
)
from mockinterview.schemas.ai.generation_results import ContinueResult, EndResult, StartResult


class CreateConversationRequest(BaseModel):
    sessionId: Optional[str] = None


class AddMessageRequest(BaseModel):
    sender: Sender
    message: str
    feedback: Optional[str] = None
    questionType: Optional[QuestionType] = None
    difficulty: Optional[Difficulty] = None

    @field_validator("questionType", "difficulty", mode="before")
    @classmethod
    def normalize_enum(cls, value: Any) -> Any:
        return lower_enum_value(value)


class CompleteConversationRequest(BaseModel):
    finalFeedback: FinalFeedback
    duration: Optional[float] = Field(None, ge=0)


class ConversationResponse(BaseModel):
    success: bool = True
    conversation: Conversation
    session: Optional[SessionSummary] = None


class MessageAppendedResponse(BaseModel):
    success: bool = True
    conversation: Conversation
    newMessage: ConversationMessage


class ConversationListItem(Conversation):
    sessionSummary: Optional[SessionSummary] = None


class ConversationListResponse(BaseModel):
    success: bool = True
    conversations: List[ConversationListItem]


class StartPhaseResponse(BaseModel):
    success: bool = True
    conversation: Conversation
    reply: StartResult


class ContinuePhaseResponse(BaseModel):
    success: bool = True
    conversation: Conversation
    reply: ContinueResult


class FinishPhaseResponse(BaseModel):
    success: bool = True
    conversation: Conversation
    reply: EndResult
