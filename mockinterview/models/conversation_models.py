"""Conversation Models Module

This module defines the document models for conversational interviews as they
are stored in MongoDB and returned by the API. Field names follow the stored
camelCase keys so a document round-trips without renaming.

The module contains the enums for message senders, question types, difficulty
levels and conversation status, the ConversationMessage entry appended to a
conversation's log, the FinalFeedback evaluation set at completion, and the
Conversation document itself.

Dependencies:
- pydantic: For data validation and serialization.
- bson: For converting MongoDB ObjectIds to strings.
- datetime: For timestamp handling.

Author: @kcaparas1630
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional
from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Sender(str, Enum):
    INTERVIEWER = "interviewer"
    CANDIDATE = "candidate"


class QuestionType(str, Enum):
    INTRODUCTION = "introduction"
    TECHNICAL = "technical"
    BEHAVIORAL = "behavioral"
    FOLLOW_UP = "follow-up"
    CLARIFICATION = "clarification"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ConversationStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


NON_TERMINAL_STATUSES = (ConversationStatus.ACTIVE, ConversationStatus.PAUSED)


def lower_enum_value(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip().lower()
        return value or None
    return value


class ConversationMessage(BaseModel):
    """A single entry in a conversation's message log.

    Messages are immutable once appended. Only interviewer messages carry
    feedback on the candidate's previous answer.
    """
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    sender: Sender
    message: str = Field(..., min_length=1)
    timestamp: datetime = Field(default_factory=utc_now)
    feedback: Optional[str] = None
    questionType: Optional[QuestionType] = None
    difficulty: Optional[Difficulty] = None

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be blank")
        return value

    @field_validator("questionType", "difficulty", mode="before")
    @classmethod
    def normalize_enum(cls, value: Any) -> Any:
        return lower_enum_value(value)


class FinalFeedback(BaseModel):
    """Evaluation stored once, when a conversation completes."""
    overallFeedback: str = ""
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    score: str = ""
    recommendedActions: List[str] = Field(default_factory=list)

    @field_validator("score", mode="before")
    @classmethod
    def score_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class SessionSummary(BaseModel):
    """The interview-prep session fields a conversation is displayed with."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    role: Optional[str] = None
    experience: Optional[Any] = None
    topicsToFocus: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def object_id_to_str(cls, value: Any) -> Any:
        return str(value) if isinstance(value, ObjectId) else value


class Conversation(BaseModel):
    """Conversational interview owned by one (session, user) pair.

    Attributes:
        id (str): MongoDB document id, serialized as "_id"
        session (str): Id of the interview-prep session
        user (str): Id of the owning user
        status (ConversationStatus): active, paused or completed
        messages (List[ConversationMessage]): Append-only log in temporal order
        finalFeedback (FinalFeedback, optional): Set once at completion
        duration (float, optional): Elapsed seconds, set at completion
        startedAt (datetime): When the conversation was created
        completedAt (datetime, optional): When the conversation completed
    """
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str = Field(..., alias="_id")
    session: str
    user: str
    status: ConversationStatus = ConversationStatus.ACTIVE
    messages: List[ConversationMessage] = Field(default_factory=list)
    finalFeedback: Optional[FinalFeedback] = None
    duration: Optional[float] = None
    startedAt: datetime = Field(default_factory=utc_now)
    completedAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def object_id_to_str(cls, value: Any) -> Any:
        return str(value) if isinstance(value, ObjectId) else value

    @property
    def is_completed(self) -> bool:
        return self.status == ConversationStatus.COMPLETED.value

    def history(self) -> List[dict]:
        """Message log in the shape embedded into prompts."""
        return [
            {"sender": message.sender, "message": message.message}
            for message in self.messages
        ]

    def __repr__(self):
        return f"Conversation(id={self.id}, status={self.status}, messages={len(self.messages)})"
