"""
Description:
Typed results for each generation phase.

The generation service is asked for a specific JSON shape per phase. Parsed
output is validated into one of these models, and a mismatch is reported as a
MalformedResponseError by the generation client.

Dependencies:
- pydantic: For data validation and settings management.
- mockinterview.models.conversation_models: For the shared enums.

Author: @kcaparas1630
"""
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from mockinterview.models.conversation_models import Difficulty, FinalFeedback, QuestionType


def _lower(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip().lower()
        return value or None
    return value


class _PhaseResult(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    message: str = Field(..., min_length=1, description="What the interviewer says next")

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be blank")
        return value


class StartResult(_PhaseResult):
    questionType: Optional[QuestionType] = None
    difficulty: Optional[Difficulty] = None
    expectsResponse: bool = True

    @field_validator("questionType", "difficulty", mode="before")
    @classmethod
    def normalize_enum(cls, value: Any) -> Any:
        return _lower(value)


class ContinueResult(StartResult):
    feedback: Optional[str] = Field(None, description="Brief feedback on the previous answer")


class EndResult(_PhaseResult):
    overallFeedback: str
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    score: str
    recommendedActions: List[str] = Field(default_factory=list)
    expectsResponse: bool = False

    @field_validator("score", mode="before")
    @classmethod
    def score_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def final_feedback(self) -> FinalFeedback:
        return FinalFeedback(
            overallFeedback=self.overallFeedback,
            strengths=self.strengths,
            improvements=self.improvements,
            score=self.score,
            recommendedActions=self.recommendedActions,
        )


class GeneratedQuestion(BaseModel):
    question: str = Field(..., min_length=1)
    answer: str


class ConceptExplanation(BaseModel):
    title: str
    explanation: str
