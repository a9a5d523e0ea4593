"""
Description:
Request bodies for the generation endpoints and the conversation phase
endpoints.

Business fields are optional at the schema level. Presence is checked by the
services, which raise a 400 ValidationError the same way for every caller.

Dependencies:
- pydantic: For data validation and settings management.

Author: @kcaparas1630
"""
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field


class InterviewParameters(BaseModel):
    role: Optional[str] = None
    experience: Optional[Union[int, float, str]] = None
    topicsToFocus: Optional[str] = None


class StartConversationRequest(InterviewParameters):
    pass


class ContinueConversationRequest(InterviewParameters):
    conversationHistory: List[Dict[str, Any]] = Field(default_factory=list)
    userResponse: Optional[str] = None


class EndConversationRequest(InterviewParameters):
    conversationHistory: Optional[List[Dict[str, Any]]] = None


class AdvanceConversationRequest(InterviewParameters):
    userResponse: Optional[str] = None
    # Accepted for compatibility with clients that track history locally; the stored log wins.
    conversationHistory: Optional[List[Dict[str, Any]]] = None


class FinishConversationRequest(InterviewParameters):
    duration: Optional[float] = Field(None, ge=0, description="Elapsed seconds measured by the client")


class GenerateQuestionsRequest(InterviewParameters):
    numberOfQuestions: Optional[int] = Field(None, ge=1, le=50)


class GenerateExplanationRequest(BaseModel):
    question: Optional[str] = None
