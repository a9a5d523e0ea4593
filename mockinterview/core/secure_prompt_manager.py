"""
Secure Prompt Manager Module

This module builds every instruction sent to the text-generation service. It
keeps prompt text isolated from user data: templates have explicit
placeholders, and every value is sanitized before it is interpolated.

The module contains:
- ConversationPhase: The start/continue/end phases of a conversational interview
- PromptTemplate: A dataclass for secure prompt templates with placeholders
- SecurePromptManager: Main class for building prompts
- sanitize_text: Utility function for text sanitization

Each conversational template asks for a specific JSON shape, which the
generation client validates against the matching result model.

Dependencies:
- dataclasses: For template data structures
- typing: For type hints
- mockinterview.constants.regex_patterns: For the control character pattern
- html: For HTML entity encoding
- json: For embedding conversation history
- loguru: For logging truncation warnings

Author: @kcaparas1630
"""

from typing import Any, Dict, List, Optional, Union
from dataclasses import dataclass
from enum import Enum
import html
import json
from loguru import logger
from mockinterview.constants.regex_patterns import REGEX_PATTERNS


class ConversationPhase(str, Enum):
    START = "start"
    CONTINUE = "continue"
    END = "end"


def sanitize_text(text: str, max_length: Optional[int] = 1000, escape_html: bool = True, allow_empty: bool = False) -> str:
    """
    Sanitize text input to prevent injection attacks and ensure data safety.

    This function performs multiple sanitization steps:
    1. Optional HTML entity encoding so user text cannot open or close prompt tags
    2. Strips leading/trailing whitespace
    3. Removes null bytes and other control characters
    4. Configurable length limiting
    5. Drops characters that cannot be encoded as UTF-8

    Args:
        text (str): The text to sanitize
        max_length (int, optional): Maximum allowed length, None for no limit (default: 1000)
        escape_html (bool): Whether to HTML escape the text (default: True)
        allow_empty (bool): Return "" instead of raising for empty input (default: False)

    Returns:
        str: The sanitized text

    Raises:
        ValueError: If text is None or empty after sanitization and allow_empty is False
    """
    if text is None:
        if allow_empty:
            return ""
        raise ValueError("Text cannot be None")

    text = str(text)

    if escape_html:
        text = html.escape(text)

    text = text.strip()

    # Remove null bytes and other control characters (except newlines and tabs)
    text = REGEX_PATTERNS["control_chars"].sub("", text)

    if max_length is not None and len(text) > max_length:
        text = text[:max_length]
        logger.warning(f"Text truncated to {max_length} characters for prompt safety")

    text = text.encode('utf-8', errors='ignore').decode('utf-8')

    if not text and not allow_empty:
        raise ValueError("Text cannot be empty after sanitization")

    return text


@dataclass
class PromptTemplate:
    """Secure prompt template with placeholders for safe data injection."""
    template: str
    placeholders: Dict[str, str]
    sanitization_config: Dict[str, Dict] = None  # Per-placeholder sanitization config

    def render(self, **kwargs) -> str:
        """
        Safely render the template with provided data.

        Args:
            **kwargs: Data to inject into placeholders

        Returns:
            str: Rendered prompt with sanitized data

        Raises:
            ValueError: If required placeholders are missing or data is invalid
        """
        missing_placeholders = set(self.placeholders.keys()) - set(kwargs.keys())
        if missing_placeholders:
            raise ValueError(f"Missing required placeholders: {missing_placeholders}")

        sanitized_data = {}
        for key, value in kwargs.items():
            if key not in self.placeholders:
                # Skip unknown keys to prevent injection
                logger.warning(f"Unknown placeholder key: {key}")
                continue
            config = self.sanitization_config.get(key, {}) if self.sanitization_config else {}
            sanitized_data[key] = sanitize_text(
                value,
                max_length=config.get('max_length', 1000),
                escape_html=config.get('escape_html', True),
                allow_empty=config.get('allow_empty', False),
            )

        try:
            return self.template.format(**sanitized_data)
        except KeyError as e:
            raise ValueError(f"Template rendering error: {e}") from e


_INTERVIEW_CONTEXT = {
    "role": "Target job role",
    "experience": "Candidate experience in years",
    "topics": "Comma separated focus topics",
}

_INTERVIEW_SANITIZATION = {
    "role": {"max_length": 200},
    "experience": {"max_length": 20},
    "topics": {"max_length": 500},
    "history": {"max_length": None, "escape_html": False, "allow_empty": True},
    "user_response": {"max_length": 4000, "allow_empty": True},
}


class SecurePromptManager:
    """
    Builds prompts for the text-generation service from fixed templates.

    This class:
    1. Uses predefined templates with explicit placeholders
    2. Sanitizes all user data before injection
    3. Serializes conversation history as JSON so the model sees sender and text verbatim
    """

    def __init__(self):
        self._templates = self._initialize_templates()

    def _initialize_templates(self) -> Dict[str, PromptTemplate]:
        """Initialize secure prompt templates with explicit placeholders."""
        return {
            ConversationPhase.START.value: PromptTemplate(
                template="""You are an experienced interviewer conducting a technical interview for a {role} position.

Context:
- Candidate Experience: {experience} years
- Focus Topics: {topics}
- This is the start of a conversational interview

Instructions:
- Act as a friendly but professional interviewer
- Start with a warm greeting and introduction
- Ask your first question related to the focus topics
- Keep questions appropriate for {experience} years of experience
- Be conversational and natural, not robotic
- Your response should feel like a real interviewer speaking

Return JSON format:
{{
  "message": "Your greeting and first question here",
  "questionType": "introduction|technical|behavioral|follow-up",
  "difficulty": "easy|medium|hard",
  "expectsResponse": true
}}

Important: Only return valid JSON.""",
                placeholders=dict(_INTERVIEW_CONTEXT),
                sanitization_config=_INTERVIEW_SANITIZATION,
            ),
            ConversationPhase.CONTINUE.value: PromptTemplate(
                template="""You are continuing a technical interview for a {role} position.

Context:
- Candidate Experience: {experience} years
- Focus Topics: {topics}
- Conversation History: {history}
- Candidate's Latest Response: "{user_response}"

Instructions:
- Analyze the candidate's response
- Provide brief acknowledgment if the answer was good/needs improvement
- Ask a follow-up question or move to next topic
- Keep the conversation natural and flowing
- Gradually increase difficulty based on their responses
- If answer was incomplete, ask for clarification
- If answer was good, appreciate and move forward

Return JSON format:
{{
  "message": "Your response and next question here",
  "feedback": "brief feedback on their previous answer",
  "questionType": "technical|behavioral|follow-up|clarification",
  "difficulty": "easy|medium|hard",
  "expectsResponse": true
}}

Important: Only return valid JSON.""",
                placeholders={
                    **_INTERVIEW_CONTEXT,
                    "history": "JSON encoded prior message log",
                    "user_response": "Candidate's latest answer",
                },
                sanitization_config=_INTERVIEW_SANITIZATION,
            ),
            ConversationPhase.END.value: PromptTemplate(
                template="""You are ending a technical interview for a {role} position.

Context:
- Candidate Experience: {experience} years
- Focus Topics: {topics}
- Full Conversation History: {history}

Instructions:
- Provide overall feedback on the interview
- Highlight strengths and areas for improvement
- Give specific examples from their responses
- Provide actionable advice for improvement
- Be constructive and encouraging
- End with a professional closing

Return JSON format:
{{
  "message": "Your closing message here",
  "overallFeedback": "Comprehensive feedback on the interview",
  "strengths": ["strength1", "strength2", "strength3"],
  "improvements": ["improvement1", "improvement2"],
  "score": "7/10",
  "recommendedActions": ["action1", "action2"],
  "expectsResponse": false
}}

Important: Only return valid JSON.""",
                placeholders={
                    **_INTERVIEW_CONTEXT,
                    "history": "JSON encoded full message log",
                },
                sanitization_config=_INTERVIEW_SANITIZATION,
            ),
            "questions": PromptTemplate(
                template="""You are an AI trained to generate technical interview questions and answers.

Task:
- Role: {role}
- Candidate Experience: {experience} years
- Focus Topics: {topics}
- Write {number_of_questions} interview questions.
- For each question, generate a detailed but beginner-friendly answer.
- If the answer needs a code example, add a small code block inside.
- Keep formatting very clean.
- Return a pure JSON array like:
[
  {{
    "question": "Question here?",
    "answer": "Answer here."
  }}
]
Important: Do NOT add any extra text. Only return valid JSON.""",
                placeholders={**_INTERVIEW_CONTEXT, "number_of_questions": "How many questions to write"},
                sanitization_config=_INTERVIEW_SANITIZATION,
            ),
            "explanation": PromptTemplate(
                template="""You are an AI trained to generate explanations for a given interview question.

Task:
- Explain the following interview question and its concept in depth as if you are teaching a beginner developer.
- Question: "{question}"
- After the explanation, provide a short and clear title that summarizes the concept for the article or page header.
- If the explanation includes a code example, provide a small code block.
- Keep the formatting very clean and clear.
- Return the result as a valid JSON object in the following format:
{{
  "title": "Short title here?",
  "explanation": "Explanation here"
}}

Important: Do NOT add any extra text outside the JSON format. Only return valid JSON.""",
                placeholders={"question": "Interview question to explain"},
                sanitization_config={"question": {"max_length": 2000}},
            ),
        }

    def get_conversation_prompt(
        self,
        role: str,
        experience: Union[int, float, str],
        topics_to_focus: str,
        phase: Union[ConversationPhase, str],
        conversation_history: Optional[List[Dict[str, Any]]] = None,
        user_response: Optional[str] = None,
    ) -> str:
        """
        Build the instruction for one phase of a conversational interview.

        Args:
            role: Target job role
            experience: Candidate experience in years
            topics_to_focus: Focus topics
            phase: start, continue or end
            conversation_history: Prior message log, used by continue and end
            user_response: Latest candidate answer, used by continue

        Returns:
            str: The rendered prompt

        Raises:
            ValueError: If phase is not a ConversationPhase
        """
        phase = ConversationPhase(phase)
        data = {"role": role, "experience": experience, "topics": topics_to_focus}
        if phase in (ConversationPhase.CONTINUE, ConversationPhase.END):
            data["history"] = json.dumps(conversation_history or [], default=str, ensure_ascii=False)
        if phase == ConversationPhase.CONTINUE:
            data["user_response"] = user_response
        return self._templates[phase.value].render(**data)

    def get_questions_prompt(self, role: str, experience: Union[int, float, str], topics_to_focus: str, number_of_questions: int) -> str:
        return self._templates["questions"].render(
            role=role,
            experience=experience,
            topics=topics_to_focus,
            number_of_questions=number_of_questions,
        )

    def get_explanation_prompt(self, question: str) -> str:
        return self._templates["explanation"].render(question=question)


secure_prompt_manager = SecurePromptManager()
