"""
Parameter Validator Utility Module

This module checks the interview parameters every generation phase needs before
any prompt is built or any write happens.

Dependencies:
- mockinterview.constants.regex_patterns: For the control character pattern.
- mockinterview.errors.exceptions: For custom exception handling.

Author: @kcaparas1630
"""

from typing import Any
from mockinterview.constants.regex_patterns import REGEX_PATTERNS
from mockinterview.errors.exceptions import ValidationError


def is_missing(value: Any) -> bool:
    """
    None and blank strings count as missing. Zero years of experience does not.

    Control characters are dropped before the blank check, the same way the
    prompt builder drops them, so a value the builder would reduce to nothing
    is reported here as missing.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not REGEX_PATTERNS["control_chars"].sub("", value).strip()
    return False


def validate_interview_parameters(role: Any, experience: Any, topics_to_focus: Any) -> None:
    """
    Validate that role, experience and focus topics are all present.

    Raises:
        ValidationError: If any of them is missing.

    Example:
        >>> validate_interview_parameters("Backend Engineer", 2, "Node.js")  # No exception
        >>> validate_interview_parameters("Backend Engineer", None, "Node.js")  # Raises ValidationError
    """
    if is_missing(role) or is_missing(experience) or is_missing(topics_to_focus):
        raise ValidationError("Missing required fields")
