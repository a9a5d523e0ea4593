"""
Description:
Normalize raw generation-service text into parsed JSON.

Models are asked for bare JSON but often wrap it in a Markdown code block.
The opening fence (```json or a bare ```) and the closing fence are stripped,
the remainder is trimmed and parsed. Normalizing already-clean text is a no-op,
so the function is idempotent.

Arguments:
- content: The raw text returned by the generation service.

Returns:
- The parsed JSON value (object or array).

Dependencies:
- json: For parsing.
- mockinterview.constants.regex_patterns: For the precompiled fence patterns.
- mockinterview.errors.exceptions: For MalformedResponseError.

Author: @kcaparas1630

"""
import json
from typing import Any
from loguru import logger
from mockinterview.constants.regex_patterns import REGEX_PATTERNS
from mockinterview.errors.exceptions import MalformedResponseError


def strip_code_fences(content: str) -> str:
    text = content.strip()
    text = REGEX_PATTERNS['leading_fence'].sub("", text, count=1)
    text = REGEX_PATTERNS['trailing_fence'].sub("", text, count=1)
    return text.strip()


def normalize_response(content: str) -> Any:
    if content is None or not isinstance(content, str):
        raise MalformedResponseError(error="Generation service returned no text")

    cleaned = strip_code_fences(content)
    if not cleaned:
        raise MalformedResponseError(error="Generation service returned empty text")

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"JSON parsing error: {e}")
        logger.debug(f"Content that failed to parse: {content}")
        raise MalformedResponseError(error=f"Invalid JSON: {e}") from e
