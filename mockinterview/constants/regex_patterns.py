"""
Description: 
This module contains precompiled regex patterns for cleaning text returned by the generation service
and text supplied by clients.

Dependencies:
- re: Python's built-in regular expression module for pattern matching.

Author: @kcaparas1630

"""

import re

# Compile regex patterns once for better performance
REGEX_PATTERNS = {
    # Opening Markdown fence, with or without a "json" language tag
    'leading_fence': re.compile(r"^```(?:json)?\s*", re.IGNORECASE),
    'trailing_fence': re.compile(r"\s*```$"),
    # Null bytes and other control characters, except newlines and tabs
    'control_chars': re.compile(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]'),
}
