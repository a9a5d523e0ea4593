"""
Test Response Normalizer Module

This module tests fence stripping and JSON parsing of raw generation output.

Dependencies:
- pytest: For testing framework
- mockinterview.helper.response_normalizer: The module being tested

Author: @kcaparas1630
"""

import json
import pytest
from mockinterview.errors.exceptions import MalformedResponseError
from mockinterview.helper.response_normalizer import normalize_response, strip_code_fences

PAYLOAD = {"message": "Hi! Tell me about REST.", "questionType": "introduction", "difficulty": "easy", "expectsResponse": True}
BARE = json.dumps(PAYLOAD)


class TestStripCodeFences:
    """Test removal of Markdown code fences."""

    def test_json_fence(self):
        assert strip_code_fences(f"```json\n{BARE}\n```") == BARE

    def test_bare_fence(self):
        assert strip_code_fences(f"```\n{BARE}\n```") == BARE

    def test_uppercase_language_tag(self):
        assert strip_code_fences(f"```JSON\n{BARE}\n```") == BARE

    def test_surrounding_whitespace(self):
        assert strip_code_fences(f"  \n```json\n{BARE}\n```\n  ") == BARE

    def test_bare_json_untouched(self):
        assert strip_code_fences(BARE) == BARE

    def test_fence_inside_string_value_kept(self):
        text = json.dumps({"answer": "Use ```code``` blocks"})
        assert strip_code_fences(text) == text


class TestNormalizeResponse:
    """Test parsing of raw generation output."""

    def test_all_wrappings_parse_identically(self):
        """Bare JSON, ```json fences and bare ``` fences give the same structure."""
        results = [
            normalize_response(BARE),
            normalize_response(f"```json\n{BARE}\n```"),
            normalize_response(f"```\n{BARE}\n```"),
        ]
        assert all(result == PAYLOAD for result in results)

    def test_idempotent(self):
        once = normalize_response(f"```json\n{BARE}\n```")
        twice = normalize_response(json.dumps(once))
        assert once == twice

    def test_array_payload(self):
        text = '```json\n[{"question": "What is REST?", "answer": "An architectural style."}]\n```'
        assert normalize_response(text) == [{"question": "What is REST?", "answer": "An architectural style."}]

    def test_invalid_json_raises(self):
        with pytest.raises(MalformedResponseError) as exc_info:
            normalize_response("Sure! Here is your question: what is REST?")
        assert exc_info.value.status_code == 500
        assert "Invalid JSON" in exc_info.value.error

    @pytest.mark.parametrize("content", ["", "   ", "```json\n```", None])
    def test_empty_or_missing_raises(self, content):
        with pytest.raises(MalformedResponseError):
            normalize_response(content)
