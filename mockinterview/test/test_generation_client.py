"""
Test Generation Client Module

This module tests how the generation client maps provider failures and
unexpected output onto UpstreamError and MalformedResponseError.

Dependencies:
- pytest: For testing framework
- httpx: For building the request attached to openai errors
- openai: For the provider error types
- mockinterview.services.generation: The module being tested

Author: @kcaparas1630
"""

from typing import List
from types import SimpleNamespace
import httpx
import openai
import pytest
from mockinterview.errors.exceptions import MalformedResponseError, UpstreamError
from mockinterview.schemas.ai.generation_results import ContinueResult, EndResult, GeneratedQuestion, StartResult

REQUEST = httpx.Request("POST", "https://generation.test/v1/chat/completions")


async def test_prompt_and_model_are_sent(generation, fake_llm):
    fake_llm.queue('{"message": "Hello"}')
    await generation.generate("Say hello")
    assert fake_llm.completions.prompts == ["Say hello"]


async def test_structured_start_result(generation, fake_llm):
    fake_llm.queue('```json\n{"message":"Hi! Tell me about REST.","questionType":"Introduction","difficulty":"EASY","expectsResponse":true}\n```')
    result = await generation.generate_structured("prompt", StartResult)
    assert isinstance(result, StartResult)
    assert result.message == "Hi! Tell me about REST."
    assert result.questionType == "introduction"
    assert result.difficulty == "easy"
    assert result.expectsResponse is True


async def test_structured_list_result(generation, fake_llm):
    fake_llm.queue('[{"question": "What is an index?", "answer": "A lookup structure."}, {"question": "What is ACID?", "answer": "Transaction guarantees."}]')
    questions = await generation.generate_structured("prompt", List[GeneratedQuestion])
    assert [question.question for question in questions] == ["What is an index?", "What is ACID?"]


async def test_numeric_score_kept_as_text(generation, fake_llm):
    fake_llm.queue('{"message": "Thanks!", "overallFeedback": "Good", "score": 8}')
    result = await generation.generate_structured("prompt", EndResult)
    assert result.score == "8"
    assert result.final_feedback().score == "8"


async def test_connection_error_is_upstream(generation, fake_llm):
    fake_llm.queue(openai.APIConnectionError(request=REQUEST))
    with pytest.raises(UpstreamError) as exc_info:
        await generation.generate("prompt")
    assert exc_info.value.status_code == 500
    assert exc_info.value.error


async def test_timeout_is_upstream(generation, fake_llm):
    fake_llm.queue(openai.APITimeoutError(request=REQUEST))
    with pytest.raises(UpstreamError) as exc_info:
        await generation.generate("prompt")
    assert "timed out" in exc_info.value.error


async def test_non_json_reply_is_malformed(generation, fake_llm):
    fake_llm.queue("I'd be happy to help with your interview!")
    with pytest.raises(MalformedResponseError):
        await generation.generate("prompt")


async def test_missing_message_is_malformed(generation, fake_llm):
    fake_llm.queue('{"feedback": "Nice", "questionType": "technical"}')
    with pytest.raises(MalformedResponseError):
        await generation.generate_structured("prompt", ContinueResult)


async def test_unknown_question_type_is_malformed(generation, fake_llm):
    fake_llm.queue('{"message": "Next question", "questionType": "trivia"}')
    with pytest.raises(MalformedResponseError):
        await generation.generate_structured("prompt", ContinueResult)


async def test_no_choices_is_malformed(generation, fake_llm):
    async def empty_create(**kwargs):
        return SimpleNamespace(choices=[])

    fake_llm.completions.create = empty_create
    with pytest.raises(MalformedResponseError):
        await generation.complete("prompt")
