# tests/test_generation.py
import json
from types import SimpleNamespace

import openai
import pytest

from interview_feedback.core.config import Settings
from interview_feedback.core.exceptions import GenerationError, SchemaViolationError
from interview_feedback.managers.generation import OpenAIFeedbackGenerator


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


@pytest.fixture
def gen_settings():
    return Settings(_env_file=None, OPENAI_API_KEY="test-key", AI_MODEL="scoring-model",
                    IDEAL_ANSWER_MODEL="answer-model")


def build_generator(settings, **kwargs):
    completions = FakeCompletions(**kwargs)
    return OpenAIFeedbackGenerator(settings, client=fake_client(completions)), completions


@pytest.mark.asyncio
async def test_generate_evaluation(gen_settings, evaluation):
    generator, completions = build_generator(
        gen_settings, content=evaluation.model_dump_json(by_alias=True)
    )

    result = await generator.generate_evaluation("- interviewer: What is Python?\n")

    assert result == evaluation
    call = completions.calls[0]
    assert call["model"] == "scoring-model"
    assert call["response_format"] == {"type": "json_object"}
    assert "What is Python?" in call["messages"][-1]["content"]
    assert "Confidence and Clarity" in call["messages"][-1]["content"]


@pytest.mark.asyncio
async def test_wrong_categories_violate_schema(gen_settings, evaluation):
    data = evaluation.model_dump(by_alias=True)
    data["categoryScores"] = data["categoryScores"][:4]
    generator, _ = build_generator(gen_settings, content=json.dumps(data))

    with pytest.raises(SchemaViolationError) as excinfo:
        await generator.generate_evaluation("transcript")
    assert excinfo.value.raw == json.dumps(data)


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["not json at all", "", None, '{"totalScore": 150}'])
async def test_malformed_evaluation(gen_settings, content):
    generator, _ = build_generator(gen_settings, content=content)

    with pytest.raises(SchemaViolationError):
        await generator.generate_evaluation("transcript")


@pytest.mark.asyncio
async def test_request_error_becomes_generation_error(gen_settings):
    generator, _ = build_generator(gen_settings, error=openai.OpenAIError("connection reset"))

    with pytest.raises(GenerationError) as excinfo:
        await generator.generate_evaluation("transcript")
    assert not isinstance(excinfo.value, SchemaViolationError)


@pytest.mark.asyncio
async def test_generate_ideal_answer(gen_settings):
    generator, completions = build_generator(
        gen_settings, content='{"modelAnswer": "Python is a high-level language."}'
    )

    answer = await generator.generate_ideal_answer("What is Python?")

    assert answer == "Python is a high-level language."
    assert completions.calls[0]["model"] == "answer-model"
    assert '"What is Python?"' in completions.calls[0]["messages"][0]["content"]


def test_client_is_created_lazily():
    generator = OpenAIFeedbackGenerator(Settings(_env_file=None, OPENAI_API_KEY=None))
    assert generator._client is None
