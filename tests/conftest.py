# tests/conftest.py
import asyncio
import os
import random

import pytest
from fastapi.testclient import TestClient

from interview_feedback.application.schemas import (
    CATEGORY_NAMES,
    CategoryScore,
    FeedbackEvaluation,
    TranscriptTurn,
)
from interview_feedback.core.exceptions import GenerationError
from interview_feedback.core.interfaces import FeedbackGenerator


def make_evaluation(total_score: int = 72) -> FeedbackEvaluation:
    return FeedbackEvaluation(
        total_score=total_score,
        category_scores=[
            CategoryScore(name=name, score=70 + i, comment=f"{name} comment")
            for i, name in enumerate(CATEGORY_NAMES)
        ],
        strengths=["Clear examples"],
        areas_for_improvement=["Quantify impact"],
        final_assessment="Solid interview with room to grow.",
    )


class StubGenerator(FeedbackGenerator):
    """In-process stand-in for the generative service."""

    def __init__(self, fail_questions=(), fail_evaluation=None, delay=0.0):
        self.fail_questions = set(fail_questions)
        self.fail_evaluation = fail_evaluation
        self.delay = delay
        self.evaluated = []
        self.asked = []
        self.active = 0
        self.max_active = 0

    async def generate_evaluation(self, transcript):
        self.evaluated.append(transcript)
        if self.fail_evaluation is not None:
            raise self.fail_evaluation
        return make_evaluation()

    async def generate_ideal_answer(self, question):
        self.asked.append(question)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if question in self.fail_questions:
                raise GenerationError("model unavailable")
            return f"Ideal answer to: {question}"
        finally:
            self.active -= 1


@pytest.fixture
def test_env_vars():
    """Set up test environment variables."""
    from interview_feedback.core.config import get_settings

    os.environ["ENVIRONMENT"] = "testing"
    os.environ["DEBUG"] = "true"
    os.environ["APP_NAME"] = "Interview Feedback Test"
    os.environ["DATABASE_URL"] = "sqlite://"
    get_settings.cache_clear()
    yield
    # Clean up
    os.environ.pop("ENVIRONMENT", None)
    os.environ.pop("DEBUG", None)
    os.environ.pop("APP_NAME", None)
    os.environ.pop("DATABASE_URL", None)
    get_settings.cache_clear()

@pytest.fixture
def settings(test_env_vars):
    """Get test settings."""
    from interview_feedback.core.config import get_settings
    return get_settings()

@pytest.fixture
def store():
    from interview_feedback.storage.repository import SqlFeedbackStore
    return SqlFeedbackStore.from_url("sqlite://")

@pytest.fixture
def generator():
    return StubGenerator()

@pytest.fixture
def make_generator():
    """Build a stub generator with failures or delays configured."""
    return StubGenerator

@pytest.fixture
def evaluation():
    return make_evaluation()

@pytest.fixture
def polarities():
    """A tiny valence table so scores are easy to compute by hand."""
    return {
        "great": 3.0,
        "good": 2.0,
        "happy": 2.0,
        "bad": -2.0,
        "terrible": -3.0,
        "fail": -2.0,
    }

@pytest.fixture
def interview_turns():
    return [
        TranscriptTurn(role="interviewer", content="Hello, welcome to the interview."),
        TranscriptTurn(role="interviewer", content="What is your experience with Python?"),
        TranscriptTurn(role="candidate", content="I have five years of Python experience building APIs."),
        TranscriptTurn(role="interviewer", content="Tell me about a project you led."),
        TranscriptTurn(role="candidate", content="I led the migration project to a new database."),
        TranscriptTurn(role="interviewer", content="Thanks, that's all for today."),
    ]

@pytest.fixture
def app(settings, store, generator):
    """Create test app instance."""
    from interview_feedback.interface.api.main import create_app
    return create_app(settings, store=store, generator=generator, rng=random.Random(7))

@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)
