# tests/test_interview_session.py
import random

import pytest

from interview_feedback.application.interview_session import InterviewSession, analyze_utterance
from interview_feedback.application.schemas import TranscriptTurn
from interview_feedback.core.config import Settings
from interview_feedback.processors.feedback import FeedbackSynthesizer
from interview_feedback.processors.sentiment import SentimentScorer
from interview_feedback.processors.speech import SpeechAnalyzer


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(polarities, clock):
    return InterviewSession.from_settings(
        interview_id="int-1",
        user_id="user-1",
        settings=Settings(_env_file=None),
        scorer=SentimentScorer(polarities=polarities),
        analyzer=SpeechAnalyzer(),
        synthesizer=FeedbackSynthesizer(rng=random.Random(1)),
        clock=clock,
    )


def words(n):
    return " ".join(["word"] * n)


def test_analyze_utterance(polarities):
    result = analyze_utterance(
        "This is good", 2000,
        SentimentScorer(polarities=polarities), SpeechAnalyzer(),
        FeedbackSynthesizer(rng=random.Random(1)),
    )

    assert result.sample.emotion == "happy"
    assert result.speech.pace.words_per_minute == pytest.approx(90)
    assert 1 <= len(result.speech.feedback) <= 3


def test_candidate_turn_timed_from_speech_start(session, clock):
    session.add_turn(TranscriptTurn(role="interviewer", content="What is your background?"))
    session.mark_speech_start()
    clock.now += 12

    analysis = session.add_turn(TranscriptTurn(role="candidate", content=words(30)))

    assert analysis.speech.pace.words_per_minute == pytest.approx(150)
    assert session.samples == [analysis.sample]
    assert session.last_analysis is analysis.speech


def test_default_duration_without_speech_start(session):
    analysis = session.add_turn(TranscriptTurn(role="candidate", content=words(10)))
    assert analysis.speech.pace.words_per_minute == pytest.approx(120)


def test_fallback_duration_comes_from_settings(polarities):
    session = InterviewSession.from_settings(
        interview_id="int-1",
        user_id="user-1",
        settings=Settings(_env_file=None, DEFAULT_SPEECH_DURATION_MS=6000),
        scorer=SentimentScorer(polarities=polarities),
        analyzer=SpeechAnalyzer(),
        synthesizer=FeedbackSynthesizer(rng=random.Random(1)),
    )

    analysis = session.add_turn(TranscriptTurn(role="candidate", content=words(10)))

    assert session.default_duration_ms == 6000
    assert analysis.speech.pace.words_per_minute == pytest.approx(100)


def test_interviewer_turn_resets_timer(session, clock):
    session.mark_speech_start()
    clock.now += 60
    session.add_turn(TranscriptTurn(role="interviewer", content="Tell me more."))

    analysis = session.add_turn(TranscriptTurn(role="candidate", content=words(10)))

    assert analysis.speech.pace.words_per_minute == pytest.approx(120)


def test_interviewer_turn_is_not_scored(session):
    assert session.add_turn(TranscriptTurn(role="interviewer", content="Hello!")) is None
    assert session.samples == []


def test_analysis_failure_keeps_session_alive(session):
    class BrokenScorer(SentimentScorer):
        def sample(self, text, timestamp=None):
            raise ValueError("bad input")

    session.scorer = BrokenScorer(polarities={})

    assert session.add_turn(TranscriptTurn(role="candidate", content="Hi there")) is None
    assert len(session.turns) == 1
    assert session.samples == []


def test_to_feedback_request(session):
    session.add_turn(TranscriptTurn(role="interviewer", content="What is Python?"))
    session.add_turn(TranscriptTurn(role="candidate", content="A good language."))

    request = session.to_feedback_request()

    assert request.interview_id == "int-1"
    assert request.user_id == "user-1"
    assert [t.role.value for t in request.transcript] == ["interviewer", "candidate"]
    assert len(request.sentiment_samples) == 1
