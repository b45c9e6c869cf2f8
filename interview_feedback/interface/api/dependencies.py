from fastapi import Request

from ...core.config import Settings
from ...core.interfaces import FeedbackStore
from ...managers.feedback import FeedbackOrchestrator
from ...processors.feedback import FeedbackSynthesizer
from ...processors.sentiment import SentimentScorer
from ...processors.speech import SpeechAnalyzer


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> FeedbackStore:
    return request.app.state.store


def get_orchestrator(request: Request) -> FeedbackOrchestrator:
    return request.app.state.orchestrator


def get_scorer(request: Request) -> SentimentScorer:
    return request.app.state.scorer


def get_speech_analyzer(request: Request) -> SpeechAnalyzer:
    return request.app.state.speech_analyzer


def get_synthesizer(request: Request) -> FeedbackSynthesizer:
    return request.app.state.synthesizer
