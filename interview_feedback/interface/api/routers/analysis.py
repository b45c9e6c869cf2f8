from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import Field

from ....application.interview_session import analyze_utterance
from ....application.schemas import CamelModel, SentimentSample
from ....core.config import Settings
from ....processors.feedback import FeedbackSynthesizer
from ....processors.sentiment import SentimentScorer
from ....processors.speech import SpeechAnalyzer
from ..dependencies import get_app_settings, get_scorer, get_speech_analyzer, get_synthesizer

router = APIRouter(prefix="/analysis", tags=["analysis"])


class UtteranceRequest(CamelModel):
    text: str
    duration_ms: Optional[float] = Field(default=None, ge=0)


class FillerWordsView(CamelModel):
    count: int
    instances: List[str]
    details: Dict[str, int]


class PaceView(CamelModel):
    words_per_minute: float
    status: str


class LiveSpeechAnalysis(CamelModel):
    filler_words: FillerWordsView
    pace: Optional[PaceView] = None
    pauses: int
    sentiment: str
    word_count: int
    feedback: List[str]
    transcript: str


class UtteranceResponse(CamelModel):
    sample: SentimentSample
    speech: LiveSpeechAnalysis


@router.post("/utterance", response_model=UtteranceResponse)
async def analyze_candidate_utterance(
    body: UtteranceRequest,
    settings: Settings = Depends(get_app_settings),
    scorer: SentimentScorer = Depends(get_scorer),
    analyzer: SpeechAnalyzer = Depends(get_speech_analyzer),
    synthesizer: FeedbackSynthesizer = Depends(get_synthesizer),
):
    """Score one candidate utterance as it arrives during the call."""
    duration_ms = body.duration_ms if body.duration_ms is not None else settings.DEFAULT_SPEECH_DURATION_MS
    result = analyze_utterance(body.text, duration_ms, scorer, analyzer, synthesizer)
    return UtteranceResponse(
        sample=result.sample,
        speech=LiveSpeechAnalysis.model_validate(asdict(result.speech)),
    )
