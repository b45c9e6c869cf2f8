import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

import structlog

from ..core.config import Settings
from ..processors.feedback import FeedbackSynthesizer
from ..processors.sentiment import SentimentScorer
from ..processors.speech import SpeechAnalysisResult, SpeechAnalyzer
from .schemas import CreateFeedbackRequest, SentimentSample, TranscriptRole, TranscriptTurn

logger = structlog.get_logger(__name__)


@dataclass
class UtteranceAnalysis:
    sample: SentimentSample
    speech: SpeechAnalysisResult


def analyze_utterance(text: str,
                      duration_ms: float,
                      scorer: SentimentScorer,
                      analyzer: SpeechAnalyzer,
                      synthesizer: FeedbackSynthesizer,
                      timestamp: Optional[datetime] = None) -> UtteranceAnalysis:
    """Sentiment sample plus speech analysis for one candidate utterance."""
    sample = scorer.sample(text, timestamp=timestamp)
    speech = analyzer.analyze_speech(text, duration_ms, scorer.coarse_mood(text))
    speech.feedback = synthesizer.synthesize(speech)
    return UtteranceAnalysis(sample=sample, speech=speech)


@dataclass
class InterviewSession:
    """
    Accumulates a live interview as final transcript events arrive.

    Candidate turns are scored as they come in; the speech timer is started
    by ``mark_speech_start`` and reset whenever the interviewer speaks.

    Meant for callers that embed the pipeline next to their own call
    transport; the HTTP API exposes the stateless ``analyze_utterance``
    instead. Build one with ``from_settings`` to share the app's
    collaborators and fallback duration.
    """
    interview_id: str
    user_id: str
    scorer: SentimentScorer
    analyzer: SpeechAnalyzer
    synthesizer: FeedbackSynthesizer
    default_duration_ms: float
    clock: Callable[[], float] = time.monotonic
    turns: List[TranscriptTurn] = field(default_factory=list)
    samples: List[SentimentSample] = field(default_factory=list)
    last_analysis: Optional[SpeechAnalysisResult] = None
    _speech_started_at: Optional[float] = field(default=None, init=False, repr=False)

    @classmethod
    def from_settings(cls,
                      interview_id: str,
                      user_id: str,
                      settings: Settings,
                      scorer: SentimentScorer,
                      analyzer: SpeechAnalyzer,
                      synthesizer: FeedbackSynthesizer,
                      clock: Callable[[], float] = time.monotonic) -> "InterviewSession":
        return cls(
            interview_id=interview_id,
            user_id=user_id,
            scorer=scorer,
            analyzer=analyzer,
            synthesizer=synthesizer,
            default_duration_ms=settings.DEFAULT_SPEECH_DURATION_MS,
            clock=clock,
        )

    def mark_speech_start(self) -> None:
        """Record when the candidate started talking, if it is their turn."""
        if not self.turns or self.turns[-1].role == TranscriptRole.INTERVIEWER:
            self._speech_started_at = self.clock()

    def add_turn(self, turn: TranscriptTurn) -> Optional[UtteranceAnalysis]:
        self.turns.append(turn)
        if turn.role != TranscriptRole.CANDIDATE:
            self._speech_started_at = None
            return None

        if self._speech_started_at is not None:
            duration_ms = (self.clock() - self._speech_started_at) * 1000
        else:
            duration_ms = self.default_duration_ms
        self._speech_started_at = None

        try:
            analysis = analyze_utterance(turn.content, duration_ms, self.scorer,
                                         self.analyzer, self.synthesizer)
        except Exception as e:
            # A bad utterance must not end the call
            logger.error("utterance_analysis_failed", interview_id=self.interview_id, error=str(e))
            return None

        self.samples.append(analysis.sample)
        self.last_analysis = analysis.speech
        logger.debug("utterance_analyzed", interview_id=self.interview_id,
                     emotion=analysis.sample.emotion, words=analysis.speech.word_count)
        return analysis

    def to_feedback_request(self) -> CreateFeedbackRequest:
        return CreateFeedbackRequest(
            interview_id=self.interview_id,
            user_id=self.user_id,
            transcript=list(self.turns),
            sentiment_samples=list(self.samples),
        )
