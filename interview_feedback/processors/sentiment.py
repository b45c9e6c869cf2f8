"""
Lexicon-based sentiment scoring for candidate utterances.

The score is a comparative polarity: the summed valence of every known word
divided by the number of tokens, clamped to [-1, 1]. Valences come from the
VADER lexicon unless a mapping is injected.
"""
import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import List, Mapping, Optional

import structlog
from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from ..application.schemas import SentimentSample
from .lexicon import DEFAULT_LEXICON, Lexicon

logger = structlog.get_logger(__name__)

_PUNCTUATION = re.compile(r"[^\w\s'-]")

_default_polarities: Optional[Mapping[str, float]] = None


def default_polarities() -> Mapping[str, float]:
    """Load the VADER word valences once per process."""
    global _default_polarities
    if _default_polarities is None:
        _default_polarities = dict(SentimentIntensityAnalyzer().lexicon)
        logger.debug("sentiment_lexicon_loaded", entries=len(_default_polarities))
    return _default_polarities


@dataclass(frozen=True)
class SentimentResult:
    score: float
    magnitude: float
    emotion: str
    confidence: float
    positive: List[str] = field(default_factory=list)
    negative: List[str] = field(default_factory=list)


def label_emotion(score: float) -> str:
    """Map a normalized polarity to an emotion band (lower band wins ties)."""
    if score >= 0.5:
        return "happy"
    if score >= 0.25:
        return "confident"
    if score > -0.25:
        return "neutral"
    if score > -0.5:
        return "uncertain"
    return "sad"


def tokenize(text: str) -> List[str]:
    return _PUNCTUATION.sub(" ", text.lower()).split()


class SentimentScorer:
    def __init__(self,
                 polarities: Optional[Mapping[str, float]] = None,
                 lexicon: Lexicon = DEFAULT_LEXICON):
        self.polarities = polarities if polarities is not None else default_polarities()
        self.lexicon = lexicon

    def analyze_local(self, text: str) -> SentimentResult:
        tokens = tokenize(text)
        total = 0.0
        positive: List[str] = []
        negative: List[str] = []

        for i, token in enumerate(tokens):
            polarity = self.polarities.get(token)
            if not polarity:
                continue
            if i > 0 and tokens[i - 1] in self.lexicon.negators:
                polarity = -polarity
            total += polarity
            if polarity > 0:
                positive.append(token)
            else:
                negative.append(token)

        comparative = total / len(tokens) if tokens else 0.0
        score = max(-1.0, min(1.0, comparative))
        magnitude = min(2.0, abs(score) * 2)

        confidence = 0.5 + min(0.5, abs(score) * 0.5)
        word_boost = min(0.2, (len(positive) + len(negative)) * 0.05)

        return SentimentResult(
            score=score,
            magnitude=magnitude,
            emotion=label_emotion(score),
            confidence=min(1.0, confidence + word_boost),
            positive=positive,
            negative=negative,
        )

    def enrich(self, text: str, result: SentimentResult) -> SentimentResult:
        """Override the emotion label from explicit emotional phrases."""
        lowered = text.lower()
        for emotion, markers in self.lexicon.emotion_markers:
            if any(marker in lowered for marker in markers):
                if emotion == "confident":
                    return replace(result, emotion=emotion,
                                   confidence=min(1.0, result.confidence + 0.1))
                return replace(result, emotion=emotion)
        return result

    def analyze(self, text: str) -> SentimentResult:
        return self.enrich(text, self.analyze_local(text))

    def sample(self, text: str, timestamp: Optional[datetime] = None) -> SentimentSample:
        """Score a candidate turn and wrap it as a timestamped sample."""
        result = self.analyze(text)
        return SentimentSample(
            timestamp=timestamp or datetime.now(timezone.utc),
            emotion=result.emotion,
            confidence=result.confidence,
            score=result.score,
            magnitude=result.magnitude,
            transcript=text,
        )

    def coarse_mood(self, text: str) -> str:
        """Cheap keyword mood label used for live speech feedback."""
        lowered = text.lower()
        for mood, markers in self.lexicon.mood_markers:
            if any(marker in lowered for marker in markers):
                return mood
        return "neutral"
