import math
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import structlog

from ..application.schemas import FillerWordTally, SpeechAnalysis
from .lexicon import DEFAULT_LEXICON, Lexicon

logger = structlog.get_logger(__name__)

# Ideal speaking pace range (words per minute), both ends inclusive
IDEAL_PACE_MIN = 130
IDEAL_PACE_MAX = 160

VERBOSE_SENTENCE_WORDS = 25
CHOPPY_SENTENCE_WORDS = 5
CHOPPY_MIN_WORDS = 10

_PAUSE = re.compile(r"[.,;:?!]\s")
_SENTENCE_END = re.compile(r"[.!?]+")


@dataclass
class FillerWordMatches:
    count: int = 0
    instances: List[str] = field(default_factory=list)
    details: Dict[str, int] = field(default_factory=dict)


@dataclass
class PaceMetrics:
    words_per_minute: float
    status: str  # too_slow | good | too_fast


@dataclass
class SpeechAnalysisResult:
    """Live analysis of a single candidate utterance."""
    filler_words: FillerWordMatches
    pace: Optional[PaceMetrics]
    pauses: int
    sentiment: str
    word_count: int
    feedback: List[str]
    transcript: str


def phrase_pattern(phrase: str) -> re.Pattern[str]:
    """Whole-word, case-insensitive pattern; multi-word phrases allow any whitespace."""
    body = r"\s+".join(re.escape(part) for part in phrase.split())
    return re.compile(rf"\b{body}\b", re.IGNORECASE)


def classify_pace(words_per_minute: float) -> str:
    if words_per_minute < IDEAL_PACE_MIN:
        return "too_slow"
    if words_per_minute > IDEAL_PACE_MAX:
        return "too_fast"
    return "good"


class SpeechAnalyzer:
    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON):
        self.lexicon = lexicon
        self._filler_patterns: List[Tuple[str, re.Pattern[str]]] = [
            (filler, phrase_pattern(filler)) for filler in lexicon.filler_words
        ]
        self._tone_patterns: List[Tuple[str, List[re.Pattern[str]]]] = [
            (tone, [phrase_pattern(indicator) for indicator in indicators])
            for tone, indicators in lexicon.tone_indicators.items()
        ]

    def find_filler_words(self, text: str) -> FillerWordMatches:
        hits: List[Tuple[int, str]] = []
        details: Dict[str, int] = {}
        for filler, pattern in self._filler_patterns:
            found = [(m.start(), m.group(0).lower()) for m in pattern.finditer(text)]
            if found:
                details[filler] = len(found)
                hits.extend(found)
        hits.sort(key=lambda hit: hit[0])
        return FillerWordMatches(
            count=len(hits),
            instances=[" ".join(word.split()) for _, word in hits],
            details=details,
        )

    def measure_pace(self, word_count: int, duration_ms: float) -> Optional[PaceMetrics]:
        """Words per minute, or None when the rate is undefined."""
        if word_count <= 0 or not duration_ms or duration_ms <= 0:
            return None
        words_per_minute = word_count / (duration_ms / 60000)
        if not math.isfinite(words_per_minute):
            return None
        return PaceMetrics(words_per_minute=words_per_minute,
                           status=classify_pace(words_per_minute))

    @staticmethod
    def count_pauses(text: str) -> int:
        return len(_PAUSE.findall(text))

    def analyze_speech(self, text: str, duration_ms: float, sentiment: str) -> SpeechAnalysisResult:
        """
        Analyze a spoken answer for filler words, pace and pauses.

        Args:
            text: Transcript of the utterance
            duration_ms: How long the candidate spoke, in milliseconds
            sentiment: Coarse mood label for the utterance

        Returns:
            SpeechAnalysisResult with rule-based feedback sentences
        """
        word_count = len(text.split())
        fillers = self.find_filler_words(text)
        pace = self.measure_pace(word_count, duration_ms)
        pauses = self.count_pauses(text)

        if pace is None:
            logger.debug("pace_undefined", word_count=word_count, duration_ms=duration_ms)

        feedback: List[str] = []

        if fillers.count > 0:
            filler_pct = fillers.count / word_count * 100
            if filler_pct > 10:
                examples = '", "'.join(fillers.instances[:3])
                feedback.append(
                    f"You used {fillers.count} filler words ({filler_pct:.1f}% of speech). "
                    f"Try to reduce words like \"{examples}\" by pausing instead."
                )
            elif filler_pct > 5:
                feedback.append(
                    f"You used {fillers.count} filler words. Try to be more direct in your responses."
                )

        if pace is not None:
            wpm = round(pace.words_per_minute)
            if pace.status == "too_fast":
                feedback.append(
                    f"You're speaking quite fast ({wpm} words/min). Try slowing down to sound more confident."
                )
            elif pace.status == "too_slow":
                feedback.append(
                    f"Your pace is a bit slow ({wpm} words/min). Try to be more concise."
                )

        if word_count > 30 and pauses < 2:
            feedback.append("Try adding more pauses in your speech to emphasize key points.")

        if sentiment == "anxious":
            feedback.append("You seem a bit anxious. Take a deep breath before responding to the next question.")
        elif sentiment == "uncertain":
            feedback.append("Your response sounds uncertain. Try using more confident language.")
        elif sentiment == "confused":
            feedback.append("You sound confused. It's okay to ask for clarification if you don't understand the question.")

        if not feedback:
            if sentiment in ("confident", "happy"):
                feedback.append("Great job! You sound confident and engaged.")
            else:
                feedback.append("Your response is clear. Keep maintaining good communication.")

        return SpeechAnalysisResult(
            filler_words=fillers,
            pace=pace,
            pauses=pauses,
            sentiment=sentiment,
            word_count=word_count,
            feedback=feedback,
            transcript=text,
        )

    def dominant_tone(self, text: str) -> str:
        best_tone, best_count = "neutral", 0
        for tone, patterns in self._tone_patterns:
            count = sum(len(pattern.findall(text)) for pattern in patterns)
            if count > best_count:
                best_tone, best_count = tone, count
        return best_tone

    def analyze_answer(self, answer: str) -> SpeechAnalysis:
        """Clarity, tone and filler breakdown for one stored answer."""
        fillers = self.find_filler_words(answer)
        word_count = len(answer.split())
        sentences = [s for s in _SENTENCE_END.split(answer) if s.strip()]
        avg_words = word_count / len(sentences) if sentences else 0.0

        clarity = "good"
        if avg_words > VERBOSE_SENTENCE_WORDS:
            clarity = "verbose"
        elif avg_words < CHOPPY_SENTENCE_WORDS and word_count > CHOPPY_MIN_WORDS:
            clarity = "choppy"

        return SpeechAnalysis(
            filler_words=FillerWordTally(total=fillers.count, details=fillers.details),
            word_count=word_count,
            clarity=clarity,
            tone=self.dominant_tone(answer),
            avg_words_per_sentence=avg_words,
        )
