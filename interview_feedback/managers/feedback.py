import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence

import structlog

from ..application.schemas import (
    IDEAL_ANSWER_FALLBACK,
    CreateFeedbackRequest,
    EnhancedQuestionAnswerPair,
    FeedbackRecord,
    FeedbackResult,
    QuestionAnswerPair,
)
from ..core.config import Settings, get_settings
from ..core.exceptions import InvalidStateTransition
from ..core.interfaces import FeedbackGenerator, FeedbackStore
from ..processors.speech import SpeechAnalyzer
from ..processors.transcript import attach_sentiment, format_transcript, segment_transcript

logger = structlog.get_logger(__name__)


class RunState(str, Enum):
    IDLE = "idle"
    SEGMENTING = "segmenting"
    ATTACHING = "attaching"
    ENHANCING = "enhancing"
    SCORING = "scoring"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


_TRANSITIONS: Dict[RunState, FrozenSet[RunState]] = {
    RunState.IDLE: frozenset({RunState.SEGMENTING}),
    RunState.SEGMENTING: frozenset({RunState.ATTACHING, RunState.FAILED}),
    RunState.ATTACHING: frozenset({RunState.ENHANCING, RunState.FAILED}),
    RunState.ENHANCING: frozenset({RunState.SCORING, RunState.FAILED}),
    RunState.SCORING: frozenset({RunState.PERSISTING, RunState.FAILED}),
    RunState.PERSISTING: frozenset({RunState.DONE, RunState.FAILED}),
    RunState.DONE: frozenset(),
    RunState.FAILED: frozenset(),
}


@dataclass
class FeedbackRun:
    """State of one feedback generation; never shared between requests."""
    interview_id: str
    user_id: str
    state: RunState = RunState.IDLE
    history: List[RunState] = field(default_factory=lambda: [RunState.IDLE])

    def advance(self, new_state: RunState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise InvalidStateTransition(f"{self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)


class FeedbackOrchestrator:
    """
    Builds and stores the feedback record for a finished interview.

    The run is all-or-nothing at the top: if scoring or persisting fails,
    nothing is stored and the result reports failure. Enhancement of single
    answers is best effort; a failed ideal answer falls back to a fixed text.
    """

    def __init__(self,
                 generator: FeedbackGenerator,
                 store: FeedbackStore,
                 speech_analyzer: Optional[SpeechAnalyzer] = None,
                 settings: Optional[Settings] = None):
        self.generator = generator
        self.store = store
        self.speech_analyzer = speech_analyzer or SpeechAnalyzer()
        self.settings = settings or get_settings()

    async def create_feedback(self, request: CreateFeedbackRequest) -> FeedbackResult:
        run = FeedbackRun(interview_id=request.interview_id, user_id=request.user_id)
        log = logger.bind(interview_id=request.interview_id, user_id=request.user_id)

        try:
            run.advance(RunState.SEGMENTING)
            pairs = segment_transcript(request.transcript)
            log.debug("transcript_segmented", pairs=len(pairs), turns=len(request.transcript))

            run.advance(RunState.ATTACHING)
            pairs = attach_sentiment(pairs, request.sentiment_samples)

            run.advance(RunState.ENHANCING)
            enhanced = await self.enhance_pairs(pairs)

            run.advance(RunState.SCORING)
            evaluation = await self.generator.generate_evaluation(
                format_transcript(request.transcript)
            )

            run.advance(RunState.PERSISTING)
            record = FeedbackRecord(
                interview_id=request.interview_id,
                user_id=request.user_id,
                total_score=evaluation.total_score,
                category_scores=evaluation.category_scores,
                strengths=evaluation.strengths,
                areas_for_improvement=evaluation.areas_for_improvement,
                final_assessment=evaluation.final_assessment,
                sentiment_analysis=list(request.sentiment_samples),
                questions_and_answers=enhanced,
            )
            feedback_id = await self.store.save_feedback(record)

            run.advance(RunState.DONE)
            log.info("feedback_created", feedback_id=feedback_id, pairs=len(enhanced),
                     total_score=record.total_score)
            return FeedbackResult(success=True, feedback_id=feedback_id, state=run.state.value)

        except Exception as e:
            failed_in = run.state
            if RunState.FAILED in _TRANSITIONS[run.state]:
                run.advance(RunState.FAILED)
            log.error("feedback_failed", stage=failed_in.value, error=str(e), exc_info=True)
            return FeedbackResult(success=False, state=run.state.value)

    async def enhance_pairs(self, pairs: Sequence[QuestionAnswerPair]) -> List[EnhancedQuestionAnswerPair]:
        """Analyze answers and fetch ideal answers, a bounded number at a time."""
        complete = [pair for pair in pairs if pair.question and pair.answer]
        if len(complete) < len(pairs):
            logger.debug("incomplete_pairs_dropped", dropped=len(pairs) - len(complete))

        semaphore = asyncio.Semaphore(max(1, self.settings.IDEAL_ANSWER_CONCURRENCY))

        async def bounded(pair: QuestionAnswerPair) -> EnhancedQuestionAnswerPair:
            async with semaphore:
                return await self.enhance_pair(pair)

        return list(await asyncio.gather(*(bounded(pair) for pair in complete)))

    async def enhance_pair(self, pair: QuestionAnswerPair) -> EnhancedQuestionAnswerPair:
        speech_analysis = None
        try:
            speech_analysis = self.speech_analyzer.analyze_answer(pair.answer)
        except Exception as e:
            logger.warning("speech_analysis_failed", question=pair.question, error=str(e))

        try:
            ideal_answer = await asyncio.wait_for(
                self.generator.generate_ideal_answer(pair.question),
                timeout=self.settings.GENERATION_TIMEOUT_SECONDS,
            )
        except Exception as e:
            logger.warning("ideal_answer_failed", question=pair.question,
                           error=str(e) or type(e).__name__)
            ideal_answer = IDEAL_ANSWER_FALLBACK

        return EnhancedQuestionAnswerPair(
            **pair.model_dump(),
            speech_analysis=speech_analysis,
            ideal_answer=ideal_answer,
        )
