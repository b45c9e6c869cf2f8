"""
Aggregates the report front end draws from a stored feedback record.
"""
from datetime import datetime
from typing import Dict, List, Sequence

from pydantic import Field

from ..application.schemas import (
    CamelModel,
    CategoryScore,
    EnhancedQuestionAnswerPair,
    FeedbackRecord,
    SentimentSample,
)


class TimelinePoint(CamelModel):
    timestamp: datetime
    score: float
    emotion: str


class SentimentSummary(CamelModel):
    emotion_distribution: Dict[str, int] = Field(default_factory=dict)
    average_score_by_emotion: Dict[str, float] = Field(default_factory=dict)
    timeline: List[TimelinePoint] = Field(default_factory=list)
    dominant_emotion: str = "neutral"
    average_confidence: float = 0.0


class FeedbackReport(CamelModel):
    feedback_id: str
    interview_id: str
    total_score: int
    category_scores: List[CategoryScore]
    strengths: List[str]
    areas_for_improvement: List[str]
    final_assessment: str
    sentiment: SentimentSummary
    questions_and_answers: List[EnhancedQuestionAnswerPair]
    created_at: datetime


def summarize_sentiment(samples: Sequence[SentimentSample]) -> SentimentSummary:
    if not samples:
        return SentimentSummary()

    counts: Dict[str, int] = {}
    totals: Dict[str, float] = {}
    for sample in samples:
        counts[sample.emotion] = counts.get(sample.emotion, 0) + 1
        totals[sample.emotion] = totals.get(sample.emotion, 0.0) + sample.score

    # max() keeps the first emotion seen when counts tie
    dominant = max(counts, key=counts.get)

    return SentimentSummary(
        emotion_distribution=counts,
        average_score_by_emotion={e: totals[e] / counts[e] for e in counts},
        timeline=[
            TimelinePoint(timestamp=s.timestamp, score=s.score, emotion=s.emotion)
            for s in samples
        ],
        dominant_emotion=dominant,
        average_confidence=sum(s.confidence for s in samples) / len(samples),
    )


def build_report(record: FeedbackRecord) -> FeedbackReport:
    return FeedbackReport(
        feedback_id=record.id,
        interview_id=record.interview_id,
        total_score=record.total_score,
        category_scores=record.category_scores,
        strengths=record.strengths,
        areas_for_improvement=record.areas_for_improvement,
        final_assessment=record.final_assessment,
        sentiment=summarize_sentiment(record.sentiment_analysis),
        questions_and_answers=record.questions_and_answers,
        created_at=record.created_at,
    )
