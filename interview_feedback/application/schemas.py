"""
Pydantic models shared by the pipeline, the store and the HTTP API.

Field names are snake_case in Python and camelCase on the wire, matching what
the report front end reads.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Rubric categories, in the order the scoring service must return them
CATEGORY_NAMES = (
    "Communication Skills",
    "Technical Knowledge",
    "Problem Solving",
    "Cultural Fit",
    "Confidence and Clarity",
)

IDEAL_ANSWER_FALLBACK = "Could not generate an ideal answer for this question."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TranscriptRole(str, Enum):
    INTERVIEWER = "interviewer"
    CANDIDATE = "candidate"
    SYSTEM = "system"


# Role names used by the voice call SDK
ROLE_ALIASES = {
    "assistant": TranscriptRole.INTERVIEWER,
    "user": TranscriptRole.CANDIDATE,
}


class TranscriptTurn(CamelModel):
    model_config = ConfigDict(frozen=True)

    role: TranscriptRole
    content: str

    @field_validator("role", mode="before")
    @classmethod
    def _map_sdk_roles(cls, value):
        if isinstance(value, str):
            return ROLE_ALIASES.get(value.lower(), value.lower())
        return value


class SentimentSample(CamelModel):
    """One sentiment reading taken when a candidate turn arrived."""
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=_utcnow)
    emotion: str
    confidence: float = Field(ge=0.0, le=1.0)
    score: float = Field(default=0.0, ge=-1.0, le=1.0)
    magnitude: float = Field(default=0.0, ge=0.0, le=2.0)
    transcript: str = ""


class SentimentScore(CamelModel):
    score: float
    emotion: str
    confidence: float


class QuestionAnswerPair(CamelModel):
    question: str
    answer: str = ""
    sentiment_score: Optional[SentimentScore] = None


class FillerWordTally(CamelModel):
    total: int = 0
    details: Dict[str, int] = Field(default_factory=dict)


class SpeechAnalysis(CamelModel):
    filler_words: FillerWordTally
    word_count: int
    clarity: str
    tone: str
    avg_words_per_sentence: float


class EnhancedQuestionAnswerPair(QuestionAnswerPair):
    speech_analysis: Optional[SpeechAnalysis] = None
    ideal_answer: str = IDEAL_ANSWER_FALLBACK


class CategoryScore(CamelModel):
    name: str
    score: int = Field(ge=0, le=100)
    comment: str


class FeedbackEvaluation(CamelModel):
    """The structured evaluation the scoring service has to return."""

    total_score: int = Field(ge=0, le=100)
    category_scores: List[CategoryScore]
    strengths: List[str]
    areas_for_improvement: List[str]
    final_assessment: str

    @model_validator(mode="after")
    def _check_categories(self):
        names = tuple(category.name for category in self.category_scores)
        if names != CATEGORY_NAMES:
            raise ValueError(
                f"categoryScores must be exactly {list(CATEGORY_NAMES)} in order, got {list(names)}"
            )
        return self


class IdealAnswer(CamelModel):
    model_answer: str


class FeedbackRecord(FeedbackEvaluation):
    id: str = Field(default_factory=_new_id)
    interview_id: str
    user_id: str
    sentiment_analysis: List[SentimentSample] = Field(default_factory=list)
    questions_and_answers: List[EnhancedQuestionAnswerPair] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)


class InterviewRecord(CamelModel):
    id: str = Field(default_factory=_new_id)
    user_id: str
    role: str
    level: str = ""
    type: str = ""
    techstack: List[str] = Field(default_factory=list)
    questions: List[str] = Field(default_factory=list)
    finalized: bool = False
    created_at: datetime = Field(default_factory=_utcnow)


class CreateFeedbackRequest(CamelModel):
    interview_id: str
    user_id: str
    transcript: List[TranscriptTurn]
    sentiment_samples: List[SentimentSample] = Field(default_factory=list)


class FeedbackResult(CamelModel):
    success: bool
    feedback_id: Optional[str] = None
    state: str
