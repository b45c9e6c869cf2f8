from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import Field

from ....application.schemas import (
    CamelModel,
    CreateFeedbackRequest,
    FeedbackRecord,
    FeedbackResult,
    SentimentSample,
    TranscriptTurn,
)
from ....core.interfaces import FeedbackStore
from ....managers.feedback import FeedbackOrchestrator
from ....processors.report import FeedbackReport, build_report
from ..dependencies import get_orchestrator, get_store

router = APIRouter(tags=["feedback"])


class FeedbackRequestBody(CamelModel):
    user_id: str
    transcript: List[TranscriptTurn]
    sentiment_samples: List[SentimentSample] = Field(default_factory=list)


@router.post("/interviews/{interview_id}/feedback", response_model=FeedbackResult)
async def create_feedback(
    interview_id: str,
    body: FeedbackRequestBody,
    orchestrator: FeedbackOrchestrator = Depends(get_orchestrator),
):
    """
    Generate and store feedback for a finished interview.

    Failures are reported with ``success: false`` rather than an error status,
    so the caller can fall back to a safe view.
    """
    request = CreateFeedbackRequest(
        interview_id=interview_id,
        user_id=body.user_id,
        transcript=body.transcript,
        sentiment_samples=body.sentiment_samples,
    )
    return await orchestrator.create_feedback(request)


async def _require_feedback(store: FeedbackStore, interview_id: str, user_id: str) -> FeedbackRecord:
    record = await store.get_feedback(interview_id, user_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Feedback not found")
    return record


@router.get("/interviews/{interview_id}/feedback", response_model=FeedbackRecord)
async def get_feedback(
    interview_id: str,
    user_id: str = Query(...),
    store: FeedbackStore = Depends(get_store),
):
    return await _require_feedback(store, interview_id, user_id)


@router.get("/interviews/{interview_id}/report", response_model=FeedbackReport)
async def get_report(
    interview_id: str,
    user_id: str = Query(...),
    store: FeedbackStore = Depends(get_store),
):
    record = await _require_feedback(store, interview_id, user_id)
    return build_report(record)


@router.get("/users/{user_id}/feedback", response_model=List[FeedbackRecord])
async def list_user_feedback(user_id: str, store: FeedbackStore = Depends(get_store)):
    return await store.list_feedback(user_id)
