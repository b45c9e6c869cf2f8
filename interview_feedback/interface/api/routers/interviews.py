from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ....application.schemas import InterviewRecord
from ....core.config import Settings
from ....core.interfaces import FeedbackStore
from ..dependencies import get_app_settings, get_store

router = APIRouter(tags=["interviews"])


@router.post("/interviews", response_model=InterviewRecord, status_code=201)
async def create_interview(record: InterviewRecord, store: FeedbackStore = Depends(get_store)):
    await store.save_interview(record)
    return record


@router.get("/interviews/latest", response_model=List[InterviewRecord])
async def latest_interviews(
    user_id: str = Query(...),
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    store: FeedbackStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """Newest finalized interviews taken by other users."""
    return await store.latest_interviews(user_id, limit or settings.LATEST_INTERVIEWS_LIMIT)


@router.get("/interviews/{interview_id}", response_model=InterviewRecord)
async def get_interview(interview_id: str, store: FeedbackStore = Depends(get_store)):
    interview = await store.get_interview(interview_id)
    if interview is None:
        raise HTTPException(status_code=404, detail="Interview not found")
    return interview


@router.get("/users/{user_id}/interviews", response_model=List[InterviewRecord])
async def list_user_interviews(user_id: str, store: FeedbackStore = Depends(get_store)):
    return await store.list_interviews(user_id)
