from abc import ABC, abstractmethod
from typing import List, Optional

from ..application.schemas import FeedbackEvaluation, FeedbackRecord, InterviewRecord

class FeedbackGenerator(ABC):
    @abstractmethod
    async def generate_evaluation(self, transcript: str) -> FeedbackEvaluation:
        """Score a formatted transcript against the fixed interview rubric."""
        pass

    @abstractmethod
    async def generate_ideal_answer(self, question: str) -> str:
        """Produce a model answer for a single interview question."""
        pass

class FeedbackStore(ABC):
    @abstractmethod
    async def save_feedback(self, record: FeedbackRecord) -> str:
        """Store a feedback record once and return its ID."""
        pass

    @abstractmethod
    async def get_feedback(self, interview_id: str, user_id: str) -> Optional[FeedbackRecord]:
        """Look up the feedback for one interview and user."""
        pass

    @abstractmethod
    async def list_feedback(self, user_id: str) -> List[FeedbackRecord]:
        """All feedback records of a user, newest first."""
        pass

    @abstractmethod
    async def save_interview(self, record: InterviewRecord) -> str:
        """Store an interview and return its ID."""
        pass

    @abstractmethod
    async def get_interview(self, interview_id: str) -> Optional[InterviewRecord]:
        pass

    @abstractmethod
    async def list_interviews(self, user_id: str) -> List[InterviewRecord]:
        """All interviews of a user, newest first."""
        pass

    @abstractmethod
    async def latest_interviews(self, user_id: str, limit: int) -> List[InterviewRecord]:
        """Newest finalized interviews that belong to other users."""
        pass
