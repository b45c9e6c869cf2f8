import asyncio
from datetime import datetime, timezone
from typing import Callable, List, Optional, TypeVar

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..application.schemas import FeedbackRecord, InterviewRecord
from ..core.exceptions import DuplicateFeedbackError, PersistenceError
from ..core.interfaces import FeedbackStore
from .database import init_db, make_engine, make_session_factory
from .models import FeedbackRow, InterviewRow

logger = structlog.get_logger(__name__)

T = TypeVar("T")

_FEEDBACK_FIELDS = (
    "id", "interview_id", "user_id", "total_score", "category_scores", "strengths",
    "areas_for_improvement", "final_assessment", "sentiment_analysis",
    "questions_and_answers",
)
_INTERVIEW_FIELDS = (
    "id", "user_id", "role", "level", "type", "techstack", "questions", "finalized",
)


def _to_utc(value: datetime) -> datetime:
    """Store instants as UTC; SQLite drops offsets and returns naive values."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _feedback_to_row(record: FeedbackRecord) -> FeedbackRow:
    data = record.model_dump(mode="json")
    return FeedbackRow(
        **{name: data[name] for name in _FEEDBACK_FIELDS},
        created_at=_to_utc(record.created_at),
    )


def _row_to_feedback(row: FeedbackRow) -> FeedbackRecord:
    data = {name: getattr(row, name) for name in _FEEDBACK_FIELDS}
    return FeedbackRecord.model_validate({**data, "created_at": _to_utc(row.created_at)})


def _interview_to_row(record: InterviewRecord) -> InterviewRow:
    data = record.model_dump(mode="json")
    return InterviewRow(
        **{name: data[name] for name in _INTERVIEW_FIELDS},
        created_at=_to_utc(record.created_at),
    )


def _row_to_interview(row: InterviewRow) -> InterviewRecord:
    data = {name: getattr(row, name) for name in _INTERVIEW_FIELDS}
    data["techstack"] = data["techstack"] or []
    data["questions"] = data["questions"] or []
    return InterviewRecord.model_validate({**data, "created_at": _to_utc(row.created_at)})


class SqlFeedbackStore(FeedbackStore):
    """
    Feedback and interview records kept in a relational database.

    Nested parts of a record (category scores, samples, QA pairs) are stored
    as JSON documents. Records are written once and never updated.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @classmethod
    def from_url(cls, database_url: str) -> "SqlFeedbackStore":
        engine = make_engine(database_url)
        init_db(engine)
        logger.info("feedback_store_ready", database_url=engine.url.render_as_string(hide_password=True))
        return cls(make_session_factory(engine))

    async def _run(self, work: Callable[[Session], T]) -> T:
        def call() -> T:
            with self.session_factory() as session:
                return work(session)
        try:
            return await asyncio.to_thread(call)
        except PersistenceError:
            raise
        except SQLAlchemyError as e:
            logger.error("feedback_store_error", error=str(e))
            raise PersistenceError(str(e)) from e

    async def save_feedback(self, record: FeedbackRecord) -> str:
        def work(session: Session) -> str:
            session.add(_feedback_to_row(record))
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateFeedbackError(record.interview_id, record.user_id) from e
            return record.id

        feedback_id = await self._run(work)
        logger.info("feedback_saved", feedback_id=feedback_id,
                    interview_id=record.interview_id, user_id=record.user_id)
        return feedback_id

    async def get_feedback(self, interview_id: str, user_id: str) -> Optional[FeedbackRecord]:
        def work(session: Session) -> Optional[FeedbackRecord]:
            row = (
                session.query(FeedbackRow)
                .filter(FeedbackRow.interview_id == interview_id, FeedbackRow.user_id == user_id)
                .first()
            )
            return _row_to_feedback(row) if row else None

        return await self._run(work)

    async def list_feedback(self, user_id: str) -> List[FeedbackRecord]:
        def work(session: Session) -> List[FeedbackRecord]:
            rows = (
                session.query(FeedbackRow)
                .filter(FeedbackRow.user_id == user_id)
                .order_by(FeedbackRow.created_at.desc())
                .all()
            )
            return [_row_to_feedback(row) for row in rows]

        return await self._run(work)

    async def save_interview(self, record: InterviewRecord) -> str:
        def work(session: Session) -> str:
            session.add(_interview_to_row(record))
            session.commit()
            return record.id

        return await self._run(work)

    async def get_interview(self, interview_id: str) -> Optional[InterviewRecord]:
        def work(session: Session) -> Optional[InterviewRecord]:
            row = session.get(InterviewRow, interview_id)
            return _row_to_interview(row) if row else None

        return await self._run(work)

    async def list_interviews(self, user_id: str) -> List[InterviewRecord]:
        def work(session: Session) -> List[InterviewRecord]:
            rows = (
                session.query(InterviewRow)
                .filter(InterviewRow.user_id == user_id)
                .order_by(InterviewRow.created_at.desc())
                .all()
            )
            return [_row_to_interview(row) for row in rows]

        return await self._run(work)

    async def latest_interviews(self, user_id: str, limit: int) -> List[InterviewRecord]:
        def work(session: Session) -> List[InterviewRecord]:
            rows = (
                session.query(InterviewRow)
                .filter(InterviewRow.finalized.is_(True), InterviewRow.user_id != user_id)
                .order_by(InterviewRow.created_at.desc())
                .limit(limit)
                .all()
            )
            return [_row_to_interview(row) for row in rows]

        return await self._run(work)
