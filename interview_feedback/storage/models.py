from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text, UniqueConstraint

from .database import Base


class FeedbackRow(Base):
    __tablename__ = "feedback"
    __table_args__ = (
        UniqueConstraint("interview_id", "user_id", name="uq_feedback_interview_user"),
    )

    id = Column(String, primary_key=True)
    interview_id = Column(String, index=True, nullable=False)
    user_id = Column(String, index=True, nullable=False)
    total_score = Column(Integer, nullable=False)
    category_scores = Column(JSON, nullable=False)
    strengths = Column(JSON, nullable=False)
    areas_for_improvement = Column(JSON, nullable=False)
    final_assessment = Column(Text, nullable=False)
    sentiment_analysis = Column(JSON, nullable=False)
    questions_and_answers = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), index=True, nullable=False)


class InterviewRow(Base):
    __tablename__ = "interviews"

    id = Column(String, primary_key=True)
    user_id = Column(String, index=True, nullable=False)
    role = Column(String, nullable=False)
    level = Column(String)
    type = Column(String)
    techstack = Column(JSON)
    questions = Column(JSON)
    finalized = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), index=True, nullable=False)
