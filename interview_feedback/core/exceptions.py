class InterviewFeedbackError(Exception):
    """Base class for errors raised by the feedback pipeline."""


class GenerationError(InterviewFeedbackError):
    """The generative service could not be reached or returned an error."""


class SchemaViolationError(GenerationError):
    """The generative service answered, but not in the agreed schema."""

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(message)
        self.raw = raw


class PersistenceError(InterviewFeedbackError):
    """The feedback store rejected or failed a read/write."""


class DuplicateFeedbackError(PersistenceError):
    """Feedback for this interview and user has already been stored."""

    def __init__(self, interview_id: str, user_id: str):
        super().__init__(
            f"Feedback already exists for interview {interview_id} and user {user_id}"
        )
        self.interview_id = interview_id
        self.user_id = user_id


class InvalidStateTransition(InterviewFeedbackError):
    """A feedback run tried to move between two states that are not connected."""
