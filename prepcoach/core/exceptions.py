"""
Error taxonomy for PrepCoach.

Only guard violations, validation failures, missing resources, rate
limits and persistence failures reach callers. Upstream degradation
(model, transcription, media analysis) is absorbed by fallbacks.
"""


class PrepCoachError(Exception):
    """Base class for errors surfaced to callers."""
    pass


class InvalidStateError(PrepCoachError):
    """Raised when an action is not legal for the session's current status."""

    def __init__(self, action: str, current_status: str):
        self.action = action
        self.current_status = current_status
        super().__init__(f"Cannot {action} a session that is {current_status}")


class AnswerValidationError(PrepCoachError):
    """Raised for malformed input, before any evaluation work starts."""
    pass


class SessionNotFoundError(PrepCoachError):
    """Raised when a session does not exist or belongs to another owner."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class QuestionNotFoundError(PrepCoachError):
    """Raised when an answer references a question the session does not have."""

    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f"Question not found in session: {question_id}")


class RateLimitExceededError(PrepCoachError):
    """Raised when an owner exceeds the attempt budget for an action."""

    def __init__(self, action: str, retry_after: int):
        self.action = action
        self.retry_after = retry_after
        super().__init__(
            f"Too many {action} attempts. Try again in {retry_after} seconds"
        )


class PersistenceError(PrepCoachError):
    """Raised when a session could not be saved."""
    pass


class AIUnavailableError(Exception):
    """Raised inside the AI layer when the model cannot produce a usable result."""
    pass
