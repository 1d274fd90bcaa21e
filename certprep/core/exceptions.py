"""
Domain exceptions for the test session and progress engine.

Every error carries a stable ``error_code`` and an ``extra`` dict so the API
layer can render it without knowing the concrete type.
"""
from typing import Any, Dict, Optional


class CertPrepError(Exception):
    """Base class for all engine errors."""

    error_code = "CERTPREP_ERROR"

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}


class InvalidConfig(CertPrepError):
    """Session parameters rejected before anything is persisted."""

    error_code = "INVALID_CONFIG"


class EmptyPool(CertPrepError):
    """No active question matches the requested categories."""

    error_code = "EMPTY_POOL"

    def __init__(self, category_ids):
        super().__init__(
            "No active questions available for the selected categories",
            extra={"category_ids": sorted(category_ids)},
        )


class UnknownQuestion(CertPrepError):
    """Submission references a question outside the session's fixed set."""

    error_code = "UNKNOWN_QUESTION"

    def __init__(self, session_id: str, question_id: int):
        super().__init__(
            f"Question {question_id} is not part of session '{session_id}'",
            extra={"session_id": session_id, "question_id": question_id},
        )


class InvalidQuestionData(CertPrepError):
    """Question bank content violates a grading invariant."""

    error_code = "INVALID_QUESTION_DATA"


class SessionNotFound(CertPrepError):
    error_code = "SESSION_NOT_FOUND"

    def __init__(self, session_id: str):
        super().__init__(
            f"Test session '{session_id}' not found",
            extra={"session_id": session_id},
        )


class SessionCompleted(CertPrepError):
    """The session is terminal and accepts no more answers."""

    error_code = "SESSION_COMPLETED"

    def __init__(self, session_id: str):
        super().__init__(
            f"Test session '{session_id}' is already completed",
            extra={"session_id": session_id},
        )


class SessionExpired(CertPrepError):
    """The time limit elapsed; the session has been finalized."""

    error_code = "SESSION_EXPIRED"

    def __init__(self, session_id: str, time_limit_minutes: int):
        super().__init__(
            f"Test session '{session_id}' exceeded its {time_limit_minutes} minute limit",
            extra={"session_id": session_id, "time_limit_minutes": time_limit_minutes},
        )


class SessionNotCompleted(CertPrepError):
    error_code = "SESSION_NOT_COMPLETED"

    def __init__(self, session_id: str):
        super().__init__(
            f"Test session '{session_id}' is not completed yet",
            extra={"session_id": session_id},
        )


class PersistenceError(CertPrepError):
    """Storage collaborator failure. Safe to retry."""

    error_code = "PERSISTENCE_ERROR"

    def __init__(self, operation: str, details: Optional[str] = None):
        super().__init__(
            f"Database operation failed: {operation}",
            extra={"operation": operation, "details": details},
        )


class AggregationFailed(CertPrepError):
    """
    Progress aggregation failed after a successful completion.

    Returned as a warning on the completion result; the session stays
    completed and reconciliation applies it later.
    """

    error_code = "AGGREGATION_FAILED"

    def __init__(self, session_id: str, details: Optional[str] = None):
        super().__init__(
            f"Progress aggregation failed for session '{session_id}'",
            extra={"session_id": session_id, "details": details},
        )
