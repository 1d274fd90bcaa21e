"""Schemas module - Import all schemas."""
from certprep.schemas.category import Category
from certprep.schemas.test_session import (
    TestSessionCreate,
    TestSessionResponse,
    TestSessionDetail,
    TestSessionResults,
    QuestionPublic,
    OptionPublic,
    AnswerSubmit,
    AnswerResult,
    AnswerReview,
    CompletionResponse,
)
from certprep.schemas.progress import CategoryProgress, ProfileStats, ReconcileResponse
from certprep.schemas.common import ErrorResponse

__all__ = [
    "Category",
    "TestSessionCreate",
    "TestSessionResponse",
    "TestSessionDetail",
    "TestSessionResults",
    "QuestionPublic",
    "OptionPublic",
    "AnswerSubmit",
    "AnswerResult",
    "AnswerReview",
    "CompletionResponse",
    "CategoryProgress",
    "ProfileStats",
    "ReconcileResponse",
    "ErrorResponse",
]
