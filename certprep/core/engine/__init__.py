"""
Test session and progress engine.
"""
from .grading import AnswerSubmission, GradeResult, grade
from .interfaces import ProfileDelta, SystemClock
from .matchers import NormalizedTextMatcher
from .progress_aggregator import ProfileSummary, ProgressAggregator, ReconcileReport, rolling_mean
from .question_bank import QuestionBankAccessor, QuestionSelection
from .session_builder import SessionBuilder
from .state_machine import CompletionResult, CompletionStatus, SessionStateMachine, compute_percentage

__all__ = [
    "AnswerSubmission",
    "GradeResult",
    "grade",
    "ProfileDelta",
    "SystemClock",
    "NormalizedTextMatcher",
    "ProfileSummary",
    "ProgressAggregator",
    "ReconcileReport",
    "rolling_mean",
    "QuestionBankAccessor",
    "QuestionSelection",
    "SessionBuilder",
    "CompletionResult",
    "CompletionStatus",
    "SessionStateMachine",
    "compute_percentage",
]
