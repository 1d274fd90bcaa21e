"""Models module - Import all models here for Alembic."""
from certprep.db.base import Base
from certprep.models.user import User
from certprep.models.category import Category
from certprep.models.question import Question, QuestionOption, QuestionType, Difficulty
from certprep.models.test_session import TestSession, TestResult, SessionStatus, CompletionReason
from certprep.models.progress import UserProgress

__all__ = ["Base", "User", "Category", "Question", "QuestionOption", "QuestionType", "Difficulty", "TestSession", "TestResult", "SessionStatus", "CompletionReason", "UserProgress"]
