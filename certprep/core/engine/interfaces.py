"""
Collaborator interfaces the engine depends on.

The engine never talks to SQLAlchemy directly for session or progress state;
it goes through these protocols. ``certprep.repositories`` holds the SQL
implementations.
"""
from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Protocol, Tuple

from certprep.models import Question, TestResult, TestSession, User, UserProgress


@dataclass(frozen=True)
class ProfileDelta:
    """Increment applied to a learner's global aggregates."""

    tests_taken: int
    questions: int
    percentage: float


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on the way back)."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class AnswerMatcher(Protocol):
    def evaluate(self, question: Question, submitted_text: str) -> Tuple[bool, Optional[float]]:
        """Return (correct, partial credit fraction in [0, 1]). None means all or nothing."""
        ...


class Repository(Protocol):
    def load(self, session_id: str, for_update: bool = False) -> TestSession: ...

    def save(self, session: TestSession) -> None: ...

    def upsert_answer(self, record: TestResult) -> TestResult: ...

    def load_answers(self, session_id: str) -> List[TestResult]: ...

    def mark_answering(self, session_id: str) -> bool: ...

    def mark_completed(
        self,
        session_id: str,
        score: float,
        max_score: float,
        percentage: float,
        completed_at: datetime,
        reason: str,
    ) -> bool: ...

    def list_for_user(self, user_id: int, limit: int) -> List[TestSession]: ...

    def list_unaggregated(self, limit: int) -> List[TestSession]: ...


class ProgressStore(Protocol):
    def load_or_create(self, user_id: int, category_id: int) -> UserProgress: ...

    def save(self, progress: UserProgress) -> None: ...

    def update_profile_aggregates(self, user_id: int, delta: ProfileDelta) -> None: ...

    def claim_aggregation(self, session_id: str, at: datetime) -> bool: ...

    def transaction(self, description: str) -> AbstractContextManager: ...

    def list_for_user(self, user_id: int) -> List[UserProgress]: ...

    def get_profile(self, user_id: int) -> Optional[User]: ...
