"""
Session builder: validates an exam configuration and materializes a session.
"""
import logging
from typing import Iterable, Mapping, Optional
from uuid import uuid4

from certprep.core.config import settings
from certprep.core.exceptions import InvalidConfig
from certprep.core.engine.interfaces import Clock, Repository, SystemClock
from certprep.core.engine.question_bank import QuestionBankAccessor
from certprep.models import SessionStatus, TestSession

logger = logging.getLogger(__name__)


class SessionBuilder:
    """Creates test sessions with a frozen, deterministic question order."""

    def __init__(
        self,
        question_bank: QuestionBankAccessor,
        repository: Repository,
        clock: Optional[Clock] = None,
        max_questions: Optional[int] = None,
    ):
        self.question_bank = question_bank
        self.repository = repository
        self.clock = clock or SystemClock()
        self.max_questions = max_questions or settings.MAX_QUESTIONS_PER_TEST

    def build(
        self,
        user_id: int,
        category_ids: Iterable[int],
        question_count: int,
        time_limit_minutes: int,
        session_name: Optional[str] = None,
        difficulty_mix: Optional[Mapping[str, float]] = None,
    ) -> TestSession:
        """
        Create and persist a new test session.

        Args:
            user_id: Owner of the session
            category_ids: Categories to draw questions from
            question_count: Number of questions requested
            time_limit_minutes: Time allowed for the whole test
            session_name: Display name, defaults to "Practice Test - <date>"
            difficulty_mix: Optional difficulty weights

        Returns:
            The persisted session in state ``open``

        Raises:
            InvalidConfig: If the configuration is rejected
            EmptyPool: If no active question matches the categories
            PersistenceError: If the session could not be stored
        """
        category_ids = set(category_ids or [])
        self._validate(category_ids, question_count, time_limit_minutes)

        session_id = str(uuid4())
        selection = self.question_bank.select_questions(
            category_ids, question_count, difficulty_mix=difficulty_mix, seed=session_id
        )

        now = self.clock.now()
        session = TestSession(
            id=session_id,
            user_id=user_id,
            session_name=session_name or f"Practice Test - {now.date().isoformat()}",
            requested_questions=question_count,
            total_questions=selection.count,
            is_partial=selection.is_partial,
            time_limit_minutes=time_limit_minutes,
            question_ids=selection.question_ids,
            status=SessionStatus.OPEN.value,
            is_completed=False,
            score=0.0,
            max_score=0.0,
            percentage=0.0,
            started_at=now,
        )
        self.repository.save(session)

        logger.info(
            f"Created test session {session_id} for user {user_id}: "
            f"{selection.count}/{question_count} questions, {time_limit_minutes} min"
        )
        return session

    def _validate(self, category_ids: set, question_count: int, time_limit_minutes: int) -> None:
        if not category_ids:
            raise InvalidConfig("Select at least one category")
        if question_count is None or question_count <= 0:
            raise InvalidConfig(
                "Question count must be positive", extra={"question_count": question_count}
            )
        if question_count > self.max_questions:
            raise InvalidConfig(
                f"Question count cannot exceed {self.max_questions}",
                extra={"question_count": question_count, "max": self.max_questions},
            )
        if time_limit_minutes is None or time_limit_minutes <= 0:
            raise InvalidConfig(
                "Time limit must be positive", extra={"time_limit_minutes": time_limit_minutes}
            )

        missing = category_ids - self.question_bank.existing_category_ids(category_ids)
        if missing:
            raise InvalidConfig(
                "Unknown categories", extra={"category_ids": sorted(missing)}
            )
