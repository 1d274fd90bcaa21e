"""
Session state machine.

    open --submit--> answering --complete/expire--> completed

``completed`` is terminal. Expiry is detected lazily whenever a session is
touched; there is no background timer.
"""
import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from certprep.core.exceptions import (
    AggregationFailed,
    SessionCompleted,
    SessionExpired,
    SessionNotCompleted,
    UnknownQuestion,
)
from certprep.core.engine.grading import AnswerSubmission, grade
from certprep.core.engine.interfaces import (
    AnswerMatcher,
    Clock,
    Repository,
    SystemClock,
    ensure_utc,
)
from certprep.core.engine.progress_aggregator import ProgressAggregator
from certprep.core.engine.question_bank import QuestionBankAccessor
from certprep.models import CompletionReason, TestResult, TestSession

logger = logging.getLogger(__name__)


class CompletionStatus(str, enum.Enum):
    COMPLETED = "completed"
    ALREADY_COMPLETED = "already_completed"


@dataclass
class CompletionResult:
    session: TestSession
    status: CompletionStatus
    warning: Optional[AggregationFailed] = None

    @property
    def score(self) -> float:
        return self.session.score

    @property
    def max_score(self) -> float:
        return self.session.max_score

    @property
    def percentage(self) -> float:
        return self.session.percentage

    @property
    def aggregation_failed(self) -> bool:
        return self.warning is not None


def compute_percentage(score: float, max_score: float) -> float:
    if max_score <= 0:
        return 0.0
    return round(min(max(100 * score / max_score, 0.0), 100.0), 2)


class SessionStateMachine:
    """Accepts answers for a session and finalizes it."""

    def __init__(
        self,
        repository: Repository,
        question_bank: QuestionBankAccessor,
        aggregator: ProgressAggregator,
        clock: Optional[Clock] = None,
        matcher: Optional[AnswerMatcher] = None,
    ):
        self.repository = repository
        self.question_bank = question_bank
        self.aggregator = aggregator
        self.clock = clock or SystemClock()
        self.matcher = matcher

    def is_expired(self, session: TestSession, now: Optional[datetime] = None) -> bool:
        now = now or self.clock.now()
        elapsed = (now - ensure_utc(session.started_at)).total_seconds()
        return elapsed > session.time_limit_minutes * 60

    def submit_answer(
        self,
        session_id: str,
        question_id: int,
        submission: AnswerSubmission,
        time_spent_seconds: int = 0,
    ) -> TestResult:
        """
        Grade and store an answer, replacing any earlier answer to the question.

        Raises:
            SessionNotFound: If the session does not exist
            SessionCompleted: If the session is already completed
            SessionExpired: If the time limit elapsed; the session is
                finalized and this submission is discarded
            UnknownQuestion: If the question is not part of the session
        """
        session = self.repository.load(session_id, for_update=True)
        now = self.clock.now()

        if session.is_completed:
            raise SessionCompleted(session_id)

        if self.is_expired(session, now):
            logger.warning(f"Submission on expired session {session_id}, finalizing")
            self._finalize(session, now, CompletionReason.EXPIRED)
            raise SessionExpired(session_id, session.time_limit_minutes)

        if question_id not in (session.question_ids or []):
            raise UnknownQuestion(session_id, question_id)

        question = self.question_bank.get_questions([question_id]).get(question_id)
        if question is None:
            raise UnknownQuestion(session_id, question_id)
        result = grade(question, submission, self.matcher)

        record = self.repository.upsert_answer(
            TestResult(
                session_id=session_id,
                question_id=question_id,
                selected_option_id=submission.option_id,
                user_answer=submission.text,
                is_correct=result.is_correct,
                points_earned=result.points_earned,
                time_spent_seconds=max(int(time_spent_seconds or 0), 0),
                submitted_at=now,
            )
        )
        if not self.repository.mark_answering(session_id):
            logger.warning(f"Session {session_id} was completed while answer {question_id} was being stored")
        return record

    def complete_session(self, session_id: str) -> CompletionResult:
        """
        Finalize a session and fold it into the learner's progress.

        Idempotent: a completed session is returned as is with status
        ``already_completed`` and nothing is recomputed.

        Raises:
            SessionNotFound: If the session does not exist
            SessionExpired: If the time limit elapsed; the session is
                finalized with reason ``expired`` before this is raised
        """
        session = self.repository.load(session_id, for_update=True)
        if session.is_completed:
            return CompletionResult(session=session, status=CompletionStatus.ALREADY_COMPLETED)

        now = self.clock.now()
        if self.is_expired(session, now):
            logger.warning(f"Completion of expired session {session_id}, finalizing")
            self._finalize(session, now, CompletionReason.EXPIRED)
            raise SessionExpired(session_id, session.time_limit_minutes)
        return self._finalize(session, now, CompletionReason.FINALIZED)

    def get_session(self, session_id: str) -> TestSession:
        return self.repository.load(session_id)

    def get_results(self, session_id: str) -> List[TestResult]:
        session = self.repository.load(session_id)
        if not session.is_completed:
            raise SessionNotCompleted(session_id)
        return self.repository.load_answers(session_id)

    def list_sessions(self, user_id: int, limit: int = 10) -> List[TestSession]:
        return self.repository.list_for_user(user_id, limit)

    def _finalize(self, session: TestSession, now: datetime, reason: CompletionReason) -> CompletionResult:
        session_id = session.id
        question_ids = list(session.question_ids or [])
        questions = self.question_bank.get_questions(question_ids)
        answers = self.repository.load_answers(session_id)

        in_session = set(question_ids)
        score = sum(a.points_earned for a in answers if a.question_id in in_session)
        max_score = sum(float(questions[qid].points or 0) for qid in question_ids if qid in questions)
        percentage = compute_percentage(score, max_score)

        won = self.repository.mark_completed(
            session_id,
            score=score,
            max_score=max_score,
            percentage=percentage,
            completed_at=now,
            reason=reason.value,
        )
        session = self.repository.load(session_id)
        if not won:
            # A concurrent request finalized it first
            return CompletionResult(session=session, status=CompletionStatus.ALREADY_COMPLETED)

        logger.info(
            f"Session {session_id} completed ({reason.value}): "
            f"{score}/{max_score} = {percentage}%"
        )

        warning = None
        try:
            self.aggregator.apply_completed_session(session, answers, questions)
        except Exception as e:
            warning = AggregationFailed(session_id, details=str(e))
            logger.exception(f"Aggregation failed for session {session_id}, left for reconciliation")

        return CompletionResult(session=session, status=CompletionStatus.COMPLETED, warning=warning)
