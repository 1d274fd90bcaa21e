"""
Progress aggregator.

Folds completed sessions into per-category and global rolling statistics.
Each fold is O(1) per category: averages are updated from the previous
average and its weight, never recomputed from history.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

from certprep.core.exceptions import PersistenceError, SessionNotCompleted
from certprep.core.engine.interfaces import (
    Clock,
    ProfileDelta,
    ProgressStore,
    Repository,
    SystemClock,
)
from certprep.core.engine.question_bank import QuestionBankAccessor
from certprep.models import Question, TestResult, TestSession, UserProgress

logger = logging.getLogger(__name__)


def rolling_mean(old_avg: float, old_weight: int, new_value: float, new_weight: int) -> float:
    """Weighted mean of an existing average and a new batch."""
    total = old_weight + new_weight
    if total <= 0:
        return old_avg
    return (old_avg * old_weight + new_value * new_weight) / total


def fold_category(progress: UserProgress, attempted: int, correct: int) -> UserProgress:
    """Apply one session's results in a category to its progress row."""
    if attempted <= 0:
        return progress
    old_attempted = progress.questions_attempted or 0
    subset_percentage = correct / attempted * 100
    progress.average_score = rolling_mean(
        progress.average_score or 0.0, old_attempted, subset_percentage, attempted
    )
    progress.questions_attempted = old_attempted + attempted
    progress.questions_correct = (progress.questions_correct or 0) + correct
    return progress


@dataclass
class ReconcileReport:
    applied: int = 0
    skipped: int = 0
    failed: int = 0


@dataclass
class ProfileSummary:
    """Dashboard figures for one learner."""

    total_tests_taken: int = 0
    average_score: float = 0.0
    best_recent_score: float = 0.0
    categories_studied: int = 0
    recent_sessions: int = 0


class ProgressAggregator:
    """Applies completed sessions to UserProgress rows and profile aggregates."""

    def __init__(
        self,
        store: ProgressStore,
        repository: Repository,
        question_bank: QuestionBankAccessor,
        clock: Optional[Clock] = None,
    ):
        self.store = store
        self.repository = repository
        self.question_bank = question_bank
        self.clock = clock or SystemClock()

    def apply_completed_session(
        self,
        session: TestSession,
        answer_records: Iterable[TestResult],
        questions: Optional[Mapping[int, Question]] = None,
    ) -> bool:
        """
        Fold a completed session into the learner's aggregates.

        All updates happen in one transaction. The session is claimed inside
        that transaction, so applying the same session twice is a no-op.

        Args:
            session: A completed test session
            answer_records: The session's graded answers
            questions: Session questions keyed by id (loaded if omitted)

        Returns:
            True if applied, False if the session had already been applied

        Raises:
            SessionNotCompleted: If the session is not completed
            PersistenceError: If the store fails; nothing is applied
            Exception: Any other store failure, also with nothing applied
        """
        if not session.is_completed:
            raise SessionNotCompleted(session.id)

        question_ids = set(session.question_ids or [])
        records = [r for r in answer_records if r.question_id in question_ids]
        if questions is None:
            questions = self.question_bank.get_questions(question_ids)

        by_category = self._group_by_category(records, questions)
        studied_at = session.completed_at or self.clock.now()

        with self.store.transaction(f"Aggregate progress for session {session.id}"):
            if not self.store.claim_aggregation(session.id, self.clock.now()):
                logger.info(f"Session {session.id} already aggregated, skipping")
                return False

            for category_id in sorted(by_category):
                category_records = by_category[category_id]
                correct = sum(1 for r in category_records if r.is_correct)
                progress = self.store.load_or_create(session.user_id, category_id)
                fold_category(progress, len(category_records), correct)
                progress.last_studied_at = studied_at
                self.store.save(progress)

            self.store.update_profile_aggregates(
                session.user_id,
                ProfileDelta(
                    tests_taken=1,
                    questions=session.total_questions,
                    percentage=session.percentage,
                ),
            )

        logger.info(
            f"Aggregated session {session.id} for user {session.user_id} "
            f"across {len(by_category)} categories"
        )
        return True

    def reconcile_pending(self, limit: int = 100) -> ReconcileReport:
        """Apply completed sessions whose aggregation never went through."""
        report = ReconcileReport()
        for session in self.repository.list_unaggregated(limit):
            try:
                answers = self.repository.load_answers(session.id)
                if self.apply_completed_session(session, answers):
                    report.applied += 1
                else:
                    report.skipped += 1
            except Exception:
                logger.exception(f"Reconciliation failed for session {session.id}")
                report.failed += 1

        if report.applied or report.failed:
            logger.info(
                f"Reconciliation: {report.applied} applied, {report.skipped} skipped, "
                f"{report.failed} failed"
            )
        return report

    def get_user_progress(self, user_id: int) -> List[UserProgress]:
        """Per-category progress of a learner, by category name."""
        return self.store.list_for_user(user_id)

    def get_profile_stats(self, user_id: int, recent_limit: int = 5) -> ProfileSummary:
        """
        Global aggregates plus the best score among the most recent sessions.

        Only completed sessions count towards ``best_recent_score``.
        """
        user = self.store.get_profile(user_id)
        if user is None:
            return ProfileSummary()

        recent = self.repository.list_for_user(user_id, recent_limit)
        completed = [s.percentage for s in recent if s.is_completed]
        return ProfileSummary(
            total_tests_taken=int(user.total_tests_taken or 0),
            average_score=float(user.average_score or 0.0),
            best_recent_score=max(completed, default=0.0),
            categories_studied=len(self.store.list_for_user(user_id)),
            recent_sessions=len(recent),
        )

    @staticmethod
    def _group_by_category(
        records: List[TestResult], questions: Mapping[int, Question]
    ) -> Dict[int, List[TestResult]]:
        grouped: Dict[int, List[TestResult]] = defaultdict(list)
        for record in records:
            question = questions.get(record.question_id)
            if question is None:
                logger.warning(f"Answered question {record.question_id} no longer exists")
                continue
            grouped[int(question.category_id)].append(record)
        return grouped
