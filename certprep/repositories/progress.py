"""
Progress store backed by SQLAlchemy.

Methods only flush; commits happen at the end of ``transaction()`` so one
session's aggregation lands all at once or not at all.
"""
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from certprep.core.exceptions import PersistenceError
from certprep.core.engine.interfaces import ProfileDelta
from certprep.core.engine.progress_aggregator import rolling_mean
from certprep.models import Category, TestSession, User, UserProgress

logger = logging.getLogger(__name__)


class SqlProgressStore:
    """Stores UserProgress rows and the profile aggregates."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self, description: str):
        """Commit everything done inside the block, or roll all of it back."""
        try:
            yield self.db
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Transaction failed ({description}): {e}")
            raise PersistenceError(description, str(e)) from e
        except Exception:
            self.db.rollback()
            raise

    def load_or_create(self, user_id: int, category_id: int) -> UserProgress:
        progress = (
            self.db.query(UserProgress)
            .filter(UserProgress.user_id == user_id, UserProgress.category_id == category_id)
            .with_for_update()
            .first()
        )
        if progress is None:
            progress = UserProgress(
                user_id=user_id,
                category_id=category_id,
                questions_attempted=0,
                questions_correct=0,
                average_score=0.0,
            )
            self.db.add(progress)
            self.db.flush()
        return progress

    def save(self, progress: UserProgress) -> None:
        self.db.add(progress)
        self.db.flush()

    def update_profile_aggregates(self, user_id: int, delta: ProfileDelta) -> None:
        user = self.db.query(User).filter(User.id == user_id).with_for_update().first()
        if user is None:
            raise PersistenceError("update profile aggregates", f"user {user_id} not found")

        old_questions = user.total_questions_taken or 0
        user.average_score = rolling_mean(
            user.average_score or 0.0, old_questions, delta.percentage, delta.questions
        )
        user.total_questions_taken = old_questions + delta.questions
        user.total_tests_taken = (user.total_tests_taken or 0) + delta.tests_taken
        self.db.flush()

    def claim_aggregation(self, session_id: str, at: datetime) -> bool:
        """Stamp the session as aggregated; False if it already was."""
        result = self.db.execute(
            update(TestSession)
            .where(
                TestSession.id == session_id,
                TestSession.is_completed.is_(True),
                TestSession.aggregated_at.is_(None),
            )
            .values(aggregated_at=at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def list_for_user(self, user_id: int) -> List[UserProgress]:
        """Progress rows of a learner, by category name."""
        return (
            self.db.query(UserProgress)
            .join(Category, Category.id == UserProgress.category_id)
            .options(joinedload(UserProgress.category))
            .filter(UserProgress.user_id == user_id)
            .order_by(Category.name)
            .all()
        )

    def get_profile(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()
