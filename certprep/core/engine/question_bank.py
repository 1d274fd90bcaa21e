"""
Question bank accessor.
Read-only access to categories and questions, plus exam question selection.
"""
import logging
import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from sqlalchemy.orm import Session, selectinload

from certprep.core.exceptions import EmptyPool, InvalidConfig
from certprep.models import Category, Difficulty, Question

logger = logging.getLogger(__name__)


@dataclass
class QuestionSelection:
    """Questions drawn for one exam, in their frozen order."""

    questions: List[Question] = field(default_factory=list)
    requested: int = 0

    @property
    def count(self) -> int:
        return len(self.questions)

    @property
    def is_partial(self) -> bool:
        return self.count < self.requested

    @property
    def question_ids(self) -> List[int]:
        return [int(q.id) for q in self.questions]


class QuestionBankAccessor:
    """
    Reads categories and questions and draws exam question sets.
    Selection is pseudo-random but reproducible for a given seed.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_categories(self) -> List[Category]:
        """All categories, alphabetical by name."""
        return self.db.query(Category).order_by(Category.name).all()

    def existing_category_ids(self, category_ids: Iterable[int]) -> set:
        ids = set(category_ids)
        rows = self.db.query(Category.id).filter(Category.id.in_(ids)).all()
        return {row[0] for row in rows}

    def get_questions(self, question_ids: Iterable[int]) -> Dict[int, Question]:
        """Questions keyed by id, options eagerly loaded."""
        ids = list(question_ids)
        if not ids:
            return {}
        questions = (
            self.db.query(Question)
            .options(selectinload(Question.options))
            .filter(Question.id.in_(ids))
            .all()
        )
        return {int(q.id): q for q in questions}

    def active_pool(self, category_ids: Iterable[int]) -> List[Question]:
        return (
            self.db.query(Question)
            .filter(
                Question.category_id.in_(list(category_ids)),
                Question.is_active.is_(True),
            )
            .order_by(Question.id)
            .all()
        )

    def select_questions(
        self,
        category_ids: Iterable[int],
        count: int,
        difficulty_mix: Optional[Mapping[str, float]] = None,
        seed: Optional[str] = None,
    ) -> QuestionSelection:
        """
        Draw up to ``count`` active questions from the given categories.

        Args:
            category_ids: Categories to draw from
            count: Number of questions requested
            difficulty_mix: Optional weights per difficulty, e.g.
                {"easy": 1, "medium": 2, "hard": 1}
            seed: Seed that fixes the draw order (the session id)

        Returns:
            QuestionSelection, flagged partial when the pool is short

        Raises:
            EmptyPool: If no active question matches the categories
            InvalidConfig: If difficulty_mix is malformed
        """
        category_ids = set(category_ids)
        pool = self.active_pool(category_ids)
        if not pool:
            raise EmptyPool(category_ids)

        rng = random.Random(seed)
        if difficulty_mix:
            chosen = self._select_with_mix(pool, count, difficulty_mix, rng)
        else:
            chosen = rng.sample(pool, min(count, len(pool)))

        selection = QuestionSelection(questions=chosen, requested=count)
        if selection.is_partial:
            logger.warning(
                f"Partial selection: requested {count}, only {selection.count} "
                f"active questions in categories {sorted(category_ids)}"
            )
        return selection

    def _select_with_mix(
        self,
        pool: List[Question],
        count: int,
        difficulty_mix: Mapping[str, float],
        rng: random.Random,
    ) -> List[Question]:
        valid = {d.value for d in Difficulty}
        unknown = set(difficulty_mix) - valid
        if unknown:
            raise InvalidConfig(
                f"Unknown difficulty levels: {sorted(unknown)}",
                extra={"valid": sorted(valid)},
            )
        if any(w < 0 for w in difficulty_mix.values()) or sum(difficulty_mix.values()) <= 0:
            raise InvalidConfig("Difficulty weights must be non-negative and not all zero")

        target = min(count, len(pool))
        quotas = _allot(target, difficulty_mix)

        chosen: List[Question] = []
        for difficulty, quota in sorted(quotas.items()):
            bucket = [q for q in pool if q.difficulty == difficulty]
            chosen.extend(rng.sample(bucket, min(quota, len(bucket))))

        # Back-fill from whatever is left when a difficulty runs dry
        if len(chosen) < target:
            taken = {q.id for q in chosen}
            rest = [q for q in pool if q.id not in taken]
            chosen.extend(rng.sample(rest, target - len(chosen)))

        rng.shuffle(chosen)
        return chosen


def _allot(total: int, weights: Mapping[str, float]) -> Dict[str, int]:
    """Split ``total`` across weights by largest remainder."""
    weight_sum = float(sum(weights.values()))
    exact = {k: total * w / weight_sum for k, w in weights.items()}
    quotas = {k: int(v) for k, v in exact.items()}
    leftover = total - sum(quotas.values())
    for k in sorted(exact, key=lambda k: (quotas[k] - exact[k], k))[:leftover]:
        quotas[k] += 1
    return quotas
