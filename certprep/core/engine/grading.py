"""
Grading engine: evaluates one submitted answer against a question's key.

Grading is pure. It never reads or writes session state; the state machine
decides whether a question may be graded at all.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from certprep.core.exceptions import InvalidQuestionData
from certprep.core.engine.interfaces import AnswerMatcher
from certprep.core.engine.matchers import NormalizedTextMatcher
from certprep.models import Question, QuestionType

logger = logging.getLogger(__name__)

_default_matcher = NormalizedTextMatcher()


@dataclass(frozen=True)
class AnswerSubmission:
    """What the learner sent: an option id, free text, or nothing."""

    option_id: Optional[int] = None
    text: Optional[str] = None


@dataclass(frozen=True)
class GradeResult:
    is_correct: bool
    points_earned: float


def grade(
    question: Question,
    submission: AnswerSubmission,
    matcher: Optional[AnswerMatcher] = None,
) -> GradeResult:
    """
    Grade a submission for a question.

    Args:
        question: Question with its options loaded
        submission: Learner's answer
        matcher: Rule for performance-based questions (defaults to
            NormalizedTextMatcher)

    Returns:
        GradeResult with correctness and points earned

    Raises:
        InvalidQuestionData: If the question's answer key is malformed
    """
    points = float(question.points or 0)

    if question.question_type == QuestionType.SINGLE_CHOICE.value:
        correct = question.correct_options
        if len(correct) != 1:
            raise InvalidQuestionData(
                f"Single choice question {question.id} has {len(correct)} correct options",
                extra={"question_id": question.id},
            )
        is_correct = submission.option_id is not None and submission.option_id == correct[0].id
        return GradeResult(is_correct=is_correct, points_earned=points if is_correct else 0.0)

    if question.question_type == QuestionType.PERFORMANCE_BASED.value:
        if not submission.text:
            return GradeResult(is_correct=False, points_earned=0.0)
        is_correct, fraction = (matcher or _default_matcher).evaluate(question, submission.text)
        if fraction is None:
            fraction = 1.0 if is_correct else 0.0
        fraction = min(max(float(fraction), 0.0), 1.0)
        return GradeResult(is_correct=bool(is_correct), points_earned=points * fraction)

    raise InvalidQuestionData(
        f"Unsupported question type '{question.question_type}'",
        extra={"question_id": question.id},
    )
