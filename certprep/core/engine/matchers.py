"""
Answer matchers for performance-based questions.
"""
import logging
import re
from typing import Iterable, List, Set, Tuple

from certprep.models import Question

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"[^\w\s]")
_SPACES = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Lowercase, drop punctuation and collapse whitespace."""
    text = _NON_WORD.sub(" ", text.lower())
    return _SPACES.sub(" ", text).strip()


def _tokens(text: str) -> Set[str]:
    return set(normalize(text).split())


class NormalizedTextMatcher:
    """
    Compares free text against the question's accepted answers.

    Accepted answers are the texts of the options flagged correct. A match
    after normalization earns full credit. With ``keyword_credit`` enabled a
    non-matching answer earns the share of the best accepted answer's words
    it contains, but is still reported incorrect.
    """

    def __init__(self, keyword_credit: bool = False):
        self.keyword_credit = keyword_credit

    def accepted_answers(self, question: Question) -> List[str]:
        return [o.option_text for o in question.options if o.is_correct]

    def evaluate(self, question: Question, submitted_text: str) -> Tuple[bool, float]:
        accepted = self.accepted_answers(question)
        if not accepted:
            logger.warning(f"Performance-based question {question.id} has no accepted answers")
            return False, 0.0

        submitted = normalize(submitted_text)
        if any(submitted == normalize(answer) for answer in accepted):
            return True, 1.0

        if not self.keyword_credit:
            return False, 0.0
        return False, self._best_overlap(_tokens(submitted_text), accepted)

    @staticmethod
    def _best_overlap(submitted: Set[str], accepted: Iterable[str]) -> float:
        best = 0.0
        for answer in accepted:
            expected = _tokens(answer)
            if expected:
                best = max(best, len(submitted & expected) / len(expected))
        return best
