"""
Tests for the grading engine and the default answer matcher.
"""
import pytest

from certprep.core.engine import AnswerSubmission, NormalizedTextMatcher, grade
from certprep.core.engine.matchers import normalize
from certprep.core.exceptions import InvalidQuestionData
from certprep.models import Question, QuestionOption, QuestionType


def single_choice(points=10.0, correct_flags=(True, False, False)):
    return Question(
        id=1,
        question_type=QuestionType.SINGLE_CHOICE.value,
        question_text="Which port does SSH use?",
        points=points,
        options=[
            QuestionOption(id=100 + i, option_text=f"opt {i}", is_correct=flag)
            for i, flag in enumerate(correct_flags)
        ],
    )


def performance_based(points=4.0, accepted=("show ip route",)):
    return Question(
        id=2,
        question_type=QuestionType.PERFORMANCE_BASED.value,
        question_text="Display the routing table",
        points=points,
        options=[
            QuestionOption(id=200 + i, option_text=text, is_correct=True)
            for i, text in enumerate(accepted)
        ],
    )


class StubMatcher:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def evaluate(self, question, submitted_text):
        self.calls.append(submitted_text)
        return self.result


class TestSingleChoice:

    def test_correct_option_earns_full_points(self):
        result = grade(single_choice(), AnswerSubmission(option_id=100))
        assert result.is_correct is True
        assert result.points_earned == 10.0

    def test_wrong_option_earns_nothing(self):
        result = grade(single_choice(), AnswerSubmission(option_id=101))
        assert result.is_correct is False
        assert result.points_earned == 0.0

    def test_missing_option_is_incorrect(self):
        result = grade(single_choice(), AnswerSubmission())
        assert result.is_correct is False
        assert result.points_earned == 0.0

    def test_option_from_another_question_is_incorrect(self):
        result = grade(single_choice(), AnswerSubmission(option_id=999))
        assert result.is_correct is False

    @pytest.mark.parametrize("flags", [(True, True, False), (False, False, False)])
    def test_key_without_exactly_one_correct_option_is_rejected(self, flags):
        with pytest.raises(InvalidQuestionData):
            grade(single_choice(correct_flags=flags), AnswerSubmission(option_id=100))


class TestPerformanceBased:

    def test_partial_credit_scales_points(self):
        matcher = StubMatcher((False, 0.5))
        result = grade(performance_based(), AnswerSubmission(text="show route"), matcher)
        assert result.is_correct is False
        assert result.points_earned == pytest.approx(2.0)
        assert matcher.calls == ["show route"]

    def test_credit_is_clamped_to_unit_interval(self):
        high = grade(performance_based(), AnswerSubmission(text="x"), StubMatcher((True, 3.0)))
        low = grade(performance_based(), AnswerSubmission(text="x"), StubMatcher((False, -1.0)))
        assert high.points_earned == pytest.approx(4.0)
        assert low.points_earned == 0.0

    @pytest.mark.parametrize("verdict, expected", [(True, 4.0), (False, 0.0)])
    def test_missing_credit_falls_back_to_verdict(self, verdict, expected):
        result = grade(performance_based(), AnswerSubmission(text="ipconfig"), StubMatcher((verdict, None)))
        assert result.is_correct is verdict
        assert result.points_earned == pytest.approx(expected)

    def test_blank_answer_skips_matcher(self):
        matcher = StubMatcher((True, 1.0))
        result = grade(performance_based(), AnswerSubmission(text=""), matcher)
        assert result.is_correct is False
        assert matcher.calls == []

    def test_default_matcher_is_used_when_none_given(self):
        result = grade(performance_based(), AnswerSubmission(text="  Show IP   Route "))
        assert result.is_correct is True
        assert result.points_earned == pytest.approx(4.0)

    def test_unsupported_type_is_rejected(self):
        question = performance_based()
        question.question_type = "essay"
        with pytest.raises(InvalidQuestionData):
            grade(question, AnswerSubmission(text="anything"))


class TestNormalizedTextMatcher:

    def test_normalize_ignores_case_punctuation_and_spacing(self):
        assert normalize("  LS,  -la! ") == "ls la"

    def test_any_accepted_answer_matches(self):
        question = performance_based(accepted=("ls -la", "ls -al"))
        assert NormalizedTextMatcher().evaluate(question, "LS -AL") == (True, 1.0)

    def test_no_keyword_credit_by_default(self):
        question = performance_based(accepted=("show ip route",))
        assert NormalizedTextMatcher().evaluate(question, "show route") == (False, 0.0)

    def test_keyword_credit_counts_matching_words(self):
        question = performance_based(accepted=("show ip route", "display routing table"))
        correct, credit = NormalizedTextMatcher(keyword_credit=True).evaluate(question, "show route")
        assert correct is False
        assert credit == pytest.approx(2 / 3)

    def test_question_without_accepted_answers_never_matches(self):
        question = performance_based(accepted=())
        assert NormalizedTextMatcher(keyword_credit=True).evaluate(question, "anything") == (False, 0.0)
