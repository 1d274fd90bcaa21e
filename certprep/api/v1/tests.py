"""
Practice test endpoints - configuring, taking and finishing timed tests.
"""
from typing import Any, List

from fastapi import APIRouter, Depends, status

from certprep.core.config import settings
from certprep.core.dependencies import (
    get_current_active_user,
    get_question_bank,
    get_session_builder,
    get_state_machine,
)
from certprep.core.engine import (
    AnswerSubmission,
    QuestionBankAccessor,
    SessionBuilder,
    SessionStateMachine,
)
from certprep.core.exceptions import SessionNotFound
from certprep.models import TestSession
from certprep.models.user import User
from certprep.schemas.test_session import (
    AnswerResult,
    AnswerReview,
    AnswerSubmit,
    CompletionResponse,
    QuestionPublic,
    TestSessionCreate,
    TestSessionDetail,
    TestSessionResponse,
    TestSessionResults,
)

router = APIRouter()


def _owned_session(machine: SessionStateMachine, session_id: str, user: User) -> TestSession:
    """Load a session of the current user; other users' sessions look missing."""
    session = machine.get_session(session_id)
    if session.user_id != user.id:
        raise SessionNotFound(session_id)
    return session


def _detail(session: TestSession, question_bank: QuestionBankAccessor) -> TestSessionDetail:
    questions = question_bank.get_questions(session.question_ids)
    ordered = [questions[qid] for qid in session.question_ids if qid in questions]
    data = TestSessionResponse.model_validate(session).model_dump()
    data["questions"] = [QuestionPublic.model_validate(q) for q in ordered]
    return TestSessionDetail(**data)


@router.post("", response_model=TestSessionDetail, status_code=status.HTTP_201_CREATED)
def create_test(
    config: TestSessionCreate,
    builder: SessionBuilder = Depends(get_session_builder),
    question_bank: QuestionBankAccessor = Depends(get_question_bank),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """
    Start a new practice test.

    The questions are drawn once and keep their order for the whole test.
    ``is_partial`` is true when the selected categories had fewer active
    questions than requested.
    """
    session = builder.build(
        user_id=current_user.id,  # type: ignore
        category_ids=config.category_ids,
        question_count=config.question_count,
        time_limit_minutes=config.time_limit_minutes,
        session_name=config.session_name,
        difficulty_mix=config.difficulty_mix,
    )
    return _detail(session, question_bank)


@router.get("", response_model=List[TestSessionResponse])
def list_tests(
    limit: int = settings.RECENT_SESSIONS_LIMIT,
    machine: SessionStateMachine = Depends(get_state_machine),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """Most recent tests of the current user."""
    return machine.list_sessions(current_user.id, limit)  # type: ignore


@router.get("/{session_id}", response_model=TestSessionDetail)
def get_test(
    session_id: str,
    machine: SessionStateMachine = Depends(get_state_machine),
    question_bank: QuestionBankAccessor = Depends(get_question_bank),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """Get a test with its questions in exam order (without answer keys)."""
    session = _owned_session(machine, session_id, current_user)
    return _detail(session, question_bank)


@router.post("/{session_id}/answers", response_model=AnswerResult)
def submit_answer(
    session_id: str,
    answer: AnswerSubmit,
    machine: SessionStateMachine = Depends(get_state_machine),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """
    Submit or change the answer to one question.

    Submitting again for the same question replaces the earlier answer.
    Once the time limit has passed the test is finished automatically and
    the submission is rejected with 410.
    """
    _owned_session(machine, session_id, current_user)
    return machine.submit_answer(
        session_id,
        answer.question_id,
        AnswerSubmission(option_id=answer.selected_option_id, text=answer.user_answer),
        answer.time_spent_seconds,
    )


@router.post("/{session_id}/complete", response_model=CompletionResponse)
def complete_test(
    session_id: str,
    machine: SessionStateMachine = Depends(get_state_machine),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """
    Finish a test and update progress. Safe to retry.
    """
    _owned_session(machine, session_id, current_user)
    result = machine.complete_session(session_id)
    warnings = [result.warning.error_code] if result.warning else []
    return CompletionResponse(
        status=result.status.value,
        session=TestSessionResponse.model_validate(result.session),
        warnings=warnings,
    )


@router.get("/{session_id}/results", response_model=TestSessionResults)
def get_results(
    session_id: str,
    machine: SessionStateMachine = Depends(get_state_machine),
    question_bank: QuestionBankAccessor = Depends(get_question_bank),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """Graded answers of a completed test, with answer keys and explanations."""
    session = _owned_session(machine, session_id, current_user)
    answers = machine.get_results(session_id)
    questions = question_bank.get_questions(session.question_ids)

    reviews = []
    for answer in answers:
        question = questions.get(answer.question_id)
        if question is None:
            continue
        correct = question.correct_options
        data = AnswerResult.model_validate(answer).model_dump()
        reviews.append(AnswerReview(
            **data,
            question_text=question.question_text,
            correct_option_id=correct[0].id if len(correct) == 1 else None,
            explanation=question.explanation,
        ))

    answered = {a.question_id for a in answers}
    return TestSessionResults(
        session=TestSessionResponse.model_validate(session),
        answers=reviews,
        unanswered_question_ids=[qid for qid in session.question_ids if qid not in answered],
    )
