"""
Question bank category endpoints.
"""
from typing import Any, List

from fastapi import APIRouter, Depends

from certprep.core.dependencies import get_current_active_user, get_question_bank
from certprep.core.engine import QuestionBankAccessor
from certprep.models.user import User
from certprep.schemas.category import Category

router = APIRouter()


@router.get("", response_model=List[Category])
def list_categories(
    question_bank: QuestionBankAccessor = Depends(get_question_bank),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """List categories alphabetically."""
    return question_bank.list_categories()
