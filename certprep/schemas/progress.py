"""
Pydantic schemas for learner progress.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_serializer

from certprep.schemas.category import Category


class CategoryProgress(BaseModel):
    """Progress in one category."""
    model_config = ConfigDict(from_attributes=True)

    category_id: int
    category: Category
    questions_attempted: int
    questions_correct: int
    average_score: float
    last_studied_at: Optional[datetime] = None

    @field_serializer("average_score")
    def round_score(self, v: float) -> float:
        return round(v, 2)


class ProfileStats(BaseModel):
    """Overall statistics shown on the dashboard."""
    model_config = ConfigDict(from_attributes=True)

    total_tests_taken: int
    average_score: float
    best_recent_score: float
    categories_studied: int
    recent_sessions: int

    @field_serializer("average_score", "best_recent_score")
    def round_scores(self, v: float) -> float:
        return round(v, 2)


class ReconcileResponse(BaseModel):
    applied: int
    skipped: int
    failed: int
