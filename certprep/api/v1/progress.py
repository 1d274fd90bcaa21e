"""
API endpoints for learning progress and statistics.
"""
from typing import Any, List

from fastapi import APIRouter, Depends

from certprep.core.config import settings
from certprep.core.dependencies import (
    get_aggregator,
    get_current_active_user,
    get_current_admin,
)
from certprep.core.engine import ProgressAggregator
from certprep.models.user import User
from certprep.schemas.progress import CategoryProgress, ProfileStats, ReconcileResponse

router = APIRouter()


@router.get("", response_model=List[CategoryProgress])
def get_progress(
    aggregator: ProgressAggregator = Depends(get_aggregator),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """Per-category progress of the current user."""
    return aggregator.get_user_progress(current_user.id)  # type: ignore


@router.get("/overview", response_model=ProfileStats)
def get_overview(
    aggregator: ProgressAggregator = Depends(get_aggregator),
    current_user: User = Depends(get_current_active_user),
) -> Any:
    """
    Dashboard statistics: tests taken, average score, best recent score.
    """
    summary = aggregator.get_profile_stats(
        current_user.id, settings.RECENT_SESSIONS_LIMIT  # type: ignore
    )
    return ProfileStats.model_validate(summary)


@router.post("/reconcile", response_model=ReconcileResponse)
def reconcile_progress(
    aggregator: ProgressAggregator = Depends(get_aggregator),
    current_user: User = Depends(get_current_admin),
) -> Any:
    """Apply completed tests whose progress update failed earlier."""
    report = aggregator.reconcile_pending(settings.RECONCILE_BATCH_SIZE)
    return ReconcileResponse(applied=report.applied, skipped=report.skipped, failed=report.failed)
