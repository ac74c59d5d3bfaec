from __future__ import annotations

from fastapi import APIRouter, Depends

from ..repositories import Repository, get_repository
from ..schemas import StatsOut

router = APIRouter(
    prefix="/api/stats",
    tags=["stats"],
)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=StatsOut,
    summary="Task Statistics",
    description=(
        "Counts derived from the current collection: total, completed, pending, "
        "highPriority (pending tasks with high priority) and byCategory."
    ),
    responses={500: {"description": "Task storage unavailable"}},
)
def get_stats(repo: Repository = Depends(get_repository)) -> StatsOut:
    return StatsOut(**repo.stats())
