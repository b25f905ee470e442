"""
Dashboard statistics endpoint.
"""

from fastapi import APIRouter, Depends

from fameflow_api.app.api.deps import get_statistics_service
from fameflow_api.app.schemas.admin import StatsRead
from fameflow_api.app.services.statistics_service import StatisticsService


router = APIRouter()


@router.get("", response_model=StatsRead)
def get_stats(service: StatisticsService = Depends(get_statistics_service)) -> StatsRead:
    """Return user, revenue, order and subscription totals plus a seven day trend.

    A storage error is reported as ``STORAGE_FAILURE``; the dashboard
    keeps its error state and the server carries on.
    """
    return service.overview()
