"""
Activity log endpoint for the back-office.

Logs capture orders, deposits, logins and administrative changes and
support filtering by actor type and action.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from fameflow_api.app.api.deps import get_activity_service
from fameflow_api.app.schemas.admin import ActivityLogRead
from fameflow_api.app.services.activity_service import ActivityService

router = APIRouter()


@router.get("", response_model=List[ActivityLogRead])
def list_activity_logs(
    actor_type: Optional[str] = Query(None, description="Admin, User or Guest"),
    action: Optional[str] = Query(None, description="e.g. order.create, setting.update"),
    limit: int = Query(100, ge=1, le=500, description="Maximum number of logs to return"),
    offset: int = Query(0, ge=0, description="Number of logs to skip"),
    service: ActivityService = Depends(get_activity_service),
) -> List[ActivityLogRead]:
    """Return activity records, newest first."""
    return service.list_logs(actor_type=actor_type, action=action, limit=limit, offset=offset)
