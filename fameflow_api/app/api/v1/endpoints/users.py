"""
User management endpoints for the back-office.

Administrators list users, create accounts and suspend or reactivate
them.  Balances are read-only here; they change only through orders and
deposits.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Path, Request, status

from fameflow_api.app.api.deps import client_ip, get_activity_service, get_user_service
from fameflow_api.app.schemas.user import UserCreate, UserRead, UserStatusUpdate
from fameflow_api.app.services.activity_service import ActivityService
from fameflow_api.app.services.user_service import UserService


router = APIRouter()


@router.get("", response_model=List[UserRead])
def list_users(service: UserService = Depends(get_user_service)) -> List[UserRead]:
    """List all users, newest first."""
    return service.list_users()


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    user: UserCreate,
    request: Request,
    service: UserService = Depends(get_user_service),
    activity: ActivityService = Depends(get_activity_service),
) -> UserRead:
    """Create a user account with an empty wallet."""
    created = service.create_user(user)
    activity.record(
        actor_type="Admin",
        action="user.create",
        details={"user_id": created.id, "username": created.username},
        ip_address=client_ip(request),
    )
    return created


@router.post("/{user_id}/status")
def set_user_status(
    body: UserStatusUpdate,
    request: Request,
    user_id: int = Path(..., description="User id"),
    service: UserService = Depends(get_user_service),
    activity: ActivityService = Depends(get_activity_service),
) -> Dict[str, Any]:
    """Set a user's status to ``Active`` or ``Suspended``.

    Suspended users cannot place orders or deposit.
    """
    user = service.set_status(user_id, body.status)
    activity.record(
        actor_type="Admin",
        action="user.status",
        details={"user_id": user_id, "status": body.status.value},
        ip_address=client_ip(request),
    )
    return {"success": True, "user": user}
