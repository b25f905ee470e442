"""
Administrator login.

Credentials are checked against the stored salted hash.  On success the
administrator record is returned as-is; no session or token is issued.
This route is not behind the ``ADMIN_API_TOKEN`` guard so the dashboard
can reach it before it has anything to present.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from fameflow_api.app.api.deps import client_ip, get_activity_service, get_admin_service
from fameflow_api.app.schemas.admin import AdminLogin, AdminLoginResult
from fameflow_api.app.services.activity_service import ActivityService
from fameflow_api.app.services.admin_service import AdminService


router = APIRouter()


@router.post("/login", response_model=AdminLoginResult)
def login(
    credentials: AdminLogin,
    request: Request,
    service: AdminService = Depends(get_admin_service),
    activity: ActivityService = Depends(get_activity_service),
) -> AdminLoginResult:
    admin = service.authenticate(credentials.email, credentials.password)
    if admin is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    activity.record(actor_type="Admin", actor_id=admin.id, action="admin.login", ip_address=client_ip(request))
    return AdminLoginResult(admin=admin)
