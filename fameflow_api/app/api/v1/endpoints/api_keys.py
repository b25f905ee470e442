"""
API key endpoints for the back-office.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request

from fameflow_api.app.api.deps import client_ip, get_activity_service, get_api_key_service
from fameflow_api.app.schemas.api_key import ApiKeyCreate, ApiKeyRead
from fameflow_api.app.services.activity_service import ActivityService
from fameflow_api.app.services.api_key_service import ApiKeyService


router = APIRouter()


@router.get("", response_model=List[ApiKeyRead])
def list_api_keys(service: ApiKeyService = Depends(get_api_key_service)) -> List[ApiKeyRead]:
    return service.list_keys()


@router.post("")
def create_api_key(
    body: ApiKeyCreate,
    request: Request,
    service: ApiKeyService = Depends(get_api_key_service),
    activity: ActivityService = Depends(get_activity_service),
) -> Dict[str, Any]:
    """Store a new provider key.  ``usage_limit`` of -1 means unlimited."""
    key = service.create_key(body)
    activity.record(
        actor_type="Admin",
        action="api_key.create",
        details={"id": key.id, "name": key.name, "provider": key.provider},
        ip_address=client_ip(request),
    )
    return {"success": True, "key": key}
