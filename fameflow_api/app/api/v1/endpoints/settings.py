"""
Settings endpoints for the back-office.

``GET`` returns the runtime settings as one flat object, which is what
the dashboard and the storefront read.  ``POST`` changes a single
recognised key; unknown keys and values of the wrong type are rejected
with ``INVALID_INPUT``.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from fameflow_api.app.api.deps import client_ip, get_activity_service, get_settings_service
from fameflow_api.app.schemas.settings import AppSettings, SettingUpdate
from fameflow_api.app.services.activity_service import ActivityService
from fameflow_api.app.services.settings_service import SettingsService


router = APIRouter()


@router.get("", response_model=AppSettings)
def get_settings(service: SettingsService = Depends(get_settings_service)) -> AppSettings:
    return service.get_app_settings()


@router.post("")
def update_setting(
    body: SettingUpdate,
    request: Request,
    service: SettingsService = Depends(get_settings_service),
    activity: ActivityService = Depends(get_activity_service),
) -> Dict[str, Any]:
    """Update one setting.

    The body is ``{"key": ..., "value": ...}``.  The response carries
    the full settings object after the change.
    """
    updated = service.update_setting(body.key, body.value)
    activity.record(
        actor_type="Admin",
        action="setting.update",
        details={"key": body.key, "value": getattr(updated, body.key)},
        ip_address=client_ip(request),
    )
    return {"success": True, "settings": updated}
