"""
Top-level router for version 1 of the API.

Storefront routes (orders, deposits, catalog) are public.  Back-office
routes live under ``/admin``; all of them except the login pass through
``require_admin``, which enforces ``ADMIN_API_TOKEN`` when it is set.
"""

from fastapi import APIRouter, Depends

from fameflow_api.app.core.security import require_admin

from .endpoints import (
    activity,
    admin_auth,
    api_keys,
    catalog,
    orders,
    settings,
    stats,
    users,
)

router = APIRouter()

router.include_router(orders.router, tags=["orders"])
router.include_router(catalog.router, prefix="/catalog", tags=["catalog"])

admin_router = APIRouter(dependencies=[Depends(require_admin)])
admin_router.include_router(stats.router, prefix="/stats", tags=["admin"])
admin_router.include_router(users.router, prefix="/users", tags=["admin"])
admin_router.include_router(api_keys.router, prefix="/api-keys", tags=["admin"])
admin_router.include_router(settings.router, prefix="/settings", tags=["admin"])
admin_router.include_router(activity.router, prefix="/activity-logs", tags=["admin"])

# The login route stays outside the guarded router.
router.include_router(admin_auth.router, prefix="/admin", tags=["admin"])
router.include_router(admin_router, prefix="/admin")
