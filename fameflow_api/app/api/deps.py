"""
FastAPI dependencies building services around the application's ``Database``.

Each request gets fresh service objects bound to the ``Database`` that
``create_app`` placed on ``app.state``; services hold no other state.
"""

from typing import Optional

from fastapi import Depends, Request

from ..core.db import Database, get_db
from ..services.activity_service import ActivityService
from ..services.admin_service import AdminService
from ..services.api_key_service import ApiKeyService
from ..services.order_service import OrderService
from ..services.settings_service import SettingsService
from ..services.statistics_service import StatisticsService
from ..services.user_service import UserService


def client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def get_order_service(request: Request, db: Database = Depends(get_db)) -> OrderService:
    return OrderService(db, id_attempts=request.app.state.settings.order_id_attempts)


def get_user_service(db: Database = Depends(get_db)) -> UserService:
    return UserService(db)


def get_settings_service(db: Database = Depends(get_db)) -> SettingsService:
    return SettingsService(db)


def get_api_key_service(db: Database = Depends(get_db)) -> ApiKeyService:
    return ApiKeyService(db)


def get_statistics_service(db: Database = Depends(get_db)) -> StatisticsService:
    return StatisticsService(db)


def get_admin_service(db: Database = Depends(get_db)) -> AdminService:
    return AdminService(db)


def get_activity_service(db: Database = Depends(get_db)) -> ActivityService:
    return ActivityService(db)
