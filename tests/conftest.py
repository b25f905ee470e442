"""
Pytest configuration and fixtures for FameFlow API tests
"""

from decimal import Decimal
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from fameflow_api.app.core.config import Settings
from fameflow_api.app.core.db import Database
from fameflow_api.app.main import create_app
from fameflow_api.app.schemas.user import UserCreate
from fameflow_api.app.services.user_service import UserService
from fameflow_api.app.services.wallet_service import WalletService

ADMIN_EMAIL = "admin@fameflow.com"
ADMIN_PASSWORD = "admin123"


def create_user(db: Database, username: str = "janedoe", balance: int | str = 0) -> int:
    """Create a user in ``db`` and optionally fund the wallet."""
    user = UserService(db).create_user(UserCreate(username=username, email=f"{username}@example.com"))
    if Decimal(balance) > 0:
        WalletService(db).credit(user.id, Decimal(balance))
    return user.id


@pytest.fixture
def db(tmp_path) -> Database:
    """
    Migrated database in a temporary file
    """
    database = Database(str(tmp_path / "fameflow-test.db"), timeout=10)
    database.init()
    return database


@pytest.fixture
def make_user(db) -> Callable[..., int]:
    def _make(username: str = "janedoe", balance: int | str = 0) -> int:
        return create_user(db, username, balance)

    return _make


@pytest.fixture
def config(tmp_path) -> Settings:
    return Settings(
        database_url=str(tmp_path / "fameflow-api.db"),
        db_timeout=10,
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        admin_api_token="",
        api_prefix="/api",
    )


@pytest.fixture
def client(config):
    """
    Test client running the application lifespan (migrations, default admin)
    """
    app = create_app(config)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def api_user(client) -> Callable[..., int]:
    """Create users directly in the database behind ``client``."""

    def _make(username: str = "janedoe", balance: int | str = 0) -> int:
        return create_user(client.app.state.db, username, balance)

    return _make
