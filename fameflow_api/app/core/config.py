"""
Simple configuration management.

The ``Settings`` dataclass reads process configuration directly from
environment variables so that the service has no dependency on
``pydantic_settings``.  Defaults are provided for all fields.  Runtime
options that administrators change through the back-office (maintenance
mode, announcement, feature flags) are not configured here; they live in
the ``app_settings`` table and are handled by ``SettingsService``.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Process settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "FameFlow API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Routes are mounted under this prefix, e.g. ``/api/order``.
    api_prefix: str = os.getenv("API_PREFIX", "/api")

    # Path to the SQLite database.  A relative path is resolved against
    # the project root by ``Database``.
    database_url: str = os.getenv("DATABASE_URL", "fameflow.db")

    # Seconds a connection waits for the write lock before giving up with
    # "database is locked".  Balance-changing requests queue on this lock.
    db_timeout: float = float(os.getenv("DB_TIMEOUT", "30"))

    # Credentials of the administrator created on first start.  The
    # password is stored hashed; change it afterwards with
    # ``reset_admin_password.py``.
    admin_email: str = os.getenv("ADMIN_EMAIL", "admin@fameflow.com")
    admin_password: str = os.getenv("ADMIN_PASSWORD", "admin123")

    # Optional static token guarding the /admin routes.  When empty the
    # back-office endpoints are open, as in local development.
    admin_api_token: str = os.getenv("ADMIN_API_TOKEN", "")

    # How many fresh identifiers an order gets before a primary key
    # collision is reported as a storage failure.
    order_id_attempts: int = int(os.getenv("ORDER_ID_ATTEMPTS", "3"))

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before this module is imported.
settings = Settings()
