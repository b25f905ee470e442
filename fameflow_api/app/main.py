"""
Main entrypoint for the FameFlow API.

``create_app`` assembles the FastAPI application: logging, the
``Database`` component, error handlers and the versioned routers.  The
database is created with the application and initialised in the
lifespan startup (migrations, default administrator), so its lifetime
follows the process.  The module-level ``app`` makes the service easy
to run with uvicorn::

    uvicorn fameflow_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import Settings, settings
from .core.db import Database
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging
from .services.admin_service import AdminService


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    config : Optional[Settings]
        Settings to use instead of the process-wide ``settings``; tests
        pass one pointing at a temporary database.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    config = config or settings
    setup_logging(config.log_level, config.log_file or None)
    db = Database(config.database_url, timeout=config.db_timeout)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db.init()
        AdminService(db).ensure_default_admin(config.admin_email, config.admin_password)
        logging.getLogger(__name__).info("%s %s started with database %s", config.project_name, config.api_version, db.path)
        yield
        logging.getLogger(__name__).info("%s stopped", config.project_name)

    app = FastAPI(title=config.project_name, version=config.api_version, debug=config.debug, lifespan=lifespan)
    app.state.settings = config
    app.state.db = db

    register_exception_handlers(app)
    app.include_router(v1_router, prefix=config.api_prefix)

    @app.get("/health", tags=["health"])
    def health() -> dict:
        return {"status": "ok"}

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
