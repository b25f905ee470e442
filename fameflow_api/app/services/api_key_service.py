"""
Service layer for third-party API key records.

Keys are stored for the delivery integrations the back-office manages.
They are plain records: nothing in the order flow reads them.
"""

import logging
from typing import List

from ..core.db import Database
from ..schemas.api_key import ApiKeyCreate, ApiKeyRead

logger = logging.getLogger(__name__)

KEY_COLUMNS = "id, name, key_value, provider, status, usage_limit, current_usage, created_at"


class ApiKeyService:
    def __init__(self, db: Database):
        self.db = db

    def list_keys(self) -> List[ApiKeyRead]:
        with self.db.cursor() as cursor:
            rows = cursor.execute(f"SELECT {KEY_COLUMNS} FROM api_keys ORDER BY id").fetchall()
        return [ApiKeyRead(**dict(row)) for row in rows]

    def create_key(self, data: ApiKeyCreate) -> ApiKeyRead:
        with self.db.cursor() as cursor:
            cursor.execute(
                "INSERT INTO api_keys (name, key_value, provider, usage_limit) VALUES (?, ?, ?, ?)",
                (data.name, data.key_value, data.provider, data.usage_limit),
            )
            key_id = cursor.lastrowid
            row = cursor.execute(f"SELECT {KEY_COLUMNS} FROM api_keys WHERE id = ?", (key_id,)).fetchone()
        # The secret itself is never logged
        logger.info("API key %s created for provider %s", data.name, data.provider)
        return ApiKeyRead(**dict(row))
