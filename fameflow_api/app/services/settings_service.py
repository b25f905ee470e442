"""
Service layer for runtime application settings.

Settings are stored as strings in the ``app_settings`` table and read
back as a typed ``AppSettings`` object.  Only keys declared on
``AppSettings`` can be written.  Values are coerced to the field's type
with pydantic's rules and stored in canonical form (``"on"`` for a flag
is stored as ``"true"``); a value that cannot be coerced, such as
``"maybe"`` for a flag, is rejected.  Updates are last-writer-wins.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from ..core.db import Database
from ..core.errors import InvalidInput
from ..schemas.settings import AppSettings

logger = logging.getLogger(__name__)


class SettingsService:
    """Service for reading and changing runtime settings."""

    def __init__(self, db: Database):
        self.db = db

    def list_raw(self) -> Dict[str, str]:
        """Return every stored row as a plain ``key -> value`` mapping."""
        with self.db.cursor() as cursor:
            rows = cursor.execute("SELECT key, value FROM app_settings").fetchall()
        return {row["key"]: row["value"] for row in rows}

    def get_app_settings(self) -> AppSettings:
        """Fold the stored rows into ``AppSettings``.

        Unrecognised keys in the table are ignored; missing keys take the
        model defaults.
        """
        raw = self.list_raw()
        values = {key: self._deserialize(key, value) for key, value in raw.items() if key in AppSettings.model_fields}
        try:
            return AppSettings.model_validate(values)
        except ValidationError:
            logger.warning("Stored settings are invalid, falling back to field defaults")
            return self._salvage(values)

    def update_setting(self, key: str, value: Any) -> AppSettings:
        """Validate and store a single setting, returning the new settings."""
        if key not in AppSettings.model_fields:
            raise InvalidInput(f"Unknown setting: {key}")
        current = self.get_app_settings().model_dump()
        current[key] = value
        try:
            updated = AppSettings.model_validate(current)
        except ValidationError as e:
            raise InvalidInput(f"Invalid value for {key}: {e.errors()[0].get('msg')}")
        serialized = self._serialize(getattr(updated, key))
        with self.db.cursor() as cursor:
            cursor.execute(
                "INSERT INTO app_settings (key, value) VALUES (?, ?)"
                " ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, serialized),
            )
        logger.info("Setting %s updated to %s", key, serialized)
        return updated

    @staticmethod
    def _salvage(values: Dict[str, Any]) -> AppSettings:
        """Build settings key by key, keeping defaults for values that do not parse."""
        valid: Dict[str, Any] = {}
        for key, value in values.items():
            try:
                AppSettings.model_validate({key: value})
            except ValidationError:
                continue
            valid[key] = value
        return AppSettings.model_validate(valid)

    @staticmethod
    def _serialize(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    @staticmethod
    def _deserialize(key: str, value: str | None) -> Any:
        # Only flags are stored as 'true'/'false'; text fields keep the raw string
        if value is None:
            return ""
        if AppSettings.model_fields[key].annotation is bool and value in {"true", "false"}:
            return value == "true"
        return value
