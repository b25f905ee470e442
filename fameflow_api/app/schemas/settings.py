"""
Typed runtime settings.

The ``app_settings`` table is a flat key/value store, but only the keys
declared on ``AppSettings`` are recognised.  Reading folds the rows
into this model (coercing ``'true'``/``'false'`` into booleans);
writing a key that is not a field is rejected.
"""

from typing import Any

from pydantic import BaseModel, Field


class AppSettings(BaseModel):
    maintenance_mode: bool = False
    app_version: str = "1.0.0"
    announcement: str = ""
    feature_followers: bool = True
    feature_views: bool = True
    feature_likes: bool = True

    model_config = {
        "extra": "ignore",
    }

    def is_service_enabled(self, service: str) -> bool:
        """Return the feature flag for ``service`` (``followers``, ``views``, ``likes``)."""
        return bool(getattr(self, f"feature_{service}", False))


class SettingUpdate(BaseModel):
    key: str = Field(..., example="maintenance_mode")
    value: Any = Field(..., example=True)
