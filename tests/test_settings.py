"""
Tests for runtime settings storage
"""

import pytest

from fameflow_api.app.core.errors import InvalidInput
from fameflow_api.app.services.settings_service import SettingsService


def test_defaults(db):
    settings = SettingsService(db).get_app_settings()

    assert settings.maintenance_mode is False
    assert settings.app_version == "1.0.0"
    assert settings.is_service_enabled("followers")


@pytest.mark.parametrize("key", ["announcement", "app_version"])
@pytest.mark.parametrize("value", ["true", "false"])
def test_text_setting_keeps_boolean_words(db, key, value):
    service = SettingsService(db)

    assert getattr(service.update_setting(key, value), key) == value
    assert getattr(service.get_app_settings(), key) == value
    assert service.list_raw()[key] == value


def test_flags_are_stored_canonically(db):
    service = SettingsService(db)

    service.update_setting("feature_views", "off")

    assert service.list_raw()["feature_views"] == "false"
    assert service.get_app_settings().feature_views is False
    assert service.get_app_settings().is_service_enabled("views") is False


def test_last_writer_wins(db):
    service = SettingsService(db)

    service.update_setting("announcement", "first")
    service.update_setting("announcement", "second")

    assert service.get_app_settings().announcement == "second"


def test_bad_updates_are_rejected(db):
    service = SettingsService(db)

    with pytest.raises(InvalidInput):
        service.update_setting("unknown_key", "1")
    with pytest.raises(InvalidInput):
        service.update_setting("maintenance_mode", "maybe")
    assert service.get_app_settings().maintenance_mode is False


def test_invalid_stored_flag_falls_back_to_default(db):
    with db.cursor() as cursor:
        cursor.execute("UPDATE app_settings SET value = 'sometimes' WHERE key = 'feature_likes'")
        cursor.execute("UPDATE app_settings SET value = 'Hello' WHERE key = 'announcement'")

    settings = SettingsService(db).get_app_settings()

    assert settings.feature_likes is True
    assert settings.announcement == "Hello"
