"""
Tests for the system settings singleton.
"""
import json

import pytest
from pydantic import ValidationError

from crm_admin.models.db_models import SettingsDB
from crm_admin.schemas import SystemSettingsPayload
from crm_admin.services.admin_service import SETTINGS_ID


class TestSystemSettings:

    def test_first_read_creates_default_row(self, admin_service, db):
        settings = admin_service.get_system_settings()

        assert settings.id == SETTINGS_ID
        assert settings.general_settings == "{}"
        assert settings.email_settings == "{}"
        assert settings.security_settings == "{}"
        assert db.query(SettingsDB).count() == 1

    def test_second_read_returns_same_row(self, admin_service, db):
        first = admin_service.get_system_settings()
        second = admin_service.get_system_settings()

        assert first.id == second.id == SETTINGS_ID
        assert db.query(SettingsDB).count() == 1

    def test_update_forces_singleton_id(self, admin_service, db):
        admin_service.get_system_settings()
        payload = SystemSettingsPayload(
            id=7,
            general_settings=json.dumps({"company": "Acme"}),
            email_settings=json.dumps({"smtp_host": "mail.acme.test"}),
            security_settings=json.dumps({"mfa": True}),
        )

        settings = admin_service.update_system_settings(payload)

        assert settings.id == SETTINGS_ID
        db.expire_all()
        assert db.query(SettingsDB).count() == 1
        assert db.get(SettingsDB, 7) is None
        stored = db.get(SettingsDB, SETTINGS_ID)
        assert json.loads(stored.general_settings) == {"company": "Acme"}
        assert json.loads(stored.security_settings) == {"mfa": True}

    def test_update_before_first_read_creates_singleton(self, admin_service, db):
        admin_service.update_system_settings(SystemSettingsPayload(general_settings='{"theme": "dark"}'))

        settings = admin_service.get_system_settings()

        assert settings.general_settings == '{"theme": "dark"}'
        assert settings.email_settings == "{}"
        assert db.query(SettingsDB).count() == 1

    def test_invalid_json_rejected(self):
        with pytest.raises(ValidationError):
            SystemSettingsPayload(general_settings="{not json")
