"""
Tests for teamhub/config.py
"""

import pytest
from pydantic import ValidationError

from teamhub.config import TeamHubSettings, get_settings

from conftest import TEST_SECRET


def make_settings(tmp_path, **overrides):
    values = {"data_dir": tmp_path / "data", "invitation_jwt_secret_key": TEST_SECRET}
    values.update(overrides)
    return TeamHubSettings(**values)


class TestInvitationSecret:

    def test_production_requires_secret(self, tmp_path):
        with pytest.raises(ValidationError, match="must be set in production"):
            make_settings(tmp_path, environment="production", invitation_jwt_secret_key="")

    def test_production_rejects_short_secret(self, tmp_path):
        with pytest.raises(ValidationError, match="too short"):
            make_settings(tmp_path, environment="production", invitation_jwt_secret_key="s3cr3t-but-short")

    def test_production_accepts_long_secret(self, tmp_path):
        settings = make_settings(tmp_path, environment="production")
        assert settings.invitation_jwt_secret_key == TEST_SECRET

    @pytest.mark.parametrize("secret", ["", "changeme", "SECRET"])
    def test_insecure_secret_is_replaced_outside_production(self, tmp_path, secret):
        with pytest.warns(UserWarning, match="auto-generated secret"):
            settings = make_settings(tmp_path, environment="testing", invitation_jwt_secret_key=secret)
        assert settings.invitation_jwt_secret_key.lower() != secret.lower()
        assert len(settings.invitation_jwt_secret_key) >= 32


class TestSettingsValues:

    def test_defaults(self, tmp_path):
        settings = make_settings(tmp_path)
        assert settings.invitation_default_duration == "7d"
        assert settings.invitation_jwt_algorithm == "HS256"
        assert settings.team_name_min_length == 4
        assert settings.game_name_min_length == 2

    def test_log_level_is_uppercased(self, tmp_path):
        assert make_settings(tmp_path, log_level="debug").log_level == "DEBUG"

    def test_data_dir_is_created(self, tmp_path):
        settings = make_settings(tmp_path, data_dir=tmp_path / "nested" / "store")
        assert settings.data_dir.is_dir()
        assert settings.database_path == tmp_path / "nested" / "store" / "teamhub.db"

    def test_non_hmac_algorithm_rejected(self, tmp_path):
        with pytest.raises(ValidationError):
            make_settings(tmp_path, invitation_jwt_algorithm="RS256")

    def test_to_dict_masks_secret(self, tmp_path):
        data = make_settings(tmp_path).to_dict()
        assert data["invitation_jwt_secret_key"] == "***"
        assert data["database_name"] == "teamhub.db"

    def test_environment_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TEAMHUB_INVITATION_DEFAULT_DURATION", "12h")
        monkeypatch.setenv("TEAMHUB_TEAM_NAME_MIN_LENGTH", "6")
        settings = make_settings(tmp_path)
        assert settings.invitation_default_duration == "12h"
        assert settings.team_name_min_length == 6

    def test_get_settings_is_cached(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TEAMHUB_DATA_DIR", str(tmp_path / "cached"))
        monkeypatch.setenv("TEAMHUB_INVITATION_JWT_SECRET_KEY", TEST_SECRET)
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
            assert get_settings().data_dir == tmp_path / "cached"
        finally:
            get_settings.cache_clear()
