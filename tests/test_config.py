"""
Unit tests for core.config
"""

import pytest
from pydantic import ValidationError

import core.config
from core.config import AppSettings, write_user_env_vars


class TestAppSettings:
    def test_defaults(self):
        settings = AppSettings()
        assert settings.http_timeout_seconds == 20.0
        assert settings.dns_timeout_seconds == 5.0
        assert settings.dns_nameservers == []
        assert settings.user_agent.startswith("paymail-inspector/")

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PAYMAIL_INSPECTOR_HTTP_TIMEOUT_SECONDS", "3.5")
        monkeypatch.setenv("PAYMAIL_INSPECTOR_SENDER_HANDLE", "bob@sender.org")
        monkeypatch.setenv("PAYMAIL_INSPECTOR_DNS_NAMESERVERS", '["1.1.1.1", "8.8.8.8"]')

        settings = AppSettings()

        assert settings.http_timeout_seconds == 3.5
        assert settings.sender_handle == "bob@sender.org"
        assert settings.dns_nameservers == ["1.1.1.1", "8.8.8.8"]

    def test_env_file(self, monkeypatch, tmp_path):
        monkeypatch.delenv("PAYMAIL_INSPECTOR_SENDER_NAME")
        (tmp_path / "custom.env").write_text("PAYMAIL_INSPECTOR_SENDER_NAME=Bob\n", encoding="utf-8")

        settings = AppSettings(_env_file=tmp_path / "custom.env")

        assert settings.sender_name == "Bob"

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            AppSettings(http_timeout_seconds=0)


class TestWriteUserEnvVars:
    def test_creates_and_merges(self, monkeypatch, tmp_path):
        env_path = tmp_path / "config" / "paymail-inspector" / ".env"
        monkeypatch.setattr(core.config, "get_user_env_file", lambda: env_path)

        write_user_env_vars({"PAYMAIL_INSPECTOR_SENDER_HANDLE": "bob@sender.org"})
        write_user_env_vars(
            {
                "PAYMAIL_INSPECTOR_SENDER_NAME": "Bob",
                "PAYMAIL_INSPECTOR_HTTP_TIMEOUT_SECONDS": None,
            }
        )

        lines = env_path.read_text(encoding="utf-8").splitlines()
        assert lines[0].startswith("#")
        assert lines[1:] == [
            "PAYMAIL_INSPECTOR_SENDER_HANDLE=bob@sender.org",
            "PAYMAIL_INSPECTOR_SENDER_NAME=Bob",
        ]
