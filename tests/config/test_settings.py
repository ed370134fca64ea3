"""Tests for settings models and the settings loader."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from tornsentinel.config import get_config, load_settings, reload_config
from tornsentinel.config.models import CacheSettings, Settings, TornAPISettings
from tornsentinel.shared.errors import ApplicationError, ErrorCode


class TestTornAPISettings:
    def test_defaults(self) -> None:
        settings = TornAPISettings()

        assert settings.api_key == ""
        assert settings.v1_base_url == "https://api.torn.com"
        assert settings.v2_base_url == "https://api.torn.com/v2"
        assert settings.max_concurrent_requests == 10

    def test_repr_masks_api_key(self) -> None:
        settings = TornAPISettings(api_key="super_secret_key")  # pragma: allowlist secret

        assert "super_secret_key" not in repr(settings)
        assert "****" in repr(settings)

    def test_concurrency_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            TornAPISettings(max_concurrent_requests=0)


class TestCacheSettings:
    def test_override_keys_are_normalized(self) -> None:
        settings = CacheSettings(ttl_overrides={"bank_rates": 600})

        assert settings.ttl_overrides == {"BANK_RATES": 600.0}

    def test_unknown_resource_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Unknown resource"):
            CacheSettings(ttl_overrides={"LOTTERY": 10})

    @pytest.mark.parametrize("ttl", [0, -5])
    def test_non_positive_ttl_rejected(self, ttl: float) -> None:
        with pytest.raises(ValidationError, match="must be positive"):
            CacheSettings(ttl_overrides={"USER_SNAPSHOT": ttl})


class TestSettingsEnvironment:
    def test_nested_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TORNSENTINEL_API__API_KEY", "env_key")
        monkeypatch.setenv("TORNSENTINEL_LOGGING__LEVEL", "DEBUG")

        settings = Settings()

        assert settings.api.api_key == "env_key"
        assert settings.logging.level == "DEBUG"

    def test_empty_env_is_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TORNSENTINEL_LOGGING__LEVEL", "")

        assert Settings().logging.level == "INFO"


class TestLoadSettings:
    def test_from_toml(self, tmp_path: Path) -> None:
        config = tmp_path / "config.toml"
        config.write_text(
            '[api]\napi_key = "toml_key"\nmax_concurrent_requests = 4\n'
            '[cache.ttl_overrides]\nUSER_SNAPSHOT = 20\n'
            '[logging]\nlevel = "WARNING"\n',
            encoding="utf-8",
        )

        settings = load_settings(config)

        assert settings.api.api_key == "toml_key"
        assert settings.api.max_concurrent_requests == 4
        assert settings.cache.ttl_overrides == {"USER_SNAPSHOT": 20.0}
        assert settings.logging.level == "WARNING"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "absent.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        config = tmp_path / "config.toml"
        config.write_text("[api\napi_key = ", encoding="utf-8")

        with pytest.raises(ApplicationError) as exc_info:
            load_settings(config)

        assert exc_info.value.code == ErrorCode.CONFIGURATION_ERROR

    def test_invalid_values(self, tmp_path: Path) -> None:
        config = tmp_path / "config.toml"
        config.write_text("[cache.ttl_overrides]\nBANK_RATES = -1\n", encoding="utf-8")

        with pytest.raises(ApplicationError) as exc_info:
            load_settings(config)

        assert exc_info.value.code == ErrorCode.CONFIGURATION_ERROR
        assert "1 error(s)" in exc_info.value.message

    def test_dotenv_does_not_override_environment(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("TORNSENTINEL_API__API_KEY=dotenv_key\n", encoding="utf-8")
        monkeypatch.setenv("TORNSENTINEL_API__API_KEY", "process_key")

        assert load_settings().api.api_key == "process_key"

    def test_singleton(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)

        first = get_config()

        assert get_config() is first
        assert reload_config() is not first
