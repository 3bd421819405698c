from pathlib import Path

import pytest
from pydantic import ValidationError

from debug_runtime.config.constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_HISTORY_SIZE,
    LOG_LEVEL_ENV,
    MAX_HISTORY_SIZE_ENV,
)
from debug_runtime.config.settings import EngineSettings


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove engine variables; anything set during the test is undone afterwards"""
    for name in (MAX_HISTORY_SIZE_ENV, LOG_LEVEL_ENV):
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    return monkeypatch


class TestEngineSettings:
    """Test engine configuration"""

    def test_defaults(self) -> None:
        settings = EngineSettings()

        assert settings.max_history_size == DEFAULT_MAX_HISTORY_SIZE
        assert settings.log_level == DEFAULT_LOG_LEVEL

    def test_log_level_normalized(self) -> None:
        assert EngineSettings(log_level="debug").log_level == "DEBUG"

    def test_invalid_values(self) -> None:
        with pytest.raises(ValidationError):
            EngineSettings(max_history_size=0)

        with pytest.raises(ValidationError):
            EngineSettings(log_level="verbose")

    def test_from_env_defaults(self, clean_env: pytest.MonkeyPatch) -> None:
        settings = EngineSettings.from_env()

        assert settings.max_history_size == DEFAULT_MAX_HISTORY_SIZE
        assert settings.log_level == DEFAULT_LOG_LEVEL

    def test_from_env_overrides(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv(MAX_HISTORY_SIZE_ENV, "25")
        clean_env.setenv(LOG_LEVEL_ENV, "warning")

        settings = EngineSettings.from_env()

        assert settings.max_history_size == 25
        assert settings.log_level == "WARNING"

    def test_from_env_invalid_size(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv(MAX_HISTORY_SIZE_ENV, "-3")

        with pytest.raises(ValidationError):
            EngineSettings.from_env()

    def test_from_env_file(self, clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text(f"{MAX_HISTORY_SIZE_ENV}=12\n{LOG_LEVEL_ENV}=ERROR\n")

        settings = EngineSettings.from_env(str(env_file))

        assert settings.max_history_size == 12
        assert settings.log_level == "ERROR"

    def test_process_env_wins_over_file(
        self, clean_env: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text(f"{MAX_HISTORY_SIZE_ENV}=12\n")
        clean_env.setenv(MAX_HISTORY_SIZE_ENV, "30")

        settings = EngineSettings.from_env(str(env_file))

        assert settings.max_history_size == 30

    def test_missing_env_file_ignored(
        self, clean_env: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        settings = EngineSettings.from_env(str(tmp_path / "missing.env"))

        assert settings.max_history_size == DEFAULT_MAX_HISTORY_SIZE
