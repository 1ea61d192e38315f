"""Tests for settings and engine config loading."""

import os
from decimal import Decimal

import pytest

from signal_engine.config import Settings, get_settings, load_engine_config
from signal_engine.models import EngineConfig


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SIGNAL_ENGINE_CONFIG_PATH", raising=False)
        settings = Settings(_env_file=None)

        assert settings.config_path is None
        assert settings.log_level == "INFO"
        assert settings.scan_concurrency == 5

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SIGNAL_ENGINE_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("SIGNAL_ENGINE_SCAN_CONCURRENCY", "12")
        monkeypatch.setenv("SIGNAL_ENGINE_CONFIG_PATH", str(tmp_path / "engine.yaml"))

        settings = get_settings()

        assert settings.log_level == "DEBUG"
        assert settings.scan_concurrency == 12
        assert settings.config_path == tmp_path / "engine.yaml"

    def test_env_file(self, monkeypatch, tmp_path):
        monkeypatch.delenv("SIGNAL_ENGINE_LOG_LEVEL", raising=False)
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("SIGNAL_ENGINE_LOG_LEVEL=WARNING\n")

        assert get_settings().log_level == "WARNING"

    def test_cached(self):
        assert get_settings() is get_settings()


class TestLoadEngineConfig:
    def test_missing_file_returns_defaults(self, tmp_path):
        config = load_engine_config(tmp_path / "nonexistent.yaml")
        assert config == EngineConfig()

    def test_empty_file_returns_defaults(self, tmp_path):
        yaml_path = tmp_path / "engine.yaml"
        yaml_path.write_text("")

        assert load_engine_config(yaml_path) == EngineConfig()

    def test_overrides(self, tmp_path):
        yaml_path = tmp_path / "engine.yaml"
        yaml_path.write_text(
            "atr_period: 7\n"
            "base_risk_reward: '2.5'\n"
            "level_proximity: '0.01'\n"
        )

        config = load_engine_config(yaml_path)

        assert config.atr_period == 7
        assert config.base_risk_reward == Decimal("2.5")
        assert config.level_proximity == Decimal("0.01")
        assert config.vwma_fast_period == 20

    def test_path_as_string(self, tmp_path):
        yaml_path = tmp_path / "engine.yaml"
        yaml_path.write_text("max_top_coins: 3\n")

        assert load_engine_config(str(yaml_path)).max_top_coins == 3

    def test_path_from_settings(self, monkeypatch, tmp_path):
        yaml_path = tmp_path / "engine.yaml"
        yaml_path.write_text("mfi_period: 10\n")
        monkeypatch.setenv("SIGNAL_ENGINE_CONFIG_PATH", str(yaml_path))

        assert load_engine_config().mfi_period == 10

    def test_sibling_env_file_not_exported(self, monkeypatch, tmp_path):
        monkeypatch.delenv("SIGNAL_ENGINE_SCAN_CONCURRENCY", raising=False)
        yaml_path = tmp_path / "engine.yaml"
        yaml_path.write_text("atr_period: 7\n")
        (tmp_path / ".env").write_text("SIGNAL_ENGINE_SCAN_CONCURRENCY=9\n")

        load_engine_config(yaml_path)

        assert "SIGNAL_ENGINE_SCAN_CONCURRENCY" not in os.environ

    def test_unknown_field_rejected(self, tmp_path):
        yaml_path = tmp_path / "engine.yaml"
        yaml_path.write_text("rsi_period: 14\n")

        with pytest.raises(ValueError, match="invalid engine config"):
            load_engine_config(yaml_path)

    def test_non_mapping_rejected(self, tmp_path):
        yaml_path = tmp_path / "engine.yaml"
        yaml_path.write_text("- atr_period\n- 7\n")

        with pytest.raises(ValueError, match="expected a mapping"):
            load_engine_config(yaml_path)

    def test_invalid_yaml_rejected(self, tmp_path):
        yaml_path = tmp_path / "engine.yaml"
        yaml_path.write_text("atr_period: [7\n")

        with pytest.raises(ValueError, match="invalid YAML"):
            load_engine_config(yaml_path)
