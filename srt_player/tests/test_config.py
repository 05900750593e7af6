"""Tests for configuration and logging setup."""

import json
import logging

import pytest

from srt_player.config import BroadcastConfig, PlaybackConfig, PlayerConfig, load_config, save_config
from srt_player.logging_config import JSONFormatter, configure_logging


class TestPlayerConfig:
    def test_defaults(self):
        config = PlayerConfig()
        assert config.playback.fps == 60.0
        assert config.playback.start_at == 0.0
        assert config.broadcast.enabled is False
        assert config.broadcast.port == 8766
        assert config.show_display is True

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SRT_PLAYER_FPS", "30")
        monkeypatch.setenv("SRT_PLAYER_BROADCAST_PORT", "9100")
        monkeypatch.setenv("SRT_PLAYER_LOG_LEVEL", "debug")
        config = PlayerConfig.from_env()
        assert config.playback.fps == 30.0
        assert config.broadcast.enabled is True
        assert config.broadcast.port == 9100
        assert config.log_level == "DEBUG"

    def test_from_env_without_broadcast(self, monkeypatch):
        monkeypatch.delenv("SRT_PLAYER_BROADCAST_PORT", raising=False)
        assert PlayerConfig.from_env().broadcast.enabled is False

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / "config.json"
        config = PlayerConfig(
            playback=PlaybackConfig(fps=24.0, start_at=12.5),
            broadcast=BroadcastConfig(enabled=True, port=9001),
            color=False,
            log_level="INFO",
        )
        save_config(config, path)
        loaded = load_config(path)
        assert loaded.playback.fps == 24.0
        assert loaded.playback.start_at == 12.5
        assert loaded.broadcast.enabled is True
        assert loaded.broadcast.port == 9001
        assert loaded.color is False
        assert loaded.log_level == "INFO"

    def test_load_missing_returns_defaults(self, tmp_path):
        config = PlayerConfig.load(tmp_path / "absent.json")
        assert config.playback.fps == 60.0

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"playback": {"fps": 10, "bogus": 1}}))
        assert PlayerConfig.load(path).playback.fps == 10

    @pytest.mark.parametrize("value", ["0", "-1", "abc", "nan"])
    def test_from_env_rejects_bad_fps(self, monkeypatch, value):
        monkeypatch.setenv("SRT_PLAYER_FPS", value)
        with pytest.raises(ValueError, match="(?i)fps"):
            PlayerConfig.from_env()

    @pytest.mark.parametrize("value", ["0", "70000", "http"])
    def test_from_env_rejects_bad_port(self, monkeypatch, value):
        monkeypatch.setenv("SRT_PLAYER_BROADCAST_PORT", value)
        with pytest.raises(ValueError, match="(?i)port"):
            PlayerConfig.from_env()

    def test_apply_env_overrides_file_settings(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"playback": {"fps": 24, "start_at": 3.0}, "log_level": "info"}))
        monkeypatch.setenv("SRT_PLAYER_FPS", "50")
        monkeypatch.delenv("SRT_PLAYER_LOG_LEVEL", raising=False)
        config = load_config(path).apply_env()
        assert config.playback.fps == 50.0
        assert config.playback.start_at == 3.0
        assert config.log_level == "INFO"

    def test_validate_rejects_file_values(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"playback": {"fps": 0}}))
        with pytest.raises(ValueError, match="fps"):
            load_config(path).validate()

    def test_load_config_uses_default_path(self, tmp_path, monkeypatch):
        path = tmp_path / "default.json"
        monkeypatch.setattr("srt_player.config.DEFAULT_CONFIG_PATH", path)
        save_config(PlayerConfig(color=False))
        assert path.exists()
        assert load_config().color is False


class TestLogging:
    def test_json_formatter(self):
        record = logging.LogRecord("timeline", logging.INFO, __file__, 1, "Seeked to %s", ("5.000s",), None)
        data = json.loads(JSONFormatter().format(record))
        assert data["level"] == "INFO"
        assert data["logger"] == "timeline"
        assert data["message"] == "Seeked to 5.000s"

    def test_configure_logging_level(self, monkeypatch):
        monkeypatch.setenv("SRT_PLAYER_ENV", "development")
        configure_logging("debug")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1

    def test_configure_logging_production_uses_json(self, monkeypatch):
        monkeypatch.setenv("SRT_PLAYER_ENV", "production")
        configure_logging("INFO")
        assert isinstance(logging.getLogger().handlers[0].formatter, JSONFormatter)

    def test_unknown_level_falls_back(self):
        configure_logging("LOUD")
        assert logging.getLogger().level == logging.WARNING
