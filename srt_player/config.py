"""
SRT Player Configuration - Centralized configuration management.

Provides:
- Type-safe configuration dataclasses
- Loading/saving from JSON/environment
"""

import json
import math
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class PlaybackConfig:
    """Timeline playback configuration."""

    fps: float = 60.0  # Frame rate of the resolution loop
    start_at: float = 0.0  # Initial position in seconds
    encoding: str = "utf-8-sig"  # Subtitle file encoding

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "PlaybackConfig":
        """Create from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class BroadcastConfig:
    """WebSocket broadcast configuration."""

    enabled: bool = False
    host: str = "0.0.0.0"
    port: int = 8766

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "BroadcastConfig":
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class PlayerConfig:
    """Complete application configuration."""

    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    broadcast: BroadcastConfig = field(default_factory=BroadcastConfig)

    # Display settings
    show_display: bool = True
    color: bool = True
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "PlayerConfig":
        """Load configuration from environment variables."""
        return cls().apply_env()

    def apply_env(self) -> "PlayerConfig":
        """Override settings from SRT_PLAYER_* environment variables.

        Raises:
            ValueError: If a variable is malformed or out of range
        """
        fps = os.environ.get("SRT_PLAYER_FPS")
        if fps:
            try:
                self.playback.fps = float(fps)
            except ValueError:
                raise ValueError(f"SRT_PLAYER_FPS must be a number, got: {fps!r}")

        broadcast_port = os.environ.get("SRT_PLAYER_BROADCAST_PORT")
        if broadcast_port:
            try:
                self.broadcast.port = int(broadcast_port)
            except ValueError:
                raise ValueError(
                    f"SRT_PLAYER_BROADCAST_PORT must be an integer, got: {broadcast_port!r}"
                )
            self.broadcast.enabled = True

        log_level = os.environ.get("SRT_PLAYER_LOG_LEVEL")
        if log_level:
            self.log_level = log_level.upper()

        self.validate()
        return self

    def validate(self) -> None:
        """Raise ValueError if a setting cannot drive playback."""
        fps = self.playback.fps
        if not isinstance(fps, (int, float)) or not math.isfinite(fps) or fps <= 0:
            raise ValueError(f"fps must be a positive number, got: {fps!r}")

        start_at = self.playback.start_at
        if not isinstance(start_at, (int, float)) or start_at < 0:
            raise ValueError(f"start_at must not be negative, got: {start_at!r}")

        port = self.broadcast.port
        if not isinstance(port, int) or not 1 <= port <= 65535:
            raise ValueError(f"port must be between 1 and 65535, got: {port!r}")

    def save(self, path: Path) -> None:
        """Save configuration to JSON file."""
        data = {
            "playback": self.playback.to_dict(),
            "broadcast": self.broadcast.to_dict(),
            "display": {
                "show_display": self.show_display,
                "color": self.color,
            },
            "log_level": self.log_level,
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(data, f, indent=2)

    @classmethod
    def load(cls, path: Path) -> "PlayerConfig":
        """Load configuration from JSON file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = json.load(f)

        config = cls()

        if "playback" in data:
            config.playback = PlaybackConfig.from_dict(data["playback"])

        if "broadcast" in data:
            config.broadcast = BroadcastConfig.from_dict(data["broadcast"])

        if "display" in data:
            config.show_display = data["display"].get("show_display", True)
            config.color = data["display"].get("color", True)

        config.log_level = data.get("log_level", "WARNING").upper()

        return config


# Default config file location
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "srt-player" / "config.json"


def load_config(path: Optional[Path] = None) -> PlayerConfig:
    """Load configuration from file or return defaults."""
    if path is None:
        path = DEFAULT_CONFIG_PATH
    return PlayerConfig.load(path)


def save_config(config: PlayerConfig, path: Optional[Path] = None) -> None:
    """Save configuration to file."""
    if path is None:
        path = DEFAULT_CONFIG_PATH
    config.save(path)
