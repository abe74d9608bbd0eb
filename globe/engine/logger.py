"""Named log channels for the globe core, switchable from settings.json."""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

ROOT_LOGGER = "globe"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Loop tracing fires every frame and stays off unless requested.
DEFAULT_CHANNELS = {
    "tessellation": True,
    "vessels": True,
    "camera": True,
    "feeds": True,
    "loop": False,
}


def _parse_level(value: Any) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).upper())
    return level if isinstance(level, int) else logging.INFO


@dataclass
class LoggerConfig:
    level: int = logging.INFO
    channels: Dict[str, bool] = field(default_factory=lambda: dict(DEFAULT_CHANNELS))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LoggerConfig":
        """Read ``logLevel`` and ``logChannels`` over the default channel set."""

        channels = dict(DEFAULT_CHANNELS)
        overrides = data.get("logChannels")
        if isinstance(overrides, dict):
            channels.update({str(name): bool(flag) for name, flag in overrides.items()})
        return cls(level=_parse_level(data.get("logLevel", "INFO")), channels=channels)


class ChannelLogger(logging.LoggerAdapter):
    """Adapter over ``globe.<channel>``; a switched-off channel drops every record."""

    def __init__(self, logger: logging.Logger, enabled: bool) -> None:
        super().__init__(logger, {})
        self.enabled = enabled

    def isEnabledFor(self, level: int) -> bool:
        return self.enabled and self.logger.isEnabledFor(level)


class GlobeLogger:
    """Channel registry; subsystems pull their handle by name."""

    def __init__(self, config: LoggerConfig) -> None:
        logging.basicConfig(level=config.level, format=LOG_FORMAT, stream=sys.stdout)
        logging.getLogger(ROOT_LOGGER).setLevel(config.level)
        self._channels: Dict[str, ChannelLogger] = {}
        for name, enabled in config.channels.items():
            self._register(name, enabled)

    def _register(self, name: str, enabled: bool) -> ChannelLogger:
        channel = ChannelLogger(logging.getLogger(f"{ROOT_LOGGER}.{name}"), enabled)
        self._channels[name] = channel
        return channel

    def channel(self, name: str) -> ChannelLogger:
        # Channels absent from the config exist but stay silent.
        return self._channels.get(name) or self._register(name, False)


def init_logger(settings: Optional[Mapping[str, Any]] = None) -> GlobeLogger:
    """Build the registry from raw settings.json data."""

    return GlobeLogger(LoggerConfig.from_dict(settings or {}))


__all__ = ["ChannelLogger", "DEFAULT_CHANNELS", "GlobeLogger", "LoggerConfig", "init_logger"]
