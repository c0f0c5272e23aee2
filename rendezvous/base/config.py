# ============================================================================
# rendezvous/base/config.py
# Playground Configuration Management
# ============================================================================
#
# PURPOSE:
# Every duration in the scenarios (doorbell timeout, alarm boot time, apple
# fade window) is expressed in narrative "time units". This file decides how
# long one unit really is and collects the remaining knobs in one place.
#
# KEY CONCEPTS:
# 1. Frozen dataclasses: immutable settings containers
# 2. Environment Variables: RENDEZVOUS_TIME_UNIT=0.01 makes every scenario fast
# 3. Singleton access: get_config() / set_config()
#
# ============================================================================

from __future__ import annotations

import math
import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from rendezvous.errors import invalid_config

logger = logging.getLogger(__name__)


# ============================================================================
# Doorbell Configuration
# ============================================================================

@dataclass(frozen=True)
class DoorbellConfig:
    # How long the caller waits at the door before giving up (in time units)
    timeout_units: float = 5.0

    # How long an occupant takes to come to the door (in time units)
    # 0 = answers immediately
    response_delay_units: float = 0.0


# ============================================================================
# Alarm Configuration
# ============================================================================

@dataclass(frozen=True)
class AlarmConfig:
    # Booting the alarm takes quite a long time
    boot_delay_units: float = 1.0


# ============================================================================
# Orchard Configuration
# ============================================================================

@dataclass(frozen=True)
class OrchardConfig:
    # Seconds (real, not units) until a picked apple has faded to black
    fade_seconds: float = 20.0

    # How many times each watcher looks at its apple before discarding it
    ticks: int = 3

    # Pause between two looks (in time units)
    interval_units: float = 1.0


# ============================================================================
# Logging Configuration
# ============================================================================

@dataclass(frozen=True)
class LogConfig:
    # DEBUG shows every enter/leave; INFO shows scenario narration
    level: str = "INFO"

    # %(threadName)s matters here: most interesting lines come from workers
    format: str = "%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s"

    # Optional log file; None = console only (no persistence by default)
    file_path: Optional[Path] = None

    # Rotation limits, only used when file_path is set
    max_file_size_mb: int = 10
    backup_count: int = 5


# ============================================================================
# Master Configuration Container
# ============================================================================

@dataclass(frozen=True)
class PlaygroundConfig:
    # Real seconds per narrative time unit
    time_unit: float = 1.0

    doorbell: DoorbellConfig = field(default_factory=DoorbellConfig)
    alarm: AlarmConfig = field(default_factory=AlarmConfig)
    orchard: OrchardConfig = field(default_factory=OrchardConfig)
    log: LogConfig = field(default_factory=LogConfig)

    def __post_init__(self):
        durations = {
            "time_unit": self.time_unit,
            "doorbell.timeout_units": self.doorbell.timeout_units,
            "doorbell.response_delay_units": self.doorbell.response_delay_units,
            "alarm.boot_delay_units": self.alarm.boot_delay_units,
            "orchard.fade_seconds": self.orchard.fade_seconds,
            "orchard.interval_units": self.orchard.interval_units,
        }
        for key, value in durations.items():
            if not math.isfinite(value):
                raise invalid_config(key, value, "must be a finite number")
            if value < 0:
                raise invalid_config(key, value, "must not be negative")
        if self.orchard.fade_seconds <= 0:
            raise invalid_config("orchard.fade_seconds", self.orchard.fade_seconds, "must be positive")
        if self.orchard.ticks < 0:
            raise invalid_config("orchard.ticks", self.orchard.ticks, "must not be negative")
        if self.log.level.upper() not in logging.getLevelNamesMapping():
            raise invalid_config("log.level", self.log.level, "unknown logging level")

    def seconds(self, units: float) -> float:
        """Convert narrative time units to real seconds."""
        return units * self.time_unit

    @property
    def doorbell_timeout(self) -> float:
        return self.seconds(self.doorbell.timeout_units)

    @property
    def response_delay(self) -> float:
        return self.seconds(self.doorbell.response_delay_units)

    @property
    def alarm_boot_delay(self) -> float:
        return self.seconds(self.alarm.boot_delay_units)

    @property
    def orchard_interval(self) -> float:
        return self.seconds(self.orchard.interval_units)

    @classmethod
    def from_env(cls) -> "PlaygroundConfig":
        """
        Build a config from RENDEZVOUS_* environment variables.

        Raises:
            ConfigError: If a numeric variable cannot be parsed or is out of range
        """
        doorbell = DoorbellConfig(
            timeout_units=_env_float("RENDEZVOUS_DOORBELL_TIMEOUT", 5.0),
            response_delay_units=_env_float("RENDEZVOUS_RESPONSE_DELAY", 0.0),
        )
        alarm = AlarmConfig(
            boot_delay_units=_env_float("RENDEZVOUS_ALARM_BOOT_DELAY", 1.0),
        )
        orchard = OrchardConfig(
            fade_seconds=_env_float("RENDEZVOUS_FADE_SECONDS", 20.0),
            ticks=_env_int("RENDEZVOUS_ORCHARD_TICKS", 3),
            interval_units=_env_float("RENDEZVOUS_ORCHARD_INTERVAL", 1.0),
        )

        log_file = os.getenv("RENDEZVOUS_LOG_FILE")
        log = LogConfig(
            level=os.getenv("RENDEZVOUS_LOG_LEVEL", "INFO"),
            file_path=Path(log_file) if log_file else None,
        )

        return cls(
            time_unit=_env_float("RENDEZVOUS_TIME_UNIT", 1.0),
            doorbell=doorbell,
            alarm=alarm,
            orchard=orchard,
            log=log,
        )


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise invalid_config(name, raw, "expected a number") from None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise invalid_config(name, raw, "expected an integer") from None


# ============================================================================
# Global Configuration Singleton
# ============================================================================

_config: Optional[PlaygroundConfig] = None


def get_config() -> PlaygroundConfig:
    """
    Get the global configuration instance.

    Loaded from the environment on first call, then reused.
    """
    global _config
    if _config is None:
        _config = PlaygroundConfig.from_env()
    return _config


def set_config(config: Optional[PlaygroundConfig]) -> None:
    """Replace the global configuration (mainly used for testing). None forces a reload."""
    global _config
    _config = config


def setup_logging(config: Optional[PlaygroundConfig] = None) -> None:
    """
    Configure Python's logging system based on our settings.

    Console always; a rotating file as well when log.file_path is set.
    Call this once at application startup.
    """
    cfg = config or get_config()

    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if cfg.log.file_path is not None:
        from logging.handlers import RotatingFileHandler
        cfg.log.file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            cfg.log.file_path,
            maxBytes=cfg.log.max_file_size_mb * 1024 * 1024,
            backupCount=cfg.log.backup_count,
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, cfg.log.level.upper()),
        format=cfg.log.format,
        handlers=handlers,
        force=True,
    )
    logger.debug(f"[Config] Logging configured at {cfg.log.level.upper()} (time_unit={cfg.time_unit}s)")
