"""
Sensor and bridge configuration.

Two layers:

- :class:`SensorConfig` is the per-accessory configuration handed over by
  the host (one entry of the ``accessories`` list in ``config.json``). It
  accepts the host's camelCase keys and is immutable once validated.
- :class:`BridgeSettings` is the process configuration for the standalone
  HAP bridge, loaded from ``HTTPSENSOR_*`` environment variables or a
  ``.env`` file via Pydantic BaseSettings.

CHANGELOG:
- 2026-10-17: Initial creation (STORY-004)
- 2026-10-17: Bridge settings and config.json loading (STORY-007)

TODO:
- None
"""

import json
import logging
from pathlib import Path

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)
from pydantic_settings import BaseSettings

from httpsensor.src.poller import DEFAULT_REFRESH_INTERVAL_S


class SensorConfig(BaseModel):
    """Configuration of one HTTP temperature/humidity accessory.

    Attributes:
        name: Accessory display name.
        url: Sensor endpoint polled for readings.
        manufacturer: Reported manufacturer string.
        model: Reported model string.
        serial: Reported serial number.
        disable_humidity: When true, humidity is neither exposed nor
            pushed (host key ``disableHumidity``).
        refresh: Seconds between polls.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    url: str
    manufacturer: str = "HttpTemperatureHumidity"
    model: str = "Default"
    serial: str = "18981898"
    disable_humidity: bool = Field(
        default=False,
        validation_alias=AliasChoices("disable_humidity", "disableHumidity"),
    )
    refresh: int = DEFAULT_REFRESH_INTERVAL_S

    @field_validator("manufacturer", "model", "serial", "refresh", mode="before")
    @classmethod
    def _empty_means_default(cls, v: object, info: ValidationInfo) -> object:
        """Treat ``None`` and empty strings as "not configured"."""
        if v is None or v == "":
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("refresh")
    @classmethod
    def refresh_must_be_positive(cls, v: int) -> int:
        """Validate refresh interval is at least 1 second."""
        if v < 1:
            raise ValueError("refresh must be >= 1")
        return v

    @property
    def refresh_interval_ms(self) -> int:
        """Polling period in milliseconds."""
        return self.refresh * 1000


class BridgeSettings(BaseSettings):
    """Standalone bridge process configuration.

    All values are loaded from ``HTTPSENSOR_``-prefixed environment
    variables and have defaults.

    Attributes:
        config_path: JSON file listing the sensor accessories.
        bridge_name: Display name of the HAP bridge.
        port: TCP port the HAP server listens on.
        persist_file: File where pairing state is kept.
        log_level: Root log level name.
    """

    config_path: str = "config.json"
    bridge_name: str = "HTTP Sensor Bridge"
    port: int = 51826
    persist_file: str = "httpsensor.state"
    log_level: str = "INFO"

    @field_validator("port")
    @classmethod
    def port_must_be_valid(cls, v: int) -> int:
        """Validate port is in the TCP range."""
        if v < 1 or v > 65535:
            raise ValueError("HTTPSENSOR_PORT must be >= 1 and <= 65535")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        """Normalize the level name and reject unknown ones."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown HTTPSENSOR_LOG_LEVEL: '{v}'")
        return level

    model_config = {
        "env_prefix": "HTTPSENSOR_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


def load_sensor_configs(path: str | Path) -> list[SensorConfig]:
    """Read sensor accessory configs from a JSON file.

    The file holds either ``{"accessories": [...]}`` (the host layout) or
    a bare list of accessory objects.

    Args:
        path: Path of the JSON file.

    Returns:
        One validated :class:`SensorConfig` per entry.

    Raises:
        ValueError: If the file shape is wrong or lists no accessories.
        pydantic.ValidationError: If an entry is invalid.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))

    if isinstance(raw, dict):
        raw = raw.get("accessories")
    if not isinstance(raw, list):
        raise ValueError(
            f"{path}: expected a list of accessories or an 'accessories' key"
        )
    if not raw:
        raise ValueError(f"{path}: no accessories configured")

    return [SensorConfig.model_validate(entry) for entry in raw]
