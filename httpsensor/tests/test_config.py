"""
Unit tests for sensor and bridge configuration (STORY-004, STORY-007).

Tests verify:
- SensorConfig applies the documented defaults.
- Host camelCase keys and snake_case names are both accepted.
- Empty optional values fall back to defaults; refresh must be >= 1.
- BridgeSettings loads from HTTPSENSOR_* environment variables.
- load_sensor_configs() reads both supported file layouts.

CHANGELOG:
- 2026-10-17: Initial creation (STORY-004)
- 2026-10-17: Bridge settings and file loading (STORY-007)

TODO:
- None
"""

import json
from pathlib import Path

import pytest
from httpsensor.src.config import BridgeSettings, SensorConfig, load_sensor_configs
from pydantic import ValidationError

_MINIMAL = {"name": "Office", "url": "http://10.0.0.7/th"}


class TestSensorConfigDefaults:
    """Optional keys fall back to defaults."""

    def test_defaults(self) -> None:
        config = SensorConfig.model_validate(_MINIMAL)

        assert config.name == "Office"
        assert config.url == "http://10.0.0.7/th"
        assert config.manufacturer == "HttpTemperatureHumidity"
        assert config.model == "Default"
        assert config.serial == "18981898"
        assert config.disable_humidity is False
        assert config.refresh == 30
        assert config.refresh_interval_ms == 30000

    def test_refresh_override(self) -> None:
        config = SensorConfig.model_validate({**_MINIMAL, "refresh": 5})
        assert config.refresh_interval_ms == 5000

    @pytest.mark.parametrize("key", ["manufacturer", "model", "serial"])
    def test_empty_string_uses_default(self, key: str) -> None:
        config = SensorConfig.model_validate({**_MINIMAL, key: ""})
        assert getattr(config, key) == SensorConfig.model_fields[key].default

    def test_null_refresh_uses_default(self) -> None:
        config = SensorConfig.model_validate({**_MINIMAL, "refresh": None})
        assert config.refresh == 30


class TestSensorConfigKeys:
    """Host key spellings and extra keys."""

    def test_camel_case_disable_humidity(self) -> None:
        config = SensorConfig.model_validate({**_MINIMAL, "disableHumidity": True})
        assert config.disable_humidity is True

    def test_snake_case_disable_humidity(self) -> None:
        config = SensorConfig(**_MINIMAL, disable_humidity=True)
        assert config.disable_humidity is True

    def test_host_discriminator_ignored(self) -> None:
        """The host's 'accessory' key is accepted and dropped."""
        config = SensorConfig.model_validate(
            {**_MINIMAL, "accessory": "HttpTemperatureHumiditySensor"}
        )
        assert not hasattr(config, "accessory")

    def test_is_frozen(self) -> None:
        config = SensorConfig.model_validate(_MINIMAL)
        with pytest.raises(ValidationError):
            config.url = "http://elsewhere"  # type: ignore[misc]


class TestSensorConfigValidation:
    """Required keys and numeric constraints."""

    def test_missing_url_raises(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            SensorConfig.model_validate({"name": "Office"})
        assert "url" in str(exc_info.value)

    def test_missing_name_raises(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            SensorConfig.model_validate({"url": "http://10.0.0.7/th"})
        assert "name" in str(exc_info.value)

    @pytest.mark.parametrize("refresh", [0, -10])
    def test_refresh_below_one_raises(self, refresh: int) -> None:
        with pytest.raises(ValidationError, match="refresh must be >= 1"):
            SensorConfig.model_validate({**_MINIMAL, "refresh": refresh})


class TestBridgeSettings:
    """Bridge settings load from HTTPSENSOR_* env vars."""

    def test_defaults(self) -> None:
        settings = BridgeSettings()

        assert settings.config_path == "config.json"
        assert settings.bridge_name == "HTTP Sensor Bridge"
        assert settings.port == 51826
        assert settings.persist_file == "httpsensor.state"
        assert settings.log_level == "INFO"

    def test_loads_env_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HTTPSENSOR_CONFIG_PATH", "/etc/httpsensor.json")
        monkeypatch.setenv("HTTPSENSOR_BRIDGE_NAME", "Garden")
        monkeypatch.setenv("HTTPSENSOR_PORT", "51900")
        monkeypatch.setenv("HTTPSENSOR_PERSIST_FILE", "/data/state")
        monkeypatch.setenv("HTTPSENSOR_LOG_LEVEL", "debug")

        settings = BridgeSettings()

        assert settings.config_path == "/etc/httpsensor.json"
        assert settings.bridge_name == "Garden"
        assert settings.port == 51900
        assert settings.persist_file == "/data/state"
        assert settings.log_level == "DEBUG"

    def test_invalid_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HTTPSENSOR_PORT", "70000")
        with pytest.raises(ValidationError, match="HTTPSENSOR_PORT"):
            BridgeSettings()

    def test_unknown_log_level_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HTTPSENSOR_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError, match="HTTPSENSOR_LOG_LEVEL"):
            BridgeSettings()

    def test_reads_dotenv_file(self, tmp_path: Path) -> None:
        """A .env file in the working directory is honoured."""
        (tmp_path / ".env").write_text("HTTPSENSOR_BRIDGE_NAME=FromDotenv\n")
        assert BridgeSettings().bridge_name == "FromDotenv"


class TestLoadSensorConfigs:
    """load_sensor_configs() file layouts and errors."""

    def test_accessories_key(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "accessories": [
                        {**_MINIMAL, "accessory": "HttpTemperatureHumiditySensor"},
                        {"name": "Garage", "url": "http://10.0.0.8/th", "disableHumidity": True},
                    ]
                }
            )
        )

        configs = load_sensor_configs(path)

        assert [c.name for c in configs] == ["Office", "Garage"]
        assert configs[1].disable_humidity is True

    def test_bare_list(self, tmp_path: Path) -> None:
        path = tmp_path / "sensors.json"
        path.write_text(json.dumps([_MINIMAL]))

        configs = load_sensor_configs(str(path))

        assert configs == [SensorConfig.model_validate(_MINIMAL)]

    def test_empty_list_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"accessories": []}))

        with pytest.raises(ValueError, match="no accessories"):
            load_sensor_configs(path)

    def test_wrong_shape_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"bridge": {}}))

        with pytest.raises(ValueError, match="expected a list"):
            load_sensor_configs(path)

    def test_invalid_entry_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps([{"name": "NoUrl"}]))

        with pytest.raises(ValidationError):
            load_sensor_configs(path)
