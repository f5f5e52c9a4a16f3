"""
HAP-python adapter for the HTTP temperature/humidity sensor.

:class:`HttpSensorAccessory` turns the host-agnostic
:class:`~httpsensor.src.accessory.TemperatureHumiditySensor` into a
``pyhap`` accessory: each service descriptor becomes a preloaded HAP
service, getters become ``getter_callback``s, and pushes become
``Characteristic.set_value`` calls. The accessory driver calls ``run()``
and ``stop()``, which start and stop the poller.

CHANGELOG:
- 2026-10-17: Initial creation (STORY-007)
- 2026-10-17: Skip non-finite readings at the HAP boundary (STORY-009)

TODO:
- None
"""

import logging
import math
from collections.abc import Callable, Iterable

from pyhap.accessory import Accessory, Bridge
from pyhap.accessory_driver import AccessoryDriver
from pyhap.characteristic import Characteristic
from pyhap.const import CATEGORY_SENSOR

from httpsensor.src.accessory import (
    SERVICE_INFORMATION,
    ServiceDescriptor,
    TemperatureHumiditySensor,
)
from httpsensor.src.config import SensorConfig
from httpsensor.src.fetcher import fetch_reading
from httpsensor.src.poller import FetchFunc

logger = logging.getLogger(__name__)


class HttpSensorAccessory(Accessory):
    """HAP accessory backed by an HTTP sensor endpoint.

    Args:
        driver: The ``AccessoryDriver`` (only ``driver.loader`` is used
            during construction).
        config: Accessory configuration.
        fetch: Fetch coroutine, overridable for tests.
        aid: Accessory id; assigned by the bridge when ``None``.
    """

    category = CATEGORY_SENSOR

    def __init__(
        self,
        driver: AccessoryDriver,
        config: SensorConfig,
        *,
        fetch: FetchFunc = fetch_reading,
        aid: int | None = None,
    ) -> None:
        super().__init__(driver, config.name, aid=aid)
        self._chars: dict[str, Characteristic] = {}
        self.sensor = TemperatureHumiditySensor(
            config, notify=self._set_char, fetch=fetch
        )

        for desc in self.sensor.get_services():
            if desc.service == SERVICE_INFORMATION:
                self._configure_information(desc)
            else:
                self._add_sensor_service(desc)

    async def run(self) -> None:
        """Start polling (called by the driver once it is running)."""
        self.sensor.start()

    async def stop(self) -> None:
        """Stop polling (called by the driver on shutdown)."""
        await self.sensor.stop()

    def _configure_information(self, desc: ServiceDescriptor) -> None:
        self.set_info_service(
            manufacturer=desc.values["Manufacturer"],
            model=desc.values["Model"],
            serial_number=desc.values["SerialNumber"],
        )
        serv_info = self.get_service(SERVICE_INFORMATION)
        serv_info.configure_char("Identify", setter_callback=self._on_identify)

    def _add_sensor_service(self, desc: ServiceDescriptor) -> None:
        serv = self.add_preload_service(desc.service)
        char = serv.configure_char(desc.characteristic)
        char.getter_callback = self._finite_getter(char, desc.getter)
        self._chars[desc.characteristic] = char

    @staticmethod
    def _finite_getter(
        char: Characteristic, getter: Callable[[], float]
    ) -> Callable[[], float]:
        """Wrap *getter* so NaN/inf reads return the last pushed value."""

        def get_value() -> float:
            value = getter()
            if not math.isfinite(value):
                logger.debug(
                    "%s is %s; serving last value %s",
                    char.display_name,
                    value,
                    char.value,
                )
                return char.value
            return value

        return get_value

    def _on_identify(self, _value: bool) -> None:
        self.sensor.identify()

    def _set_char(self, characteristic: str, value: float) -> None:
        # HAP numeric characteristics cannot carry NaN or inf.
        if not math.isfinite(value):
            logger.debug(
                "Skipping %s push of non-finite value %s", characteristic, value
            )
            return
        self._chars[characteristic].set_value(value)


def build_bridge(
    driver: AccessoryDriver,
    display_name: str,
    configs: Iterable[SensorConfig],
) -> Bridge:
    """Create a bridge holding one :class:`HttpSensorAccessory` per config."""
    bridge = Bridge(driver, display_name)
    for config in configs:
        bridge.add_accessory(HttpSensorAccessory(driver, config))
        logger.info("Added accessory %s polling %s", config.name, config.url)
    return bridge
