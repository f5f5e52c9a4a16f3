"""
Host-agnostic temperature/humidity accessory.

Wraps a :class:`~httpsensor.src.poller.ReadingPoller` with the surface a
home-automation host expects from a sensor plugin: synchronous getters,
an identify hook, a list of exposed services, and a push of fresh values
after each successful refresh.

The host is reached only through the ``notify`` callable passed to the
constructor, so the same core runs under HAP-python (see
:mod:`httpsensor.src.hap`) or under a test double.

CHANGELOG:
- 2026-10-17: Initial creation (STORY-005)

TODO:
- None
"""

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from httpsensor.src.config import SensorConfig
from httpsensor.src.fetcher import fetch_reading
from httpsensor.src.poller import FetchFunc, ReadingPoller
from httpsensor.src.reading import Reading

logger = logging.getLogger(__name__)

# HAP service and characteristic type names.
SERVICE_INFORMATION = "AccessoryInformation"
SERVICE_TEMPERATURE = "TemperatureSensor"
SERVICE_HUMIDITY = "HumiditySensor"
CHAR_CURRENT_TEMPERATURE = "CurrentTemperature"
CHAR_CURRENT_HUMIDITY = "CurrentRelativeHumidity"

NotifyFunc = Callable[[str, float], None]


@dataclass(frozen=True)
class ServiceDescriptor:
    """One service the accessory exposes to the host.

    Attributes:
        service: HAP service type name.
        display_name: Name shown for the service.
        characteristic: Readable characteristic served by *getter*.
        getter: Returns the current value of *characteristic*.
        values: Static characteristic values (information service).
    """

    service: str
    display_name: str
    characteristic: str | None = None
    getter: Callable[[], float] | None = None
    values: Mapping[str, str] = field(default_factory=dict)


class TemperatureHumiditySensor:
    """Plugin core for one HTTP temperature/humidity sensor.

    Args:
        config: Validated accessory configuration.
        notify: ``notify(characteristic, value)`` pushes a new value to
            the host.
        fetch: Fetch coroutine handed to the poller.
    """

    def __init__(
        self,
        config: SensorConfig,
        *,
        notify: NotifyFunc,
        fetch: FetchFunc = fetch_reading,
    ) -> None:
        self._config = config
        self._notify = notify
        self._poller = ReadingPoller(
            config.url,
            config.refresh,
            on_update=self._push,
            fetch=fetch,
        )

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def humidity_enabled(self) -> bool:
        return not self._config.disable_humidity

    @property
    def poller(self) -> ReadingPoller:
        return self._poller

    def get_current_temperature(self) -> float:
        """Return the cached temperature for the host."""
        value = self._poller.get_current_temperature()
        logger.info("%s: getCurrentTemperature: %s", self.name, value)
        return value

    def get_current_relative_humidity(self) -> float:
        """Return the cached humidity for the host."""
        value = self._poller.get_current_humidity()
        logger.info("%s: getCurrentRelativeHumidity: %s", self.name, value)
        return value

    def identify(self) -> None:
        """Handle the host's identify request (pairing)."""
        logger.info("%s: Identify!", self.name)

    def get_services(self) -> list[ServiceDescriptor]:
        """List the services to register with the host.

        Information and temperature are always present; humidity only
        when it is not disabled by configuration.
        """
        services = [
            ServiceDescriptor(
                service=SERVICE_INFORMATION,
                display_name=self.name,
                values={
                    "Manufacturer": self._config.manufacturer,
                    "Model": self._config.model,
                    "SerialNumber": self._config.serial,
                },
            ),
            ServiceDescriptor(
                service=SERVICE_TEMPERATURE,
                display_name="Temperature",
                characteristic=CHAR_CURRENT_TEMPERATURE,
                getter=self.get_current_temperature,
            ),
        ]
        if self.humidity_enabled:
            services.append(
                ServiceDescriptor(
                    service=SERVICE_HUMIDITY,
                    display_name="Humidity",
                    characteristic=CHAR_CURRENT_HUMIDITY,
                    getter=self.get_current_relative_humidity,
                )
            )
        return services

    def start(self) -> asyncio.Task:
        """Warm the cache and start polling. Returns the tick task."""
        task = self._poller.start()
        logger.info("%s finished initializing!", self.name)
        logger.debug(
            "%s: will refresh state every %ds", self.name, self._config.refresh
        )
        return task

    async def stop(self) -> None:
        """Stop polling."""
        await self._poller.stop()

    def _push(self, reading: Reading) -> None:
        """Push a fresh reading to the host."""
        self._notify(CHAR_CURRENT_TEMPERATURE, reading.temperature)
        if self.humidity_enabled:
            self._notify(CHAR_CURRENT_HUMIDITY, reading.humidity)
        logger.debug("%s: pushed updated state to host", self.name)
