"""
Sensor bridge entry point -- one HAP bridge, one accessory per sensor.

Loads :class:`BridgeSettings` from the environment, reads the sensor
accessories from ``config_path``, and runs a HAP-python accessory driver
until SIGINT/SIGTERM. On shutdown the driver stops every accessory, which
cancels its poller.

CHANGELOG:
- 2026-10-17: Initial creation (STORY-007)
- 2026-10-17: Structured JSON logging (STORY-008)

TODO:
- None
"""

import logging
import signal

from pyhap.accessory_driver import AccessoryDriver

from httpsensor.src.config import BridgeSettings, load_sensor_configs
from httpsensor.src.hap import build_bridge
from httpsensor.src.logging_config import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    """Bridge entry point.

    Loads configuration, builds the bridge and blocks in the driver's
    event loop until interrupted.
    """
    settings = BridgeSettings()
    setup_logging(level=settings.log_level)

    sensors = load_sensor_configs(settings.config_path)

    driver = AccessoryDriver(
        port=settings.port,
        persist_file=settings.persist_file,
    )
    driver.add_accessory(
        accessory=build_bridge(driver, settings.bridge_name, sensors)
    )

    signal.signal(signal.SIGTERM, driver.signal_handler)

    logger.info(
        "Sensor bridge '%s' starting on port %d with %d accessories",
        settings.bridge_name,
        settings.port,
        len(sensors),
    )
    driver.start()
    logger.info("Sensor bridge shut down")


if __name__ == "__main__":
    main()
