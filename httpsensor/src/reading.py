"""
Reading value object and parser for the sensor endpoint's JSON body.

The endpoint returns ``{"temperature": 25.8, "humidity": 38}``. Parsing is
a pure function: no I/O, no range validation. A field that is missing from
the body becomes ``NaN`` and flows through to the host unchanged.

CHANGELOG:
- 2026-10-17: Initial creation (STORY-001)
- 2026-10-17: Integers too large for a float are rejected (STORY-009)

TODO:
- None
"""

import math
from dataclasses import dataclass
from typing import Any

# Keys read from the endpoint body.
_TEMPERATURE_KEY = "temperature"
_HUMIDITY_KEY = "humidity"


@dataclass(frozen=True)
class Reading:
    """One temperature/humidity pair retrieved from the sensor endpoint.

    Attributes:
        temperature: Temperature in degrees Celsius.
        humidity: Relative humidity in percent.
    """

    temperature: float = 0.0
    humidity: float = 0.0


def parse_reading(raw: Any) -> Reading:
    """Build a :class:`Reading` from a decoded JSON body.

    Args:
        raw: The decoded JSON body. Must be a JSON object.

    Returns:
        A new :class:`Reading`. Missing fields are ``NaN``.

    Raises:
        ValueError: If *raw* is not an object or a field is not numeric.
    """
    if not isinstance(raw, dict):
        raise ValueError(
            f"Expected a JSON object, got {type(raw).__name__}"
        )

    return Reading(
        temperature=_to_float(raw, _TEMPERATURE_KEY),
        humidity=_to_float(raw, _HUMIDITY_KEY),
    )


def _to_float(raw: dict, key: str) -> float:
    """Return ``raw[key]`` as a float, or ``NaN`` when absent."""
    value = raw.get(key)
    if value is None:
        return math.nan
    # bool is an int subclass; "true" is not a temperature.
    if isinstance(value, bool):
        raise ValueError(f"Field '{key}' must be numeric, got bool")
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValueError(
            f"Field '{key}' must be numeric, got {value!r}"
        ) from exc
