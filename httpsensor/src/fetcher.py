"""
Sensor endpoint fetcher -- one HTTP GET, JSON body parsed into a Reading.

Sends ``GET {url}`` with no custom headers and no retry, following
redirects, and returns the parsed :class:`~httpsensor.src.reading.Reading`.
Every failure (transport error, non-2xx status, malformed JSON, unexpected
body shape) is raised as a single :class:`FetchError` so callers handle
one error kind.

CHANGELOG:
- 2026-10-17: Initial creation (STORY-002)
- 2026-10-17: Follow redirects (STORY-009)

TODO:
- None
"""

import logging

import httpx

from httpsensor.src.reading import Reading, parse_reading

logger = logging.getLogger(__name__)

# No request timeout: a hanging endpoint delays only its own tick.
_DEFAULT_TIMEOUT: float | None = None


class FetchError(Exception):
    """Fetching or parsing a reading from the sensor endpoint failed."""


async def fetch_reading(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float | None = _DEFAULT_TIMEOUT,
) -> Reading:
    """Fetch the latest reading from the sensor endpoint.

    Args:
        url: Full URL of the sensor endpoint (not validated here).
        client: Optional shared ``httpx.AsyncClient``. When omitted, a
            client is created for this request and closed afterwards.
        timeout: Request timeout in seconds for a client created here.
            Defaults to ``None`` (no timeout). Ignored when *client* is
            given.

    Returns:
        The parsed :class:`Reading`.

    Raises:
        FetchError: On network failure, non-2xx status, or a body that
            is not a JSON object with numeric fields.
    """
    if client is None:
        async with httpx.AsyncClient(timeout=timeout) as own_client:
            return await _get_reading(own_client, url)
    return await _get_reading(client, url)


async def _get_reading(client: httpx.AsyncClient, url: str) -> Reading:
    """Issue the GET on *client* and translate failures to FetchError."""
    try:
        response = await client.get(url, follow_redirects=True)
        response.raise_for_status()
        body = response.json()
    except httpx.HTTPStatusError as exc:
        raise FetchError(
            f"HTTP {exc.response.status_code} from {url}"
        ) from exc
    except httpx.HTTPError as exc:
        raise FetchError(f"Request to {url} failed: {exc!r}") from exc
    except ValueError as exc:
        raise FetchError(f"Invalid JSON from {url}: {exc}") from exc

    try:
        reading = parse_reading(body)
    except ValueError as exc:
        raise FetchError(f"Unexpected body from {url}: {exc}") from exc

    logger.debug(
        "Fetched reading from %s: temperature=%s humidity=%s",
        url,
        reading.temperature,
        reading.humidity,
    )
    return reading
