"""
Shared test fixtures for the sensor bridge tests.

CHANGELOG:
- 2026-10-17: Initial creation (STORY-001)

TODO:
- None
"""

import json
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# All BridgeSettings environment variable names, used for cleanup.
_ALL_BRIDGE_ENV_VARS = (
    "HTTPSENSOR_CONFIG_PATH",
    "HTTPSENSOR_BRIDGE_NAME",
    "HTTPSENSOR_PORT",
    "HTTPSENSOR_PERSIST_FILE",
    "HTTPSENSOR_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_bridge_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Remove all bridge env vars and isolate from .env files before each test.

    Changes working directory to tmp_path so no .env file is accidentally
    loaded by Pydantic BaseSettings.
    """
    for var in _ALL_BRIDGE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def sensor_responses() -> dict:
    """Load sensor endpoint fixture bodies from JSON file."""
    fixture_path = FIXTURES_DIR / "sensor_responses.json"
    return json.loads(fixture_path.read_text())


@pytest.fixture()
def make_client() -> Callable[..., httpx.AsyncClient]:
    """Build an ``httpx.AsyncClient`` served by an in-memory handler.

    Call with ``status_code`` plus either ``json_data`` or raw
    ``content``, or with ``exc`` to raise a transport error.
    """

    def _make(
        *,
        status_code: int = 200,
        json_data: object = None,
        content: bytes | None = None,
        exc: Exception | None = None,
    ) -> httpx.AsyncClient:
        def handler(request: httpx.Request) -> httpx.Response:
            if exc is not None:
                raise exc
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=json_data)

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
