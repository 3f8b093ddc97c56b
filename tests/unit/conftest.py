"""Shared pytest fixtures for unit tests.

Provides:
- An in-process mock of the platform API (httpx.MockTransport)
- Test settings
- Resolved Device and CredentialsProvider fixtures
"""

import asyncio
import os
from collections import Counter
from typing import Any, AsyncGenerator, Callable
from urllib.parse import quote

import httpx
import pytest
import pytest_asyncio

from device_client.api_client import CredentialsProvider, Device
from device_client.core.config import Settings

TEST_API_URL = "https://api.test.local"
TEST_TOKEN = "fox_dt_test_secret"

DEVICE_INFO_PATH = "/internal/platform/v1/device-info"


def remote_sessions_path(encoded_device_id: str) -> str:
    return f"/internal/platform/v1/devices/{encoded_device_id}/remote-sessions"


# -----------------------------------------------------------------------------
# Mock platform API
# -----------------------------------------------------------------------------


class MockPlatformAPI:
    """In-process stand-in for the platform API.

    Responses can be overridden per path; every request is recorded and
    counted by path.
    """

    def __init__(
        self,
        device_id: str = "dev_1",
        device_name: str = "Test Device",
        token: str = TEST_TOKEN,
    ) -> None:
        self.device_id = device_id
        self.token = token
        self.device_info: dict[str, Any] = {
            "id": device_id,
            "name": device_name,
            "projectId": "prj_1",
            "retainRecordingsSeconds": 3600,
        }
        self.session: dict[str, Any] = {"token": "abc", "url": "wss://x"}
        self.requests: list[httpx.Request] = []
        self.calls: Counter[str] = Counter()
        self.overrides: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        # Set to delay remote-sessions responses (seconds)
        self.authorize_delay = 0.0

    @property
    def sessions_path(self) -> str:
        return remote_sessions_path(quote(self.device_id, safe=""))

    @property
    def authorize_calls(self) -> int:
        return self.calls[self.sessions_path]

    @property
    def device_info_calls(self) -> int:
        return self.calls[DEVICE_INFO_PATH]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.raw_path.decode("ascii")
        self.requests.append(request)
        self.calls[path] += 1

        if path in self.overrides:
            return self.overrides[path](request)

        if request.headers.get("Authorization") != f"DeviceToken {self.token}":
            return httpx.Response(401, json={"error": "bad token"})

        if request.method == "GET" and path == DEVICE_INFO_PATH:
            return httpx.Response(200, json=self.device_info)

        if request.method == "POST" and path == self.sessions_path:
            if self.authorize_delay:
                await asyncio.sleep(self.authorize_delay)
            return httpx.Response(200, json=self.session)

        return httpx.Response(
            404, json={"error": "not found", "code": "NOT_FOUND"}
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's FOXGLOVE_* variables out of tests."""
    for key in list(os.environ):
        if key.startswith("FOXGLOVE_"):
            monkeypatch.delenv(key)


@pytest.fixture
def settings() -> Settings:
    """Test settings pointing at the mock API."""
    return Settings(
        _env_file=None,
        foxglove_api_url=TEST_API_URL,
        foxglove_device_token=TEST_TOKEN,
        foxglove_log_level="warning",
        foxglove_log_format="text",
    )


@pytest.fixture
def mock_api() -> MockPlatformAPI:
    return MockPlatformAPI()


@pytest_asyncio.fixture
async def device(
    mock_api: MockPlatformAPI, settings: Settings
) -> AsyncGenerator[Device, None]:
    """Device resolved against the mock API."""
    device = await Device.resolve(settings=settings, transport=mock_api.transport)
    yield device
    await device.aclose()


@pytest.fixture
def provider(device: Device) -> CredentialsProvider:
    """Cold credentials cache for the resolved device."""
    return CredentialsProvider(device)
