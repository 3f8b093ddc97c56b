"""Cached remote visualization credentials.

A single credential slot per device:
- Readers never block and never touch the network
- At most one refresh is in flight for concurrent load_credentials() calls
- Failed refreshes leave the slot untouched (no negative caching)

The service does not send an expiry. Holders detect stale credentials
themselves (e.g. a 401 from the media server) and call clear().
"""

import asyncio
from typing import Any

from device_client.core.logging import get_logger

from .device import Device
from .exceptions import CredentialsFetchError, DeviceClientError
from .models import RtcCredentials

logger = get_logger(__name__)


class CredentialsProvider:
    """Single-flight cache of session credentials for one device.

    The slot holds an immutable RtcCredentials and is replaced as a whole,
    so a reader sees either the previous or the new value. The refresh
    lock only serializes the decision to refresh, never the read path.
    """

    def __init__(self, device: Device) -> None:
        self.device = device
        self._credentials: RtcCredentials | None = None
        self._refresh_lock = asyncio.Lock()

    def current_credentials(self) -> RtcCredentials | None:
        """Return the cached credentials, if any. Never blocks."""
        return self._credentials

    async def load_credentials(self) -> RtcCredentials:
        """Return cached credentials, fetching them if the cache is empty.

        Concurrent callers on a cold cache share one network request.

        Raises:
            CredentialsFetchError: The refresh failed
        """
        credentials = self.current_credentials()
        if credentials is not None:
            return credentials

        async with self._refresh_lock:
            # Another caller may have refreshed while we waited.
            credentials = self.current_credentials()
            if credentials is not None:
                return credentials
            return await self.refresh()

    async def refresh(self) -> RtcCredentials:
        """Fetch new credentials unconditionally and cache them.

        Raises:
            CredentialsFetchError: The request failed; the cache is unchanged
        """
        logger.debug("Refreshing session credentials", device_id=self.device.id)

        try:
            response = await self.device.authorize_session()
        except DeviceClientError as e:
            logger.warning(
                "Failed to refresh session credentials",
                device_id=self.device.id,
                error=str(e),
                status_code=e.status_code,
            )
            raise CredentialsFetchError(e) from e

        credentials = RtcCredentials.from_response(response)
        self._credentials = credentials

        logger.info(
            "Session credentials refreshed",
            device_id=self.device.id,
            url=credentials.url,
        )
        return credentials

    def clear(self) -> None:
        """Drop the cached credentials.

        A refresh already in flight still installs its result afterwards.
        """
        self._credentials = None
        logger.debug("Session credentials cleared", device_id=self.device.id)

    async def aclose(self) -> None:
        """Clear the cache and close the device's HTTP client."""
        self.clear()
        await self.device.aclose()

    async def __aenter__(self) -> "CredentialsProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()
