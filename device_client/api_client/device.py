"""Resolved device identity."""

from typing import Any

import httpx

from device_client.core.config import Settings, get_settings
from device_client.core.logging import get_logger

from .client import ApiClient, DeviceToken
from .exceptions import NoTokenError
from .models import AuthorizeRemoteVizResponse, DeviceResponse

logger = get_logger(__name__)


class Device:
    """A device whose token has been resolved into platform metadata.

    The metadata is fetched once by :meth:`resolve` and never changes
    afterwards, so a Device can be shared by concurrent tasks.

    Usage:
        async with await Device.resolve(token) as device:
            session = await device.authorize_session()
    """

    def __init__(self, info: DeviceResponse, client: ApiClient) -> None:
        self._info = info
        self._client = client

    @classmethod
    async def resolve(
        cls,
        token: DeviceToken | str | None = None,
        *,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "Device":
        """Fetch device info for a token.

        Args:
            token: Device token; falls back to FOXGLOVE_DEVICE_TOKEN
            settings: Settings override
            transport: Optional httpx transport

        Raises:
            NoTokenError: No token given or configured (no request is made)
            BuildClientError: Invalid client configuration
            RequestError: Device info request failed
        """
        settings = settings or get_settings()
        if token is None and settings.has_device_token:
            token = settings.foxglove_device_token
        if isinstance(token, str):
            token = DeviceToken(token)
        if not token:
            raise NoTokenError()

        client = ApiClient(
            base_url=settings.foxglove_api_url,
            device_token=token,
            user_agent=settings.foxglove_user_agent,
            timeout=settings.foxglove_request_timeout_sec,
            transport=transport,
        )

        try:
            info = await client.fetch_device_info()
        except BaseException:
            await client.aclose()
            raise

        logger.info(
            "Resolved device identity",
            device_id=info.id,
            device_name=info.name,
            project_id=info.project_id,
        )
        return cls(info, client)

    @property
    def id(self) -> str:
        return self._info.id

    @property
    def name(self) -> str:
        return self._info.name

    @property
    def project_id(self) -> str:
        return self._info.project_id

    @property
    def retain_recordings_seconds(self) -> int | None:
        return self._info.retain_recordings_seconds

    @property
    def info(self) -> DeviceResponse:
        return self._info

    async def authorize_session(self) -> AuthorizeRemoteVizResponse:
        """Request new remote visualization session credentials."""
        return await self._client.authorize_remote_viz(self.id)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "Device":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"Device(id={self.id!r}, name={self.name!r})"
