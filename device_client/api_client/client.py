"""Platform API async client.

Single-attempt async client for the device platform API with:
- Device token authentication
- Typed responses via Pydantic models
- Structured error handling (no retries; retry policy belongs to the caller)
"""

from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from device_client._version import __version__
from device_client.core.config import (
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT,
    Settings,
    get_settings,
)
from device_client.core.logging import get_logger

from .exceptions import (
    BuildClientError,
    LoadResponseError,
    NoTokenError,
    ParseResponseError,
    SendRequestError,
    classify_error_response,
)
from .models import AuthorizeRemoteVizResponse, DeviceResponse

logger = get_logger(__name__)

DEVICE_INFO_PATH = "/internal/platform/v1/device-info"
REMOTE_SESSIONS_PATH = "/internal/platform/v1/devices/{device_id}/remote-sessions"

AUTH_SCHEME = "DeviceToken"

ModelT = TypeVar("ModelT", bound=BaseModel)


def default_user_agent() -> str:
    """User-Agent sent with every request."""
    return f"foxglove-sdk/{__version__}"


def encode_uri_component(component: str) -> str:
    """Percent-encode a value for use as a single URL path segment.

    Every byte except ASCII alphanumerics and ``-._~`` is encoded.
    """
    return quote(component, safe="")


def join_url(base_url: str, path: str) -> str:
    """Join base URL and path with exactly one slash between them."""
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


class DeviceToken:
    """Opaque device secret.

    The value is only ever rendered into the Authorization header.
    """

    __slots__ = ("_value",)

    def __init__(self, value: str) -> None:
        self._value = value

    def __bool__(self) -> bool:
        return bool(self._value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DeviceToken):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return "DeviceToken(***)"

    __str__ = __repr__

    def to_header(self) -> str:
        """Authorization header value."""
        return f"{AUTH_SCHEME} {self._value}"


class RequestBuilder:
    """A pending request against the platform API.

    Usage:
        response = await client.get("/path").device_token(token).send()
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        method: str,
        url: str,
        user_agent: str,
    ) -> None:
        self._http = http
        self.method = method
        self.url = url
        self.headers: dict[str, str] = {"User-Agent": user_agent}

    def device_token(self, token: DeviceToken) -> "RequestBuilder":
        """Attach the device token Authorization header."""
        self.headers["Authorization"] = token.to_header()
        return self

    async def send(self) -> httpx.Response:
        """Send the request once.

        Returns:
            The response for any non-error status. The body has been read.

        Raises:
            SendRequestError: The request could not be sent
            LoadResponseError: The response body could not be read
            StructuredAPIError: 4xx/5xx with the service error envelope
            MalformedAPIError: 4xx/5xx with any other body
        """
        try:
            request = self._http.build_request(
                self.method, self.url, headers=self.headers
            )
            response = await self._http.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as e:
            logger.debug(
                "API request failed",
                method=self.method,
                url=self.url,
                error=str(e),
            )
            raise SendRequestError(f"Failed to send request: {e}") from e

        try:
            try:
                body = await response.aread()
            except httpx.HTTPError as e:
                if not response.is_error:
                    raise LoadResponseError(
                        f"Failed to load response bytes: {e}"
                    ) from e
                body = b""

            error = classify_error_response(
                response.status_code, body, response.headers
            )
        finally:
            await response.aclose()

        logger.debug(
            "API request completed",
            method=self.method,
            url=self.url,
            status_code=response.status_code,
        )

        if error is not None:
            logger.warning(
                "API error response",
                method=self.method,
                url=self.url,
                status_code=error.status_code,
                error_code=error.error_code,
            )
            raise error

        return response


class ApiClient:
    """Async client for the device platform API.

    Usage:
        async with ApiClient(device_token=DeviceToken(token)) as client:
            info = await client.fetch_device_info()
            session = await client.authorize_remote_viz(info.id)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        device_token: DeviceToken | None = None,
        user_agent: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the API client.

        Args:
            base_url: Platform API base URL
            device_token: Token identifying this device
            user_agent: User-Agent override
            timeout: Request timeout and keep-alive expiry in seconds
            transport: Optional httpx transport (tests, proxies)

        Raises:
            BuildClientError: Invalid base URL or timeout
        """
        self.base_url = _validate_base_url(base_url)
        if timeout <= 0:
            raise BuildClientError(f"timeout must be positive, got {timeout}")

        self.user_agent = user_agent or default_user_agent()
        self.timeout = timeout
        self._device_token = device_token

        try:
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(timeout),
                limits=httpx.Limits(keepalive_expiry=timeout),
                follow_redirects=True,
                transport=transport,
            )
        except (TypeError, ValueError) as e:
            raise BuildClientError(str(e)) from e

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "ApiClient":
        """Build a client from configuration."""
        settings = settings or get_settings()
        token = None
        if settings.has_device_token:
            token = DeviceToken(settings.foxglove_device_token)
        return cls(
            base_url=settings.foxglove_api_url,
            device_token=token,
            user_agent=settings.foxglove_user_agent,
            timeout=settings.foxglove_request_timeout_sec,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    @property
    def device_token(self) -> DeviceToken | None:
        return self._device_token

    def set_device_token(self, token: DeviceToken) -> "ApiClient":
        self._device_token = token
        return self

    # -------------------------------------------------------------------------
    # Request building
    # -------------------------------------------------------------------------

    def request(self, method: str, path: str) -> RequestBuilder:
        return RequestBuilder(
            self._http,
            method,
            join_url(self.base_url, path),
            self.user_agent,
        )

    def get(self, path: str) -> RequestBuilder:
        return self.request("GET", path)

    def post(self, path: str) -> RequestBuilder:
        return self.request("POST", path)

    def _require_token(self) -> DeviceToken:
        if not self._device_token:
            raise NoTokenError()
        return self._device_token

    # -------------------------------------------------------------------------
    # Device API
    # -------------------------------------------------------------------------

    async def fetch_device_info(self) -> DeviceResponse:
        """Resolve the configured device token into device metadata.

        Raises:
            NoTokenError: No device token configured
            RequestError: Request failed or response could not be parsed
        """
        token = self._require_token()
        response = await self.get(DEVICE_INFO_PATH).device_token(token).send()
        return _parse(DeviceResponse, response)

    async def authorize_remote_viz(self, device_id: str) -> AuthorizeRemoteVizResponse:
        """Request session credentials for a remote visualization connection.

        Args:
            device_id: Device ID (percent-encoded into the path)

        Raises:
            NoTokenError: No device token configured
            RequestError: Request failed or response could not be parsed
        """
        token = self._require_token()
        path = REMOTE_SESSIONS_PATH.format(device_id=encode_uri_component(device_id))
        response = await self.post(path).device_token(token).send()
        return _parse(AuthorizeRemoteVizResponse, response)


def _validate_base_url(base_url: str) -> str:
    try:
        url = httpx.URL(base_url)
    except httpx.InvalidURL as e:
        raise BuildClientError(f"invalid base URL {base_url!r}: {e}") from e

    if url.scheme not in ("http", "https") or not url.host:
        raise BuildClientError(
            f"base URL must be an absolute http(s) URL, got {base_url!r}"
        )
    return base_url


def _parse(model: type[ModelT], response: httpx.Response) -> ModelT:
    try:
        return model.model_validate_json(response.content)
    except ValidationError as e:
        raise ParseResponseError(f"Failed to parse response: {e}") from e
