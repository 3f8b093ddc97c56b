"""Platform API integration layer.

Provides the async client used to resolve a device token and to obtain
remote visualization session credentials.

Usage:
    from device_client.api_client import CredentialsProvider, Device

    device = await Device.resolve(token)
    async with CredentialsProvider(device) as provider:
        credentials = await provider.load_credentials()

Exception Hierarchy:
    DeviceClientError (base)
    ├── NoTokenError - No device token configured (no request made)
    ├── BuildClientError - Invalid client configuration
    ├── RequestError - A single request failed
    │   ├── TransportFailureError
    │   │   ├── SendRequestError - Request could not be sent
    │   │   └── LoadResponseError - Response body could not be read
    │   ├── StructuredAPIError - 4xx/5xx with the service error envelope
    │   ├── MalformedAPIError - 4xx/5xx with an unrecognized body
    │   └── ParseResponseError - 2xx body did not match the schema
    └── CredentialsError
        └── CredentialsFetchError - Credential refresh failed (wraps cause)
"""

from .client import (
    DEFAULT_API_URL,
    ApiClient,
    DeviceToken,
    RequestBuilder,
    default_user_agent,
    encode_uri_component,
)
from .credentials import CredentialsProvider
from .device import Device
from .exceptions import (
    BuildClientError,
    CredentialsError,
    CredentialsFetchError,
    DeviceClientError,
    LoadResponseError,
    MalformedAPIError,
    NoTokenError,
    ParseResponseError,
    RequestError,
    SendRequestError,
    StructuredAPIError,
    TransportFailureError,
    classify_error_response,
)
from .models import (
    AuthorizeRemoteVizResponse,
    DeviceResponse,
    ErrorResponse,
    RtcCredentials,
)

__all__ = [
    # Client
    "DEFAULT_API_URL",
    "ApiClient",
    "DeviceToken",
    "RequestBuilder",
    "default_user_agent",
    "encode_uri_component",
    # Device and credentials
    "Device",
    "CredentialsProvider",
    # Exceptions
    "DeviceClientError",
    "NoTokenError",
    "BuildClientError",
    "RequestError",
    "TransportFailureError",
    "SendRequestError",
    "LoadResponseError",
    "StructuredAPIError",
    "MalformedAPIError",
    "ParseResponseError",
    "CredentialsError",
    "CredentialsFetchError",
    "classify_error_response",
    # Models
    "DeviceResponse",
    "AuthorizeRemoteVizResponse",
    "RtcCredentials",
    "ErrorResponse",
]
