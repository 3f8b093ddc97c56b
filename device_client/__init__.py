"""Device client for the platform remote visualization API."""

from ._version import __version__
from .api_client import (
    ApiClient,
    CredentialsFetchError,
    CredentialsProvider,
    Device,
    DeviceClientError,
    DeviceToken,
    NoTokenError,
    RtcCredentials,
)

__all__ = [
    "__version__",
    "ApiClient",
    "CredentialsFetchError",
    "CredentialsProvider",
    "Device",
    "DeviceClientError",
    "DeviceToken",
    "NoTokenError",
    "RtcCredentials",
]
