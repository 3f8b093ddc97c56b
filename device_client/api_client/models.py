"""Platform API models.

Pydantic models for platform API responses. The wire format is camelCase;
fields are exposed in snake_case.
"""

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ApiModel(BaseModel):
    """Immutable response model.

    Only the camelCase wire keys are accepted and values are not coerced,
    e.g. ``"3600"`` is rejected for an integer field.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        strict=True,
        frozen=True,
    )


# -----------------------------------------------------------------------------
# Device Models
# -----------------------------------------------------------------------------


class DeviceResponse(_ApiModel):
    """Response from GET /internal/platform/v1/device-info."""

    id: str = Field(min_length=1)
    name: str
    project_id: str
    retain_recordings_seconds: int | None = Field(default=None, ge=0)


# -----------------------------------------------------------------------------
# Remote Visualization Models
# -----------------------------------------------------------------------------


class AuthorizeRemoteVizResponse(_ApiModel):
    """Response from POST /internal/platform/v1/devices/{id}/remote-sessions."""

    token: str = Field(repr=False)
    url: str


@dataclass(frozen=True)
class RtcCredentials:
    """Session credentials for a real-time visualization connection.

    The service does not communicate an expiry. Credentials stay valid
    until the holder clears them.
    """

    url: str
    token: str = field(repr=False)

    @classmethod
    def from_response(cls, response: AuthorizeRemoteVizResponse) -> "RtcCredentials":
        return cls(url=response.url, token=response.token)


# -----------------------------------------------------------------------------
# Error Models
# -----------------------------------------------------------------------------


class ErrorResponse(_ApiModel):
    """Error envelope returned with 4xx/5xx responses.

    The wire field ``error`` holds the human readable message.
    """

    message: str = Field(alias="error")
    code: str | None = None
