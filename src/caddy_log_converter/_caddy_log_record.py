"""
Models for a single decoded Caddy access log record.

Caddy writes one JSON object per request. Only part of each object is needed for the GoAccess projection, but the
remaining request details (protocol, TLS session) are kept on the model so the record reads the same as it was logged.

Fields follow the Go zero-value convention of the Caddy encoder: an absent or `null` field is decoded as 0, an empty
string, an empty mapping or False, and a header whose value list is `null` is dropped like an empty one. A field of the
wrong JSON type, or a non-finite number, is a validation error.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _drop_null_values(data: Any) -> Any:
    if isinstance(data, dict):
        return {key: value for key, value in data.items() if value is not None}

    return data


class _CaddyLogModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True, allow_inf_nan=False)

    @model_validator(mode="before")
    @classmethod
    def drop_null_fields(cls, data: Any) -> Any:
        return _drop_null_values(data)


class CaddyLogTLS(_CaddyLogModel):
    resumed: bool = False
    version: int = 0
    cipher_suite: int = 0
    proto: str = ""
    proto_mutual: bool = False
    server_name: str = ""


class CaddyLogRequest(_CaddyLogModel):
    remote_address: str = Field(default="", alias="remote_addr")
    proto: str = ""
    method: str = ""
    host: str = ""
    uri: str = ""
    headers: dict[str, list[str]] = Field(default_factory=dict)
    tls: CaddyLogTLS = Field(default_factory=CaddyLogTLS)

    @field_validator("headers", mode="before")
    @classmethod
    def drop_null_header_values(cls, headers: Any) -> Any:
        return _drop_null_values(headers)


class CaddyLogRecord(_CaddyLogModel):
    timestamp: float = Field(default=0.0, alias="ts")
    logger: str = ""
    msg: str = ""
    request: CaddyLogRequest = Field(default_factory=CaddyLogRequest)
    duration: float = 0.0
    size: int = 0
    status: int = 0
    response_headers: dict[str, list[str]] = Field(default_factory=dict, alias="resp_headers")

    @field_validator("response_headers", mode="before")
    @classmethod
    def drop_null_header_values(cls, response_headers: Any) -> Any:
        return _drop_null_values(response_headers)
