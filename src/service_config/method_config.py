from __future__ import annotations

import re
from datetime import timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from service_config.json_tree import JsonNode
from service_config.values import ValueVTable

# proto3 JSON duration: whole seconds plus up to nine fractional digits, "s" suffix.
_DURATION_RX = re.compile(r"^(\d+)(?:\.(\d{1,9}))?s$")
_INT64_RX = re.compile(r"^\d+$")
_INT64_MAX = 2**63 - 1


class MethodConfig(BaseModel):
    # Typed view of the per-method policy fields; unknown fields are kept as extras.
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    wait_for_ready: bool | None = Field(default=None, alias="waitForReady", strict=True)
    timeout: timedelta | None = None
    max_request_message_bytes: int | None = Field(default=None, alias="maxRequestMessageBytes")
    max_response_message_bytes: int | None = Field(default=None, alias="maxResponseMessageBytes")

    @field_validator("timeout", mode="before")
    @classmethod
    def _parse_duration(cls, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("timeout must be a duration string such as '1.5s'")
        match = _DURATION_RX.match(value)
        if match is None:
            raise ValueError(f"timeout {value!r} is not a valid duration")
        seconds, fraction = match.groups()
        nanos = int((fraction or "").ljust(9, "0"))
        return timedelta(seconds=int(seconds), microseconds=nanos // 1000)

    @field_validator("max_request_message_bytes", "max_response_message_bytes", mode="before")
    @classmethod
    def _parse_int64(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, bool):
            raise ValueError("message size limit must be an integer")
        if isinstance(value, str):
            if _INT64_RX.match(value) is None:
                raise ValueError(f"message size limit {value!r} is not a non-negative integer")
            value = int(value)
        if not isinstance(value, int):
            raise ValueError("message size limit must be an integer or integer string")
        if value < 0 or value > _INT64_MAX:
            raise ValueError("message size limit must be within 0..2^63-1")
        return value


def method_config_factory(node: JsonNode) -> MethodConfig:
    # Ready-made value factory: the name list is routing data, not policy.
    raw = node.to_python()
    if not isinstance(raw, dict):
        raise ValueError("methodConfig entry must be an object")
    raw.pop("name", None)
    return MethodConfig.model_validate(raw)


def _same(value: MethodConfig) -> MethodConfig:
    return value


def _release(value: MethodConfig) -> None:
    _ = value


# MethodConfig is frozen, so every path can share one instance.
METHOD_CONFIG_VTABLE: ValueVTable[MethodConfig] = ValueVTable(copy=_same, destroy=_release)
