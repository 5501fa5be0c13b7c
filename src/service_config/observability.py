from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class LogMessage:
    # Structured diagnostic record emitted while parsing configs and building tables.
    level: str
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    fields: dict[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.level or not self.message:
            raise ValueError("LogMessage requires non-empty level/message")


@runtime_checkable
class LogSink(Protocol):
    def emit(self, message: LogMessage) -> None:
        raise NotImplementedError("LogSink.emit must be implemented")


class StdlibLogSink:
    # Default sink: forwards records to a stdlib logger, fields go into `extra`.
    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger if logger is not None else logging.getLogger("service_config")

    def emit(self, message: LogMessage) -> None:
        level = logging.getLevelName(message.level.upper())
        if not isinstance(level, int):
            level = logging.INFO
        self._logger.log(level, message.message, extra={"fields": dict(message.fields)})
