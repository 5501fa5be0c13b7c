from __future__ import annotations

from pathlib import Path

from service_config.document import ServiceConfig
from service_config.errors import ServiceConfigError
from service_config.observability import LogSink

_JSON_SUFFIXES = {".json"}
_YAML_SUFFIXES = {".yaml", ".yml"}


def load_service_config(path: Path, *, log_sink: LogSink | None = None) -> ServiceConfig:
    # File loader; the suffix picks the tokenizer, validation happens when tables are built.
    suffix = path.suffix.lower()
    if suffix not in _JSON_SUFFIXES and suffix not in _YAML_SUFFIXES:
        raise ServiceConfigError(
            f"Unsupported service config file type {suffix!r}; "
            f"expected one of: {sorted(_JSON_SUFFIXES | _YAML_SUFFIXES)}"
        )
    text = path.read_text(encoding="utf-8")
    if suffix in _YAML_SUFFIXES:
        return ServiceConfig.from_yaml(text, log_sink=log_sink)
    return ServiceConfig.create(text, log_sink=log_sink)
