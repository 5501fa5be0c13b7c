from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Generic

from service_config.document import METHOD_CONFIG_KEY, ServiceConfig, top_level_fields
from service_config.errors import DuplicatePathError, ServiceConfigError
from service_config.extractor import count_method_names, extract_method_config
from service_config.json_tree import JsonNode
from service_config.observability import LogMessage, LogSink
from service_config.paths import DEFAULT_INTERNER, PathInterner, wildcard_path
from service_config.values import V, ValueFactory, ValueVTable

_EMPTY: Mapping[str, object] = MappingProxyType({})


class MethodConfigTable(Generic[V]):
    # Immutable path -> value index; owns one value replica per path until close().
    __slots__ = ("_entries", "_vtable", "_closed")

    def __init__(self, entries: Mapping[str, V], vtable: ValueVTable[V]) -> None:
        self._entries: Mapping[str, V] = MappingProxyType(dict(entries))
        self._vtable = vtable
        self._closed = False

    def get(self, path: str) -> V | None:
        # Exact match only.
        return self._entries.get(path)

    def lookup(self, path: str) -> V | None:
        # Exact match first, then the service-wide "/service/*" entry.
        value = self.get(path)
        if value is not None:
            return value
        wildcard = wildcard_path(path)
        if wildcard is None:
            return None
        return self.get(wildcard)

    def paths(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def as_mapping(self) -> Mapping[str, V]:
        return self._entries

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        # Release every owned value exactly once.
        if self._closed:
            return
        self._closed = True
        entries = self._entries
        self._entries = _EMPTY
        for value in entries.values():
            self._vtable.destroy(value)

    def __enter__(self) -> MethodConfigTable[V]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"MethodConfigTable(paths={list(self._entries)!r}, closed={self._closed})"


def build_method_config_table(
    config: ServiceConfig,
    factory: ValueFactory,
    vtable: ValueVTable[V],
    *,
    interner: PathInterner | None = None,
    log_sink: LogSink | None = None,
) -> MethodConfigTable[V]:
    # All-or-nothing build: either a complete table or an error with every staged value destroyed.
    sink = log_sink if log_sink is not None else config.log_sink
    try:
        entries = _stage_entries(config.tree, factory, vtable, interner or DEFAULT_INTERNER)
    except ServiceConfigError as exc:
        sink.emit(
            LogMessage(
                level="INFO",
                message="service_config.table_rejected",
                fields={"kind": exc.kind, "error": str(exc)},
            )
        )
        raise
    table = MethodConfigTable(entries, vtable)
    sink.emit(LogMessage(level="DEBUG", message="service_config.table_built", fields={"entries": len(table)}))
    return table


def lookup(table: MethodConfigTable[V], path: str) -> V | None:
    return table.lookup(path)


def _stage_entries(
    tree: JsonNode,
    factory: ValueFactory,
    vtable: ValueVTable[V],
    interner: PathInterner,
) -> dict[str, V]:
    method_configs = top_level_fields(tree).get(METHOD_CONFIG_KEY)
    if method_configs is None:
        # A config with only a load-balancing policy has no per-method entries.
        return {}

    # Sizing pass: the fill pass must produce exactly this many entries.
    expected = sum(count_method_names(entry) for entry in method_configs)

    staged: dict[str, V] = {}
    try:
        for index, entry in enumerate(method_configs):
            extracted = extract_method_config(entry, factory, vtable, where=f"{METHOD_CONFIG_KEY}[{index}]")
            try:
                for path in extracted.paths:
                    if path in staged:
                        raise DuplicatePathError(
                            f"{METHOD_CONFIG_KEY}[{index}] names {path!r}, already configured by an earlier entry"
                        )
                    staged[path] = vtable.copy(extracted.value)
            finally:
                vtable.destroy(extracted.value)
        if len(staged) != expected:
            raise RuntimeError(f"Method config table staged {len(staged)} entries, expected {expected}")
    except Exception:
        for value in staged.values():
            vtable.destroy(value)
        raise
    # Paths enter the shared arena only once the whole build has succeeded.
    return {interner.intern(path): value for path, value in staged.items()}
